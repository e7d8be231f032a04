"""Splice-capable stream over a caller-owned file-like object.

The tag library edits files in place: besides plain reads and writes it
inserts and removes byte ranges, shifting everything behind them. Caller
objects only offer read, write, seek, tell and truncate, so `insert` and
`remove_block` are emulated with those primitives.

When mutagen saves through the adapter it does its own splicing
(`mutagen._util.insert_bytes` and `delete_bytes`) on top of `read`,
`write`, `seek` and `truncate`; `fileno` raising keeps it off the mmap
path. `insert` and `remove_block` are for callers editing the stream
directly.

Limitations callers must be aware of:

* Splicing buffers everything after the edited range in memory. Tags sit
  near the start or end of a media file, so this is normally small, but a
  splice near the start of a large file reads most of it.
* Splicing is not transactional. If the resource fails part way through,
  bytes already written stay written and the error propagates unchanged.
* The adapter never closes the resource. `close()` only drops the
  adapter's reference; the caller closes the resource afterwards.
"""

from __future__ import annotations

import io
import logging
import os
from enum import IntEnum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class Position(IntEnum):
    START = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END = os.SEEK_END


class StreamAdapter:
    """Binary file object borrowing a caller resource.

    The resource needs `read`, `seek` and `tell`; `write` and `truncate`
    are only used when it reports itself writable.
    """

    def __init__(self, resource: Any) -> None:
        if not self.is_stream(resource):
            raise TypeError(f"{type(resource).__name__} is not a readable, seekable stream")
        self._resource: Optional[Any] = resource
        self._read_only = not _resource_writable(resource)

    @staticmethod
    def is_stream(candidate: Any) -> bool:
        return all(callable(getattr(candidate, attr, None)) for attr in ("read", "seek", "tell"))

    @property
    def resource(self) -> Any:
        if self._resource is None:
            raise ValueError("I/O operation on a closed stream adapter")
        return self._resource

    @property
    def name(self) -> str:
        resource = self.resource
        name = getattr(resource, "name", None)
        if isinstance(name, str):
            return name
        return str(resource)

    def __repr__(self) -> str:
        if self._resource is None:
            return "<StreamAdapter closed>"
        return f"<StreamAdapter {self.name!r}>"

    # TagLib-style stream operations

    def read_block(self, length: int) -> bytes:
        """Read up to `length` bytes; returns b"" at the end of the resource."""

        if length <= 0:
            return b""
        data = self.resource.read(length)
        return bytes(data) if data else b""

    def write_block(self, data: bytes) -> None:
        self._check_writable()
        self.resource.write(data)

    def seek(self, offset: int, whence: int = Position.START) -> int:
        self.resource.seek(offset, int(whence))
        return self.tell()

    def tell(self) -> int:
        return self.resource.tell()

    def length(self) -> int:
        resource = self.resource
        current = resource.tell()
        try:
            resource.seek(0, os.SEEK_END)
            return resource.tell()
        finally:
            resource.seek(current, os.SEEK_SET)

    def truncate(self, size: Optional[int] = None) -> int:
        self._check_writable()
        resource = self.resource
        if size is None:
            size = resource.tell()
        resource.truncate(size)
        return size

    def insert(self, data: bytes, start: int = 0, replace: int = 0) -> None:
        """Replace `replace` bytes at `start` with `data`, shifting the rest."""

        self._check_writable()
        if start < 0 or replace < 0:
            raise ValueError("start and replace must not be negative")
        remainder = self._read_from(start + replace)
        self.seek(start)
        self.write_block(data)
        self.write_block(remainder)
        self.truncate(start + len(data) + len(remainder))

    def remove_block(self, start: int = 0, length: int = 0) -> None:
        """Remove `length` bytes at `start`, shifting the rest down."""

        self._check_writable()
        if start < 0 or length < 0:
            raise ValueError("start and length must not be negative")
        remainder = self._read_from(start + length)
        self.seek(start)
        self.write_block(remainder)
        self.truncate(start + len(remainder))

    def is_open(self) -> bool:
        if self._resource is None:
            return False
        return not getattr(self._resource, "closed", False)

    def read_only(self) -> bool:
        return self._read_only

    def clear(self) -> None:
        pass

    # binary file protocol used by mutagen

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            return self._read_all()
        return self.read_block(size)

    def readall(self) -> bytes:
        return self._read_all()

    def readinto(self, buffer: Any) -> int:
        data = self.read_block(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def write(self, data: Any) -> int:
        data = bytes(data)
        self.write_block(data)
        return len(data)

    def flush(self) -> None:
        if self._resource is None:
            return
        flush = getattr(self._resource, "flush", None)
        if callable(flush):
            flush()

    def readable(self) -> bool:
        self._check_open()
        return True

    def writable(self) -> bool:
        self._check_open()
        return not self._read_only

    def seekable(self) -> bool:
        self._check_open()
        return True

    def fileno(self) -> int:
        raise io.UnsupportedOperation("stream adapters have no file descriptor")

    @property
    def closed(self) -> bool:
        return not self.is_open()

    def close(self) -> None:
        """Release the adapter. The wrapped resource stays open."""

        self._resource = None

    def _read_all(self) -> bytes:
        data = self.resource.read()
        return bytes(data) if data else b""

    def _read_from(self, offset: int) -> bytes:
        self.seek(offset)
        return self._read_all()

    def _check_open(self) -> None:
        if self._resource is None:
            raise ValueError("I/O operation on a closed stream adapter")

    def _check_writable(self) -> None:
        self._check_open()
        if self._read_only:
            raise io.UnsupportedOperation("stream is read-only")


def _resource_writable(resource: Any) -> bool:
    writable = getattr(resource, "writable", None)
    if writable is None:
        return False
    if callable(writable):
        try:
            return bool(writable())
        except (OSError, ValueError):
            return False
    return bool(writable)
