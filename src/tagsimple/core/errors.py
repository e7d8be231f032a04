"""Exceptions raised by tagsimple."""

from __future__ import annotations


class TagSimpleError(Exception):
    """Base error for failures reported by the metadata bridge."""


class InvalidHandleError(TagSimpleError):
    """Raised when a metadata handle is used after close or failed to parse."""


class UnsupportedInputError(TagSimpleError, TypeError):
    """Raised when a file argument is neither a path nor a stream."""


class UnknownKeyError(TagSimpleError, KeyError):
    """Raised when a tag update names a field outside the basic tag."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class UnsupportedFeatureError(TagSimpleError, NotImplementedError):
    """Raised when the tag library cannot provide a requested capability."""


class VersionMismatchError(TagSimpleError, ImportError):
    """Raised when the loaded tag library has an incompatible major version."""
