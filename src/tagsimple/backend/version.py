"""mutagen version compatibility check."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import mutagen

from tagsimple.core.errors import VersionMismatchError

logger = logging.getLogger(__name__)

# mutagen release the tag dialects are written against
COMPILED_VERSION: Tuple[int, int, int] = (1, 47, 0)

LIBRARY_VERSION: Tuple[int, ...] = tuple(mutagen.version)
MAJOR_VERSION = LIBRARY_VERSION[0]
MINOR_VERSION = LIBRARY_VERSION[1] if len(LIBRARY_VERSION) > 1 else 0
PATCH_VERSION = LIBRARY_VERSION[2] if len(LIBRARY_VERSION) > 2 else 0


def version_string(version: Tuple[int, ...]) -> str:
    return ".".join(str(part) for part in version)


def check_library_version(
    runtime: Optional[Tuple[int, ...]] = None,
    compiled: Tuple[int, ...] = COMPILED_VERSION,
) -> None:
    """Refuse a mutagen with another major version; warn on an older minor."""

    runtime = tuple(runtime) if runtime is not None else LIBRARY_VERSION
    if runtime[0] != compiled[0]:
        raise VersionMismatchError(
            f"mutagen {version_string(runtime)} is incompatible, major version {compiled[0]} is required"
        )
    if len(runtime) > 1 and len(compiled) > 1 and compiled[1] > runtime[1]:
        logger.warning(
            "mutagen %s is older than %s, some tag features may be missing",
            version_string(runtime),
            version_string(compiled),
        )
