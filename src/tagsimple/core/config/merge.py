"""Merge helpers for configuration dictionaries."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def merge_settings(defaults: Dict[str, Any], user: Dict[str, Any], section: str = "") -> Dict[str, Any]:
    """Overlay `user` on a copy of `defaults`.

    A section that is a mapping in the defaults keeps its default value
    when the user document replaces it with anything else.
    """

    result: Dict[str, Any] = copy.deepcopy(defaults)
    for key, value in user.items():
        name = f"{section}.{key}" if section else str(key)
        current = result.get(key)
        if isinstance(current, dict):
            if isinstance(value, dict):
                result[key] = merge_settings(current, value, name)
            else:
                logger.warning("Ignoring setting %s: expected a mapping, got %r", name, value)
        else:
            result[key] = copy.deepcopy(value)
    return result
