"""File path helpers."""

from __future__ import annotations

import os


def abs_rel_shorter(path: str) -> str:
    """Return path relative to the current directory if that has fewer segments.

    The path is returned unchanged when it is empty, when it is relative,
    or when no relative form can be computed.
    """
    if not path:
        return ""
    try:
        current = os.path.abspath(".")
    except OSError:
        return path
    # A relative path cannot be related to the absolute current directory.
    if not os.path.isabs(path):
        return path
    try:
        relative = os.path.relpath(path, current)
    except ValueError:
        return path
    if len(relative.split(os.sep)) < len(path.split(os.sep)):
        return relative
    return path