"""Path composition helpers.

Route paths are plain strings built by concatenation. After every
concatenation the result goes through :func:`normalize`, so ``"/a/" + "/b"``
yields ``"/a/b"`` and never ``"/a//b"``.
"""

from __future__ import annotations

import re

__all__ = ["normalize", "join_paths"]

_SEPARATORS = re.compile(r"/+")


def normalize(path: str) -> str:
    """Collapse every run of consecutive ``/`` into a single ``/``."""
    return _SEPARATORS.sub("/", path)


def join_paths(*paths: str | None) -> str:
    """Concatenate path segments (outer-most first) into one route pattern.

    Empty and ``None`` segments are skipped.

    Example::

        >>> join_paths("/api/", "/users", None, "/{id}")
        '/api/users/{id}'
    """
    return normalize("".join(p for p in paths if p))
