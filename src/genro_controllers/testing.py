"""Helpers for testing hooks and controllers without a transport."""

from __future__ import annotations

from typing import Any

from genro_controllers.core.http import Context, Request

__all__ = ["create_empty_context"]


def create_empty_context(*, user: Any = None, **request_fields: Any) -> Context:
    """Return a fresh ``Context`` around a ``Request`` built from ``request_fields``.

    Example::

        ctx = create_empty_context(headers={"Authorization": "Bearer abc"})
    """
    return Context(Request(**request_fields), user=user)
