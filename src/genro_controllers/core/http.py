# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HTTP vocabulary shared by controllers, hooks and transport adapters.

Objects
-------
``HttpMethod``
    Closed enumeration of the HTTP methods a route can be bound to.

``Request``
    Minimal inbound request representation. Transport adapters build one per
    request; hooks only read from it.

``Context``
    Mutable per-request object threaded through a middleware chain. Each
    in-flight request owns its own instance; nothing is shared across chains.

``HttpResponse`` and subclasses
    Immutable response values. Hooks wrap them in ``Abort`` to short-circuit
    a chain; transport adapters render them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

__all__ = [
    "HttpMethod",
    "Request",
    "Context",
    "HttpResponse",
    "HttpResponseOK",
    "HttpResponseBadRequest",
    "HttpResponseUnauthorized",
    "HttpResponseForbidden",
]


class HttpMethod(str, Enum):
    """HTTP methods accepted by ``Controller.add_route``."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: HttpMethod | str) -> HttpMethod:
        """Return the member for ``value`` (case-insensitive for strings).

        Raises:
            ValueError: If ``value`` is not a known HTTP method.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown HTTP method {value!r}. Allowed: {allowed}") from None


@dataclass
class Request:
    """Inbound request as seen by hooks.

    Header lookups through :meth:`get` are case-insensitive.
    """

    method: str = "GET"
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: Any = None

    def get(self, header: str, default: str | None = None) -> str | None:
        """Return the value of ``header`` or ``default``."""
        wanted = header.lower()
        for name, value in self.headers.items():
            if name.lower() == wanted:
                return value
        return default


class Context:
    """Per-request state shared by the middlewares of one chain.

    Attributes:
        request: The inbound request.
        state: Free-form storage for hooks.
        user: Authenticated principal, set by authentication hooks.
        result: Return value of the service invocation.
    """

    __slots__ = ("request", "state", "user", "result")

    def __init__(self, request: Request, *, user: Any = None) -> None:
        self.request = request
        self.state: dict[str, Any] = {}
        self.user = user
        self.result: Any = None

    def __repr__(self) -> str:
        return f"Context({self.request.method} {self.request.path})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """An HTTP response built through immutable transformations."""

    body: Any = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    def with_header(self, name: str, value: str) -> HttpResponse:
        """Return a copy with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> HttpResponse:
        """Return a copy with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def get_header(self, name: str) -> str | None:
        """Return the last value set for ``name`` (case-insensitive)."""
        wanted = name.lower()
        for key, value in reversed(self.headers):
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True, slots=True)
class HttpResponseOK(HttpResponse):
    status: int = 200


@dataclass(frozen=True, slots=True)
class HttpResponseBadRequest(HttpResponse):
    status: int = 400


@dataclass(frozen=True, slots=True)
class HttpResponseUnauthorized(HttpResponse):
    status: int = 401


@dataclass(frozen=True, slots=True)
class HttpResponseForbidden(HttpResponse):
    status: int = 403
