# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""TokenHook - bearer token authentication pre-hook.

Reads a token from the ``Authorization: Bearer <token>`` header (or from a
cookie), verifies it with a user-supplied function and stores the
authenticated principal in ``ctx.user``.

Token verification itself is delegated: ``verify(token)`` returns the token
payload (a mapping) or raises :class:`InvalidTokenError`. It may be a
coroutine function. This keeps the hook independent from any particular
token format or signing library.

Usage::

    from genro_controllers.hooks.token import InvalidTokenError, TokenHook

    def verify(token):
        payload = my_jwt_library.decode(token, SECRET)  # raises on failure
        return payload

    hooks.add_pre_hooks(UserService, [TokenHook(verify, user=load_user)])
    hooks.add_pre_hooks(PublicService, [TokenHook(verify, required=False)])

Configuration
-------------
    - ``required``: missing token aborts with 400 (default True); when False
      a missing token lets the request through with ``ctx.user`` untouched
    - ``cookie``: read the token from a cookie instead of the header
    - ``cookie_name``: cookie holding the token (default "auth")
    - ``csrf``: in cookie mode, require a double-submit CSRF token on
      unsafe methods (anything but GET, HEAD and OPTIONS)
    - ``csrf_cookie_name``: cookie holding the CSRF token (default
      "XSRF-TOKEN")
    - ``enabled``: gate the hook entirely

Outcomes (failures abort the chain):
    - missing header/cookie (required): 400 ``invalid_request``
    - header without the Bearer scheme: 400 ``invalid_request``
    - blacklisted token: 401 ``invalid_token`` "token revoked"
    - ``verify`` raises ``InvalidTokenError``: 401 ``invalid_token``
    - ``user`` loader given but payload has no string ``sub``, or no user
      matches it: 401 ``invalid_token``
    - CSRF cookie missing, not verifiable, issued for another subject, or
      not echoed in the ``_csrf`` body field or the ``X-CSRF-Token`` /
      ``X-XSRF-Token`` header: 403
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from genro_controllers.core.executor import invoke
from genro_controllers.core.hooks import Abort
from genro_controllers.core.http import (
    HttpResponseBadRequest,
    HttpResponseForbidden,
    HttpResponseUnauthorized,
)

from ._base_hook import BaseHook

__all__ = ["InvalidTokenError", "TokenHook", "DEFAULT_COOKIE_NAME", "DEFAULT_CSRF_COOKIE_NAME"]

DEFAULT_COOKIE_NAME = "auth"
DEFAULT_CSRF_COOKIE_NAME = "XSRF-TOKEN"
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class InvalidTokenError(Exception):
    """Raised by ``verify`` functions when a token is not acceptable."""


def _invalid_token(description: str) -> Abort:
    response = HttpResponseUnauthorized({"code": "invalid_token", "description": description})
    return Abort(
        response.with_header(
            "WWW-Authenticate",
            f'error="invalid_token", error_description="{description}"',
        )
    )


def _invalid_request(description: str) -> Abort:
    return Abort(HttpResponseBadRequest({"code": "invalid_request", "description": description}))


def _csrf_rejected() -> Abort:
    return Abort(HttpResponseForbidden("CSRF token missing or incorrect."))


def _subject(payload: Any) -> Any:
    return payload.get("sub") if isinstance(payload, dict) else None


class TokenHook(BaseHook):
    """Bearer token authentication."""

    hook_code = "token"
    hook_description = "Verifies a bearer token and sets ctx.user"

    __slots__ = ("_verify", "_user", "_blacklist")

    def __init__(
        self,
        verify: Callable[[str], Any],
        *,
        user: Callable[[Any], Any] | None = None,
        blacklist: Callable[[str], Any] | None = None,
        **cfg: Any,
    ):
        self._verify = verify
        self._user = user
        self._blacklist = blacklist
        super().__init__(**cfg)

    def configure(  # type: ignore[override]
        self,
        *,
        required: bool = True,
        cookie: bool = False,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        csrf: bool = False,
        csrf_cookie_name: str = DEFAULT_CSRF_COOKIE_NAME,
        enabled: bool = True,
    ) -> None:
        """Configure token lookup.

        Args:
            required: Abort when no token is present.
            cookie: Read the token from ``cookie_name`` instead of the header.
            cookie_name: Name of the cookie holding the token.
            csrf: Check a double-submit CSRF token in cookie mode.
            csrf_cookie_name: Name of the cookie holding the CSRF token.
            enabled: Enable/disable the hook entirely.
        """
        pass  # Storage handled by wrapper

    def _read_token(self, ctx: Any, cfg: dict[str, Any]) -> str | Abort | None:
        if cfg["cookie"]:
            token = ctx.request.cookies.get(cfg["cookie_name"])
            if not token:
                return _invalid_request("Auth cookie not found.") if cfg["required"] else None
            return token

        header = ctx.request.get("Authorization") or ""
        if not header:
            return _invalid_request("Authorization header not found.") if cfg["required"] else None
        scheme, _, token = header.partition("Bearer ")
        if scheme or not token:
            return _invalid_request(
                "Expected a bearer token. Scheme is Authorization: Bearer <token>."
            )
        return token

    async def _check_csrf(self, ctx: Any, cfg: dict[str, Any], payload: Any) -> Abort | None:
        request = ctx.request
        if not (cfg["cookie"] and cfg["csrf"]) or request.method.upper() in SAFE_METHODS:
            return None

        expected = request.cookies.get(cfg["csrf_cookie_name"])
        if not expected:
            return _csrf_rejected()
        try:
            csrf_payload = await invoke(self._verify, expected)
        except InvalidTokenError:
            return _csrf_rejected()
        if _subject(csrf_payload) != _subject(payload):
            return _csrf_rejected()

        body = request.body if isinstance(request.body, dict) else {}
        submitted = (
            body.get("_csrf") or request.get("X-CSRF-Token") or request.get("X-XSRF-Token")
        )
        if submitted != expected:
            return _csrf_rejected()
        return None

    async def run(self, ctx: Any, services: Any) -> Abort | None:
        cfg = self.configuration()
        token = self._read_token(ctx, cfg)
        if token is None or isinstance(token, Abort):
            return token

        if self._blacklist is not None and await invoke(self._blacklist, token):
            return _invalid_token("token revoked")

        try:
            payload = await invoke(self._verify, token)
        except InvalidTokenError as exc:
            return _invalid_token(str(exc) or "invalid token")

        rejected = await self._check_csrf(ctx, cfg, payload)
        if rejected is not None:
            return rejected

        if self._user is None:
            ctx.user = payload
            return None

        subject = _subject(payload)
        if not isinstance(subject, str):
            return _invalid_token("The token must include a subject which is the id of the user.")

        user = await invoke(self._user, subject)
        if user is None:
            return _invalid_token("The token subject does not match any user.")
        ctx.user = user
        return None
