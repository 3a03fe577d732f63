# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""TagsHook - tag-based authorization pre-hook.

Evaluates an authorization rule against the tags of the authenticated
principal stored in ``ctx.user`` (usually set by an authentication hook that
ran earlier in the chain).

Usage::

    from genro_controllers.hooks.auth import TagsHook

    hooks.add_pre_hooks(AdminService, [token_hook, TagsHook(rule="admin&!guest")])

Rule syntax:
    - ``|`` : OR (user must have at least one)
    - ``&`` : AND (user must have all)
    - ``!`` : NOT (user must not have)
    - ``()`` : grouping

NOTE: Comma is NOT allowed in the rule. Use ``|`` for OR, ``&`` for AND.

User tags are read from ``user.tags`` or ``user["tags"]`` and may be a
comma-separated string or any iterable of strings.

Outcomes:
    - no rule, or tags match: continue
    - no user: ``Abort(HttpResponseUnauthorized)``
    - tags do not match: ``Abort(HttpResponseForbidden)``
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from genro_toolbox import tags_match

from genro_controllers.core.hooks import Abort
from genro_controllers.core.http import HttpResponseForbidden, HttpResponseUnauthorized

from ._base_hook import BaseHook

__all__ = ["TagsHook", "user_tags"]


def user_tags(user: Any) -> set[str]:
    """Return the tag set of ``user`` (empty when it has none)."""
    if isinstance(user, dict):
        raw = user.get("tags")
    else:
        raw = getattr(user, "tags", None)
    if not raw:
        return set()
    if isinstance(raw, str):
        raw = raw.split(",")
    elif not isinstance(raw, Iterable):
        return set()
    return {str(v).strip() for v in raw if str(v).strip()}


class TagsHook(BaseHook):
    """Authorization pre-hook with tag-based access control."""

    hook_code = "auth"
    hook_description = "Tag-based authorization"

    def configure(
        self,
        *,
        rule: str = "",
        enabled: bool = True,
    ) -> None:
        """Define the authorization rule.

        Args:
            rule: Boolean rule expression (e.g., "admin&internal", "!guest").
                  Use ``|`` for OR, ``&`` for AND. Comma is not allowed.
            enabled: Whether the hook is enabled (default True)

        Raises:
            ValueError: If rule contains comma (use ``|`` for OR instead).
        """
        if "," in rule:
            raise ValueError(
                f"Comma not allowed in auth rule: {rule!r}. "
                "Use '|' for OR (e.g., 'admin|manager') or '&' for AND (e.g., 'admin&hr')."
            )
        pass  # Storage handled by wrapper

    def run(self, ctx: Any, services: Any) -> Abort | None:
        rule = self.configuration()["rule"]
        if not rule:
            return None
        if ctx.user is None:
            return Abort(HttpResponseUnauthorized({"code": "not_authenticated"}))
        if tags_match(rule, user_tags(ctx.user)):
            return None
        return Abort(HttpResponseForbidden({"code": "not_authorized"}))
