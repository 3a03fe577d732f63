# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Hook contract and hook metadata registry.

Hook contract
-------------
A hook is any callable ``hook(ctx, services)`` where ``ctx`` is the
per-request :class:`~genro_controllers.core.http.Context` and ``services``
is the dependency resolver the controller was bound with. It may be a plain
function or a coroutine function, and it ends in one of three ways:

- returns ``None`` or ``CONTINUE``: the chain moves to the next middleware;
- returns ``Abort(response)``: the chain stops and ``response`` becomes the
  final response;
- raises: the exception propagates to the transport adapter untouched.

Anything else is rejected with ``InvalidHookResult`` by the executor.

Hook metadata
-------------
``HookRegistry`` is an explicit map filled at service registration time:

- ``service_class`` → class-level pre/post hooks;
- ``(service_class, method_name)`` → method-level pre/post hooks.

Lists keep registration order. Absent metadata reads as empty.

Example::

    hooks = HookRegistry()
    hooks.add_pre_hooks(UserService, [require_token])
    hooks.add_pre_hooks(UserService, [validate_body], method="create")
    hooks.add_post_hooks(UserService, [audit])
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Union

__all__ = [
    "Abort",
    "CONTINUE",
    "Continue",
    "Hook",
    "HookOutcome",
    "HookRegistry",
    "HookSet",
    "PreHook",
    "PostHook",
]


class Continue:
    """Outcome telling the executor to run the next middleware."""

    __slots__ = ()
    _instance: Continue | None = None

    def __new__(cls) -> Continue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CONTINUE"


CONTINUE = Continue()


@dataclass(frozen=True, slots=True)
class Abort:
    """Outcome that stops the chain and supplies the final response."""

    response: Any


HookOutcome = Union[Continue, Abort, None]
Hook = Callable[[Any, Any], Union[HookOutcome, Awaitable[HookOutcome]]]
PreHook = Hook
PostHook = Hook


@dataclass(frozen=True, slots=True)
class HookSet:
    """Ordered pre- and post-hooks declared at one level."""

    pre: tuple[Hook, ...] = ()
    post: tuple[Hook, ...] = ()


_EMPTY = HookSet()


class HookRegistry:
    """Explicit hook metadata for service classes and their methods.

    Class-level hooks follow inheritance: hooks registered on a base class
    apply to subclasses and run before the subclass' own hooks.
    """

    __slots__ = ("_class_hooks", "_method_hooks")

    def __init__(self) -> None:
        self._class_hooks: dict[type, dict[str, list[Hook]]] = {}
        self._method_hooks: dict[tuple[type, str], dict[str, list[Hook]]] = {}

    def _bucket(self, service_class: type, method: str | None) -> dict[str, list[Hook]]:
        if not isinstance(service_class, type):
            raise TypeError(
                f"Hooks are registered on classes, got {type(service_class).__name__}"
            )
        if method is None:
            return self._class_hooks.setdefault(service_class, {"pre": [], "post": []})
        key = (service_class, method)
        return self._method_hooks.setdefault(key, {"pre": [], "post": []})

    def add_pre_hooks(
        self, service_class: type, hooks: Iterable[Hook], *, method: str | None = None
    ) -> HookRegistry:
        """Append pre-hooks to a class (or to one of its methods)."""
        self._bucket(service_class, method)["pre"].extend(hooks)
        return self

    def add_post_hooks(
        self, service_class: type, hooks: Iterable[Hook], *, method: str | None = None
    ) -> HookRegistry:
        """Append post-hooks to a class (or to one of its methods)."""
        self._bucket(service_class, method)["post"].extend(hooks)
        return self

    def pre_hook(self, service_class: type, hook: Hook, *, method: str | None = None) -> HookRegistry:
        """Append a single pre-hook (see :meth:`add_pre_hooks`)."""
        return self.add_pre_hooks(service_class, [hook], method=method)

    def post_hook(self, service_class: type, hook: Hook, *, method: str | None = None) -> HookRegistry:
        """Append a single post-hook (see :meth:`add_post_hooks`)."""
        return self.add_post_hooks(service_class, [hook], method=method)

    def class_hooks(self, service_class: type) -> HookSet:
        """Return class-level hooks, base classes first."""
        pre: list[Hook] = []
        post: list[Hook] = []
        for klass in reversed(service_class.__mro__):
            bucket = self._class_hooks.get(klass)
            if bucket:
                pre.extend(bucket["pre"])
                post.extend(bucket["post"])
        if not pre and not post:
            return _EMPTY
        return HookSet(tuple(pre), tuple(post))

    def method_hooks(self, service_class: type, method: str | None) -> HookSet:
        """Return hooks registered on ``method``; empty when ``method`` is None.

        The closest class in the MRO that registered hooks for ``method``
        wins, so an inherited method keeps the hooks of the class defining it.
        """
        if method is None:
            return _EMPTY
        for klass in service_class.__mro__:
            bucket = self._method_hooks.get((klass, method))
            if bucket:
                return HookSet(tuple(bucket["pre"]), tuple(bucket["post"]))
        return _EMPTY
