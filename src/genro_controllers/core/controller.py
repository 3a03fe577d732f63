"""Route registry for Genro Controllers.

This module exposes :class:`Controller`, a named collection of routes scoped
under an optional path prefix, plus the hook-attachment operations used
while wiring an application.

Constructor
-----------
``Controller(prefix=None)``

- ``prefix`` is prepended to every path passed to ``add_route`` and the
  result is normalized (``"/api/" + "/users"`` → ``"/api/users"``).

Routes
------
- ``add_route(name, http_method, path, handler)`` stores a :class:`Route`
  under ``name``. Re-using a name replaces the route silently; the other
  routes keep their insertion order.
- ``get_route(name)`` raises :class:`~genro_controllers.exceptions.NotFound`
  for unknown names: a hook targeting a missing route is a wiring bug.
- ``get_routes()`` returns a list snapshot in insertion order.

Hooks
-----
Targeted or broadcast appenders return ``self`` for chaining::

    controller = (
        Controller("/users")
        .with_pre_hook(require_token)
        .with_pre_hooks([validate_body], "create", "update")
        .with_post_hook(audit, "delete")
    )

Nesting a controller inside another uses the dedicated primitives:

- ``add_pre_hooks_at_the_top(hooks)``: outer guards run before anything the
  inner controller declared;
- ``add_post_hooks_at_the_bottom(hooks)``: outer post-processing runs after
  everything the inner controller declared;
- ``add_path_at_the_beginning(path)``: outer prefix goes in front of every
  route path.

There is no "pre-hooks at the bottom" or "post-hooks at the top" primitive.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from genro_controllers.exceptions import NotFound

from .hooks import PostHook, PreHook
from .http import HttpMethod
from .paths import normalize

__all__ = ["Controller", "Route"]


@dataclass
class Route:
    """A route owned by a :class:`Controller`.

    Attributes:
        name: Key inside the owning controller, used for hook targeting only.
        http_method: HTTP method the route answers to.
        path: Normalized path, including every prefix applied so far.
        handler: Operation invoked as ``handler(ctx)``.
        pre_hooks: Hooks run before the handler, in order.
        post_hooks: Hooks run after the handler, in order.
        success_status: Status a transport uses when no hook aborts.
    """

    name: str
    http_method: HttpMethod
    path: str
    handler: Callable[..., Any]
    pre_hooks: list[PreHook] = field(default_factory=list)
    post_hooks: list[PostHook] = field(default_factory=list)
    success_status: int = 200


class Controller:
    """Named routes under an optional prefix, with hook attachment helpers."""

    __slots__ = ("prefix", "_routes")

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix
        self._routes: dict[str, Route] = {}

    def __repr__(self) -> str:
        return f"Controller(prefix={self.prefix!r}, routes={list(self._routes)})"

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------
    def add_route(
        self,
        name: str,
        http_method: HttpMethod | str,
        path: str,
        handler: Callable[..., Any],
        *,
        success_status: int = 200,
    ) -> None:
        """Register ``handler`` under ``name``, replacing any previous route.

        Raises:
            ValueError: If ``http_method`` is not a known HTTP method.
        """
        full_path = f"{self.prefix}{path}" if self.prefix else path
        self._routes[name] = Route(
            name=name,
            http_method=HttpMethod.parse(http_method),
            path=normalize(full_path),
            handler=handler,
            success_status=success_status,
        )

    def get_route(self, name: str) -> Route:
        """Return the route called ``name``.

        Raises:
            NotFound: If no route was registered under ``name``.
        """
        route = self._routes.get(name)
        if route is None:
            raise NotFound(name)
        return route

    def get_routes(self) -> list[Route]:
        """Return all routes in insertion order."""
        return list(self._routes.values())

    def _targets(self, route_names: tuple[str, ...]) -> list[Route]:
        if not route_names:
            return self.get_routes()
        return [self.get_route(name) for name in route_names]

    # ------------------------------------------------------------------
    # Nesting primitives
    # ------------------------------------------------------------------
    def add_pre_hooks_at_the_top(self, pre_hooks: Iterable[PreHook]) -> None:
        """Insert ``pre_hooks`` before the existing pre-hooks of every route."""
        pre_hooks = list(pre_hooks)
        for route in self._routes.values():
            route.pre_hooks[:0] = pre_hooks

    def add_post_hooks_at_the_bottom(self, post_hooks: Iterable[PostHook]) -> None:
        """Append ``post_hooks`` after the existing post-hooks of every route."""
        post_hooks = list(post_hooks)
        for route in self._routes.values():
            route.post_hooks.extend(post_hooks)

    def add_path_at_the_beginning(self, path: str) -> None:
        """Prefix every route path with ``path``."""
        for route in self._routes.values():
            route.path = normalize(f"{path}{route.path}")

    # ------------------------------------------------------------------
    # Fluent appenders
    # ------------------------------------------------------------------
    def with_pre_hook(self, pre_hook: PreHook, *route_names: str) -> Controller:
        """Append one pre-hook to the given routes (all routes if none given).

        Raises:
            NotFound: If a route name is unknown.
        """
        return self.with_pre_hooks([pre_hook], *route_names)

    def with_pre_hooks(self, pre_hooks: Iterable[PreHook], *route_names: str) -> Controller:
        """Append several pre-hooks to the given routes (all routes if none given)."""
        pre_hooks = list(pre_hooks)
        for route in self._targets(route_names):
            route.pre_hooks.extend(pre_hooks)
        return self

    def with_post_hook(self, post_hook: PostHook, *route_names: str) -> Controller:
        """Append one post-hook to the given routes (all routes if none given)."""
        return self.with_post_hooks([post_hook], *route_names)

    def with_post_hooks(self, post_hooks: Iterable[PostHook], *route_names: str) -> Controller:
        """Append several post-hooks to the given routes (all routes if none given)."""
        post_hooks = list(post_hooks)
        for route in self._targets(route_names):
            route.post_hooks.extend(post_hooks)
        return self
