"""Controller factories: bind services to routes and reduce hook chains.

A :class:`ControllerFactory` turns the abstract route declarations of a
service class into :class:`ReducedRoute` objects a transport adapter can
dispatch against.

Binding
-------
``attach_service(prefix_path, ServiceClass)`` returns a *binder*. Calling the
binder with a dependency resolver:

1. resolves the service instance with ``services.resolve(ServiceClass)``;
2. asks ``get_routes(service)`` for the declared routes;
3. reads class-level hooks and, for routes naming a service method, the
   method-level hooks from the factory's :class:`HookRegistry`;
4. emits one ``ReducedRoute`` per declaration.

Chain order
-----------
::

    class pre-hooks
    method pre-hooks
    route pre-hooks
    service invocation      (stores its value in ctx.result)
    route post-hooks
    method post-hooks
    class post-hooks

Each segment keeps registration order. Hooks are bound to the resolver so
every middleware is called as ``middleware(ctx)``.

Example::

    class UserControllerFactory(ControllerFactory):
        def get_routes(self, service):
            return [
                RouteDeclaration(
                    http_method="GET",
                    path="/users",
                    middleware=lambda ctx: service.list_users(),
                    service_method_name="list_users",
                ),
            ]

    binder = UserControllerFactory(hooks).attach_service("/api", UserService)
    routes = binder(ServiceManager())
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import wraps
from typing import Any

from genro_toolbox.typeutils import safe_is_instance

from .controller import Controller, Route
from .executor import invoke, run_chain
from .hooks import Abort, Hook, HookRegistry, HookSet
from .http import Context, HttpMethod
from .paths import join_paths, normalize
from .services import Resolver

__all__ = [
    "ControllerFactory",
    "ControllerRoutesFactory",
    "ReducedRoute",
    "RouteDeclaration",
]

logger = logging.getLogger("genro_controllers")

Middleware = Callable[[Context], Any]


@dataclass(frozen=True)
class RouteDeclaration:
    """A route as declared by a factory for one service instance.

    Attributes:
        http_method: HTTP method (member or string).
        path: Path relative to the prefix given to ``attach_service``.
        middleware: Service invocation, called as ``middleware(ctx)``.
        service_method_name: Method whose hooks apply, or ``None`` for
            class-level hooks only.
        success_status: Status a transport uses when no hook aborts.
        pre_hooks: Hooks run right before the invocation.
        post_hooks: Hooks run right after the invocation.
    """

    http_method: HttpMethod | str
    path: str
    middleware: Callable[[Context], Any]
    service_method_name: str | None = None
    success_status: int = 200
    pre_hooks: Sequence[Hook] = ()
    post_hooks: Sequence[Hook] = ()


@dataclass(frozen=True)
class ReducedRoute:
    """Transport-facing route descriptor.

    ``paths`` keeps the segments separate (outer-most first) so adapters and
    documentation generators can see the hierarchy; :attr:`path` joins them.
    """

    http_method: HttpMethod
    paths: tuple[str, ...]
    success_status: int
    middlewares: tuple[Middleware, ...]

    @property
    def path(self) -> str:
        """Concatenated route pattern."""
        return join_paths(*self.paths)

    async def dispatch(self, ctx: Context) -> Abort | None:
        """Run the middleware chain; return the ``Abort`` outcome or ``None``."""
        return await run_chain(self.middlewares, ctx)


def _bind_hook(hook: Hook, services: Resolver) -> Middleware:
    @wraps(hook)
    def middleware(ctx: Context) -> Any:
        return hook(ctx, services)

    if not hasattr(hook, "__qualname__"):
        # callable objects
        middleware.__name__ = middleware.__qualname__ = type(hook).__qualname__
    return middleware


def _service_invocation(declaration: RouteDeclaration, label: str) -> Middleware:
    call = declaration.middleware

    async def invoke_service(ctx: Context) -> None:
        ctx.result = await invoke(call, ctx)

    invoke_service.__name__ = invoke_service.__qualname__ = label
    return invoke_service


class ControllerFactory(ABC):
    """Base class binding a service class to its declared routes.

    Subclasses implement :meth:`get_routes`.
    """

    __slots__ = ("hooks",)

    def __init__(self, hooks: HookRegistry | None = None) -> None:
        self.hooks = hooks if hooks is not None else HookRegistry()

    @abstractmethod
    def get_routes(self, service: Any) -> list[RouteDeclaration]:
        """Return the routes exposed by ``service``."""

    def attach_service(
        self, path: str, service_class: type
    ) -> Callable[[Resolver], list[ReducedRoute]]:
        """Return a binder producing reduced routes for ``service_class``.

        Reduced routes are built fresh on every binder call.
        """

        def binder(services: Resolver) -> list[ReducedRoute]:
            service = services.resolve(service_class)
            class_hooks = self.hooks.class_hooks(service_class)
            reduced = []
            for declaration in self.get_routes(service):
                method_hooks = self.hooks.method_hooks(
                    service_class, declaration.service_method_name
                )
                route = self._reduce(
                    path, service_class, declaration, class_hooks, method_hooks, services
                )
                logger.debug(
                    "%s %s -> %d middlewares (%s)",
                    route.http_method.value,
                    route.path,
                    len(route.middlewares),
                    service_class.__name__,
                )
                reduced.append(route)
            return reduced

        binder.__qualname__ = f"attach_service.<{service_class.__name__}>"
        return binder

    def _reduce(
        self,
        path: str,
        service_class: type,
        declaration: RouteDeclaration,
        class_hooks: HookSet,
        method_hooks: HookSet,
        services: Resolver,
    ) -> ReducedRoute:
        target = declaration.service_method_name or declaration.path
        invocation = _service_invocation(declaration, f"{service_class.__name__}.{target}")
        before = (*class_hooks.pre, *method_hooks.pre, *declaration.pre_hooks)
        after = (*declaration.post_hooks, *method_hooks.post, *class_hooks.post)
        middlewares = (
            *(_bind_hook(hook, services) for hook in before),
            invocation,
            *(_bind_hook(hook, services) for hook in after),
        )
        return ReducedRoute(
            http_method=HttpMethod.parse(declaration.http_method),
            paths=(normalize(path), normalize(declaration.path)),
            success_status=declaration.success_status,
            middlewares=middlewares,
        )


class ControllerRoutesFactory(ControllerFactory):
    """Factory whose routes come from a :class:`Controller` built per service.

    Subclasses implement :meth:`create_controller`. The hooks attached to each
    controller route run right around the service invocation; handlers that
    are bound methods of the service also pick up their method-level hooks.

    Example::

        class TodoControllers(ControllerRoutesFactory):
            def create_controller(self, service):
                controller = Controller("/todos")
                controller.add_route("list", "GET", "/", service.list_todos)
                controller.add_route("add", "POST", "/", service.add_todo,
                                     success_status=201)
                return controller.with_pre_hook(validate_body, "add")
    """

    __slots__ = ()

    @abstractmethod
    def create_controller(self, service: Any) -> Controller:
        """Build the route registry for ``service``."""

    def get_routes(self, service: Any) -> list[RouteDeclaration]:
        controller = self.create_controller(service)
        if not safe_is_instance(controller, "genro_controllers.core.controller.Controller"):
            raise TypeError(
                f"create_controller() must return a Controller, got {type(controller).__name__}"
            )
        return [self._declare(service, route) for route in controller.get_routes()]

    @staticmethod
    def _declare(service: Any, route: Route) -> RouteDeclaration:
        handler = route.handler
        bound_to_service = getattr(handler, "__self__", None) is service
        return RouteDeclaration(
            http_method=route.http_method,
            path=route.path,
            middleware=handler,
            service_method_name=handler.__name__ if bound_to_service else None,
            success_status=route.success_status,
            pre_hooks=tuple(route.pre_hooks),
            post_hooks=tuple(route.post_hooks),
        )
