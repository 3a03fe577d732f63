"""Genro Controllers - route registry and hook composition for Python services.

Binds service operations to HTTP-style routes, merges class-level and
method-level hooks into one ordered middleware chain per route, and emits
flat ``ReducedRoute`` descriptors for a transport adapter.

Public exports:
    - ``Controller``: named routes under a prefix, with hook attachment
    - ``ControllerFactory``: binds a service class to its routes
    - ``HookRegistry``: explicit class/method hook metadata
    - ``Abort`` / ``CONTINUE``: hook outcomes
    - ``run_chain``: sequential short-circuit executor

Concrete hooks live in ``genro_controllers.hooks`` and are imported on demand.

Example::

    from genro_controllers import (
        Abort, ControllerFactory, HookRegistry, HttpResponseUnauthorized,
        RouteDeclaration, ServiceManager,
    )

    def logged_in(ctx, services):
        if ctx.user is None:
            return Abort(HttpResponseUnauthorized())

    hooks = HookRegistry().add_pre_hooks(Greeter, [logged_in])

    class GreeterFactory(ControllerFactory):
        def get_routes(self, service):
            return [RouteDeclaration("GET", "/hello", lambda ctx: service.hello(),
                                     service_method_name="hello")]

    routes = GreeterFactory(hooks).attach_service("/api", Greeter)(ServiceManager())
"""

__version__ = "0.1.0"

from .core import (
    CONTINUE,
    Abort,
    Context,
    Continue,
    Controller,
    ControllerFactory,
    ControllerRoutesFactory,
    HookRegistry,
    HookSet,
    HttpMethod,
    HttpResponse,
    HttpResponseBadRequest,
    HttpResponseForbidden,
    HttpResponseOK,
    HttpResponseUnauthorized,
    ReducedRoute,
    Request,
    Resolver,
    Route,
    RouteDeclaration,
    ServiceManager,
    join_paths,
    normalize,
    run_chain,
)
from .exceptions import ConfigurationError, InvalidHookResult, NotFound

__all__ = [
    "Abort",
    "CONTINUE",
    "ConfigurationError",
    "Context",
    "Continue",
    "Controller",
    "ControllerFactory",
    "ControllerRoutesFactory",
    "HookRegistry",
    "HookSet",
    "HttpMethod",
    "HttpResponse",
    "HttpResponseBadRequest",
    "HttpResponseForbidden",
    "HttpResponseOK",
    "HttpResponseUnauthorized",
    "InvalidHookResult",
    "NotFound",
    "ReducedRoute",
    "Request",
    "Resolver",
    "Route",
    "RouteDeclaration",
    "ServiceManager",
    "join_paths",
    "normalize",
    "run_chain",
]
