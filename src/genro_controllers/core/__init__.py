"""Core runtime aggregator for Genro Controllers.

Public API:
    - ``Controller`` / ``Route``: route registry and its entries
    - ``ControllerFactory`` / ``ControllerRoutesFactory``: service binding
    - ``RouteDeclaration`` / ``ReducedRoute``: factory input and output
    - ``HookRegistry``, ``Abort``, ``CONTINUE``: hook contract
    - ``run_chain``: short-circuit executor
    - ``normalize`` / ``join_paths``: path composition

Importing this module performs only imports.
"""

from .controller import Controller, Route
from .executor import run_chain
from .factory import ControllerFactory, ControllerRoutesFactory, ReducedRoute, RouteDeclaration
from .hooks import CONTINUE, Abort, Continue, HookRegistry, HookSet
from .http import (
    Context,
    HttpMethod,
    HttpResponse,
    HttpResponseBadRequest,
    HttpResponseForbidden,
    HttpResponseOK,
    HttpResponseUnauthorized,
    Request,
)
from .paths import join_paths, normalize
from .services import Resolver, ServiceManager

__all__ = [
    "Abort",
    "CONTINUE",
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
