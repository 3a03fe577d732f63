"""Minimal dependency resolver.

The factory only needs ``resolve(service_class) -> instance``. Any object
offering that method can be passed to a binder; ``ServiceManager`` is a
small default that creates one instance per class on first use.

Instances are never stored at module level: every test or application
creates its own manager.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

__all__ = ["Resolver", "ServiceManager"]

T = TypeVar("T")


class Resolver(Protocol):
    """Shape of the dependency resolver consumed by controller binders."""

    def resolve(self, service_class: type[T]) -> T: ...


class ServiceManager:
    """Lazy per-class singletons with explicit overrides.

    Example::

        services = ServiceManager()
        services.set(Mailer, FakeMailer())
        users = services.resolve(UserService)  # UserService() built once
    """

    __slots__ = ("_instances",)

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}

    def set(self, service_class: type[T], instance: T) -> ServiceManager:
        """Register ``instance`` as the service for ``service_class``."""
        self._instances[service_class] = instance
        return self

    def resolve(self, service_class: type[T]) -> T:
        """Return the instance for ``service_class``, creating it if needed."""
        instance = self._instances.get(service_class)
        if instance is None:
            instance = service_class()
            self._instances[service_class] = instance
        return instance

    get = resolve

    def __contains__(self, service_class: object) -> bool:
        return service_class in self._instances
