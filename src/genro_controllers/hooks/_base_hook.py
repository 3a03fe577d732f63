"""Base class for configurable hooks.

``BaseHook`` is an optional helper: any callable ``hook(ctx, services)``
satisfies the hook contract. Subclass it when a hook needs validated options.

Required class attributes:
    - ``hook_code``: short identifier (e.g. "logging")
    - ``hook_description``: human-readable description

Configuration
-------------
Subclasses declare their options as the parameters of ``configure()``. At
class creation ``__init_subclass__`` wraps it so that:

- ``flags="before,after:off"`` is parsed into boolean options;
- options are validated with pydantic ``validate_call``;
- values are stored on the hook and read back with ``configuration()``.

Example::

    class SlowDown(BaseHook):
        hook_code = "slowdown"
        hook_description = "Sleeps before the handler"

        def configure(self, seconds: float = 0.1, enabled: bool = True):
            pass  # Storage handled by the wrapper

        async def run(self, ctx, services):
            await anyio.sleep(self.configuration()["seconds"])

    hook = SlowDown(seconds=0.5)
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from pydantic import validate_call

__all__ = ["BaseHook"]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a hook's configure() method to handle flags, validation, and storage."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(self: BaseHook, *, flags: str | None = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))
        # Raises pydantic.ValidationError on unknown options or wrong types
        validated(self, **kwargs)
        self._config.update(kwargs)

    return wrapper


def _declared_defaults(configure: Callable) -> dict[str, Any]:
    target = inspect.unwrap(configure)
    defaults = {}
    for name, param in inspect.signature(target).parameters.items():
        if name in ("self", "flags") or param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        if param.default is not inspect.Parameter.empty:
            defaults[name] = param.default
    return defaults


class BaseHook:
    """Callable hook with validated configuration.

    Subclasses implement :meth:`run` and may override :meth:`configure`.
    Calling the hook skips :meth:`run` when the ``enabled`` option is false.
    """

    __slots__ = ("_config",)

    hook_code: str = ""
    hook_description: str = ""
    _defaults: dict[str, Any] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]
        cls._defaults = _declared_defaults(cls.configure)

    def __init__(self, **config: Any) -> None:
        self._config: dict[str, Any] = {}
        self.configure(**config)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.configuration()}>"

    def __call__(self, ctx: Any, services: Any) -> Any:
        if not self.configuration().get("enabled", True):
            return None
        return self.run(ctx, services)

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def configuration(self) -> dict[str, Any]:
        """Return declared defaults merged with configured values."""
        return self._defaults | self._config

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM HOOKS
    # =========================================================================

    def configure(self, *, flags: str | None = None) -> None:
        """Override to define accepted configuration parameters.

        Args:
            flags: String like "enabled,before:off" parsed into booleans.
        """
        if flags:
            self._config.update(self._parse_flags(flags))

    def run(self, ctx: Any, services: Any) -> Any:
        """Override with the hook body; same contract as a plain hook."""
        raise NotImplementedError(f"{type(self).__name__} must implement run()")
