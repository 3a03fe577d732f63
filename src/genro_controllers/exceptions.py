# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Genro Controllers.

Only wiring-time mistakes are reported with exceptions owned by this
package. Errors raised inside hooks or service methods are never wrapped:
they reach the transport adapter unchanged.
"""

__all__ = [
    "ConfigurationError",
    "NotFound",
    "InvalidHookResult",
]


class ConfigurationError(Exception):
    """Raised when controllers or hooks are wired incorrectly.

    This is a programming mistake detected at startup and is never
    recovered locally.
    """


class NotFound(ConfigurationError):
    """Raised when a hook targets a route name that was never registered.

    Attributes:
        name: The route name that could not be found.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No route called `{name}` could be found.")


class InvalidHookResult(TypeError):
    """Raised when a hook returns something other than a hook outcome.

    Hooks must return ``None``, ``CONTINUE`` or an ``Abort`` instance.

    Attributes:
        hook: The offending hook.
        value: The value it returned.
    """

    def __init__(self, hook: object, value: object) -> None:
        self.hook = hook
        self.value = value
        name = getattr(hook, "__qualname__", None) or type(hook).__name__
        super().__init__(
            f"Hook {name} returned {type(value).__name__}; "
            "expected None, CONTINUE or Abort(response)"
        )
