"""Logging hooks for Genro Controllers.

``LoggingHook`` logs the start and the end of a request with timing. One
instance provides both halves: register it as a pre-hook and its
:attr:`~LoggingHook.post` companion as a post-hook.

Configuration
-------------
    - ``enabled``: Gate the hook entirely (default True)
    - ``before``: Log "start" message (default True)
    - ``after``: Log "end" message with timing (default True)
    - ``log``: Use logger.info() when available (default True)
    - ``print``: Always use print() (default False)

Example::

    timing = LoggingHook(flags="before:off")
    hooks.add_pre_hooks(UserService, [timing])
    hooks.add_post_hooks(UserService, [timing.post])

Since the post half only runs when no hook aborts, aborted requests log a
start without an end.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from ._base_hook import BaseHook

__all__ = ["LoggingHook"]

_STARTED = "logging.started"


class LoggingHook(BaseHook):
    """Start/end request logging with timing."""

    hook_code = "logging"
    hook_description = "Logs requests with timing"

    __slots__ = ("_logger",)

    def __init__(self, *, logger: logging.Logger | None = None, **cfg: Any):
        self._logger = logger or logging.getLogger("genro_controllers")
        super().__init__(**cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging hook options.

        Args:
            enabled: Enable/disable the hook entirely.
            before: Log "{request} start" before the handler.
            after: Log "{request} end (X ms)" after the handler.
            log: Use logger.info() when handlers available.
            print: Always use print() instead of logger.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, cfg: dict[str, Any]) -> None:
        if cfg["print"]:
            print(message)
            return
        if cfg["log"]:
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    @staticmethod
    def _label(ctx: Any) -> str:
        request = ctx.request
        return f"{request.method} {request.path}"

    def run(self, ctx: Any, services: Any) -> None:
        cfg = self.configuration()
        ctx.state[_STARTED] = time.perf_counter()
        if cfg["before"]:
            self._emit(f"{self._label(ctx)} start", cfg)

    def post(self, ctx: Any, services: Any) -> None:
        """Post-hook half: log the end of the request."""
        cfg = self.configuration()
        if not cfg["enabled"] or not cfg["after"]:
            return
        started = ctx.state.pop(_STARTED, None)
        if started is None:
            self._emit(f"{self._label(ctx)} end", cfg)
            return
        elapsed = (time.perf_counter() - started) * 1000
        self._emit(f"{self._label(ctx)} end ({elapsed:.2f} ms)", cfg)
