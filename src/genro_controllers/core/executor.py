"""Short-circuit executor for reduced middleware chains.

``run_chain`` awaits every middleware of a chain in order, one at a time.
Each middleware is called with the request context only (the factory has
already bound the dependency resolver). The first ``Abort`` outcome stops
the chain; later middlewares never run and the ``Abort`` itself is returned,
so an abort is never confused with a completed chain.

The executor adds no ``try``/``except`` around middlewares: exceptions reach
the caller unchanged.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import Any

from genro_controllers.exceptions import InvalidHookResult

from .hooks import Abort, Continue

__all__ = ["run_chain", "invoke", "check_outcome"]

logger = logging.getLogger("genro_controllers")


async def invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def check_outcome(hook: Any, outcome: Any) -> Abort | None:
    """Return ``outcome`` when it aborts, ``None`` when the chain continues.

    Raises:
        InvalidHookResult: If ``outcome`` is not a hook outcome.
    """
    if outcome is None or isinstance(outcome, Continue):
        return None
    if isinstance(outcome, Abort):
        return outcome
    raise InvalidHookResult(hook, outcome)


async def run_chain(middlewares: Iterable[Callable[[Any], Any]], ctx: Any) -> Abort | None:
    """Run ``middlewares`` sequentially against ``ctx``.

    Returns:
        The first ``Abort`` outcome (the final response is its ``response``),
        or ``None`` when every middleware completed. In the latter case the
        service result is in ``ctx.result``.
    """
    for position, middleware in enumerate(middlewares):
        outcome = check_outcome(middleware, await invoke(middleware, ctx))
        if outcome is not None:
            logger.debug(
                "chain aborted at position %d by %s (%s)",
                position,
                getattr(middleware, "__qualname__", type(middleware).__name__),
                getattr(outcome.response, "status", "-"),
            )
            return outcome
    return None
