# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the short-circuit executor and hook outcomes."""

import anyio
import pytest

from genro_controllers import (
    CONTINUE,
    Abort,
    Continue,
    ControllerFactory,
    HookRegistry,
    HttpResponseUnauthorized,
    InvalidHookResult,
    RouteDeclaration,
    run_chain,
)
from genro_controllers.testing import create_empty_context


def mark(key, outcome=None):
    def middleware(ctx):
        ctx.state.setdefault("ran", []).append(key)
        return outcome

    return middleware


def amark(key, outcome=None):
    async def middleware(ctx):
        await anyio.sleep(0)
        ctx.state.setdefault("ran", []).append(key)
        return outcome

    return middleware


def test_continue_is_a_singleton():
    assert Continue() is CONTINUE
    assert repr(CONTINUE) == "CONTINUE"


@pytest.mark.anyio
async def test_chain_without_abort_returns_none(ctx):
    chain = [mark("a"), amark("b", CONTINUE), mark("c")]
    assert await run_chain(chain, ctx) is None
    assert ctx.state["ran"] == ["a", "b", "c"]


@pytest.mark.anyio
@pytest.mark.parametrize("position", [0, 1, 2])
async def test_abort_stops_every_later_middleware(ctx, position):
    response = HttpResponseUnauthorized()
    chain = [amark("a"), mark("b"), amark("c"), mark("d")]
    chain[position] = mark(f"abort-{position}", Abort(response))
    outcome = await run_chain(chain, ctx)
    assert isinstance(outcome, Abort)
    assert outcome.response is response
    assert ctx.state["ran"][-1] == f"abort-{position}"
    assert len(ctx.state["ran"]) == position + 1


@pytest.mark.anyio
async def test_async_abort(ctx):
    chain = [amark("a", Abort("stop")), mark("b")]
    assert await run_chain(chain, ctx) == Abort("stop")
    assert ctx.state["ran"] == ["a"]


@pytest.mark.anyio
async def test_abort_with_falsy_response_still_aborts(ctx):
    chain = [mark("a", Abort(None)), mark("b")]
    outcome = await run_chain(chain, ctx)
    assert isinstance(outcome, Abort)
    assert outcome.response is None
    assert ctx.state["ran"] == ["a"]


@pytest.mark.anyio
async def test_middlewares_run_strictly_sequentially(ctx):
    events = []

    def slow(label, delay):
        async def middleware(ctx):
            events.append(f"{label}:start")
            await anyio.sleep(delay)
            events.append(f"{label}:end")

        return middleware

    await run_chain([slow("one", 0.02), slow("two", 0), slow("three", 0.01)], ctx)
    assert events == ["one:start", "one:end", "two:start", "two:end", "three:start", "three:end"]


@pytest.mark.anyio
async def test_exceptions_propagate_unchanged(ctx):
    class Boom(Exception):
        pass

    def explode(ctx):
        raise Boom("broken hook")

    with pytest.raises(Boom, match="broken hook"):
        await run_chain([mark("a"), explode, mark("b")], ctx)
    assert ctx.state["ran"] == ["a"]


@pytest.mark.anyio
@pytest.mark.parametrize("value", [True, False, 0, "response", {"status": 401}])
async def test_non_outcome_values_are_rejected(ctx, value):
    with pytest.raises(InvalidHookResult) as excinfo:
        await run_chain([mark("a", value), mark("b")], ctx)
    assert excinfo.value.value == value
    assert ctx.state["ran"] == ["a"]


class Service:
    def __init__(self):
        self.calls = 0

    def run(self):
        self.calls += 1
        return "done"


class Factory(ControllerFactory):
    def get_routes(self, service):
        return [RouteDeclaration("GET", "/run", lambda ctx: service.run(), "run")]


@pytest.mark.anyio
async def test_pre_hook_abort_skips_service_and_post_hooks(services):
    post_calls = []

    def guard(ctx, services):
        if ctx.user is None:
            return Abort(HttpResponseUnauthorized())

    async def after(ctx, services):
        post_calls.append(ctx.result)

    hooks = HookRegistry().add_pre_hooks(Service, [guard]).add_post_hooks(Service, [after])
    (route,) = Factory(hooks).attach_service("/", Service)(services)

    ctx = create_empty_context()
    outcome = await route.dispatch(ctx)
    assert outcome.response.status == 401
    assert services.resolve(Service).calls == 0
    assert post_calls == []

    ctx = create_empty_context(user={"id": 1})
    assert await route.dispatch(ctx) is None
    assert ctx.result == "done"
    assert post_calls == ["done"]


@pytest.mark.anyio
async def test_post_hook_abort_skips_remaining_post_hooks(services):
    seen = []

    def method_post(ctx, services):
        seen.append("method_post")
        return Abort(ctx.result.upper())

    def class_post(ctx, services):
        seen.append("class_post")

    hooks = HookRegistry()
    hooks.add_post_hooks(Service, [class_post])
    hooks.add_post_hooks(Service, [method_post], method="run")
    (route,) = Factory(hooks).attach_service("/", Service)(services)

    assert await route.dispatch(create_empty_context()) == Abort("DONE")
    assert seen == ["method_post"]


@pytest.mark.anyio
async def test_invalid_result_names_the_hook(services):
    def sloppy_hook(ctx, services):
        return "oops"

    hooks = HookRegistry().add_pre_hooks(Service, [sloppy_hook])
    (route,) = Factory(hooks).attach_service("/", Service)(services)
    with pytest.raises(InvalidHookResult, match="sloppy_hook"):
        await route.dispatch(create_empty_context())


@pytest.mark.anyio
async def test_abort_without_response_differs_from_completion(services):
    def stop(ctx, services):
        return Abort(None)

    class Guarded(Service):
        pass

    hooks = HookRegistry().add_pre_hooks(Guarded, [stop])
    (aborted_route,) = Factory(hooks).attach_service("/", Guarded)(services)
    (plain_route,) = Factory(hooks).attach_service("/", Service)(services)

    aborted = await aborted_route.dispatch(create_empty_context())
    completed = await plain_route.dispatch(create_empty_context())

    assert aborted != completed
    assert aborted == Abort(None)
    assert completed is None
    assert services.resolve(Guarded).calls == 0
    assert services.resolve(Service).calls == 1
