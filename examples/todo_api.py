"""Todo API wired with genro-controllers and dispatched by a toy transport."""

from __future__ import annotations

import anyio
from pydantic import BaseModel

from genro_controllers import (
    Controller,
    ControllerRoutesFactory,
    HookRegistry,
    ServiceManager,
)
from genro_controllers.hooks.auth import TagsHook
from genro_controllers.hooks.logging import LoggingHook
from genro_controllers.hooks.pydantic import ValidateBody
from genro_controllers.hooks.token import InvalidTokenError, TokenHook
from genro_controllers.testing import create_empty_context

TOKENS = {"s3cret": {"sub": "alice", "tags": "editor"}}


def verify(token):
    if token not in TOKENS:
        raise InvalidTokenError("unknown token")
    return TOKENS[token]


class NewTodo(BaseModel):
    title: str


class TodoService:
    def __init__(self):
        self.todos: list[str] = []

    def list_todos(self, ctx):
        return self.todos

    def add_todo(self, ctx):
        self.todos.append(ctx.state["body"].title)
        return {"added": ctx.state["body"].title}


class TodoControllers(ControllerRoutesFactory):
    def create_controller(self, service):
        controller = Controller("/todos")
        controller.add_route("list", "GET", "/", service.list_todos)
        controller.add_route("add", "POST", "/", service.add_todo, success_status=201)
        return controller


timing = LoggingHook(print=True)
hooks = HookRegistry()
hooks.add_pre_hooks(TodoService, [timing, TokenHook(verify)])
hooks.add_post_hooks(TodoService, [timing.post])
hooks.add_pre_hooks(TodoService, [TagsHook(rule="editor"), ValidateBody(NewTodo)], method="add_todo")


async def main():
    routes = TodoControllers(hooks).attach_service("/api", TodoService)(ServiceManager())
    table = {(r.http_method.value, r.path): r for r in routes}
    for route in routes:
        print(f"{route.http_method.value:6} {route.path} -> {route.success_status}")

    async def request(method, path, **fields):
        route = table[(method, path)]
        ctx = create_empty_context(method=method, path=path, **fields)
        aborted = await route.dispatch(ctx)
        if aborted is not None:
            return aborted.response.status, aborted.response.body
        return route.success_status, ctx.result

    auth = {"Authorization": "Bearer s3cret"}
    print(await request("POST", "/api/todos/", headers=auth, body={"title": "ship"}))
    print(await request("POST", "/api/todos/", headers=auth, body={}))
    print(await request("GET", "/api/todos/"))
    print(await request("GET", "/api/todos/", headers=auth))


if __name__ == "__main__":
    anyio.run(main)
