"""Pydantic request-body validation hook.

``ValidateBody(Model)`` validates ``ctx.request.body`` against a pydantic
model before the service runs. On success the validated instance is stored
in ``ctx.state["body"]``; on failure the chain aborts with a 400 response
listing the validation errors.

Example::

    from pydantic import BaseModel

    from genro_controllers.hooks.pydantic import ValidateBody

    class NewTodo(BaseModel):
        title: str
        done: bool = False

    hooks.add_pre_hooks(TodoService, [ValidateBody(NewTodo)], method="add_todo")

Configuration::

    ValidateBody(NewTodo, state_key="todo")   # store under another key
    ValidateBody(NewTodo, strict=True)        # no type coercion
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from genro_controllers.core.hooks import Abort
from genro_controllers.core.http import HttpResponseBadRequest

from ._base_hook import BaseHook

__all__ = ["ValidateBody"]


class ValidateBody(BaseHook):
    """Validate the request body with a pydantic model."""

    hook_code = "pydantic"
    hook_description = "Validates the request body using a Pydantic model"

    __slots__ = ("model",)

    def __init__(self, model: type[BaseModel], **cfg: Any):
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise TypeError(f"ValidateBody requires a pydantic model, got {model!r}")
        self.model = model
        super().__init__(**cfg)

    def configure(  # type: ignore[override]
        self,
        state_key: str = "body",
        strict: bool = False,
        enabled: bool = True,
    ):
        """Configure validation options.

        Args:
            state_key: Key of ``ctx.state`` receiving the validated model.
            strict: Validate in pydantic strict mode.
            enabled: If False, skip validation.
        """
        pass  # Storage is handled by the wrapper

    def run(self, ctx: Any, services: Any) -> Abort | None:
        cfg = self.configuration()
        try:
            validated = self.model.model_validate(ctx.request.body, strict=cfg["strict"])
        except ValidationError as exc:
            return Abort(
                HttpResponseBadRequest(
                    {
                        "code": "validation_error",
                        "model": self.model.__name__,
                        "errors": exc.errors(include_url=False),
                    }
                )
            )
        ctx.state[cfg["state_key"]] = validated
        return None
