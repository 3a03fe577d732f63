"""Concrete hooks for Genro Controllers.

Note: concrete hooks are not imported here to keep imports side-effect free
and to avoid loading optional collaborators. Import them from their modules::

    from genro_controllers.hooks.auth import TagsHook
    from genro_controllers.hooks.logging import LoggingHook
    from genro_controllers.hooks.pydantic import ValidateBody
    from genro_controllers.hooks.token import InvalidTokenError, TokenHook
"""

from ._base_hook import BaseHook

__all__ = ["BaseHook"]
