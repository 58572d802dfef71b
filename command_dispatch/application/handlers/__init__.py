"""Handler pipeline components."""

from command_dispatch.application.handlers.base import PipelineComponent
from command_dispatch.application.handlers.group import HandlerGroup
from command_dispatch.application.handlers.handler import Handler

__all__ = ["Handler", "HandlerGroup", "PipelineComponent"]
