"""Tool engine: registry, dispatcher, handlers and backend-facing core helpers."""

from .dispatcher import ToolDispatcher, ToolRegistry, ToolSpec, build_registry
from .handlers import HandlerContext

__all__ = [
    "HandlerContext",
    "ToolDispatcher",
    "ToolRegistry",
    "ToolSpec",
    "build_registry",
]
