"""Base infrastructure for tool handlers.

This module provides the common types and utilities used by all handler modules.
Each handler receives its validated parameters model and a HandlerContext, and
returns either plain data (serialized by the dispatcher) or a ready ToolResult.
"""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from pydantic import BaseModel

from ...models import ToolResult

if TYPE_CHECKING:
    from ...auth import AuthCoordinator
    from ...client import FrappeClient
    from ...config import Settings
    from ..core.hints import StaticHints


@dataclass
class HandlerContext:
    """Context object passed to all handlers.

    Holds the process-wide collaborators created once at startup.
    """

    # Backend access
    client: "FrappeClient"
    auth: "AuthCoordinator"

    # Static usage hints (may be empty)
    hints: "StaticHints"

    settings: "Settings"


# Type alias for handler functions
HandlerFunc = Callable[
    [BaseModel, HandlerContext],
    Coroutine[Any, Any, Any],
]


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def render_list(
    items: list[Any], label: str = "Documents retrieved", footer: str = ""
) -> ToolResult:
    """Text result for a list, prefixed with a count line."""
    return ToolResult.text(f"{label}: {len(items)}\n\n{to_json(items)}{footer}")


def render_result(data: Any, label: str = "Documents retrieved") -> ToolResult:
    """Serialize a handler's return value into a ToolResult."""
    if isinstance(data, ToolResult):
        return data
    if isinstance(data, list):
        return render_list(data, label)
    if isinstance(data, str):
        return ToolResult.text(data)
    return ToolResult.text(to_json(data))


def pagination_hint(count: int, limit: int | None, limit_start: int | None) -> str:
    if not limit:
        return ""
    start = limit_start or 0
    end = start + count
    hint = f"\n\nShowing items {start + 1}-{end}"
    if count == limit:
        hint += f" (more items may be available, use limit_start={end} to see next page)"
    return hint
