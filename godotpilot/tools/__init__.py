"""Tool handlers, registry and dispatcher."""

from godotpilot.tools.dispatcher import ToolCall, ToolDispatcher, ToolResponse
from godotpilot.tools.registry import PROGRESS_TOOLS, TOOL_SPECS, ToolName, ToolSpec

__all__ = [
    "PROGRESS_TOOLS",
    "TOOL_SPECS",
    "ToolCall",
    "ToolDispatcher",
    "ToolName",
    "ToolResponse",
    "ToolSpec",
]
