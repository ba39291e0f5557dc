"""Tool registry for the Ratchet MCP server.

Pairs each MCP ``Tool`` definition with the executor that runs it, and
dispatches calls by name. Unknown names and executor crashes come back as
error-flagged results instead of exceptions.

Example:
    registry = ToolRegistry()
    registry.register_tool(search_patient.TOOL, search_patient.execute)
    result = await registry.execute("search_patient", {"query": "Eleanor"}, context)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from mcp.types import CallToolResult, TextContent, Tool

from . import create_visit_note, get_patient_history, search_patient

if TYPE_CHECKING:
    from ..context import RatchetContext

logger = logging.getLogger(__name__)

# Type alias for tool executor functions
ToolExecutor = Callable[[dict[str, Any], "RatchetContext"], Awaitable[CallToolResult]]


@dataclass
class ToolDefinition:
    """Definition of a single tool."""

    tool: Tool
    executor: ToolExecutor

    @property
    def name(self) -> str:
        return self.tool.name


class ToolRegistry:
    """Name -> executor lookup for all server tools."""

    def __init__(self):
        self._tools: dict[str, ToolDefinition] = {}

    def register_tool(self, tool: Tool, executor: ToolExecutor) -> None:
        self._tools[tool.name] = ToolDefinition(tool=tool, executor=executor)

    def get(self, name: str) -> ToolDefinition | None:
        """Get tool definition by name."""
        return self._tools.get(name)

    @property
    def names(self) -> list[str]:
        """List of registered tool names, in registration order."""
        return list(self._tools.keys())

    @property
    def tools(self) -> list[Tool]:
        return [definition.tool for definition in self._tools.values()]

    async def execute(
        self,
        tool_name: str,
        args: dict[str, Any] | None,
        context: RatchetContext,
    ) -> CallToolResult:
        """Execute a tool by name with given arguments.

        Args:
            tool_name: Name of the tool to execute
            args: Arguments dict from the MCP request
            context: Runtime context passed through to the executor

        Returns:
            The executor's result, or an error result for unknown tools
            and executor crashes
        """
        logger.info("Tool called", extra={"data": {"tool": tool_name}})

        definition = self._tools.get(tool_name)
        if definition is None:
            logger.warning("Unknown tool requested", extra={"data": {"tool": tool_name}})
            return _error_text(
                f"Unknown tool: {tool_name}. Available tools: {', '.join(self.names)}"
            )

        try:
            return await definition.executor(args or {}, context)
        except Exception as e:
            # Adapters handle their own errors; this only catches bugs
            logger.error(
                "Tool execution failed",
                extra={"data": {"tool": tool_name, "error": type(e).__name__}},
            )
            return _error_text(f"Tool execution failed: {str(e) or 'Unknown error'}")


def _error_text(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)


def build_registry() -> ToolRegistry:
    """Registry with the three PointCare tools."""
    registry = ToolRegistry()
    registry.register_tool(search_patient.TOOL, search_patient.execute)
    registry.register_tool(create_visit_note.TOOL, create_visit_note.execute)
    registry.register_tool(get_patient_history.TOOL, get_patient_history.execute)
    return registry


# Global registry instance
TOOL_REGISTRY = build_registry()


def get_tool_names() -> list[str]:
    """Get list of registered tool names."""
    return TOOL_REGISTRY.names
