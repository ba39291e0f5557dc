"""Tests for the MCP server handlers and tool registry."""

from __future__ import annotations

import pytest
from mcp.types import CallToolResult, TextContent, Tool

from ratchet.context import RatchetContext
from ratchet.tools import server
from ratchet.tools.registry import TOOL_REGISTRY, ToolRegistry, get_tool_names


@pytest.fixture
def server_context(context: RatchetContext):
    server.set_context(context)
    yield context
    server.set_context(None)


def test_tool_names() -> None:
    assert get_tool_names() == ["search_patient", "create_visit_note", "get_patient_history"]


def test_tool_schemas_use_camel_case() -> None:
    schemas = {tool.name: tool.inputSchema for tool in TOOL_REGISTRY.tools}

    assert schemas["search_patient"]["required"] == ["query"]
    assert "searchType" in schemas["search_patient"]["properties"]
    assert set(schemas["create_visit_note"]["required"]) == {
        "patientId",
        "visitType",
        "visitDate",
        "timeIn",
        "timeOut",
    }
    assert "vitalSigns" in schemas["create_visit_note"]["properties"]
    assert schemas["get_patient_history"]["required"] == ["patientId"]


@pytest.mark.asyncio
async def test_list_tools() -> None:
    tools = await server.list_tools()

    assert [tool.name for tool in tools] == get_tool_names()
    assert all(tool.description for tool in tools)


@pytest.mark.asyncio
async def test_call_tool_dispatches(server_context: RatchetContext) -> None:
    result = await server.call_tool("search_patient", {"query": "Eleanor"})

    assert result.isError is False
    assert "Eleanor Thompson" in result.content[0].text


@pytest.mark.asyncio
async def test_call_tool_shares_context_state(server_context: RatchetContext) -> None:
    await server.call_tool(
        "create_visit_note",
        {
            "patientId": "PT-10002",
            "visitType": "skilled_nursing",
            "visitDate": "2024-12-23",
            "timeIn": "08:00",
            "timeOut": "08:30",
        },
    )

    result = await server.call_tool("get_patient_history", {"patientId": "PT-10002"})

    assert "Showing 2 of 2 visit(s):" in result.content[0].text
    assert len(server_context.store.visits) == 5


@pytest.mark.asyncio
async def test_call_tool_without_arguments(server_context: RatchetContext) -> None:
    result = await server.call_tool("search_patient", None)

    assert result.isError is True
    assert "Search query is required" in result.content[0].text


@pytest.mark.asyncio
async def test_unknown_tool(server_context: RatchetContext) -> None:
    result = await server.call_tool("delete_patient", {})

    assert result.isError is True
    assert result.content[0].text == (
        "Unknown tool: delete_patient. Available tools: "
        "search_patient, create_visit_note, get_patient_history"
    )


@pytest.mark.asyncio
async def test_registry_catches_executor_crash(context: RatchetContext) -> None:
    async def broken(args, ctx) -> CallToolResult:
        raise RuntimeError("kaboom")

    registry = ToolRegistry()
    registry.register_tool(Tool(name="broken", inputSchema={"type": "object"}), broken)

    result = await registry.execute("broken", {}, context)

    assert result.isError is True
    assert result.content == [TextContent(type="text", text="Tool execution failed: kaboom")]


@pytest.mark.asyncio
async def test_registry_reports_unknown_error(context: RatchetContext) -> None:
    async def silent(args, ctx) -> CallToolResult:
        raise RuntimeError()

    registry = ToolRegistry()
    registry.register_tool(Tool(name="silent", inputSchema={"type": "object"}), silent)

    result = await registry.execute("silent", {}, context)

    assert result.content[0].text == "Tool execution failed: Unknown error"


def test_get_context_builds_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POINTCARE_API_URL", raising=False)
    server.set_context(None)
    try:
        context = server.get_context()
        assert context.mock_mode is True
        assert server.get_context() is context
    finally:
        server.set_context(None)
