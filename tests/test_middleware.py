"""
Tests for the toolset registry and the x-mcp-tools filter.
"""

import asyncio
from types import SimpleNamespace

import pytest

from netbird_mcp.middleware import ToolFilterMiddleware, get_registry, tool
from netbird_mcp.middleware import tool_filter_middleware
from netbird_mcp.middleware.tool_filter_middleware import expand_toolsets, parse_tools_header


class FakeMCP:
    """Records tool registrations the way FastMCP.tool does."""

    def __init__(self):
        self.registered = []

    def tool(self, **tool_kwargs):
        def decorator(fn):
            registered = SimpleNamespace(name=tool_kwargs.get("name") or fn.__name__, fn=fn)
            self.registered.append(registered)
            return registered

        return decorator


@pytest.fixture
def mcp():
    mcp = FakeMCP()

    @tool(mcp, toolset="peers", name="list_netbird_peers")
    def list_peers():
        return []

    @tool(mcp, toolset="peers", name="get_netbird_peer")
    def get_peer(peer_id):
        return {}

    @tool(mcp, toolset="routes")
    def list_netbird_routes():
        return []

    return mcp


def test_tools_are_recorded_by_toolset(mcp):
    registry = get_registry(mcp)
    assert registry["peers"] == {"list_netbird_peers", "get_netbird_peer"}
    assert registry["routes"] == {"list_netbird_routes"}
    assert [t.name for t in mcp.registered] == ["list_netbird_peers", "get_netbird_peer", "list_netbird_routes"]


def test_unknown_toolset_is_rejected():
    with pytest.raises(ValueError, match="Unknown toolset 'firewall'"):
        tool(FakeMCP(), toolset="firewall", name="x")


def test_expand_toolsets_keeps_plain_tool_names(mcp):
    expanded = expand_toolsets(["routes", "get_netbird_peer"], get_registry(mcp))
    assert expanded == {"list_netbird_routes", "get_netbird_peer"}


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("", set()),
        (" , ,", set()),
        ("peers", {"list_netbird_peers", "get_netbird_peer"}),
        (" list_netbird_routes , get_netbird_peer ", {"list_netbird_routes", "get_netbird_peer"}),
    ],
)
def test_parse_tools_header(mcp, raw, expected):
    assert parse_tools_header(raw, get_registry(mcp)) == expected


def _list_tools(mcp, monkeypatch, headers):
    monkeypatch.setattr(tool_filter_middleware, "get_http_headers", lambda include_all=False: headers)
    middleware = ToolFilterMiddleware(mcp)

    async def call_next(context):
        return list(mcp.registered)

    tools = asyncio.run(middleware.on_list_tools(SimpleNamespace(), call_next))
    return [t.name for t in tools]


def test_list_tools_without_header_returns_everything(mcp, monkeypatch):
    assert len(_list_tools(mcp, monkeypatch, {})) == 3


def test_list_tools_filters_by_header(mcp, monkeypatch):
    names = _list_tools(mcp, monkeypatch, {"X-MCP-Tools": "routes"})
    assert names == ["list_netbird_routes"]


def test_list_tools_with_empty_header_returns_nothing(mcp, monkeypatch):
    assert _list_tools(mcp, monkeypatch, {"x-mcp-tools": ""}) == []


def test_unreadable_headers_disable_filtering(mcp, monkeypatch):
    def broken(include_all=False):
        raise RuntimeError("no active request")

    monkeypatch.setattr(tool_filter_middleware, "get_http_headers", broken)
    assert ToolFilterMiddleware(mcp).allowed_tools() is None
