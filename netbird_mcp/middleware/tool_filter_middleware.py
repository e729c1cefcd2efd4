"""
Toolset registry and x-mcp-tools header filtering.

Every NetBird tool is registered into one toolset. HTTP clients can narrow
``tools/list`` to the tools they need by sending a comma-separated list of
tool or toolset names in the ``x-mcp-tools`` header.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Iterable, Optional, Protocol, Set, cast

from fastmcp.server.dependencies import get_http_headers
from fastmcp.server.middleware import Middleware, MiddlewareContext

logger = logging.getLogger(__name__)

TOOLS_HEADER = "x-mcp-tools"

# attribute name to store registry on the mcp instance
_REGISTRY_ATTR = "_toolset_registry"

TOOLSETS = {
    "peers": "Peers and their ingress port allocations",
    "groups": "Groups and group/policy dependency management",
    "policies": "Access control policies",
    "networks": "Networks, network resources and network routers",
    "dns": "Nameserver groups",
    "posture": "Posture checks",
    "routes": "Network routes",
    "access": "Users and setup keys",
    "account": "Account settings",
}

ToolsetRegistry = DefaultDict[str, Set[str]]  # toolset -> {tool names}


class MCPInstance(Protocol):
    def tool(
        self, **tool_kwargs: Any
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]: ...


def get_registry(mcp: MCPInstance) -> ToolsetRegistry:
    """Return the toolset registry attached to a FastMCP instance, creating it on first use."""
    reg = getattr(mcp, _REGISTRY_ATTR, None)
    if reg is None:
        reg = defaultdict(set)
        setattr(mcp, _REGISTRY_ATTR, reg)
    return cast(ToolsetRegistry, reg)


def tool(mcp: MCPInstance, *, toolset: str, **tool_kwargs: Any):
    """
    Register a tool with FastMCP and record it under ``toolset``.

    Usage:
        @tool(mcp, toolset="peers", name="list_netbird_peers",
              description="List all NetBird peers")
        def list_netbird_peers():
            ...
    """
    if toolset not in TOOLSETS:
        raise ValueError(f"Unknown toolset '{toolset}'")

    def decorator(fn: Callable):
        wrapped = mcp.tool(**tool_kwargs)(fn)
        tool_name = (
            getattr(wrapped, "name", None) or tool_kwargs.get("name") or fn.__name__
        )
        get_registry(mcp)[toolset].add(tool_name)
        return wrapped

    return decorator


def expand_toolsets(names: Iterable[str], registry: ToolsetRegistry) -> Set[str]:
    """Replace toolset names with their tools; other names are kept as tool names."""
    expanded: Set[str] = set()
    for name in names:
        if name in registry:
            expanded.update(registry[name])
        else:
            expanded.add(name)
    return expanded


def parse_tools_header(raw: Optional[str], registry: ToolsetRegistry) -> Optional[Set[str]]:
    """
    Header semantics:
      - Missing => allow ALL tools (None)
      - Present but empty => allow NONE (empty set)
      - Otherwise => allow listed tools/toolsets
    """
    if raw is None:
        return None

    items = {x.strip() for x in raw.split(",") if x.strip()}
    if not items:
        return set()
    return expand_toolsets(items, registry)


class ToolFilterMiddleware(Middleware):
    """Filters tools/list responses using the x-mcp-tools header."""

    def __init__(self, mcp: MCPInstance, header_name: str = TOOLS_HEADER) -> None:
        self.header_name = header_name
        self._mcp = mcp

    def _get_header_value(self) -> Optional[str]:
        headers = get_http_headers(include_all=True) or {}
        for k, v in headers.items():
            if k.casefold() == self.header_name.casefold():
                return v
        return None

    def allowed_tools(self) -> Optional[Set[str]]:
        try:
            raw = self._get_header_value()
        except Exception as e:
            # no readable headers (e.g. stdio) means no filtering
            logger.error(f"ToolFilterMiddleware: failed to read HTTP headers: {e}", exc_info=True)
            return None
        return parse_tools_header(raw, get_registry(self._mcp))

    async def on_list_tools(self, context: MiddlewareContext, call_next):
        tools = await call_next(context)
        allowed = self.allowed_tools()

        if allowed is None:
            return tools

        logger.debug(f"Filtering tools/list to {sorted(allowed)}")
        return [t for t in tools if t.name in allowed]
