"""
NetBird MCP Server
Main server implementation using Python's fastmcp library.
"""

import argparse
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from .config import ConfigLoader
from .errors import GroupDeletionError, NetbirdError
from .middleware import ToolFilterMiddleware, tool
from .tools import (
    AccountSettings,
    CheckConfig,
    DirectPort,
    GroupResource,
    IngressPortRange,
    Nameserver,
    accounts_tool,
    group_dependencies_tool,
    groups_tool,
    nameservers_tool,
    network_resources_tool,
    network_routers_tool,
    networks_tool,
    peers_tool,
    policies_tool,
    port_allocations_tool,
    posture_checks_tool,
    routes_tool,
    setup_keys_tool,
    users_tool,
)
from .utilities import configure_auth, get_netbird_client, log_user_access

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "sse", "streamable-http")
DEFAULT_PORT = 8001


def _run(tool_name: str, operation: Callable[[], Any]) -> Any:
    """Run a tool body, logging failures and surfacing them as ToolError."""
    log_user_access(tool_name)
    try:
        return operation()
    except GroupDeletionError as e:
        logger.error(f"Error in {tool_name}: {e}")
        raise ToolError(f"{e} (policies modified: {e.result.policies_modified})") from e
    except (NetbirdError, ValidationError) as e:
        logger.error(f"Error in {tool_name}: {e}")
        raise ToolError(str(e)) from e
    except Exception as e:
        logger.exception(f"Unexpected error in {tool_name}")
        raise ToolError(f"{tool_name} failed: {e}") from e


def create_server(config_loader: Optional[ConfigLoader] = None) -> FastMCP:
    """Create and configure the FastMCP server.

    Args:
        config_loader: Carries the CLI token/host; header and environment
            values are resolved per request

    Returns:
        Configured FastMCP server instance
    """
    loader = config_loader or ConfigLoader()

    auth_provider = configure_auth()
    mcp = FastMCP(name="NetBird MCP Server", auth=auth_provider)
    mcp.add_middleware(ToolFilterMiddleware(mcp, header_name="x-mcp-tools"))

    def client():
        return get_netbird_client(loader)

    # ============================================
    # PEERS - Peers and ingress port allocations
    # ============================================

    @tool(mcp, name="list_netbird_peers", toolset="peers",
          description="List all NetBird peers")
    def list_netbird_peers() -> List[Dict[str, Any]]:
        return _run("list_netbird_peers", lambda: peers_tool.list(client()))

    @tool(mcp, name="get_netbird_peer", toolset="peers",
          description="Get a NetBird peer by ID")
    def get_netbird_peer(peer_id: str) -> Dict[str, Any]:
        return _run("get_netbird_peer", lambda: peers_tool.get(client(), {"peer_id": peer_id}))

    @tool(mcp, name="update_netbird_peer", toolset="peers",
          description="Update a NetBird peer's name, SSH and expiration settings")
    def update_netbird_peer(
        peer_id: str,
        name: Optional[str] = None,
        ssh_enabled: Optional[bool] = None,
        login_expiration_enabled: Optional[bool] = None,
        inactivity_expiration_enabled: Optional[bool] = None,
        approval_required: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "peer_id": peer_id,
            "name": name,
            "ssh_enabled": ssh_enabled,
            "login_expiration_enabled": login_expiration_enabled,
            "inactivity_expiration_enabled": inactivity_expiration_enabled,
            "approval_required": approval_required,
        }
        return _run("update_netbird_peer", lambda: peers_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_peer", toolset="peers",
          description="Delete a NetBird peer")
    def delete_netbird_peer(peer_id: str) -> Dict[str, Any]:
        return _run("delete_netbird_peer", lambda: peers_tool.delete(client(), {"peer_id": peer_id}))

    @tool(mcp, name="list_netbird_port_allocations", toolset="peers",
          description="List ingress port allocations of a peer")
    def list_netbird_port_allocations(peer_id: str) -> List[Dict[str, Any]]:
        return _run(
            "list_netbird_port_allocations",
            lambda: port_allocations_tool.list(client(), {"peer_id": peer_id}),
        )

    @tool(mcp, name="get_netbird_port_allocation", toolset="peers",
          description="Get an ingress port allocation of a peer")
    def get_netbird_port_allocation(peer_id: str, allocation_id: str) -> Dict[str, Any]:
        input_data = {"peer_id": peer_id, "allocation_id": allocation_id}
        return _run(
            "get_netbird_port_allocation",
            lambda: port_allocations_tool.get(client(), input_data),
        )

    @tool(mcp, name="create_netbird_port_allocation", toolset="peers",
          description="Create an ingress port allocation on a peer")
    def create_netbird_port_allocation(
        peer_id: str,
        name: str,
        enabled: bool,
        port_ranges: Optional[List[IngressPortRange]] = None,
        direct_port: Optional[DirectPort] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "peer_id": peer_id,
            "name": name,
            "enabled": enabled,
            "port_ranges": port_ranges,
            "direct_port": direct_port,
        }
        return _run(
            "create_netbird_port_allocation",
            lambda: port_allocations_tool.create(client(), input_data),
        )

    @tool(mcp, name="update_netbird_port_allocation", toolset="peers",
          description="Update an ingress port allocation on a peer")
    def update_netbird_port_allocation(
        peer_id: str,
        allocation_id: str,
        name: Optional[str] = None,
        enabled: Optional[bool] = None,
        port_ranges: Optional[List[IngressPortRange]] = None,
        direct_port: Optional[DirectPort] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "peer_id": peer_id,
            "allocation_id": allocation_id,
            "name": name,
            "enabled": enabled,
            "port_ranges": port_ranges,
            "direct_port": direct_port,
        }
        return _run(
            "update_netbird_port_allocation",
            lambda: port_allocations_tool.update(client(), input_data),
        )

    @tool(mcp, name="delete_netbird_port_allocation", toolset="peers",
          description="Delete an ingress port allocation from a peer")
    def delete_netbird_port_allocation(peer_id: str, allocation_id: str) -> Dict[str, Any]:
        input_data = {"peer_id": peer_id, "allocation_id": allocation_id}
        return _run(
            "delete_netbird_port_allocation",
            lambda: port_allocations_tool.delete(client(), input_data),
        )

    # ============================================
    # GROUPS - Groups and policy dependencies
    # ============================================

    @tool(mcp, name="list_netbird_groups", toolset="groups",
          description="List all NetBird groups")
    def list_netbird_groups() -> List[Dict[str, Any]]:
        return _run("list_netbird_groups", lambda: groups_tool.list(client()))

    @tool(mcp, name="get_netbird_group", toolset="groups",
          description="Get a NetBird group by ID")
    def get_netbird_group(group_id: str) -> Dict[str, Any]:
        return _run("get_netbird_group", lambda: groups_tool.get(client(), {"group_id": group_id}))

    @tool(mcp, name="create_netbird_group", toolset="groups",
          description="Create a NetBird group with optional peers and resources")
    def create_netbird_group(
        name: str,
        peers: Optional[List[str]] = None,
        resources: Optional[List[GroupResource]] = None,
    ) -> Dict[str, Any]:
        input_data = {"name": name, "peers": peers, "resources": resources}
        return _run("create_netbird_group", lambda: groups_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_group", toolset="groups",
          description="Update a NetBird group's name, peers or resources")
    def update_netbird_group(
        group_id: str,
        name: Optional[str] = None,
        peers: Optional[List[str]] = None,
        resources: Optional[List[GroupResource]] = None,
    ) -> Dict[str, Any]:
        input_data = {"group_id": group_id, "name": name, "peers": peers, "resources": resources}
        return _run("update_netbird_group", lambda: groups_tool.update(client(), input_data))

    @tool(
        mcp,
        name="delete_netbird_group",
        toolset="groups",
        description=(
            "Delete a NetBird group. Fails if policies reference it unless force=true, "
            "which first removes the group from every policy and deletes policies left without rules"
        ),
    )
    def delete_netbird_group(group_id: str, force: bool = False) -> Dict[str, Any]:
        input_data = {"group_id": group_id, "force": force}
        return _run("delete_netbird_group", lambda: groups_tool.delete(client(), input_data))

    @tool(mcp, name="list_policies_by_group", toolset="groups",
          description="List every policy rule location (sources, destinations, authorized_groups) referencing a group")
    def list_policies_by_group(group_id: str) -> List[Dict[str, Any]]:
        return _run(
            "list_policies_by_group",
            lambda: group_dependencies_tool.list_policies(client(), {"group_id": group_id}),
        )

    @tool(mcp, name="replace_group_in_policies", toolset="groups",
          description="Replace one group with another in every policy that references it")
    def replace_group_in_policies(old_group_id: str, new_group_id: str) -> Dict[str, Any]:
        input_data = {"old_group_id": old_group_id, "new_group_id": new_group_id}
        return _run(
            "replace_group_in_policies",
            lambda: group_dependencies_tool.replace(client(), input_data),
        )

    # ============================================
    # POLICIES - Access control policies
    # ============================================

    @tool(mcp, name="list_netbird_policies", toolset="policies",
          description="List all NetBird access control policies")
    def list_netbird_policies() -> List[Dict[str, Any]]:
        return _run("list_netbird_policies", lambda: policies_tool.list(client()))

    @tool(mcp, name="get_netbird_policy", toolset="policies",
          description="Get a NetBird policy by ID")
    def get_netbird_policy(policy_id: str) -> Dict[str, Any]:
        return _run("get_netbird_policy", lambda: policies_tool.get(client(), {"policy_id": policy_id}))

    @tool(
        mcp,
        name="create_netbird_policy",
        toolset="policies",
        description=(
            "Create a NetBird policy. Each rule needs name, enabled, action (accept/drop), "
            "bidirectional, protocol (tcp/udp/icmp/all) and at least one source and destination. "
            "See get_policy_template for examples"
        ),
    )
    def create_netbird_policy(
        name: str,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        rules: Optional[List[Dict[str, Any]]] = None,
        source_posture_checks: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "name": name,
            "description": description,
            "enabled": enabled,
            "rules": rules,
            "source_posture_checks": source_posture_checks,
        }
        return _run("create_netbird_policy", lambda: policies_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_policy", toolset="policies",
          description="Update a NetBird policy; rules, when given, replace the existing rules")
    def update_netbird_policy(
        policy_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        rules: Optional[List[Dict[str, Any]]] = None,
        source_posture_checks: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "policy_id": policy_id,
            "name": name,
            "description": description,
            "enabled": enabled,
            "rules": rules,
            "source_posture_checks": source_posture_checks,
        }
        return _run("update_netbird_policy", lambda: policies_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_policy", toolset="policies",
          description="Delete a NetBird policy")
    def delete_netbird_policy(policy_id: str) -> Dict[str, Any]:
        return _run(
            "delete_netbird_policy",
            lambda: policies_tool.delete(client(), {"policy_id": policy_id}),
        )

    @tool(mcp, name="get_policy_template", toolset="policies",
          description="Get an example policy showing the accepted rule formats")
    def get_policy_template() -> Dict[str, Any]:
        return _run("get_policy_template", policies_tool.template)

    # ============================================
    # NETWORKS - Networks, resources and routers
    # ============================================

    @tool(mcp, name="list_netbird_networks", toolset="networks",
          description="List all NetBird networks")
    def list_netbird_networks() -> List[Dict[str, Any]]:
        return _run("list_netbird_networks", lambda: networks_tool.list(client()))

    @tool(mcp, name="get_netbird_network", toolset="networks",
          description="Get a NetBird network by ID")
    def get_netbird_network(network_id: str) -> Dict[str, Any]:
        return _run("get_netbird_network", lambda: networks_tool.get(client(), {"network_id": network_id}))

    @tool(mcp, name="create_netbird_network", toolset="networks",
          description="Create a NetBird network")
    def create_netbird_network(name: str, description: Optional[str] = None) -> Dict[str, Any]:
        input_data = {"name": name, "description": description}
        return _run("create_netbird_network", lambda: networks_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_network", toolset="networks",
          description="Update a NetBird network")
    def update_netbird_network(
        network_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> Dict[str, Any]:
        input_data = {"network_id": network_id, "name": name, "description": description}
        return _run("update_netbird_network", lambda: networks_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_network", toolset="networks",
          description="Delete a NetBird network")
    def delete_netbird_network(network_id: str) -> Dict[str, Any]:
        return _run(
            "delete_netbird_network",
            lambda: networks_tool.delete(client(), {"network_id": network_id}),
        )

    @tool(mcp, name="list_netbird_network_resources", toolset="networks",
          description="List the resources of a network")
    def list_netbird_network_resources(network_id: str) -> List[Dict[str, Any]]:
        return _run(
            "list_netbird_network_resources",
            lambda: network_resources_tool.list(client(), {"network_id": network_id}),
        )

    @tool(mcp, name="get_netbird_network_resource", toolset="networks",
          description="Get a network resource by ID")
    def get_netbird_network_resource(network_id: str, resource_id: str) -> Dict[str, Any]:
        input_data = {"network_id": network_id, "resource_id": resource_id}
        return _run(
            "get_netbird_network_resource",
            lambda: network_resources_tool.get(client(), input_data),
        )

    @tool(mcp, name="create_netbird_network_resource", toolset="networks",
          description="Create a host, subnet or domain resource in a network")
    def create_netbird_network_resource(
        network_id: str,
        name: str,
        address: str,
        enabled: bool,
        groups: List[str],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "network_id": network_id,
            "name": name,
            "address": address,
            "enabled": enabled,
            "groups": groups,
            "description": description,
        }
        return _run(
            "create_netbird_network_resource",
            lambda: network_resources_tool.create(client(), input_data),
        )

    @tool(mcp, name="update_netbird_network_resource", toolset="networks",
          description="Update a network resource")
    def update_netbird_network_resource(
        network_id: str,
        resource_id: str,
        name: Optional[str] = None,
        address: Optional[str] = None,
        enabled: Optional[bool] = None,
        groups: Optional[List[str]] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "network_id": network_id,
            "resource_id": resource_id,
            "name": name,
            "address": address,
            "enabled": enabled,
            "groups": groups,
            "description": description,
        }
        return _run(
            "update_netbird_network_resource",
            lambda: network_resources_tool.update(client(), input_data),
        )

    @tool(mcp, name="delete_netbird_network_resource", toolset="networks",
          description="Delete a network resource")
    def delete_netbird_network_resource(network_id: str, resource_id: str) -> Dict[str, Any]:
        input_data = {"network_id": network_id, "resource_id": resource_id}
        return _run(
            "delete_netbird_network_resource",
            lambda: network_resources_tool.delete(client(), input_data),
        )

    @tool(mcp, name="list_netbird_network_routers", toolset="networks",
          description="List the routers of a network")
    def list_netbird_network_routers(network_id: str) -> List[Dict[str, Any]]:
        return _run(
            "list_netbird_network_routers",
            lambda: network_routers_tool.list(client(), {"network_id": network_id}),
        )

    @tool(mcp, name="get_netbird_network_router", toolset="networks",
          description="Get a network router by ID")
    def get_netbird_network_router(network_id: str, router_id: str) -> Dict[str, Any]:
        input_data = {"network_id": network_id, "router_id": router_id}
        return _run(
            "get_netbird_network_router",
            lambda: network_routers_tool.get(client(), input_data),
        )

    @tool(mcp, name="create_netbird_network_router", toolset="networks",
          description="Create a network router served by a peer or by peer groups")
    def create_netbird_network_router(
        network_id: str,
        metric: int,
        masquerade: bool,
        enabled: bool,
        peer: Optional[str] = None,
        peer_groups: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "network_id": network_id,
            "metric": metric,
            "masquerade": masquerade,
            "enabled": enabled,
            "peer": peer,
            "peer_groups": peer_groups,
        }
        return _run(
            "create_netbird_network_router",
            lambda: network_routers_tool.create(client(), input_data),
        )

    @tool(mcp, name="update_netbird_network_router", toolset="networks",
          description="Update a network router")
    def update_netbird_network_router(
        network_id: str,
        router_id: str,
        metric: Optional[int] = None,
        masquerade: Optional[bool] = None,
        enabled: Optional[bool] = None,
        peer: Optional[str] = None,
        peer_groups: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "network_id": network_id,
            "router_id": router_id,
            "metric": metric,
            "masquerade": masquerade,
            "enabled": enabled,
            "peer": peer,
            "peer_groups": peer_groups,
        }
        return _run(
            "update_netbird_network_router",
            lambda: network_routers_tool.update(client(), input_data),
        )

    @tool(mcp, name="delete_netbird_network_router", toolset="networks",
          description="Delete a network router")
    def delete_netbird_network_router(network_id: str, router_id: str) -> Dict[str, Any]:
        input_data = {"network_id": network_id, "router_id": router_id}
        return _run(
            "delete_netbird_network_router",
            lambda: network_routers_tool.delete(client(), input_data),
        )

    # ============================================
    # DNS - Nameserver groups
    # ============================================

    @tool(mcp, name="list_netbird_nameservers", toolset="dns",
          description="List all nameserver groups")
    def list_netbird_nameservers() -> List[Dict[str, Any]]:
        return _run("list_netbird_nameservers", lambda: nameservers_tool.list(client()))

    @tool(mcp, name="get_netbird_nameserver", toolset="dns",
          description="Get a nameserver group by ID")
    def get_netbird_nameserver(nameserver_id: str) -> Dict[str, Any]:
        return _run(
            "get_netbird_nameserver",
            lambda: nameservers_tool.get(client(), {"nameserver_id": nameserver_id}),
        )

    @tool(mcp, name="create_netbird_nameserver", toolset="dns",
          description="Create a nameserver group")
    def create_netbird_nameserver(
        name: str,
        nameservers: List[Nameserver],
        groups: List[str],
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        primary: Optional[bool] = None,
        domains: Optional[List[str]] = None,
        search_domains_enabled: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "name": name,
            "nameservers": nameservers,
            "groups": groups,
            "description": description,
            "enabled": enabled,
            "primary": primary,
            "domains": domains,
            "search_domains_enabled": search_domains_enabled,
        }
        return _run("create_netbird_nameserver", lambda: nameservers_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_nameserver", toolset="dns",
          description="Update a nameserver group")
    def update_netbird_nameserver(
        nameserver_id: str,
        name: Optional[str] = None,
        nameservers: Optional[List[Nameserver]] = None,
        groups: Optional[List[str]] = None,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        primary: Optional[bool] = None,
        domains: Optional[List[str]] = None,
        search_domains_enabled: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "nameserver_id": nameserver_id,
            "name": name,
            "nameservers": nameservers,
            "groups": groups,
            "description": description,
            "enabled": enabled,
            "primary": primary,
            "domains": domains,
            "search_domains_enabled": search_domains_enabled,
        }
        return _run("update_netbird_nameserver", lambda: nameservers_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_nameserver", toolset="dns",
          description="Delete a nameserver group")
    def delete_netbird_nameserver(nameserver_id: str) -> Dict[str, Any]:
        return _run(
            "delete_netbird_nameserver",
            lambda: nameservers_tool.delete(client(), {"nameserver_id": nameserver_id}),
        )

    # ============================================
    # POSTURE - Posture checks
    # ============================================

    @tool(mcp, name="list_netbird_posture_checks", toolset="posture",
          description="List all posture checks")
    def list_netbird_posture_checks() -> List[Dict[str, Any]]:
        return _run("list_netbird_posture_checks", lambda: posture_checks_tool.list(client()))

    @tool(mcp, name="get_netbird_posture_check", toolset="posture",
          description="Get a posture check by ID")
    def get_netbird_posture_check(posture_check_id: str) -> Dict[str, Any]:
        return _run(
            "get_netbird_posture_check",
            lambda: posture_checks_tool.get(client(), {"posture_check_id": posture_check_id}),
        )

    @tool(mcp, name="create_netbird_posture_check", toolset="posture",
          description="Create a posture check")
    def create_netbird_posture_check(
        name: str, checks: CheckConfig, description: Optional[str] = None
    ) -> Dict[str, Any]:
        input_data = {"name": name, "checks": checks, "description": description}
        return _run(
            "create_netbird_posture_check",
            lambda: posture_checks_tool.create(client(), input_data),
        )

    @tool(mcp, name="update_netbird_posture_check", toolset="posture",
          description="Update a posture check")
    def update_netbird_posture_check(
        posture_check_id: str,
        name: Optional[str] = None,
        checks: Optional[CheckConfig] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "posture_check_id": posture_check_id,
            "name": name,
            "checks": checks,
            "description": description,
        }
        return _run(
            "update_netbird_posture_check",
            lambda: posture_checks_tool.update(client(), input_data),
        )

    @tool(mcp, name="delete_netbird_posture_check", toolset="posture",
          description="Delete a posture check")
    def delete_netbird_posture_check(posture_check_id: str) -> Dict[str, Any]:
        return _run(
            "delete_netbird_posture_check",
            lambda: posture_checks_tool.delete(client(), {"posture_check_id": posture_check_id}),
        )

    # ============================================
    # ROUTES - Network routes
    # ============================================

    @tool(mcp, name="list_netbird_routes", toolset="routes",
          description="List all network routes")
    def list_netbird_routes() -> List[Dict[str, Any]]:
        return _run("list_netbird_routes", lambda: routes_tool.list(client()))

    @tool(mcp, name="get_netbird_route", toolset="routes",
          description="Get a network route by ID")
    def get_netbird_route(route_id: str) -> Dict[str, Any]:
        return _run("get_netbird_route", lambda: routes_tool.get(client(), {"route_id": route_id}))

    @tool(mcp, name="create_netbird_route", toolset="routes",
          description="Create a network route for a CIDR network or a list of domains")
    def create_netbird_route(
        network_id: str,
        groups: List[str],
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        peer: Optional[str] = None,
        peer_groups: Optional[List[str]] = None,
        network: Optional[str] = None,
        domains: Optional[List[str]] = None,
        metric: Optional[int] = None,
        masquerade: Optional[bool] = None,
        keep_route: Optional[bool] = None,
        access_control_groups: Optional[List[str]] = None,
        skip_auto_apply: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "network_id": network_id,
            "groups": groups,
            "description": description,
            "enabled": enabled,
            "peer": peer,
            "peer_groups": peer_groups,
            "network": network,
            "domains": domains,
            "metric": metric,
            "masquerade": masquerade,
            "keep_route": keep_route,
            "access_control_groups": access_control_groups,
            "skip_auto_apply": skip_auto_apply,
        }
        return _run("create_netbird_route", lambda: routes_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_route", toolset="routes",
          description="Update a network route")
    def update_netbird_route(
        route_id: str,
        network_id: Optional[str] = None,
        groups: Optional[List[str]] = None,
        description: Optional[str] = None,
        enabled: Optional[bool] = None,
        peer: Optional[str] = None,
        peer_groups: Optional[List[str]] = None,
        network: Optional[str] = None,
        domains: Optional[List[str]] = None,
        metric: Optional[int] = None,
        masquerade: Optional[bool] = None,
        keep_route: Optional[bool] = None,
        access_control_groups: Optional[List[str]] = None,
        skip_auto_apply: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "route_id": route_id,
            "network_id": network_id,
            "groups": groups,
            "description": description,
            "enabled": enabled,
            "peer": peer,
            "peer_groups": peer_groups,
            "network": network,
            "domains": domains,
            "metric": metric,
            "masquerade": masquerade,
            "keep_route": keep_route,
            "access_control_groups": access_control_groups,
            "skip_auto_apply": skip_auto_apply,
        }
        return _run("update_netbird_route", lambda: routes_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_route", toolset="routes",
          description="Delete a network route")
    def delete_netbird_route(route_id: str) -> Dict[str, Any]:
        return _run("delete_netbird_route", lambda: routes_tool.delete(client(), {"route_id": route_id}))

    # ============================================
    # ACCESS - Setup keys and users
    # ============================================

    @tool(mcp, name="list_netbird_setup_keys", toolset="access",
          description="List all setup keys")
    def list_netbird_setup_keys() -> List[Dict[str, Any]]:
        return _run("list_netbird_setup_keys", lambda: setup_keys_tool.list(client()))

    @tool(mcp, name="get_netbird_setup_key", toolset="access",
          description="Get a setup key by ID")
    def get_netbird_setup_key(key_id: str) -> Dict[str, Any]:
        return _run("get_netbird_setup_key", lambda: setup_keys_tool.get(client(), {"key_id": key_id}))

    @tool(mcp, name="create_netbird_setup_key", toolset="access",
          description="Create a reusable or one-off setup key")
    def create_netbird_setup_key(
        name: str,
        type: str,
        expires_in: int,
        auto_groups: Optional[List[str]] = None,
        usage_limit: Optional[int] = None,
        ephemeral: Optional[bool] = None,
        allow_extra_dns_labels: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "name": name,
            "type": type,
            "expires_in": expires_in,
            "auto_groups": auto_groups,
            "usage_limit": usage_limit,
            "ephemeral": ephemeral,
            "allow_extra_dns_labels": allow_extra_dns_labels,
        }
        return _run("create_netbird_setup_key", lambda: setup_keys_tool.create(client(), input_data))

    @tool(mcp, name="update_netbird_setup_key", toolset="access",
          description="Rename, regroup or revoke a setup key")
    def update_netbird_setup_key(
        key_id: str,
        name: Optional[str] = None,
        auto_groups: Optional[List[str]] = None,
        revoked: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {"key_id": key_id, "name": name, "auto_groups": auto_groups, "revoked": revoked}
        return _run("update_netbird_setup_key", lambda: setup_keys_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_setup_key", toolset="access",
          description="Delete a setup key")
    def delete_netbird_setup_key(key_id: str) -> Dict[str, Any]:
        return _run(
            "delete_netbird_setup_key",
            lambda: setup_keys_tool.delete(client(), {"key_id": key_id}),
        )

    @tool(mcp, name="list_netbird_users", toolset="access",
          description="List all users of the account")
    def list_netbird_users() -> List[Dict[str, Any]]:
        return _run("list_netbird_users", lambda: users_tool.list(client()))

    @tool(mcp, name="get_netbird_user", toolset="access",
          description="Get a user by ID")
    def get_netbird_user(user_id: str) -> Dict[str, Any]:
        return _run("get_netbird_user", lambda: users_tool.get(client(), {"user_id": user_id}))

    @tool(mcp, name="invite_netbird_user", toolset="access",
          description="Invite a user to the account")
    def invite_netbird_user(
        email: str,
        role: str,
        name: Optional[str] = None,
        auto_groups: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        input_data = {"email": email, "role": role, "name": name, "auto_groups": auto_groups}
        return _run("invite_netbird_user", lambda: users_tool.invite(client(), input_data))

    @tool(mcp, name="update_netbird_user", toolset="access",
          description="Update a user's role, auto groups or blocked state")
    def update_netbird_user(
        user_id: str,
        role: Optional[str] = None,
        auto_groups: Optional[List[str]] = None,
        is_blocked: Optional[bool] = None,
    ) -> Dict[str, Any]:
        input_data = {
            "user_id": user_id,
            "role": role,
            "auto_groups": auto_groups,
            "is_blocked": is_blocked,
        }
        return _run("update_netbird_user", lambda: users_tool.update(client(), input_data))

    @tool(mcp, name="delete_netbird_user", toolset="access",
          description="Delete a user")
    def delete_netbird_user(user_id: str) -> Dict[str, Any]:
        return _run("delete_netbird_user", lambda: users_tool.delete(client(), {"user_id": user_id}))

    # ============================================
    # ACCOUNT - Account settings
    # ============================================

    @tool(mcp, name="get_netbird_account", toolset="account",
          description="Get the account the API token belongs to")
    def get_netbird_account() -> Optional[Dict[str, Any]]:
        return _run("get_netbird_account", lambda: accounts_tool.get(client()))

    @tool(mcp, name="update_netbird_account", toolset="account",
          description="Update account settings")
    def update_netbird_account(
        settings: AccountSettings, account_id: Optional[str] = None
    ) -> Dict[str, Any]:
        input_data = {"settings": settings, "account_id": account_id}
        return _run("update_netbird_account", lambda: accounts_tool.update(client(), input_data))

    return mcp


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="NetBird MCP Server - Model Context Protocol server for the NetBird API",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=os.getenv("TRANSPORT", "stdio").lower(),
        help="Transport type (default: stdio, env TRANSPORT)",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind for HTTP transports (env HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", str(DEFAULT_PORT))),
        help=f"Port to bind for HTTP transports (default: {DEFAULT_PORT}, env PORT)",
    )
    parser.add_argument(
        "--sse-address",
        default=None,
        help="host:port to listen on for SSE; overrides --host/--port",
    )
    parser.add_argument("--api-token", default=None, help="NetBird API token (overrides headers and env)")
    parser.add_argument("--api-host", default=None, help="NetBird API host (overrides headers and env)")
    return parser.parse_args(argv)


def split_address(address: str, default_port: int) -> tuple:
    """Split ``host:port``; a bare ``:port`` binds all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, default_port
    return host or "0.0.0.0", int(port)


def main(argv: Optional[List[str]] = None):
    """Main entry point for the server."""
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    args = parse_args(argv)
    host, port = args.host, args.port
    if args.sse_address:
        host, port = split_address(args.sse_address, port)

    mcp = create_server(ConfigLoader(cli_token=args.api_token, cli_host=args.api_host))

    logger.info(f"Starting NetBird MCP Server with transport: {args.transport}")
    if args.api_host:
        logger.info(f"Using NetBird host from command line: {args.api_host}")

    try:
        if args.transport == "stdio":
            mcp.run(transport="stdio")
        else:
            logger.info(f"Listening on {host}:{port}")
            mcp.run(transport=args.transport, host=host, port=port)

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
