"""
Tools package for NetBird MCP Server
"""

from .peers_tool import PeersTool, peers_tool, GetPeerInput, UpdatePeerInput
from .groups_tool import (
    GroupsTool,
    groups_tool,
    GetGroupInput,
    CreateGroupInput,
    UpdateGroupInput,
    DeleteGroupInput,
    GroupResource,
)
from .policies_tool import PoliciesTool, policies_tool, GetPolicyInput, CreatePolicyInput, UpdatePolicyInput
from .group_dependencies_tool import (
    GroupDependenciesTool,
    group_dependencies_tool,
    ForceDeleteResult,
    GroupReplacementResult,
    PolicyReference,
    delete_group_force,
    list_policies_by_group,
    replace_group_in_policies,
)
from .policy_rules import format_rule_for_api, validate_policy_rules

# Networks
from .networks_tool import NetworksTool, networks_tool
from .network_resources_tool import NetworkResourcesTool, network_resources_tool
from .network_routers_tool import NetworkRoutersTool, network_routers_tool

# DNS, posture and routing
from .nameservers_tool import NameserversTool, nameservers_tool, Nameserver
from .posture_checks_tool import PostureChecksTool, posture_checks_tool, CheckConfig
from .port_allocations_tool import (
    PortAllocationsTool,
    port_allocations_tool,
    DirectPort,
    IngressPortRange,
)
from .routes_tool import RoutesTool, routes_tool

# Access management
from .setup_keys_tool import SetupKeysTool, setup_keys_tool
from .users_tool import UsersTool, users_tool
from .accounts_tool import AccountsTool, accounts_tool, AccountSettings

__all__ = [
    "PeersTool", "peers_tool", "GetPeerInput", "UpdatePeerInput",
    "GroupsTool", "groups_tool", "GetGroupInput", "CreateGroupInput", "UpdateGroupInput",
    "DeleteGroupInput", "GroupResource",
    "PoliciesTool", "policies_tool", "GetPolicyInput", "CreatePolicyInput", "UpdatePolicyInput",
    "GroupDependenciesTool", "group_dependencies_tool", "ForceDeleteResult", "GroupReplacementResult",
    "PolicyReference", "delete_group_force", "list_policies_by_group", "replace_group_in_policies",
    "format_rule_for_api", "validate_policy_rules",
    "NetworksTool", "networks_tool",
    "NetworkResourcesTool", "network_resources_tool",
    "NetworkRoutersTool", "network_routers_tool",
    "NameserversTool", "nameservers_tool", "Nameserver",
    "PostureChecksTool", "posture_checks_tool", "CheckConfig",
    "PortAllocationsTool", "port_allocations_tool", "DirectPort", "IngressPortRange",
    "RoutesTool", "routes_tool",
    "SetupKeysTool", "setup_keys_tool",
    "UsersTool", "users_tool",
    "AccountsTool", "accounts_tool", "AccountSettings",
]
