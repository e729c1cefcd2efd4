"""
Policies Tool
CRUD for NetBird access-control policies.

Rules supplied on create/update are validated and normalized with
``policy_rules`` before any request is sent.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input
from .peers_tool import PeerGroup
from .policy_rules import prepare_rules

logger = logging.getLogger(__name__)


class PortRange(NetbirdEntity):
    start: int = 0
    end: int = 0


class ResourceReference(NetbirdEntity):
    id: str = ""
    type: str = ""


class PolicyRule(NetbirdEntity):
    """A policy rule as returned by the API (group references are objects)."""
    id: str = ""
    name: str = ""
    description: str = ""
    enabled: bool = False
    action: str = ""
    bidirectional: bool = False
    protocol: str = ""
    ports: Optional[List[str]] = None
    port_ranges: Optional[List[PortRange]] = None
    sources: List[PeerGroup] = Field(default_factory=list)
    destinations: List[PeerGroup] = Field(default_factory=list)
    authorized_groups: Optional[Dict[str, List[str]]] = None
    sourceResource: Optional[ResourceReference] = None
    destinationResource: Optional[ResourceReference] = None


class Policy(NetbirdEntity):
    id: str = ""
    name: str = ""
    description: str = ""
    enabled: bool = False
    rules: List[PolicyRule] = Field(default_factory=list)
    source_posture_checks: Optional[List[str]] = None


class GetPolicyInput(BaseModel):
    policy_id: str = Field(..., description="The ID of the policy")


class CreatePolicyInput(BaseModel):
    name: str = Field(..., description="Policy name")
    description: Optional[str] = Field(None, description="Policy description")
    enabled: Optional[bool] = Field(None, description="Enable the policy")
    rules: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Policy rules; sources/destinations may be group IDs or group objects",
    )
    source_posture_checks: Optional[List[str]] = Field(None, description="Posture check IDs applied to sources")


class UpdatePolicyInput(BaseModel):
    policy_id: str = Field(..., description="The ID of the policy to update")
    name: Optional[str] = Field(None, description="Policy name")
    description: Optional[str] = Field(None, description="Policy description")
    enabled: Optional[bool] = Field(None, description="Enable the policy")
    rules: Optional[List[Dict[str, Any]]] = Field(None, description="Replacement policy rules")
    source_posture_checks: Optional[List[str]] = Field(None, description="Posture check IDs applied to sources")


def _policy_body(args: BaseModel) -> Dict[str, Any]:
    body = {}
    for field_name in ("name", "description", "enabled", "source_posture_checks"):
        value = getattr(args, field_name)
        if value is not None:
            body[field_name] = value
    if args.rules is not None:
        body["rules"] = prepare_rules(args.rules)
    return body


def policy_update_body(policy: Dict[str, Any], rules: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Full-replacement body used when rewriting an existing policy's rules."""
    return {
        "name": policy.get("name") or "",
        "description": policy.get("description") or "",
        "enabled": bool(policy.get("enabled")),
        "rules": rules,
    }


class PoliciesTool:
    """CRUD operations on /policies."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(Policy, client.get("/policies"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPolicyInput]) -> Dict[str, Any]:
        args = parse_input(GetPolicyInput, input_data)
        return decode(Policy, client.get(f"/policies/{args.policy_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreatePolicyInput]) -> Dict[str, Any]:
        args = parse_input(CreatePolicyInput, input_data)
        body = _policy_body(args)
        logger.info(f"Creating policy '{args.name}' with {len(body.get('rules', []))} rules")
        return decode(Policy, client.post("/policies", body))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdatePolicyInput]) -> Dict[str, Any]:
        args = parse_input(UpdatePolicyInput, input_data)
        body = _policy_body(args)
        logger.info(f"Updating policy '{args.policy_id}'")
        return decode(Policy, client.put(f"/policies/{args.policy_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPolicyInput]) -> Dict[str, str]:
        args = parse_input(GetPolicyInput, input_data)
        logger.info(f"Deleting policy '{args.policy_id}'")
        client.delete(f"/policies/{args.policy_id}")
        return deleted(policy_id=args.policy_id)

    def template(self) -> Dict[str, Any]:
        """Example policy showing the accepted rule shapes."""
        return {
            "name": "example-policy",
            "description": "Example policy demonstrating simple and complex rules",
            "enabled": True,
            "rules": [
                {
                    "name": "allow-web-traffic",
                    "description": "Allow HTTP and HTTPS from dev group to prod group",
                    "enabled": True,
                    "action": "accept",
                    "bidirectional": False,
                    "protocol": "tcp",
                    "ports": ["80", "443"],
                    "sources": ["group-id-dev"],
                    "destinations": ["group-id-prod"],
                },
                {
                    "name": "allow-ssh-with-auth",
                    "description": "Allow SSH with user authorization from admins to servers",
                    "enabled": True,
                    "action": "accept",
                    "bidirectional": False,
                    "protocol": "tcp",
                    "port_ranges": [{"start": 22, "end": 22}],
                    "sources": ["group-id-admins"],
                    "destinations": ["group-id-servers"],
                    "authorized_groups": {
                        "group-id-admins": ["user1@example.com", "user2@example.com"],
                    },
                },
                {
                    "name": "allow-database-access",
                    "description": "Allow database access from app servers to database host",
                    "enabled": True,
                    "action": "accept",
                    "bidirectional": False,
                    "protocol": "tcp",
                    "ports": ["5432"],
                    "sources": ["group-id-app-servers"],
                    # type is one of host, domain, subnet
                    "destinationResource": {"id": "resource-id-database", "type": "host"},
                },
            ],
        }


# Create singleton instance for FastMCP
policies_tool = PoliciesTool()
