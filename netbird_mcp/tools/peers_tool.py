"""
Peers Tool
List, inspect, update and remove NetBird peers.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class PeerGroup(NetbirdEntity):
    """A group as embedded in peers and policy rules."""
    id: str = ""
    name: str = ""
    peers_count: int = 0
    resources_count: int = 0


class PeerLocalFlags(NetbirdEntity):
    rosenpass_enabled: bool = False
    rosenpass_permissive: bool = False
    server_ssh_allowed: bool = False
    disable_client_routes: bool = False
    disable_server_routes: bool = False
    disable_dns: bool = False
    disable_firewall: bool = False
    block_lan_access: bool = False
    block_inbound: bool = False
    lazy_connection_enabled: bool = False


class Peer(NetbirdEntity):
    id: str = ""
    name: str = ""
    ip: str = ""
    connection_ip: str = ""
    connected: bool = False
    hostname: str = ""
    os: str = ""
    version: str = ""
    kernel_version: str = ""
    ui_version: str = ""
    dns_label: str = ""
    extra_dns_labels: List[str] = Field(default_factory=list)
    user_id: str = ""
    groups: List[PeerGroup] = Field(default_factory=list)
    ssh_enabled: bool = False
    approval_required: bool = False
    disapproval_reason: Optional[str] = None
    ephemeral: Optional[bool] = None
    login_expiration_enabled: bool = False
    login_expired: bool = False
    inactivity_expiration_enabled: bool = False
    last_login: Optional[str] = None
    last_seen: Optional[str] = None
    created_at: Optional[str] = None
    accessible_peers_count: int = 0
    city_name: str = ""
    country_code: str = ""
    geoname_id: int = 0
    serial_number: str = ""
    local_flags: Optional[PeerLocalFlags] = None


class GetPeerInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer")


class UpdatePeerInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer to update")
    name: Optional[str] = Field(None, description="Peer name")
    ssh_enabled: Optional[bool] = Field(None, description="Enable SSH access")
    login_expiration_enabled: Optional[bool] = Field(None, description="Enable login expiration")
    inactivity_expiration_enabled: Optional[bool] = Field(None, description="Enable inactivity expiration")
    approval_required: Optional[bool] = Field(None, description="Require approval for the peer")


class PeersTool:
    """CRUD operations on /peers. Peers are created by enrolment, not through the API."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(Peer, client.get("/peers"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPeerInput]) -> Dict[str, Any]:
        args = parse_input(GetPeerInput, input_data)
        return decode(Peer, client.get(f"/peers/{args.peer_id}"))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdatePeerInput]) -> Dict[str, Any]:
        args = parse_input(UpdatePeerInput, input_data)
        logger.info(f"Updating peer '{args.peer_id}'")
        body = request_body(args, exclude={"peer_id"})
        return decode(Peer, client.put(f"/peers/{args.peer_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPeerInput]) -> Dict[str, str]:
        args = parse_input(GetPeerInput, input_data)
        logger.info(f"Deleting peer '{args.peer_id}'")
        client.delete(f"/peers/{args.peer_id}")
        return deleted(peer_id=args.peer_id)


# Create singleton instance for FastMCP
peers_tool = PeersTool()
