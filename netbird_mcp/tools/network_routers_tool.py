"""
Network Routers Tool
CRUD for the routing peers that carry traffic into a network.

A router names either a single ``peer`` or a list of ``peer_groups``; the
API rejects requests that set both.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class NetworkRouter(NetbirdEntity):
    id: str = ""
    peer: Optional[str] = None
    peer_groups: Optional[List[str]] = None
    metric: int = 0
    masquerade: bool = False
    enabled: bool = False


class ListNetworkRoutersInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")


class GetNetworkRouterInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    router_id: str = Field(..., description="The ID of the network router")


class CreateNetworkRouterInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    peer: Optional[str] = Field(None, description="Peer ID (cannot be used with peer_groups)")
    peer_groups: Optional[List[str]] = Field(None, description="Peer group IDs (cannot be used with peer)")
    metric: int = Field(..., description="Route metric (1-9999)")
    masquerade: bool = Field(..., description="Enable masquerading")
    enabled: bool = Field(..., description="Router status")


class UpdateNetworkRouterInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    router_id: str = Field(..., description="The ID of the network router to update")
    peer: Optional[str] = Field(None, description="Peer ID (cannot be used with peer_groups)")
    peer_groups: Optional[List[str]] = Field(None, description="Peer group IDs (cannot be used with peer)")
    metric: Optional[int] = Field(None, description="Route metric (1-9999)")
    masquerade: Optional[bool] = Field(None, description="Enable masquerading")
    enabled: Optional[bool] = Field(None, description="Router status")


def _routers_path(network_id: str) -> str:
    return f"/networks/{network_id}/routers"


class NetworkRoutersTool:

    def list(self, client: NetbirdClient, input_data: Union[Dict[str, Any], ListNetworkRoutersInput]) -> List[Dict[str, Any]]:
        args = parse_input(ListNetworkRoutersInput, input_data)
        return decode_list(NetworkRouter, client.get(_routers_path(args.network_id)))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkRouterInput]) -> Dict[str, Any]:
        args = parse_input(GetNetworkRouterInput, input_data)
        return decode(NetworkRouter, client.get(f"{_routers_path(args.network_id)}/{args.router_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateNetworkRouterInput]) -> Dict[str, Any]:
        args = parse_input(CreateNetworkRouterInput, input_data)
        logger.info(f"Creating router in network '{args.network_id}'")
        body = request_body(args, exclude={"network_id"})
        return decode(NetworkRouter, client.post(_routers_path(args.network_id), body))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateNetworkRouterInput]) -> Dict[str, Any]:
        args = parse_input(UpdateNetworkRouterInput, input_data)
        logger.info(f"Updating router '{args.router_id}' in network '{args.network_id}'")
        body = request_body(args, exclude={"network_id", "router_id"})
        path = f"{_routers_path(args.network_id)}/{args.router_id}"
        return decode(NetworkRouter, client.put(path, body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkRouterInput]) -> Dict[str, str]:
        args = parse_input(GetNetworkRouterInput, input_data)
        logger.info(f"Deleting router '{args.router_id}' from network '{args.network_id}'")
        client.delete(f"{_routers_path(args.network_id)}/{args.router_id}")
        return deleted(network_id=args.network_id, router_id=args.router_id)


# Create singleton instance for FastMCP
network_routers_tool = NetworkRoutersTool()
