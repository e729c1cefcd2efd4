"""
Networks Tool
CRUD for NetBird networks.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class Network(NetbirdEntity):
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    routers: List[str] = Field(default_factory=list)
    routing_peers_count: int = 0
    resources: List[str] = Field(default_factory=list)
    policies: List[str] = Field(default_factory=list)


class GetNetworkInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")


class CreateNetworkInput(BaseModel):
    name: str = Field(..., description="Network name")
    description: Optional[str] = Field(None, description="Network description")


class UpdateNetworkInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network to update")
    name: Optional[str] = Field(None, description="Network name")
    description: Optional[str] = Field(None, description="Network description")


class NetworksTool:
    """CRUD operations on /networks."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(Network, client.get("/networks"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkInput]) -> Dict[str, Any]:
        args = parse_input(GetNetworkInput, input_data)
        return decode(Network, client.get(f"/networks/{args.network_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateNetworkInput]) -> Dict[str, Any]:
        args = parse_input(CreateNetworkInput, input_data)
        logger.info(f"Creating network '{args.name}'")
        return decode(Network, client.post("/networks", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateNetworkInput]) -> Dict[str, Any]:
        args = parse_input(UpdateNetworkInput, input_data)
        logger.info(f"Updating network '{args.network_id}'")
        body = request_body(args, exclude={"network_id"})
        return decode(Network, client.put(f"/networks/{args.network_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkInput]) -> Dict[str, str]:
        args = parse_input(GetNetworkInput, input_data)
        logger.info(f"Deleting network '{args.network_id}'")
        client.delete(f"/networks/{args.network_id}")
        return deleted(network_id=args.network_id)


# Create singleton instance for FastMCP
networks_tool = NetworksTool()
