"""
Network Resources Tool
CRUD for the hosts, subnets and domains exposed inside a network.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class NetworkResourceGroup(NetbirdEntity):
    id: str = ""
    name: str = ""
    peers_count: int = 0
    resources_count: int = 0
    issued: str = ""


class NetworkResource(NetbirdEntity):
    id: str = ""
    type: str = ""
    name: str = ""
    description: Optional[str] = None
    address: str = ""
    enabled: bool = False
    groups: List[NetworkResourceGroup] = Field(default_factory=list)


class ListNetworkResourcesInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")


class GetNetworkResourceInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    resource_id: str = Field(..., description="The ID of the network resource")


class CreateNetworkResourceInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    name: str = Field(..., description="Network resource name")
    description: Optional[str] = Field(None, description="Network resource description")
    address: str = Field(..., description="Network resource address (IP, subnet, or domain)")
    enabled: bool = Field(..., description="Network resource status")
    groups: List[str] = Field(..., description="Group IDs containing the resource")


class UpdateNetworkResourceInput(BaseModel):
    network_id: str = Field(..., description="The ID of the network")
    resource_id: str = Field(..., description="The ID of the network resource to update")
    name: Optional[str] = Field(None, description="Network resource name")
    description: Optional[str] = Field(None, description="Network resource description")
    address: Optional[str] = Field(None, description="Network resource address (IP, subnet, or domain)")
    enabled: Optional[bool] = Field(None, description="Network resource status")
    groups: Optional[List[str]] = Field(None, description="Group IDs containing the resource")


def _resources_path(network_id: str) -> str:
    return f"/networks/{network_id}/resources"


class NetworkResourcesTool:
    """CRUD operations on /networks/{network_id}/resources."""

    def list(self, client: NetbirdClient, input_data: Union[Dict[str, Any], ListNetworkResourcesInput]) -> List[Dict[str, Any]]:
        args = parse_input(ListNetworkResourcesInput, input_data)
        return decode_list(NetworkResource, client.get(_resources_path(args.network_id)))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkResourceInput]) -> Dict[str, Any]:
        args = parse_input(GetNetworkResourceInput, input_data)
        path = f"{_resources_path(args.network_id)}/{args.resource_id}"
        return decode(NetworkResource, client.get(path))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateNetworkResourceInput]) -> Dict[str, Any]:
        args = parse_input(CreateNetworkResourceInput, input_data)
        logger.info(f"Creating resource '{args.name}' in network '{args.network_id}'")
        body = request_body(args, exclude={"network_id"})
        return decode(NetworkResource, client.post(_resources_path(args.network_id), body))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateNetworkResourceInput]) -> Dict[str, Any]:
        args = parse_input(UpdateNetworkResourceInput, input_data)
        logger.info(f"Updating resource '{args.resource_id}' in network '{args.network_id}'")
        body = request_body(args, exclude={"network_id", "resource_id"})
        path = f"{_resources_path(args.network_id)}/{args.resource_id}"
        return decode(NetworkResource, client.put(path, body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNetworkResourceInput]) -> Dict[str, str]:
        args = parse_input(GetNetworkResourceInput, input_data)
        logger.info(f"Deleting resource '{args.resource_id}' from network '{args.network_id}'")
        client.delete(f"{_resources_path(args.network_id)}/{args.resource_id}")
        return deleted(network_id=args.network_id, resource_id=args.resource_id)


# Create singleton instance for FastMCP
network_resources_tool = NetworkResourcesTool()
