"""
Port Allocations Tool
CRUD for ingress port allocations forwarded through an ingress peer.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class PortRangeMapping(NetbirdEntity):
    translated_start: int = 0
    translated_end: int = 0
    ingress_start: int = 0
    ingress_end: int = 0
    protocol: str = ""


class IngressPortRange(BaseModel):
    start: int = Field(..., description="First port of the range")
    end: int = Field(..., description="Last port of the range")
    protocol: str = Field(..., description="tcp, udp, or tcp/udp")


class DirectPort(BaseModel):
    count: int = Field(..., description="Number of ports to allocate")
    protocol: str = Field(..., description="tcp, udp, or tcp/udp")


class PortAllocation(NetbirdEntity):
    id: str = ""
    name: str = ""
    ingress_peer_id: str = ""
    region: str = ""
    enabled: bool = False
    ingress_ip: str = ""
    port_range_mappings: List[PortRangeMapping] = Field(default_factory=list)


class ListPortAllocationsInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer to get port allocations for")


class GetPortAllocationInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer")
    allocation_id: str = Field(..., description="The ID of the port allocation")


class CreatePortAllocationInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer")
    name: str = Field(..., description="Name of the ingress port allocation")
    enabled: bool = Field(..., description="Whether the allocation is enabled")
    port_ranges: Optional[List[IngressPortRange]] = Field(None, description="Port ranges forwarded by the ingress peer")
    direct_port: Optional[DirectPort] = Field(None, description="Direct port configuration")


class UpdatePortAllocationInput(BaseModel):
    peer_id: str = Field(..., description="The ID of the peer")
    allocation_id: str = Field(..., description="The ID of the port allocation to update")
    name: Optional[str] = Field(None, description="Name of the ingress port allocation")
    enabled: Optional[bool] = Field(None, description="Whether the allocation is enabled")
    port_ranges: Optional[List[IngressPortRange]] = Field(None, description="Port ranges forwarded by the ingress peer")
    direct_port: Optional[DirectPort] = Field(None, description="Direct port configuration")


def _ports_path(peer_id: str) -> str:
    return f"/peers/{peer_id}/ingress/ports"


class PortAllocationsTool:
    """CRUD operations on /peers/{peer_id}/ingress/ports."""

    def list(self, client: NetbirdClient, input_data: Union[Dict[str, Any], ListPortAllocationsInput]) -> List[Dict[str, Any]]:
        args = parse_input(ListPortAllocationsInput, input_data)
        return decode_list(PortAllocation, client.get(_ports_path(args.peer_id)))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPortAllocationInput]) -> Dict[str, Any]:
        args = parse_input(GetPortAllocationInput, input_data)
        return decode(PortAllocation, client.get(f"{_ports_path(args.peer_id)}/{args.allocation_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreatePortAllocationInput]) -> Dict[str, Any]:
        args = parse_input(CreatePortAllocationInput, input_data)
        logger.info(f"Creating port allocation '{args.name}' on peer '{args.peer_id}'")
        body = request_body(args, exclude={"peer_id"})
        return decode(PortAllocation, client.post(_ports_path(args.peer_id), body))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdatePortAllocationInput]) -> Dict[str, Any]:
        args = parse_input(UpdatePortAllocationInput, input_data)
        logger.info(f"Updating port allocation '{args.allocation_id}' on peer '{args.peer_id}'")
        body = request_body(args, exclude={"peer_id", "allocation_id"})
        return decode(PortAllocation, client.put(f"{_ports_path(args.peer_id)}/{args.allocation_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetPortAllocationInput]) -> Dict[str, str]:
        args = parse_input(GetPortAllocationInput, input_data)
        logger.info(f"Deleting port allocation '{args.allocation_id}' on peer '{args.peer_id}'")
        client.delete(f"{_ports_path(args.peer_id)}/{args.allocation_id}")
        return deleted(peer_id=args.peer_id, allocation_id=args.allocation_id)


# Create singleton instance for FastMCP
port_allocations_tool = PortAllocationsTool()
