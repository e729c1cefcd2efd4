"""
Routes Tool
CRUD for network routes. A route targets either a CIDR ``network`` or a list
of ``domains``, and is served by a ``peer`` or by ``peer_groups``.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class Route(NetbirdEntity):
    id: str = ""
    network_id: str = ""
    network: Optional[str] = None
    network_type: str = ""
    peer: Optional[str] = None
    peer_groups: Optional[List[str]] = None
    description: str = ""
    masquerade: bool = False
    metric: int = 0
    enabled: bool = False
    groups: List[str] = Field(default_factory=list)
    domains: Optional[List[str]] = None
    keep_route: bool = False
    access_control_groups: Optional[List[str]] = None
    skip_auto_apply: Optional[bool] = None


class GetRouteInput(BaseModel):
    route_id: str = Field(..., description="The ID of the route")


class CreateRouteInput(BaseModel):
    network_id: str = Field(..., description="Route network identifier to group HA routes (1-40 characters)")
    groups: List[str] = Field(..., description="Group IDs containing routing peers")
    description: Optional[str] = Field(None, description="Route description")
    enabled: Optional[bool] = Field(None, description="Route status")
    peer: Optional[str] = Field(None, description="Peer ID to route through (cannot be used with peer_groups)")
    peer_groups: Optional[List[str]] = Field(None, description="Peer group IDs to route through (cannot be used with peer)")
    network: Optional[str] = Field(None, description="Network range in CIDR format (conflicts with domains)")
    domains: Optional[List[str]] = Field(None, description="Domains resolved dynamically (conflicts with network)")
    metric: Optional[int] = Field(None, description="Route metric (1-9999, lower has higher priority)")
    masquerade: Optional[bool] = Field(None, description="Enable masquerading (NAT)")
    keep_route: Optional[bool] = Field(None, description="Keep route after domain doesn't resolve")
    access_control_groups: Optional[List[str]] = Field(None, description="Access control group IDs")
    skip_auto_apply: Optional[bool] = Field(None, description="Skip auto-application for exit node route (0.0.0.0/0)")


class UpdateRouteInput(BaseModel):
    route_id: str = Field(..., description="The ID of the route to update")
    network_id: Optional[str] = Field(None, description="Route network identifier to group HA routes (1-40 characters)")
    groups: Optional[List[str]] = Field(None, description="Group IDs containing routing peers")
    description: Optional[str] = Field(None, description="Route description")
    enabled: Optional[bool] = Field(None, description="Route status")
    peer: Optional[str] = Field(None, description="Peer ID to route through (cannot be used with peer_groups)")
    peer_groups: Optional[List[str]] = Field(None, description="Peer group IDs to route through (cannot be used with peer)")
    network: Optional[str] = Field(None, description="Network range in CIDR format (conflicts with domains)")
    domains: Optional[List[str]] = Field(None, description="Domains resolved dynamically (conflicts with network)")
    metric: Optional[int] = Field(None, description="Route metric (1-9999, lower has higher priority)")
    masquerade: Optional[bool] = Field(None, description="Enable masquerading (NAT)")
    keep_route: Optional[bool] = Field(None, description="Keep route after domain doesn't resolve")
    access_control_groups: Optional[List[str]] = Field(None, description="Access control group IDs")
    skip_auto_apply: Optional[bool] = Field(None, description="Skip auto-application for exit node route (0.0.0.0/0)")


class RoutesTool:
    """CRUD operations on /routes."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(Route, client.get("/routes"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetRouteInput]) -> Dict[str, Any]:
        args = parse_input(GetRouteInput, input_data)
        return decode(Route, client.get(f"/routes/{args.route_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateRouteInput]) -> Dict[str, Any]:
        args = parse_input(CreateRouteInput, input_data)
        logger.info(f"Creating route '{args.network_id}'")
        return decode(Route, client.post("/routes", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateRouteInput]) -> Dict[str, Any]:
        args = parse_input(UpdateRouteInput, input_data)
        logger.info(f"Updating route '{args.route_id}'")
        body = request_body(args, exclude={"route_id"})
        return decode(Route, client.put(f"/routes/{args.route_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetRouteInput]) -> Dict[str, str]:
        args = parse_input(GetRouteInput, input_data)
        logger.info(f"Deleting route '{args.route_id}'")
        client.delete(f"/routes/{args.route_id}")
        return deleted(route_id=args.route_id)


# Create singleton instance for FastMCP
routes_tool = RoutesTool()
