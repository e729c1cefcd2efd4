"""
Nameservers Tool
CRUD for DNS nameserver groups.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, NullAsDefaultModel, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)

NAMESERVERS_PATH = "/dns/nameservers"


class Nameserver(NullAsDefaultModel):
    ip: str = Field(..., description="Nameserver IP address")
    ns_type: str = Field("udp", description="Nameserver protocol type")
    port: int = Field(53, description="Nameserver port")


class NameserverGroup(NetbirdEntity):
    id: str = ""
    name: str = ""
    description: str = ""
    nameservers: List[Nameserver] = Field(default_factory=list)
    enabled: bool = False
    groups: List[str] = Field(default_factory=list)
    primary: bool = False
    domains: List[str] = Field(default_factory=list)
    search_domains_enabled: bool = False


class GetNameserverInput(BaseModel):
    nameserver_id: str = Field(..., description="The ID of the nameserver group")


class CreateNameserverInput(BaseModel):
    name: str = Field(..., description="Nameserver group name")
    description: Optional[str] = Field(None, description="Nameserver group description")
    nameservers: List[Nameserver] = Field(..., description="List of nameservers")
    enabled: Optional[bool] = Field(None, description="Enable the nameserver group")
    groups: List[str] = Field(..., description="Distribution group IDs")
    primary: Optional[bool] = Field(None, description="Resolve all domains with this group")
    domains: Optional[List[str]] = Field(None, description="Match domains")
    search_domains_enabled: Optional[bool] = Field(None, description="Enable search domains")


class UpdateNameserverInput(BaseModel):
    nameserver_id: str = Field(..., description="The ID of the nameserver group to update")
    name: Optional[str] = Field(None, description="Nameserver group name")
    description: Optional[str] = Field(None, description="Nameserver group description")
    nameservers: Optional[List[Nameserver]] = Field(None, description="List of nameservers")
    enabled: Optional[bool] = Field(None, description="Enable the nameserver group")
    groups: Optional[List[str]] = Field(None, description="Distribution group IDs")
    primary: Optional[bool] = Field(None, description="Resolve all domains with this group")
    domains: Optional[List[str]] = Field(None, description="Match domains")
    search_domains_enabled: Optional[bool] = Field(None, description="Enable search domains")


class NameserversTool:
    """CRUD operations on /dns/nameservers."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(NameserverGroup, client.get(NAMESERVERS_PATH))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNameserverInput]) -> Dict[str, Any]:
        args = parse_input(GetNameserverInput, input_data)
        return decode(NameserverGroup, client.get(f"{NAMESERVERS_PATH}/{args.nameserver_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateNameserverInput]) -> Dict[str, Any]:
        args = parse_input(CreateNameserverInput, input_data)
        logger.info(f"Creating nameserver group '{args.name}'")
        return decode(NameserverGroup, client.post(NAMESERVERS_PATH, request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateNameserverInput]) -> Dict[str, Any]:
        args = parse_input(UpdateNameserverInput, input_data)
        logger.info(f"Updating nameserver group '{args.nameserver_id}'")
        body = request_body(args, exclude={"nameserver_id"})
        return decode(NameserverGroup, client.put(f"{NAMESERVERS_PATH}/{args.nameserver_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetNameserverInput]) -> Dict[str, str]:
        args = parse_input(GetNameserverInput, input_data)
        logger.info(f"Deleting nameserver group '{args.nameserver_id}'")
        client.delete(f"{NAMESERVERS_PATH}/{args.nameserver_id}")
        return deleted(nameserver_id=args.nameserver_id)


# Create singleton instance for FastMCP
nameservers_tool = NameserversTool()
