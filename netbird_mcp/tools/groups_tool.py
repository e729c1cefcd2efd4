"""
Groups Tool
CRUD for NetBird groups. Deletion checks policy dependencies first.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from ..errors import GroupInUseError
from .base import NetbirdEntity, decode, decode_list, parse_input, request_body
from .group_dependencies_tool import delete_group_force, list_policies_by_group, unique_policy_ids

logger = logging.getLogger(__name__)


class GroupMember(NetbirdEntity):
    id: str = ""
    name: str = ""


class GroupResource(BaseModel):
    """Resource reference as sent in group create/update requests."""
    id: str = Field(..., description="Resource ID")
    type: str = Field(..., description="Resource type (host, subnet, domain)")


class Group(NetbirdEntity):
    id: str = ""
    name: str = ""
    issued: str = ""
    peers: List[GroupMember] = Field(default_factory=list)
    peers_count: int = 0
    resources: List[Dict[str, Any]] = Field(default_factory=list)
    resources_count: int = 0


class GetGroupInput(BaseModel):
    group_id: str = Field(..., description="The ID of the group")


class CreateGroupInput(BaseModel):
    name: str = Field(..., description="Group name")
    peers: Optional[List[str]] = Field(None, description="Peer IDs to add to group")
    resources: Optional[List[GroupResource]] = Field(None, description="Resource references")


class UpdateGroupInput(BaseModel):
    group_id: str = Field(..., description="The ID of the group to update")
    name: Optional[str] = Field(None, description="New group name")
    peers: Optional[List[str]] = Field(None, description="Peer IDs in the group")
    resources: Optional[List[GroupResource]] = Field(None, description="Resource references")


class DeleteGroupInput(BaseModel):
    group_id: str = Field(..., description="The ID of the group to delete")
    force: bool = Field(False, description="Force delete by removing all dependencies first")


class GroupsTool:
    """CRUD operations on /groups."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(Group, client.get("/groups"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetGroupInput]) -> Dict[str, Any]:
        args = parse_input(GetGroupInput, input_data)
        return decode(Group, client.get(f"/groups/{args.group_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateGroupInput]) -> Dict[str, Any]:
        args = parse_input(CreateGroupInput, input_data)
        logger.info(f"Creating group '{args.name}'")
        return decode(Group, client.post("/groups", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateGroupInput]) -> Dict[str, Any]:
        args = parse_input(UpdateGroupInput, input_data)
        logger.info(f"Updating group '{args.group_id}'")
        body = request_body(args, exclude={"group_id"})
        return decode(Group, client.put(f"/groups/{args.group_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], DeleteGroupInput]) -> Dict[str, Any]:
        """
        Delete a group.

        Without ``force`` the delete is refused while any policy references
        the group. With ``force`` the group is first removed from every
        dependent policy (see ``delete_group_force``).

        Raises:
            GroupInUseError: if the group is referenced and force is False
            GroupDeletionError: if a forced delete fails at the final step
        """
        args = parse_input(DeleteGroupInput, input_data)

        if args.force:
            logger.info(f"Force deleting group '{args.group_id}'")
            result = delete_group_force(client, args.group_id)
            return {
                "status": "deleted",
                "group_id": args.group_id,
                "force": True,
                "policies_modified": result.policies_modified,
                "errors": result.errors,
            }

        references = list_policies_by_group(client, args.group_id)
        if references:
            raise GroupInUseError(args.group_id, unique_policy_ids(references))

        logger.info(f"Deleting group '{args.group_id}'")
        client.delete(f"/groups/{args.group_id}")
        return {"status": "deleted", "group_id": args.group_id, "force": False}


# Create singleton instance for FastMCP
groups_tool = GroupsTool()
