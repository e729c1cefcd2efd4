"""
Users Tool
List, invite, update and remove account users.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class User(NetbirdEntity):
    id: str = ""
    email: str = ""
    name: str = ""
    role: str = ""
    auto_groups: List[str] = Field(default_factory=list)
    status: str = ""
    is_service_user: bool = False
    is_blocked: bool = False
    last_login: Optional[str] = None
    issued: str = ""


class GetUserInput(BaseModel):
    user_id: str = Field(..., description="The ID of the user")


class InviteUserInput(BaseModel):
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User name")
    role: str = Field(..., description="User role (admin, user, owner)")
    auto_groups: Optional[List[str]] = Field(None, description="Groups auto-assigned to the user's peers")


class UpdateUserInput(BaseModel):
    user_id: str = Field(..., description="The ID of the user to update")
    role: Optional[str] = Field(None, description="User role (admin, user, owner)")
    auto_groups: Optional[List[str]] = Field(None, description="Groups auto-assigned to the user's peers")
    is_blocked: Optional[bool] = Field(None, description="Block the user")


class UsersTool:
    """Operations on /users. Users are invited rather than created."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(User, client.get("/users"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetUserInput]) -> Dict[str, Any]:
        args = parse_input(GetUserInput, input_data)
        return decode(User, client.get(f"/users/{args.user_id}"))

    def invite(self, client: NetbirdClient, input_data: Union[Dict[str, Any], InviteUserInput]) -> Dict[str, Any]:
        args = parse_input(InviteUserInput, input_data)
        logger.info(f"Inviting user with role '{args.role}'")
        return decode(User, client.post("/users", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateUserInput]) -> Dict[str, Any]:
        args = parse_input(UpdateUserInput, input_data)
        logger.info(f"Updating user '{args.user_id}'")
        body = request_body(args, exclude={"user_id"})
        return decode(User, client.put(f"/users/{args.user_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetUserInput]) -> Dict[str, str]:
        args = parse_input(GetUserInput, input_data)
        logger.info(f"Deleting user '{args.user_id}'")
        client.delete(f"/users/{args.user_id}")
        return deleted(user_id=args.user_id)


# Create singleton instance for FastMCP
users_tool = UsersTool()
