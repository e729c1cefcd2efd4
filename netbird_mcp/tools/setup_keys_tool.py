"""
Setup Keys Tool
CRUD for the keys peers use to enrol into the account.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from .base import NetbirdEntity, decode, decode_list, deleted, parse_input, request_body

logger = logging.getLogger(__name__)


class SetupKey(NetbirdEntity):
    id: str = ""
    key: str = ""
    name: str = ""
    expires: Optional[str] = None
    type: str = ""
    valid: bool = False
    revoked: bool = False
    used_times: int = 0
    last_used: Optional[str] = None
    state: str = ""
    auto_groups: List[str] = Field(default_factory=list)
    updated_at: Optional[str] = None
    usage_limit: int = 0
    ephemeral: bool = False
    allow_extra_dns_labels: Optional[bool] = None


class GetSetupKeyInput(BaseModel):
    key_id: str = Field(..., description="The ID of the setup key")


class CreateSetupKeyInput(BaseModel):
    name: str = Field(..., description="Setup key name")
    type: str = Field(..., description="Key type (reusable or one-off)")
    expires_in: int = Field(..., description="Expiration time in seconds")
    auto_groups: Optional[List[str]] = Field(None, description="Groups auto-assigned to enrolled peers")
    usage_limit: Optional[int] = Field(None, description="Usage limit (0 for unlimited)")
    ephemeral: Optional[bool] = Field(None, description="Ephemeral peer (deleted on disconnect)")
    allow_extra_dns_labels: Optional[bool] = Field(None, description="Allow extra DNS labels")


class UpdateSetupKeyInput(BaseModel):
    key_id: str = Field(..., description="The ID of the setup key to update")
    name: Optional[str] = Field(None, description="Setup key name")
    auto_groups: Optional[List[str]] = Field(None, description="Groups auto-assigned to enrolled peers")
    revoked: Optional[bool] = Field(None, description="Revoke the key")


class SetupKeysTool:
    """CRUD operations on /setup-keys."""

    def list(self, client: NetbirdClient) -> List[Dict[str, Any]]:
        return decode_list(SetupKey, client.get("/setup-keys"))

    def get(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetSetupKeyInput]) -> Dict[str, Any]:
        args = parse_input(GetSetupKeyInput, input_data)
        return decode(SetupKey, client.get(f"/setup-keys/{args.key_id}"))

    def create(self, client: NetbirdClient, input_data: Union[Dict[str, Any], CreateSetupKeyInput]) -> Dict[str, Any]:
        args = parse_input(CreateSetupKeyInput, input_data)
        logger.info(f"Creating {args.type} setup key '{args.name}'")
        return decode(SetupKey, client.post("/setup-keys", request_body(args)))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateSetupKeyInput]) -> Dict[str, Any]:
        args = parse_input(UpdateSetupKeyInput, input_data)
        logger.info(f"Updating setup key '{args.key_id}'")
        body = request_body(args, exclude={"key_id"})
        return decode(SetupKey, client.put(f"/setup-keys/{args.key_id}", body))

    def delete(self, client: NetbirdClient, input_data: Union[Dict[str, Any], GetSetupKeyInput]) -> Dict[str, str]:
        args = parse_input(GetSetupKeyInput, input_data)
        logger.info(f"Deleting setup key '{args.key_id}'")
        client.delete(f"/setup-keys/{args.key_id}")
        return deleted(key_id=args.key_id)


# Create singleton instance for FastMCP
setup_keys_tool = SetupKeysTool()
