"""
Accounts Tool
Read and update the settings of the caller's NetBird account.

A token belongs to exactly one account, so ``GET /accounts`` returns a
single-element list and the tool works on its first entry.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..client import NetbirdClient
from ..errors import NetbirdAPIError
from .base import NetbirdEntity, decode, parse_input, request_body

logger = logging.getLogger(__name__)


class AccountExtra(BaseModel):
    model_config = ConfigDict(extra="allow")

    peer_approval_enabled: Optional[bool] = None
    user_approval_required: Optional[bool] = None
    network_traffic_logs_enabled: Optional[bool] = None
    network_traffic_logs_groups: Optional[List[str]] = None
    network_traffic_packet_counter_enabled: Optional[bool] = None


class AccountSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    peer_login_expiration: Optional[int] = Field(None, description="Login expiration in seconds")
    peer_login_expiration_enabled: Optional[bool] = None
    peer_inactivity_expiration: Optional[int] = Field(None, description="Inactivity expiration in seconds")
    peer_inactivity_expiration_enabled: Optional[bool] = None
    groups_propagation_enabled: Optional[bool] = None
    jwt_groups_enabled: Optional[bool] = None
    jwt_groups_claim_name: Optional[str] = None
    jwt_allow_groups: Optional[List[str]] = None
    regular_users_view_blocked: Optional[bool] = None
    routing_peer_dns_resolution_enabled: Optional[bool] = None
    dns_domain: Optional[str] = None
    network_range: Optional[str] = None
    extra: Optional[AccountExtra] = None
    lazy_connection_enabled: Optional[bool] = None


class AccountOnboarding(NetbirdEntity):
    signup_form_pending: bool = False
    onboarding_flow_pending: bool = False


class Account(NetbirdEntity):
    id: str = ""
    settings: AccountSettings = Field(default_factory=AccountSettings)
    onboarding: Optional[AccountOnboarding] = None
    domain: Optional[str] = None
    domain_category: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None


class UpdateAccountInput(BaseModel):
    account_id: Optional[str] = Field(None, description="Account ID; defaults to the caller's account")
    settings: AccountSettings = Field(..., description="Account settings")


class AccountsTool:

    def _current(self, client: NetbirdClient) -> Optional[Dict[str, Any]]:
        accounts = client.get("/accounts") or []
        return accounts[0] if accounts else None

    def get(self, client: NetbirdClient) -> Optional[Dict[str, Any]]:
        """Return the caller's account, or None when the API lists none."""
        return decode(Account, self._current(client))

    def update(self, client: NetbirdClient, input_data: Union[Dict[str, Any], UpdateAccountInput]) -> Dict[str, Any]:
        args = parse_input(UpdateAccountInput, input_data)

        account_id = args.account_id
        if not account_id:
            current = self._current(client)
            if current is None:
                raise NetbirdAPIError("no account found for this token")
            account_id = current.get("id", "")

        logger.info(f"Updating settings of account '{account_id}'")
        body = request_body(args, exclude={"account_id"})
        return decode(Account, client.put(f"/accounts/{account_id}", body))


# Create singleton instance for FastMCP
accounts_tool = AccountsTool()
