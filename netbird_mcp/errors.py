"""Exceptions raised by the NetBird tools."""

from typing import Optional


class NetbirdError(Exception):
    """Base class for NetBird tool errors."""


class NetbirdAPIError(NetbirdError):
    """A gateway call failed: transport, non-2xx status, or undecodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidRuleError(NetbirdError, ValueError):
    """A policy rule is malformed. Raised before any network call."""


class GroupInUseError(NetbirdError):
    """A group cannot be deleted because policies still reference it."""

    def __init__(self, group_id: str, policy_ids):
        self.group_id = group_id
        self.policy_ids = list(policy_ids)
        super().__init__(
            f"cannot delete group '{group_id}': referenced by {len(self.policy_ids)} policies "
            f"{self.policy_ids}. Use force=true to remove dependencies first"
        )


class GroupDeletionError(NetbirdError):
    """The final group delete of a force delete failed.

    ``result`` still carries the policy changes that succeeded.
    """

    def __init__(self, message: str, result):
        super().__init__(message)
        self.result = result
