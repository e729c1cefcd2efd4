"""
Group Dependencies Tool
Find, replace and remove group references held by access-control policies.

Policies reference groups from three places in each rule: the ``sources``
list, the ``destinations`` list, and the keys of ``authorized_groups``.
The bulk operations here are best-effort per policy: a failure on one policy
is recorded in the returned result and the remaining policies are still
processed.
"""

import logging
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field

from ..client import NetbirdClient
from ..errors import GroupDeletionError, InvalidRuleError, NetbirdError
from .base import parse_input
from .policies_tool import policy_update_body
from .policy_rules import format_rule_for_api, group_ref_id

logger = logging.getLogger(__name__)

LOCATION_SOURCES = "sources"
LOCATION_DESTINATIONS = "destinations"
LOCATION_AUTHORIZED_GROUPS = "authorized_groups"


class PolicyReference(BaseModel):
    """One rule location where a group is referenced."""
    policy_id: str = Field(..., description="ID of the referencing policy")
    policy_name: str = Field(..., description="Name of the referencing policy")
    rule_id: str = Field(..., description="ID of the referencing rule")
    rule_name: str = Field(..., description="Name of the referencing rule")
    location: str = Field(..., description="sources, destinations, or authorized_groups")


class GroupReplacementResult(BaseModel):
    updated_policy_ids: List[str] = Field(default_factory=list, description="Policies rewritten to the new group")
    errors: Dict[str, str] = Field(default_factory=dict, description="Policy ID to failure message")


class ForceDeleteResult(BaseModel):
    group_id: str = Field(..., description="The group that was targeted")
    policies_modified: List[str] = Field(default_factory=list, description="Policies updated or deleted")
    deleted: bool = Field(False, description="Whether the group itself was deleted")
    errors: List[str] = Field(default_factory=list, description="Failures encountered along the way")


class ListPoliciesByGroupInput(BaseModel):
    group_id: str = Field(..., description="The ID of the group to search for in policies")


class ReplaceGroupInput(BaseModel):
    old_group_id: str = Field(..., description="The ID of the group to replace")
    new_group_id: str = Field(..., description="The ID of the group to replace with")


def _refs(rule: Dict[str, Any], field_name: str) -> List[Any]:
    return rule.get(field_name) or []


def _references_group(refs: Iterable[Any], group_id: str) -> bool:
    return any(group_ref_id(ref) == group_id for ref in refs)


def list_policies_by_group(client: NetbirdClient, group_id: str) -> List[PolicyReference]:
    """
    Return every (rule, location) pair that references ``group_id``.

    A rule contributes at most one reference per location even when the
    group appears several times in the same list. Order follows the policy
    listing and rule order.
    """
    policies = client.get("/policies") or []

    references = []
    for policy in policies:
        for rule in policy.get("rules") or []:
            locations = []
            if _references_group(_refs(rule, "sources"), group_id):
                locations.append(LOCATION_SOURCES)
            if _references_group(_refs(rule, "destinations"), group_id):
                locations.append(LOCATION_DESTINATIONS)
            if group_id in (rule.get("authorized_groups") or {}):
                locations.append(LOCATION_AUTHORIZED_GROUPS)

            for location in locations:
                references.append(
                    PolicyReference(
                        policy_id=policy.get("id", ""),
                        policy_name=policy.get("name", ""),
                        rule_id=rule.get("id", ""),
                        rule_name=rule.get("name", ""),
                        location=location,
                    )
                )

    logger.info(f"Group '{group_id}' is referenced {len(references)} times")
    return references


def unique_policy_ids(references: Iterable[PolicyReference]) -> List[str]:
    """Policy IDs in first-seen order, each once."""
    seen = {}
    for ref in references:
        seen.setdefault(ref.policy_id, None)
    return list(seen)


def _replace_ref(ref: Any, old_group_id: str, new_group_id: str) -> Tuple[Any, bool]:
    if group_ref_id(ref) != old_group_id:
        return ref, False
    if isinstance(ref, str):
        return new_group_id, True
    return {**ref, "id": new_group_id}, True


def replace_group_in_rule(rule: Dict[str, Any], old_group_id: str, new_group_id: str) -> Tuple[Dict[str, Any], bool]:
    """Return a copy of ``rule`` with the group swapped, and whether anything changed."""
    updated = dict(rule)
    modified = False

    for field_name in (LOCATION_SOURCES, LOCATION_DESTINATIONS):
        new_refs = []
        for ref in _refs(rule, field_name):
            new_ref, changed = _replace_ref(ref, old_group_id, new_group_id)
            new_refs.append(new_ref)
            modified = modified or changed
        if field_name in rule:
            updated[field_name] = new_refs

    authorized = rule.get("authorized_groups")
    if authorized and old_group_id in authorized:
        moved = {k: v for k, v in authorized.items() if k != old_group_id}
        moved[new_group_id] = authorized[old_group_id]
        updated["authorized_groups"] = moved
        modified = True

    return updated, modified


def strip_group_from_rule(rule: Dict[str, Any], group_id: str) -> Dict[str, Any]:
    """Return a copy of ``rule`` with every reference to ``group_id`` removed."""
    stripped = dict(rule)
    for field_name in (LOCATION_SOURCES, LOCATION_DESTINATIONS):
        stripped[field_name] = [ref for ref in _refs(rule, field_name) if group_ref_id(ref) != group_id]

    authorized = rule.get("authorized_groups")
    if authorized is not None:
        stripped["authorized_groups"] = {k: v for k, v in authorized.items() if k != group_id}
    return stripped


def rule_has_endpoints(rule: Dict[str, Any]) -> bool:
    """A rule needs at least one source and one destination to be kept."""
    has_source = len(_refs(rule, "sources")) > 0 or rule.get("sourceResource") is not None
    has_destination = len(_refs(rule, "destinations")) > 0 or rule.get("destinationResource") is not None
    return has_source and has_destination


def _write_policy_rules(client: NetbirdClient, policy_id: str, policy: Dict[str, Any], rules: List[Dict[str, Any]]) -> None:
    """Format ``rules`` and submit them as a full update of the policy."""
    formatted = [format_rule_for_api(rule) for rule in rules]
    client.put(f"/policies/{policy_id}", policy_update_body(policy, formatted))


def replace_group_in_policies(client: NetbirdClient, old_group_id: str, new_group_id: str) -> GroupReplacementResult:
    """
    Replace ``old_group_id`` with ``new_group_id`` in every referencing policy.

    Each referencing policy is fetched fresh, rewritten, and updated with a
    single PUT. Failures are recorded per policy ID and do not stop the
    remaining policies.

    Raises:
        NetbirdAPIError: if the initial policy listing fails
    """
    references = list_policies_by_group(client, old_group_id)
    result = GroupReplacementResult()

    for policy_id in unique_policy_ids(references):
        try:
            policy = client.get(f"/policies/{policy_id}")
        except NetbirdError as e:
            logger.warning(f"Failed to fetch policy '{policy_id}': {e}")
            result.errors[policy_id] = f"fetching policy: {e}"
            continue

        rules = []
        modified = False
        for rule in policy.get("rules") or []:
            new_rule, changed = replace_group_in_rule(rule, old_group_id, new_group_id)
            rules.append(new_rule)
            modified = modified or changed

        if not modified:
            continue

        try:
            _write_policy_rules(client, policy_id, policy, rules)
        except InvalidRuleError as e:
            result.errors[policy_id] = f"formatting rule: {e}"
            continue
        except NetbirdError as e:
            logger.warning(f"Failed to update policy '{policy_id}': {e}")
            result.errors[policy_id] = f"updating policy: {e}"
            continue

        result.updated_policy_ids.append(policy_id)

    logger.info(
        f"Replaced group '{old_group_id}' with '{new_group_id}' in "
        f"{len(result.updated_policy_ids)} policies ({len(result.errors)} failed)"
    )
    return result


def delete_group_force(client: NetbirdClient, group_id: str) -> ForceDeleteResult:
    """
    Remove ``group_id`` from all policies, then delete the group.

    Rules left without a source or destination are dropped. Policies that
    keep at least one rule are updated; policies left with none are deleted
    after all updates have been attempted. The group is deleted last.

    Raises:
        NetbirdAPIError: if the initial policy listing fails
        GroupDeletionError: if the final group delete fails; the partial
            result is attached to the exception
    """
    references = list_policies_by_group(client, group_id)
    result = ForceDeleteResult(group_id=group_id)
    policies_to_delete = []

    for policy_id in unique_policy_ids(references):
        try:
            policy = client.get(f"/policies/{policy_id}")
        except NetbirdError as e:
            result.errors.append(f"policy {policy_id}: fetching: {e}")
            continue

        valid_rules = []
        for rule in policy.get("rules") or []:
            stripped = strip_group_from_rule(rule, group_id)
            if rule_has_endpoints(stripped):
                valid_rules.append(stripped)

        if not valid_rules:
            policies_to_delete.append(policy_id)
            result.policies_modified.append(policy_id)
            continue

        try:
            _write_policy_rules(client, policy_id, policy, valid_rules)
        except InvalidRuleError as e:
            result.errors.append(f"policy {policy_id}: formatting rule: {e}")
            continue
        except NetbirdError as e:
            result.errors.append(f"policy {policy_id}: updating: {e}")
            continue

        result.policies_modified.append(policy_id)

    for policy_id in policies_to_delete:
        try:
            client.delete(f"/policies/{policy_id}")
        except NetbirdError as e:
            result.errors.append(f"policy {policy_id}: deleting: {e}")

    for error in result.errors:
        logger.warning(f"Force delete of group '{group_id}': {error}")

    try:
        client.delete(f"/groups/{group_id}")
    except NetbirdError as e:
        result.errors.append(f"deleting group: {e}")
        raise GroupDeletionError(f"deleting group: {e}", result) from e

    result.deleted = True
    logger.info(f"Deleted group '{group_id}' after modifying {len(result.policies_modified)} policies")
    return result


class GroupDependenciesTool:
    """Tool entry points for the dependency operations."""

    def list_policies(self, client: NetbirdClient, input_data) -> List[Dict[str, Any]]:
        args = parse_input(ListPoliciesByGroupInput, input_data)
        return [ref.model_dump() for ref in list_policies_by_group(client, args.group_id)]

    def replace(self, client: NetbirdClient, input_data) -> Dict[str, Any]:
        args = parse_input(ReplaceGroupInput, input_data)
        return replace_group_in_policies(client, args.old_group_id, args.new_group_id).model_dump()


# Create singleton instance for FastMCP
group_dependencies_tool = GroupDependenciesTool()
