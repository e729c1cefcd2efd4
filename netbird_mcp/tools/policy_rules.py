"""
Policy rule formatting and validation.

The NetBird API is asymmetric for group references inside policy rules:
responses carry full group objects (``{"id": ..., "name": ...}``) in
``sources`` and ``destinations`` while create/update requests expect bare
group ID strings. ``format_rule_for_api`` normalizes a rule so it can be sent
back, and ``validate_policy_rules`` rejects malformed rules before any
request is made.
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..errors import InvalidRuleError

logger = logging.getLogger(__name__)

# A group reference as found in a rule: a bare ID or a group object
GroupRef = Union[str, Mapping[str, Any]]

VALID_ACTIONS = ("accept", "drop")
VALID_PROTOCOLS = ("tcp", "udp", "icmp", "all")
REQUIRED_RULE_FIELDS = ("name", "enabled", "action", "bidirectional", "protocol")
GROUP_REFERENCE_FIELDS = ("sources", "destinations")


def group_ref_id(ref: GroupRef) -> Optional[str]:
    """Return the group ID of a reference, or None if it has no string ID."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping):
        ref_id = ref.get("id")
        if isinstance(ref_id, str):
            return ref_id
    return None


def _to_id_list(value: Any, field_name: str) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise InvalidRuleError(
            f"{field_name}: unsupported type {type(value).__name__}, expected array"
        )

    ids = []
    for i, item in enumerate(value):
        if isinstance(item, str):
            ids.append(item)
        elif isinstance(item, Mapping):
            ref_id = group_ref_id(item)
            if ref_id is None:
                raise InvalidRuleError(
                    f"{field_name}[{i}]: object missing 'id' field or 'id' is not a string"
                )
            ids.append(ref_id)
        else:
            raise InvalidRuleError(
                f"{field_name}[{i}]: unsupported type {type(item).__name__}, "
                f"expected string or object with 'id' field"
            )
    return ids


def format_rule_for_api(rule: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Convert a rule to the shape expected by policy create/update requests.

    ``sources`` and ``destinations`` become lists of group ID strings whether
    they arrive as ID strings or as group objects. Every other key is copied
    unchanged. The input mapping is not modified.

    Raises:
        InvalidRuleError: if the rule is None or a reference has no string ID
    """
    if rule is None:
        raise InvalidRuleError("rule cannot be None")

    formatted = dict(rule)
    for field_name in GROUP_REFERENCE_FIELDS:
        value = rule.get(field_name)
        if value is not None:
            formatted[field_name] = _to_id_list(value, field_name)
    return formatted


def _rule_identifier(rule: Mapping[str, Any], index: int) -> str:
    name = rule.get("name")
    if isinstance(name, str) and name:
        return f"'{name}'"
    return f"[{index}]"


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid port
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _validate_port_ranges(port_ranges: Any, rule_name: str) -> None:
    if not isinstance(port_ranges, (list, tuple)):
        raise InvalidRuleError(f"rule {rule_name}: port_ranges must be an array")

    for i, port_range in enumerate(port_ranges):
        if not isinstance(port_range, Mapping):
            raise InvalidRuleError(f"rule {rule_name}: port_ranges[{i}] must be an object")
        if "start" not in port_range or "end" not in port_range:
            raise InvalidRuleError(
                f"rule {rule_name}: port_ranges[{i}] must have 'start' and 'end' fields"
            )

        start = _as_int(port_range["start"])
        if start is None:
            raise InvalidRuleError(f"rule {rule_name}: port_ranges[{i}].start must be a number")
        end = _as_int(port_range["end"])
        if end is None:
            raise InvalidRuleError(f"rule {rule_name}: port_ranges[{i}].end must be a number")

        if start > end:
            raise InvalidRuleError(
                f"rule {rule_name}: port_ranges[{i}] invalid: start ({start}) must be <= end ({end})"
            )


def _has_endpoint(rule: Mapping[str, Any], list_field: str, resource_field: str) -> bool:
    refs = rule.get(list_field)
    if isinstance(refs, (list, tuple)) and len(refs) > 0:
        return True
    return rule.get(resource_field) is not None


def validate_policy_rules(rules: Optional[Sequence[Mapping[str, Any]]]) -> None:
    """
    Validate a batch of rules, stopping at the first invalid one.

    Raises:
        InvalidRuleError: naming the rule (by name, else index) and the
            constraint that failed
    """
    if not rules:
        return

    for i, rule in enumerate(rules):
        rule_name = _rule_identifier(rule, i)

        for field_name in REQUIRED_RULE_FIELDS:
            if field_name not in rule:
                raise InvalidRuleError(f"rule {rule_name}: missing required field '{field_name}'")

        action = rule["action"]
        if not isinstance(action, str):
            raise InvalidRuleError(f"rule {rule_name}: field 'action' must be a string")
        if action not in VALID_ACTIONS:
            raise InvalidRuleError(
                f"rule {rule_name}: invalid action '{action}', must be 'accept' or 'drop'"
            )

        protocol = rule["protocol"]
        if not isinstance(protocol, str):
            raise InvalidRuleError(f"rule {rule_name}: field 'protocol' must be a string")
        if protocol not in VALID_PROTOCOLS:
            raise InvalidRuleError(
                f"rule {rule_name}: invalid protocol '{protocol}', "
                f"must be 'tcp', 'udp', 'icmp', or 'all'"
            )

        if rule.get("port_ranges") is not None:
            _validate_port_ranges(rule["port_ranges"], rule_name)

        if not _has_endpoint(rule, "sources", "sourceResource"):
            raise InvalidRuleError(
                f"rule {rule_name}: must have at least one source (sources or sourceResource)"
            )
        if not _has_endpoint(rule, "destinations", "destinationResource"):
            raise InvalidRuleError(
                f"rule {rule_name}: must have at least one destination "
                f"(destinations or destinationResource)"
            )


def prepare_rules(rules: Optional[Sequence[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """Validate a batch of caller-supplied rules and format each for the API."""
    try:
        validate_policy_rules(rules)
    except InvalidRuleError as e:
        raise InvalidRuleError(f"validation error: {e}") from e

    formatted = []
    for i, rule in enumerate(rules or []):
        try:
            formatted.append(format_rule_for_api(rule))
        except InvalidRuleError as e:
            raise InvalidRuleError(f"formatting rule {i}: {e}") from e
    return formatted
