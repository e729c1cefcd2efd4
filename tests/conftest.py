"""
Shared fixtures for the NetBird MCP tests.

``FakeGateway`` stands in for ``NetbirdClient``: it keeps policies and groups
in memory, records every call, and can be told to fail specific calls.
"""

import copy

import pytest

from netbird_mcp.errors import NetbirdAPIError


def group(group_id, name=None):
    """A group reference in the shape the API returns inside policy rules."""
    return {"id": group_id, "name": name or group_id.upper(), "peers_count": 1, "resources_count": 0}


def rule(rule_id, sources=None, destinations=None, **extra):
    data = {
        "id": rule_id,
        "name": f"rule-{rule_id}",
        "description": "",
        "enabled": True,
        "action": "accept",
        "bidirectional": True,
        "protocol": "all",
        "sources": sources if sources is not None else [],
        "destinations": destinations if destinations is not None else [],
    }
    data.update(extra)
    return data


def policy(policy_id, *rules, **extra):
    data = {
        "id": policy_id,
        "name": f"policy-{policy_id}",
        "description": f"description of {policy_id}",
        "enabled": True,
        "rules": list(rules),
    }
    data.update(extra)
    return data


class FakeGateway:
    def __init__(self, policies=None, groups=None):
        self.policies = {p["id"]: copy.deepcopy(p) for p in (policies or [])}
        self.groups = {g["id"]: copy.deepcopy(g) for g in (groups or [])}
        self.responses = {}
        self.failures = {}
        self.calls = []

    def fail(self, method, path, message="boom", status_code=500):
        self.failures[(method, path)] = NetbirdAPIError(
            f"unexpected status code: {status_code}, body: {message}",
            status_code=status_code,
            body=message,
        )

    def respond(self, method, path, data):
        self.responses[(method, path)] = data

    def calls_for(self, method, path=None):
        return [c for c in self.calls if c[0] == method and (path is None or c[1] == path)]

    def _record(self, method, path, body=None):
        self.calls.append((method, path, copy.deepcopy(body)))
        if (method, path) in self.failures:
            raise self.failures[(method, path)]

    @staticmethod
    def _as_stored_policy(body):
        # requests carry group IDs, responses carry group objects
        stored = copy.deepcopy(body)
        for r in stored.get("rules") or []:
            for field_name in ("sources", "destinations"):
                if r.get(field_name) is not None:
                    r[field_name] = [group(ref) if isinstance(ref, str) else ref for ref in r[field_name]]
        return stored

    @staticmethod
    def _not_found(path):
        return NetbirdAPIError(f"unexpected status code: 404, body: {path} not found", status_code=404)

    def get(self, path):
        self._record("GET", path)
        if ("GET", path) in self.responses:
            return copy.deepcopy(self.responses[("GET", path)])
        if path == "/policies":
            return copy.deepcopy(list(self.policies.values()))
        if path.startswith("/policies/"):
            policy_id = path.split("/")[2]
            if policy_id not in self.policies:
                raise self._not_found(path)
            return copy.deepcopy(self.policies[policy_id])
        if path == "/groups":
            return copy.deepcopy(list(self.groups.values()))
        if path.startswith("/groups/"):
            group_id = path.split("/")[2]
            if group_id not in self.groups:
                raise self._not_found(path)
            return copy.deepcopy(self.groups[group_id])
        return None

    def post(self, path, body=None):
        self._record("POST", path, body)
        if ("POST", path) in self.responses:
            return copy.deepcopy(self.responses[("POST", path)])
        return {"id": "new-id", **copy.deepcopy(body or {})}

    def put(self, path, body=None):
        self._record("PUT", path, body)
        if path.startswith("/policies/"):
            policy_id = path.split("/")[2]
            if policy_id not in self.policies:
                raise self._not_found(path)
            self.policies[policy_id].update(self._as_stored_policy(body))
            return copy.deepcopy(self.policies[policy_id])
        if ("PUT", path) in self.responses:
            return copy.deepcopy(self.responses[("PUT", path)])
        return copy.deepcopy(body)

    def delete(self, path):
        self._record("DELETE", path)
        if path.startswith("/policies/"):
            if self.policies.pop(path.split("/")[2], None) is None:
                raise self._not_found(path)
        elif path.startswith("/groups/"):
            self.groups.pop(path.split("/")[2], None)
        return None


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the server reads."""
    for name in (
        "NETBIRD_API_TOKEN",
        "NETBIRD_HOST",
        "NETBIRD_TIMEOUT",
        "AUTH_JWKS_URI",
        "AUTH_ISSUER",
        "AUTH_AUDIENCE",
        "DISABLE_JWT_AUTH",
        "ENABLE_AUTH_LOGGING",
        "TRANSPORT",
        "HOST",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
