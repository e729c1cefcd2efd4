"""
Tests for the path and body shaping of the resource CRUD tools.
"""

import pytest

from netbird_mcp.errors import NetbirdAPIError
from netbird_mcp.tools import (
    accounts_tool,
    nameservers_tool,
    network_resources_tool,
    network_routers_tool,
    networks_tool,
    peers_tool,
    port_allocations_tool,
    posture_checks_tool,
    routes_tool,
    setup_keys_tool,
    users_tool,
)


@pytest.mark.parametrize(
    "operation, input_data, expected_call",
    [
        (
            peers_tool.update,
            {"peer_id": "peer-1", "ssh_enabled": True},
            ("PUT", "/peers/peer-1", {"ssh_enabled": True}),
        ),
        (
            networks_tool.create,
            {"name": "office"},
            ("POST", "/networks", {"name": "office"}),
        ),
        (
            networks_tool.update,
            {"network_id": "n1", "description": "branch"},
            ("PUT", "/networks/n1", {"description": "branch"}),
        ),
        (
            network_resources_tool.create,
            {"network_id": "n1", "name": "db", "address": "10.0.0.5/32", "enabled": True, "groups": ["g1"]},
            ("POST", "/networks/n1/resources",
             {"name": "db", "address": "10.0.0.5/32", "enabled": True, "groups": ["g1"]}),
        ),
        (
            network_resources_tool.update,
            {"network_id": "n1", "resource_id": "r1", "enabled": False},
            ("PUT", "/networks/n1/resources/r1", {"enabled": False}),
        ),
        (
            network_routers_tool.create,
            {"network_id": "n1", "peer_groups": ["g1"], "metric": 100, "masquerade": False, "enabled": True},
            ("POST", "/networks/n1/routers",
             {"peer_groups": ["g1"], "metric": 100, "masquerade": False, "enabled": True}),
        ),
        (
            network_routers_tool.update,
            {"network_id": "n1", "router_id": "rt1", "metric": 10},
            ("PUT", "/networks/n1/routers/rt1", {"metric": 10}),
        ),
        (
            nameservers_tool.create,
            {"name": "corp", "nameservers": [{"ip": "10.0.0.53"}], "groups": ["g1"]},
            ("POST", "/dns/nameservers",
             {"name": "corp", "nameservers": [{"ip": "10.0.0.53", "ns_type": "udp", "port": 53}], "groups": ["g1"]}),
        ),
        (
            nameservers_tool.update,
            {"nameserver_id": "ns1", "primary": True},
            ("PUT", "/dns/nameservers/ns1", {"primary": True}),
        ),
        (
            posture_checks_tool.create,
            {"name": "min-version", "checks": {"nb_version_check": {"min_version": "0.28.0"}}},
            ("POST", "/posture-checks",
             {"name": "min-version", "checks": {"nb_version_check": {"min_version": "0.28.0"}}}),
        ),
        (
            port_allocations_tool.create,
            {"peer_id": "peer-1", "name": "web", "enabled": True, "direct_port": {"count": 2, "protocol": "tcp"}},
            ("POST", "/peers/peer-1/ingress/ports",
             {"name": "web", "enabled": True, "direct_port": {"count": 2, "protocol": "tcp"}}),
        ),
        (
            port_allocations_tool.update,
            {"peer_id": "peer-1", "allocation_id": "a1", "port_ranges": [{"start": 80, "end": 81, "protocol": "tcp"}]},
            ("PUT", "/peers/peer-1/ingress/ports/a1",
             {"port_ranges": [{"start": 80, "end": 81, "protocol": "tcp"}]}),
        ),
        (
            routes_tool.create,
            {"network_id": "lan", "groups": ["g1"], "network": "192.168.0.0/24", "peer": "peer-1"},
            ("POST", "/routes",
             {"network_id": "lan", "groups": ["g1"], "network": "192.168.0.0/24", "peer": "peer-1"}),
        ),
        (
            routes_tool.update,
            {"route_id": "rt1", "enabled": False},
            ("PUT", "/routes/rt1", {"enabled": False}),
        ),
        (
            setup_keys_tool.create,
            {"name": "ci", "type": "reusable", "expires_in": 86400, "ephemeral": True},
            ("POST", "/setup-keys", {"name": "ci", "type": "reusable", "expires_in": 86400, "ephemeral": True}),
        ),
        (
            setup_keys_tool.update,
            {"key_id": "k1", "revoked": True},
            ("PUT", "/setup-keys/k1", {"revoked": True}),
        ),
        (
            users_tool.invite,
            {"email": "ops@example.com", "role": "user"},
            ("POST", "/users", {"email": "ops@example.com", "role": "user"}),
        ),
        (
            users_tool.update,
            {"user_id": "u1", "is_blocked": True},
            ("PUT", "/users/u1", {"is_blocked": True}),
        ),
    ],
)
def test_write_operations_shape_requests(gateway, operation, input_data, expected_call):
    operation(gateway, input_data)
    assert gateway.calls == [expected_call]


@pytest.mark.parametrize(
    "operation, input_data, path, expected",
    [
        (peers_tool.delete, {"peer_id": "peer-1"}, "/peers/peer-1", {"peer_id": "peer-1"}),
        (networks_tool.delete, {"network_id": "n1"}, "/networks/n1", {"network_id": "n1"}),
        (
            network_resources_tool.delete,
            {"network_id": "n1", "resource_id": "r1"},
            "/networks/n1/resources/r1",
            {"network_id": "n1", "resource_id": "r1"},
        ),
        (
            network_routers_tool.delete,
            {"network_id": "n1", "router_id": "rt1"},
            "/networks/n1/routers/rt1",
            {"network_id": "n1", "router_id": "rt1"},
        ),
        (nameservers_tool.delete, {"nameserver_id": "ns1"}, "/dns/nameservers/ns1", {"nameserver_id": "ns1"}),
        (
            posture_checks_tool.delete,
            {"posture_check_id": "pc1"},
            "/posture-checks/pc1",
            {"posture_check_id": "pc1"},
        ),
        (
            port_allocations_tool.delete,
            {"peer_id": "peer-1", "allocation_id": "a1"},
            "/peers/peer-1/ingress/ports/a1",
            {"peer_id": "peer-1", "allocation_id": "a1"},
        ),
        (routes_tool.delete, {"route_id": "rt1"}, "/routes/rt1", {"route_id": "rt1"}),
        (setup_keys_tool.delete, {"key_id": "k1"}, "/setup-keys/k1", {"key_id": "k1"}),
        (users_tool.delete, {"user_id": "u1"}, "/users/u1", {"user_id": "u1"}),
    ],
)
def test_delete_operations_acknowledge(gateway, operation, input_data, path, expected):
    result = operation(gateway, input_data)
    assert gateway.calls == [("DELETE", path, None)]
    assert result == {"status": "deleted", **expected}


@pytest.mark.parametrize(
    "operation, path",
    [
        (peers_tool.list, "/peers"),
        (networks_tool.list, "/networks"),
        (nameservers_tool.list, "/dns/nameservers"),
        (posture_checks_tool.list, "/posture-checks"),
        (routes_tool.list, "/routes"),
        (setup_keys_tool.list, "/setup-keys"),
        (users_tool.list, "/users"),
    ],
)
def test_list_operations(gateway, operation, path):
    gateway.respond("GET", path, [{"id": "x1"}, {"id": "x2"}])
    result = operation(gateway)
    assert [item["id"] for item in result] == ["x1", "x2"]
    assert gateway.calls == [("GET", path, None)]


def test_nested_list_operations_use_parent_id(gateway):
    network_resources_tool.list(gateway, {"network_id": "n1"})
    network_routers_tool.list(gateway, {"network_id": "n1"})
    port_allocations_tool.list(gateway, {"peer_id": "peer-1"})
    assert [path for _, path, _ in gateway.calls] == [
        "/networks/n1/resources",
        "/networks/n1/routers",
        "/peers/peer-1/ingress/ports",
    ]


def test_get_keeps_fields_unknown_to_the_model(gateway):
    gateway.respond("GET", "/networks/n1", {"id": "n1", "name": "office", "new_api_field": 7})
    result = networks_tool.get(gateway, {"network_id": "n1"})
    assert result["new_api_field"] == 7
    assert result["routers"] == []


def test_peer_get_decodes_groups(gateway):
    gateway.respond("GET", "/peers/peer-1", {
        "id": "peer-1",
        "name": "laptop",
        "connected": True,
        "groups": [{"id": "g1", "name": "All", "peers_count": 3, "resources_count": 0}],
        "last_seen": "2024-01-01T00:00:00Z",
    })
    result = peers_tool.get(gateway, {"peer_id": "peer-1"})
    assert result["groups"][0]["name"] == "All"
    assert result["last_seen"] == "2024-01-01T00:00:00Z"


def test_nameserver_group_with_null_lists(gateway):
    gateway.respond("GET", "/dns/nameservers", [{
        "id": "ns1",
        "name": "corp",
        "description": None,
        "nameservers": [{"ip": "10.0.0.53", "ns_type": None, "port": 53}],
        "groups": None,
        "domains": None,
    }])

    result = nameservers_tool.list(gateway)[0]

    assert result["description"] == ""
    assert result["groups"] == []
    assert result["domains"] == []
    assert result["nameservers"][0]["ns_type"] == "udp"


def test_posture_check_with_null_nested_lists(gateway):
    gateway.respond("GET", "/posture-checks/pc1", {
        "id": "pc1",
        "name": "geo",
        "description": None,
        "checks": {
            "geo_location_check": {"locations": None, "action": "allow"},
            "process_check": {"processes": None},
        },
    })

    result = posture_checks_tool.get(gateway, {"posture_check_id": "pc1"})

    assert result["description"] == ""
    assert result["checks"]["geo_location_check"] == {"locations": [], "action": "allow"}
    assert result["checks"]["process_check"] == {"processes": []}


def test_gateway_errors_propagate(gateway):
    gateway.fail("GET", "/routes/missing", status_code=404)
    with pytest.raises(NetbirdAPIError) as exc:
        routes_tool.get(gateway, {"route_id": "missing"})
    assert exc.value.status_code == 404


def test_missing_required_input_is_rejected_before_any_call(gateway):
    with pytest.raises(ValueError):
        setup_keys_tool.create(gateway, {"name": "ci"})
    assert gateway.calls == []


# ============================================
# Accounts
# ============================================


def test_get_account_returns_first_account(gateway):
    gateway.respond("GET", "/accounts", [
        {"id": "acc1", "settings": {"peer_login_expiration": 86400}, "domain": "example.com"},
        {"id": "acc2"},
    ])
    account = accounts_tool.get(gateway)
    assert account["id"] == "acc1"
    assert account["settings"]["peer_login_expiration"] == 86400


def test_get_account_returns_none_when_no_account(gateway):
    gateway.respond("GET", "/accounts", [])
    assert accounts_tool.get(gateway) is None


def test_update_account_resolves_account_id(gateway):
    gateway.respond("GET", "/accounts", [{"id": "acc1"}])

    accounts_tool.update(gateway, {"settings": {"peer_login_expiration_enabled": True}})

    assert gateway.calls == [
        ("GET", "/accounts", None),
        ("PUT", "/accounts/acc1", {"settings": {"peer_login_expiration_enabled": True}}),
    ]


def test_update_account_with_explicit_id(gateway):
    accounts_tool.update(gateway, {"account_id": "acc9", "settings": {"jwt_groups_enabled": False}})
    assert gateway.calls == [("PUT", "/accounts/acc9", {"settings": {"jwt_groups_enabled": False}})]


def test_update_account_without_any_account_fails(gateway):
    gateway.respond("GET", "/accounts", [])
    with pytest.raises(NetbirdAPIError, match="no account found"):
        accounts_tool.update(gateway, {"settings": {}})
