"""
Tests for chain registry endpoints and system routes
"""
BASE = "/api/v1/chains"


def test_list_chains(client):
    response = client.get(f"{BASE}/")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 9
    chains = {item["chain"]: item for item in body["data"]}
    assert chains["polygon"]["address_rule"] == "evm"
    assert chains["polygon"]["aliases"] == ["matic"]
    assert chains["sui"]["aliases"] == []


def test_validate_address_ok(client):
    response = client.post(f"{BASE}/validate-address", json={"address": "0x" + "a" * 64, "chain": "SUI"})

    assert response.json()["data"] == {"valid": True, "reason": None, "chain": "sui"}


def test_validate_address_alias(client):
    response = client.post(f"{BASE}/validate-address", json={"address": "0x123", "chain": "matic"})

    data = response.json()["data"]
    assert data["valid"] is False
    assert data["chain"] == "polygon"
    assert data["reason"] == "Invalid Ethereum address format (should be 0x followed by 40 hex characters)"


def test_validate_address_unsupported_chain(client):
    response = client.post(f"{BASE}/validate-address", json={"address": "D" * 34, "chain": "dogecoin"})

    assert response.json()["data"] == {
        "valid": False,
        "reason": "Unsupported blockchain chain",
        "chain": None,
    }


def test_validate_address_missing(client):
    response = client.post(f"{BASE}/validate-address", json={"chain": "ethereum"})

    assert response.json()["data"]["reason"] == "Address is required"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.text == "ok"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/v1/unknown")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}
