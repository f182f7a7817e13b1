"""
Tests for Wallets API endpoints
"""
from chainvault.utils.ids import new_id

ETH_ADDRESS = "0x" + "1" * 40
BASE = "/api/v1/wallets"


def create_wallet(client, user_id, **overrides):
    payload = {"user_id": user_id, "label": "Main", "address": ETH_ADDRESS, "chain": "ethereum"}
    payload.update(overrides)
    return client.post(f"{BASE}/", json=payload)


def test_wallet_lifecycle(client, user_id):
    """Создание, дубликат, смена сети, невалидный адрес, удаление"""
    response = create_wallet(client, user_id, address="0x" + "AB" * 20, chain="Ethereum")
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Wallet created successfully"
    wallet = body["data"]
    assert wallet["address"] == "0x" + "ab" * 20
    assert wallet["chain"] == "ethereum"

    response = create_wallet(client, user_id, address="0x" + "ab" * 20)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Wallet with this address and chain already exists for this user",
    }

    response = client.put(f"{BASE}/{wallet['id']}", json={"chain": "polygon"})
    assert response.status_code == 200
    assert response.json()["data"]["chain"] == "polygon"

    response = client.put(f"{BASE}/{wallet['id']}", json={"address": "0x123"})
    assert response.status_code == 400
    assert "Invalid Ethereum address format" in response.json()["error"]

    response = client.delete(f"{BASE}/{wallet['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Wallet deleted successfully"

    response = client.get(f"{BASE}/{wallet['id']}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Wallet not found"}


def test_create_wallet_validation_error(client, user_id):
    response = create_wallet(client, user_id, label="", address="", chain="")

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Validation failed: Wallet label is required, "
        "Wallet address is required, Blockchain chain is required"
    )


def test_create_wallet_missing_fields(client, user_id):
    response = client.post(f"{BASE}/", json={"user_id": user_id})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_create_wallet_unknown_user(client):
    response = create_wallet(client, new_id())

    assert response.status_code == 400
    assert response.json()["error"] == "User not found"


def test_create_wallet_malformed_user_id(client):
    response = create_wallet(client, "user-1")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid user ID format"


def test_create_wallet_without_body(client):
    response = client.post(f"{BASE}/")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_get_wallet_malformed_id(client):
    response = client.get(f"{BASE}/not-an-id")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid wallet ID format"


def test_update_wallet_empty_body(client, user_id):
    wallet = create_wallet(client, user_id).json()["data"]

    response = client.put(f"{BASE}/{wallet['id']}", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "At least one field (label, address, chain) is required for update"


def test_update_missing_wallet(client):
    response = client.put(f"{BASE}/{new_id()}", json={"label": "x"})

    assert response.status_code == 404


def test_delete_missing_wallet(client):
    response = client.delete(f"{BASE}/{new_id()}")

    assert response.status_code == 404
    assert response.json()["error"] == "Wallet not found"


def test_list_user_wallets(client, user_id, other_user_id):
    create_wallet(client, user_id)
    create_wallet(client, user_id, chain="base")
    create_wallet(client, other_user_id)

    response = client.get(f"{BASE}/user/{user_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert {w["chain"] for w in body["data"]} == {"ethereum", "base"}

    response = client.get(f"{BASE}/user/{user_id}/chain/base")
    assert response.json()["count"] == 1

    response = client.get(f"{BASE}/")
    assert response.json()["count"] == 3


def test_find_wallet_by_address(client, user_id):
    wallet = create_wallet(client, user_id, address="0x" + "ab" * 20).json()["data"]

    response = client.get(f"{BASE}/user/{user_id}/address/0x{'AB' * 20}/chain/Ethereum")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == wallet["id"]

    response = client.get(f"{BASE}/user/{user_id}/address/{ETH_ADDRESS}/chain/polygon")
    assert response.status_code == 404


def test_wallets_health(client):
    response = client.get(f"{BASE}/health")

    assert response.status_code == 200
    assert response.json()["service"] == "wallets-service"
    assert response.json()["status"] == "healthy"
