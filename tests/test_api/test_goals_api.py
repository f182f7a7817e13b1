"""
Tests for Goals API endpoints
"""
from chainvault.utils.ids import new_id

BASE = "/api/v1/goals"


def create_goal(client, user_id, **overrides):
    payload = {
        "user_id": user_id,
        "name": "Buy a bike",
        "coin": "Ethereum",
        "coin_symbol": "ETH",
        "current_amount": 250,
        "target_amount": 1000,
        "goal_type": "regular",
    }
    payload.update(overrides)
    return client.post(f"{BASE}/", json=payload)


def test_goal_progress_scenario(client, user_id):
    response = create_goal(client, user_id)
    assert response.status_code == 201
    goal = response.json()["data"]
    assert goal["progress_percentage"] == 25

    response = client.put(f"{BASE}/{goal['id']}/progress", json={"current_amount": 1500})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Current amount cannot exceed target amount"}

    response = client.put(f"{BASE}/{goal['id']}/progress", json={"current_amount": 1000})
    assert response.status_code == 200
    assert response.json()["data"]["progress_percentage"] == 100

    response = client.get(f"{BASE}/{goal['id']}/progress")
    assert response.json()["data"]["is_completed"] is True
    assert response.json()["data"]["remaining_amount"] == 0


def test_progress_update_requires_amount(client, user_id):
    goal = create_goal(client, user_id).json()["data"]

    response = client.put(f"{BASE}/{goal['id']}/progress", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "current_amount is required"


def test_create_goal_exceeding_target(client, user_id):
    response = create_goal(client, user_id, current_amount=2000)

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed: Current amount cannot exceed target amount"


def test_create_goal_with_target_date(client, user_id):
    response = create_goal(client, user_id, target_date="2027-06-01", milestones=[{"amount": 500}])

    assert response.status_code == 201
    goal = response.json()["data"]
    assert goal["target_date"] == "2027-06-01"
    assert goal["milestones"] == [{"amount": 500}]


def test_create_goal_missing_parent(client, user_id):
    response = create_goal(client, user_id, goal_type="subgoal", parent_goal_id=new_id())

    assert response.status_code == 400
    assert response.json()["error"] == "Parent goal not found"


def test_delete_parent_with_subgoals(client, user_id):
    parent = create_goal(client, user_id, goal_type="parent").json()["data"]
    child = create_goal(client, user_id, goal_type="subgoal", parent_goal_id=parent["id"]).json()["data"]

    response = client.delete(f"{BASE}/{parent['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete goal with subgoals. Please delete subgoals first."

    assert client.delete(f"{BASE}/{child['id']}").status_code == 200
    assert client.delete(f"{BASE}/{parent['id']}").status_code == 200
    assert client.get(f"{BASE}/{parent['id']}").status_code == 404


def test_update_goal(client, user_id):
    goal = create_goal(client, user_id).json()["data"]

    response = client.put(f"{BASE}/{goal['id']}", json={"target_amount": 500, "status": "paused"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["progress_percentage"] == 50
    assert data["status"] == "paused"


def test_update_goal_empty_body(client, user_id):
    goal = create_goal(client, user_id).json()["data"]

    response = client.put(f"{BASE}/{goal['id']}", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "At least one field is required for update"


def test_goal_not_found_and_malformed_id(client):
    assert client.get(f"{BASE}/{new_id()}").status_code == 404
    assert client.get(f"{BASE}/{new_id()}/progress").status_code == 404

    response = client.get(f"{BASE}/goal-1")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid goal ID format"


def test_list_goals(client, user_id, other_user_id):
    create_goal(client, user_id)
    create_goal(client, other_user_id)

    response = client.get(f"{BASE}/user/{user_id}")
    assert response.json()["count"] == 1

    response = client.get(f"{BASE}/")
    assert response.json()["count"] == 2


def test_create_goal_infinite_target_rejected(client, user_id):
    """Голые Infinity/NaN из JSON не доходят до БД"""
    body = (
        '{"user_id": "%s", "name": "Moon", "coin": "Ethereum", "coin_symbol": "ETH", '
        '"current_amount": 0, "target_amount": Infinity, "goal_type": "regular"}'
    ) % user_id

    response = client.post(f"{BASE}/", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed: Target amount must be a positive number"

    response = client.get(f"{BASE}/user/{user_id}")
    assert response.status_code == 200
    assert response.json()["count"] == 0


def test_progress_update_nan_rejected(client, user_id):
    goal = create_goal(client, user_id).json()["data"]

    response = client.put(
        f"{BASE}/{goal['id']}/progress",
        content='{"current_amount": NaN}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "New amount must be a non-negative number"
    assert client.get(f"{BASE}/{goal['id']}").json()["data"]["current_amount"] == 250


def test_amounts_are_not_coerced(client, user_id):
    response = create_goal(client, user_id, current_amount=True, target_amount="1000")

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Validation failed: Current amount must be a non-negative number, "
        "Target amount must be a positive number"
    )
    assert client.get(f"{BASE}/user/{user_id}").json()["count"] == 0


def test_progress_update_string_amount_rejected(client, user_id):
    goal = create_goal(client, user_id).json()["data"]

    response = client.put(f"{BASE}/{goal['id']}/progress", json={"current_amount": "500"})

    assert response.status_code == 400


def test_wallet_chain_alias_stored_canonical(client, user_id):
    response = create_goal(client, user_id, wallet_address="0x" + "1" * 40, wallet_chain="eth")

    assert response.status_code == 201
    assert response.json()["data"]["wallet_chain"] == "ethereum"
