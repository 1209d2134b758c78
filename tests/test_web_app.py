"""Tests for the Flask JSON API."""

import pytest

from fairminutes.services import RulesService
from fairminutes.ui import create_app

SQUAD = ["P1", "P2", "P3", "P4", "P5", "P6", "P7", "P8"]


@pytest.fixture
def client(tmp_path):
    app = create_app(RulesService(str(tmp_path / "rules.json")))
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def allocation(client):
    response = client.post("/api/allocations/generate", json={"squad": SQUAD})
    return response.get_json()["allocation"]


def test_generate(client):
    response = client.post("/api/allocations/generate", json={"squad": SQUAD})
    data = response.get_json()

    assert response.status_code == 200
    assert data["success"] is True
    assert len(data["allocation"]["quarters"]) == 4
    assert set(data["allocation"]["summary"].values()) == {25}
    assert data["report"]["spread"] == 0


def test_generate_with_manual_goalkeepers(client):
    response = client.post("/api/allocations/generate", json={
        "squad": SQUAD, "manual_goalkeepers": ["P8", None, None, None]
    })
    slots = response.get_json()["allocation"]["quarters"][0]["slots"]

    assert slots[0] == {"player": "P8", "position": "GK", "minutes": 10}


@pytest.mark.parametrize("manual_goalkeepers", ["P8", {"1": "P8"}, [{"name": "P8"}]])
def test_generate_rejects_malformed_manual_goalkeepers(client, manual_goalkeepers):
    response = client.post("/api/allocations/generate", json={
        "squad": SQUAD, "manual_goalkeepers": manual_goalkeepers
    })
    data = response.get_json()

    assert response.status_code == 400
    assert data["error_type"] == "AllocationValidationError"
    assert "manual_goalkeepers" in data["error"]


def test_generate_rejects_small_squad(client):
    response = client.post("/api/allocations/generate", json={"squad": SQUAD[:4]})
    data = response.get_json()

    assert response.status_code == 400
    assert data["success"] is False
    assert data["error_type"] == "SquadValidationError"


def test_generate_requires_squad(client):
    response = client.post("/api/allocations/generate", json={})

    assert response.status_code == 400
    assert "squad" in response.get_json()["error"]


def test_non_json_body_rejected(client):
    response = client.post("/api/allocations/generate", data="squad",
                           content_type="text/plain")

    assert response.status_code == 400


def test_assign(client, allocation):
    response = client.post("/api/allocations/assign", json={
        "allocation": allocation, "quarter": 1, "slot_index": 1, "player": "P9"
    })
    data = response.get_json()

    assert response.status_code == 200
    assert data["allocation"]["quarters"][0]["slots"][1]["player"] == "P9"
    assert data["allocation"]["summary"]["P9"] == 5
    assert data["report"]["warnings"]


def test_assign_out_of_range(client, allocation):
    response = client.post("/api/allocations/assign", json={
        "allocation": allocation, "quarter": 1, "slot_index": 42, "player": "P9"
    })

    assert response.status_code == 400
    assert response.get_json()["error_type"] == "SlotRangeError"


def test_assign_outside_candidates(client, allocation):
    response = client.post("/api/allocations/assign", json={
        "allocation": allocation, "quarter": 1, "slot_index": 1,
        "player": "P9", "candidates": SQUAD,
    })

    assert response.status_code == 400


def test_swap(client, allocation):
    response = client.post("/api/allocations/swap", json={
        "allocation": allocation, "quarter": 1, "slot_index_a": 0, "slot_index_b": 1
    })
    slots = response.get_json()["allocation"]["quarters"][0]["slots"]

    assert response.status_code == 200
    assert slots[0]["player"] == "P5"
    assert slots[1]["player"] == "P1"


def test_swap_across_quarters_rejected(client, allocation):
    response = client.post("/api/allocations/swap", json={
        "allocation": allocation, "quarter": 1, "quarter_b": 2,
        "slot_index_a": 0, "slot_index_b": 1,
    })

    assert response.status_code == 400


def test_swap_requires_integer_index(client, allocation):
    response = client.post("/api/allocations/swap", json={
        "allocation": allocation, "quarter": 1, "slot_index_a": "first", "slot_index_b": 1
    })

    assert response.status_code == 400


def test_substitute(client, allocation):
    response = client.post("/api/allocations/substitute", json={
        "allocation": allocation, "quarter": 1, "slot_index": 1, "substitute": "P2"
    })
    slots = response.get_json()["allocation"]["quarters"][0]["slots"]

    assert slots[1]["player"] == "P2"
    assert slots[5]["player"] == "P5"


def test_wave_change(client, allocation):
    response = client.post("/api/allocations/wave", json={
        "allocation": allocation, "quarter": 1, "slot_index": 1, "wave": "second"
    })

    assert response.status_code == 200
    assert response.get_json()["allocation"]["quarters"][0]["slots"][1]["wave"] == "second"


def test_wave_change_on_goalkeeper(client, allocation):
    response = client.post("/api/allocations/wave", json={
        "allocation": allocation, "quarter": 1, "slot_index": 0, "wave": "second"
    })

    assert response.status_code == 400
    assert response.get_json()["error_type"] == "SlotOperationError"


def test_evaluate_bare_summary(client):
    response = client.post("/api/allocations/evaluate", json={
        "allocation": {"summary": {"Alex": 30, "Blake": 25, "Casey": 20, "Drew": 15}}
    })
    report = response.get_json()["report"]

    assert report["spread"] == 15
    assert report["mean"] == 22.5
    assert len(report["warnings"]) == 1


def test_evaluate_malformed_allocation(client):
    response = client.post("/api/allocations/evaluate", json={
        "allocation": {"quarters": [{"quarter": 1, "slots": [{"player": "A"}]}]}
    })

    assert response.status_code == 400


def test_breakdown(client, allocation):
    response = client.post("/api/allocations/breakdown", json={
        "allocation": allocation, "player": "P1", "squad": SQUAD
    })
    data = response.get_json()

    assert data["minutes"] == [10, 5, 5, 5]
    assert data["roles"] == ["GK", "5", "5", "5"]


def test_breakdown_player_outside_squad(client, allocation):
    response = client.post("/api/allocations/breakdown", json={
        "allocation": allocation, "player": "P9", "squad": SQUAD
    })

    assert response.status_code == 400


def test_validate(client, allocation):
    response = client.post("/api/allocations/validate", json={
        "allocation": allocation, "squad": SQUAD + ["P9"]
    })
    data = response.get_json()

    assert data["valid"] is False
    assert data["errors"] == ["Player P9 is a substitute for consecutive quarters (Q1-Q2)"]
    assert data["substitutes"]["1"] == ["P9"]


def test_rules_roundtrip(client):
    response = client.get("/api/rules")
    assert response.get_json()["rules"]["fairness"]["maxVariance"] == 5

    response = client.put("/api/rules", json={"fairness": {"maxVariance": 20}})
    assert response.status_code == 200
    assert response.get_json()["rules"]["fairness"]["maxVariance"] == 20
    assert client.get("/api/rules").get_json()["rules"]["fairness"]["maxVariance"] == 20

    response = client.delete("/api/rules")
    assert response.get_json()["rules"]["fairness"]["maxVariance"] == 5


def test_invalid_rules_rejected(client):
    response = client.put("/api/rules", json={"waves": {"first": 1, "second": 1}})

    assert response.status_code == 400
    assert response.get_json()["error_type"] == "FormationError"


def test_rules_apply_to_generation(client):
    client.put("/api/rules", json={"fairness": {"maxVariance": 0}})
    response = client.post("/api/allocations/generate", json={"squad": SQUAD[:7]})

    assert response.get_json()["report"]["warnings"] == response.get_json()["allocation"]["warnings"]
