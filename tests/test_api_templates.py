"""
Template Builder API Tests - tests/test_api_templates.py

Exercises the HTTP endpoints through FastAPI's TestClient.

Run with: python -m pytest tests/test_api_templates.py -v
"""

import pytest
from fastapi.testclient import TestClient

from templatekit.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data


# =============================================================================
# VALIDATE
# =============================================================================


def test_validate_valid_template(client, marketing_data):
    response = client.post("/api/templates/validate", json=marketing_data)

    assert response.status_code == 200
    assert response.json() == {"valid": True, "errors": [], "warnings": []}


def test_validate_per_step(client, marketing_data):
    marketing_data["body"]["text"] = ""

    step_one = client.post("/api/templates/validate?step=1", json=marketing_data).json()
    step_two = client.post("/api/templates/validate?step=2", json=marketing_data).json()

    assert step_one["valid"] is True
    assert step_two["valid"] is False
    assert step_two["errors"][0]["field"] == "body.text"


def test_validate_malformed_template(client):
    response = client.post("/api/templates/validate", json={"name": "x", "buttons": {"items": "nope"}})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert "buttons.items" in [e["field"] for e in data["errors"]]


@pytest.mark.parametrize("step", [0, 5])
def test_validate_unknown_step(client, marketing_data, step):
    response = client.post(f"/api/templates/validate?step={step}", json=marketing_data)

    assert response.status_code == 400


# =============================================================================
# PREVIEW
# =============================================================================


def test_preview(client, marketing_data):
    response = client.post("/api/templates/preview", json={"template": marketing_data})

    assert response.status_code == 200
    data = response.json()
    assert data["header"]["text"] == "Hello Ana"
    assert data["body"]["text"] == "Hi Ana, *20%* off everything until Sunday."
    assert data["buttons"][1]["phoneNumber"] == "+15551234567"


def test_preview_with_values(client, marketing_data):
    payload = {"template": marketing_data, "values": {"body": ["Bo", "5%", "Monday"]}}

    data = client.post("/api/templates/preview", json=payload).json()

    assert data["body"]["text"] == "Hi Bo, *5%* off everything until Monday."


def test_preview_incomplete_draft(client):
    data = client.post("/api/templates/preview", json={"template": {}}).json()

    assert data["body"] == {"text": "", "spans": []}
    assert "header" not in data
    assert "footer" not in data


# =============================================================================
# COMPONENTS
# =============================================================================


def test_components(client, auth_data):
    response = client.post("/api/templates/components", json=auth_data)

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "login_code"
    assert [c["type"] for c in data["components"]] == ["BODY", "BUTTONS"]


def test_components_invalid_template(client, marketing_data):
    marketing_data["name"] = "Summer Sale"

    response = client.post("/api/templates/components", json=marketing_data)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["message"] == "Template validation failed"
    assert detail["errors"][0]["field"] == "name"
