"""
Tests for the HTTP endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_health():
    """Test health check."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_calculate(trip_data, expected_balances):
    """Test balance and settlement calculation."""
    response = client.post("/settlements/calculate", json=trip_data)
    assert response.status_code == 200

    body = response.json()
    assert body["settlement_currency"] == "HKD"
    assert body["balances"] == pytest.approx(expected_balances)
    assert body["spending"] == pytest.approx({"Alice": 520.0, "Bob": 570.0, "Carol": 610.0})
    assert [(s["from"], s["to"]) for s in body["settlements"]] == [
        ("Bob", "Carol"),
        ("Alice", "Carol"),
        ("Dave", "Carol"),
    ]
    assert len(body["explanations"]) == 4
    assert len(body["warnings"]) == 1


def test_calculate_empty_trip():
    """Test calculation with nothing recorded."""
    response = client.post("/settlements/calculate", json={"members": ["Alice", "Bob"]})
    assert response.status_code == 200
    assert response.json()["settlements"] == []


def test_calculate_rejects_bad_members():
    """Test that a non-list roster is rejected."""
    response = client.post("/settlements/calculate", json={"members": "Alice"})
    assert response.status_code == 422


def test_record_settlement(trip_data):
    """Test recording a confirmed transfer."""
    response = client.post(
        "/settlements/record",
        json={
            "trip": trip_data,
            "from_person": "Bob",
            "to_person": "Carol",
            "amount": 360,
            "date": "2025-04-06",
        },
    )
    assert response.status_code == 201

    body = response.json()
    assert body["expense"]["is_settlement"] is True
    assert body["expense"]["split"]["custom_shares"] == {"Carol": 360.0}
    assert len(body["trip"]["expenses"]) == 4

    recalculated = client.post("/settlements/calculate", json=body["trip"]).json()
    assert recalculated["balances"]["Bob"] == pytest.approx(0.0, abs=1e-9)


def test_record_settlement_rejects_zero_amount(trip_data):
    """Test that a zero transfer is rejected at the API boundary."""
    response = client.post(
        "/settlements/record",
        json={"trip": trip_data, "from_person": "Bob", "to_person": "Carol", "amount": 0},
    )
    assert response.status_code == 422


def test_journal_filters(trip_data):
    """Test the filtered journal."""
    response = client.post(
        "/journal",
        json={"trip": trip_data, "member": "Bob", "payment_method": "Cash"},
    )
    assert response.status_code == 200
    ids = [t["transaction_id"] for t in response.json()["transactions"]]
    assert ids == ["E2", "A1"]


def test_journal_unexpected_error_is_500(trip_data, monkeypatch):
    """Test that an unexpected failure while building the journal is reported."""
    def broken_journal(trip):
        raise RuntimeError("journal unavailable")

    monkeypatch.setattr("main.build_journal", broken_journal)
    response = client.post("/journal", json={"trip": trip_data})
    assert response.status_code == 500
    assert response.json()["detail"] == "journal unavailable"


def test_conversion_back_solves_rate():
    """Test editing the settlement amount."""
    response = client.post(
        "/conversion",
        json={"local": 100, "rate": 7.8, "settlement": 780, "field": "settlement", "value": 390},
    )
    assert response.status_code == 200
    assert response.json() == {"local": 100.0, "rate": 3.9, "settlement": 390.0}


def test_conversion_non_numeric_value():
    """Test that a non-numeric edit counts as 0."""
    response = client.post(
        "/conversion",
        json={"local": 100, "rate": 7.8, "settlement": 780, "field": "local", "value": "abc"},
    )
    assert response.status_code == 200
    assert response.json() == {"local": 0.0, "rate": 7.8, "settlement": 0.0}
