from __future__ import annotations

import pytest


def _create(client, **overrides):
    payload = {"name": "Ava Thompson", "email": "ava@example.com", "hourly_rate": 30}
    payload.update(overrides)
    response = client.post("/employees", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_list_employees_empty(client):
    response = client.get("/employees")

    assert response.status_code == 200
    assert response.json() == []


def test_create_employee_and_list(client):
    created = _create(client, hourly_rate=25.5, scheduler_id=" 9001 ")

    assert created["name"] == "Ava Thompson"
    assert created["hourly_rate"] == 25.5
    assert created["scheduler_id"] == "9001"
    assert created["is_active"] is True

    listed = client.get("/employees").json()
    assert [row["id"] for row in listed] == [created["id"]]


def test_create_employee_requires_name(client):
    response = client.post("/employees", json={"hourly_rate": 30})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request"
    assert body["details"][0]["field"] == "name"


def test_create_employee_rejects_negative_rate(client):
    response = client.post("/employees", json={"name": "Ava", "hourly_rate": -1})

    assert response.status_code == 400


def test_get_unknown_employee_returns_error_body(client):
    response = client.get("/employees/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Employee not found", "details": {"employee_id": 999}}


def test_update_employee_rate(client):
    created = _create(client)

    response = client.patch(f"/employees/{created['id']}", json={"hourly_rate": 32.25})

    assert response.status_code == 200
    assert response.json()["hourly_rate"] == 32.25
    assert response.json()["name"] == "Ava Thompson"


def test_deactivate_keeps_employee(client):
    active = _create(client, name="Liam Nguyen")
    gone = _create(client, name="Mia Patel")

    response = client.delete(f"/employees/{gone['id']}")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert len(client.get("/employees").json()) == 2
    only_active = client.get("/employees", params={"active": True}).json()
    assert [row["id"] for row in only_active] == [active["id"]]


def test_duplicate_scheduler_id_is_rejected(client):
    _create(client, scheduler_id="9001")

    response = client.post(
        "/employees", json={"name": "Liam Nguyen", "hourly_rate": 28, "scheduler_id": "9001"}
    )

    assert response.status_code == 400
    assert "Scheduler id" in response.json()["error"]


def test_employee_payroll_history(client):
    created = _create(client)
    client.post(
        "/payroll",
        json={"employeeId": created["id"], "date": "2025-01-06", "hoursWorked": 10, "hourlyRate": 30},
    )

    response = client.get(f"/employees/{created['id']}/payroll")

    assert response.status_code == 200
    assert [row["total_pay"] for row in response.json()] == [300.0]
    assert client.get("/employees/999/payroll").status_code == 404


@pytest.mark.parametrize("rate", ["Infinity", "NaN"])
def test_non_finite_rate_is_rejected(client, rate):
    response = client.post(
        "/employees",
        content=f'{{"name": "Ava Thompson", "hourly_rate": {rate}}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert client.get("/employees").json() == []
