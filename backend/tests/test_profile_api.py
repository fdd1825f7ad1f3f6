"""Tests for the caller's own profile."""

import bcrypt

from autoclinic.models.employee import Employee
from autoclinic.models.user import User


def test_get_user_profile(client, make_user, bearer):
    user = make_user(name="Alice", email="alice@example.com")
    resp = client.get("/api/profile", headers=bearer(user.id, role="user"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == user.id
    assert body["email"] == "alice@example.com"
    assert body["notifications_enabled"] is True
    assert "password" not in body


def test_get_employee_profile(client, make_employee, bearer):
    employee = make_employee(name="Sam")
    resp = client.get("/api/profile", headers=bearer(employee.id, role="staff", account_type="Employee"))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Sam"
    assert resp.json()["role"] == "staff"


def test_missing_account(client, bearer):
    resp = client.get("/api/profile", headers=bearer(99, role="user"))
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_update_fields(client, db, make_user, bearer):
    user = make_user()
    resp = client.put(
        "/api/profile",
        json={"name": "Alice B", "phone": "555-0100", "notifications_enabled": False},
        headers=bearer(user.id, role="user"),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice B"
    assert resp.json()["phone"] == "555-0100"
    assert resp.json()["notifications_enabled"] is False


def test_password_is_not_a_profile_field(client, db, make_user, bearer):
    user = make_user(email="alice@example.com", password="old")
    resp = client.put("/api/profile", json={"password": "ignored"}, headers=bearer(user.id, role="user"))
    assert resp.status_code == 200

    db.expire_all()
    stored = db.get(User, user.id).password
    assert bcrypt.checkpw(b"old", stored.encode())


def test_update_email_is_normalised(client, db, make_user, bearer):
    user = make_user()
    client.put("/api/profile", json={"email": "  New@Example.com "}, headers=bearer(user.id, role="user"))
    db.expire_all()
    assert db.get(User, user.id).email == "new@example.com"


def test_update_email_taken(client, make_user, bearer):
    make_user(email="taken@example.com")
    user = make_user(name="Bob", email="bob@example.com")
    resp = client.put("/api/profile", json={"email": "taken@example.com"}, headers=bearer(user.id, role="user"))
    assert resp.status_code == 400


def test_employee_update_ignores_notifications(client, db, make_employee, bearer):
    employee = make_employee()
    resp = client.put(
        "/api/profile",
        json={"phone": "555-0199", "notifications_enabled": False},
        headers=bearer(employee.id, role="staff", account_type="Employee"),
    )
    assert resp.status_code == 200
    db.expire_all()
    assert db.get(Employee, employee.id).phone == "555-0199"


def test_update_missing_account(client, bearer):
    resp = client.put("/api/profile", json={"name": "X"}, headers=bearer(42, account_type="Employee"))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Employee not found"}
