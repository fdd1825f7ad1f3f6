"""Test configuration: in-memory SQLite, fast bcrypt, fixed signing secret."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient

import main
from autoclinic.core.auth import create_access_token
from autoclinic.core.database import Base, SessionLocal, engine
from autoclinic.models.employee import Employee
from autoclinic.models.user import User


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # no context manager: startup would start the purge loop
    return TestClient(main.app)


@pytest.fixture
def make_user(db):
    def _make(name="Alice", email="alice@example.com", password="p1", role=None):
        user = User(name=name, email=email, password=password, role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_employee(db):
    def _make(name="Sam", email="sam@example.com", password=None, role="staff"):
        employee = Employee(name=name, email=email, password=password, role=role)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee
    return _make


def _bearer(account_id, role="admin", name="Tester", account_type="User"):
    token = create_access_token({"sub": str(account_id), "role": role, "name": name, "type": account_type})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def bearer():
    return _bearer


@pytest.fixture
def admin_headers():
    return _bearer(1, role="admin", name="Boss", account_type="Employee")


@pytest.fixture
def staff_headers():
    return _bearer(2, role="staff", name="Helper", account_type="Employee")
