"""
Shared pytest fixtures for the civic portal test suite.

Each test gets a fresh application bound to an in-memory SQLite database and
a temporary upload folder. Fixtures hand out ids rather than ORM objects so
tests can open their own app context when they need to look at rows.
"""

from datetime import datetime

import pytest

from app import create_app
from extensions import db
from models import User, Complaint

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "MAIL_DEFAULT_SENDER": "noreply@example.com",
        "MAIL_SUPPRESS_SEND": True,
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def create_user(email, role="citizen", first_name="Maria", last_name="Santos", barangay="Poblacion", **fields):
    """Insert a profile and return its id. Needs an active app context."""
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        barangay=barangay,
        contact_number="09171234567",
        role=role,
        **fields,
    )
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user.id


def create_complaint(user_id=None, **fields):
    """Insert a complaint and return its id. Needs an active app context."""
    values = {
        "title": "Broken street light",
        "content": "The street light in front of the chapel has been out for two weeks.",
        "category": "Street Lighting",
        "location": "Purok 3",
        "barangay": "Poblacion",
        "status": "pending",
        "is_public": True,
        "is_anonymous": False,
    }
    values.update(fields)
    if user_id is None and "guest_name" not in values:
        values["guest_name"] = "Juan Dela Cruz"
        values["guest_phone"] = "09181234567"
        values["is_anonymous"] = True
    complaint = Complaint(user_id=user_id, **values)
    db.session.add(complaint)
    db.session.commit()
    return complaint.id


def login(client, email, password=PASSWORD):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"Login failed for {email}: {resp.get_data(as_text=True)}"
    return client


@pytest.fixture
def admin_id(app):
    with app.app_context():
        return create_user("admin@example.com", role="admin", first_name="Ana", last_name="Reyes")


@pytest.fixture
def citizen_id(app):
    with app.app_context():
        return create_user("citizen@example.com", barangay="San Isidro")


@pytest.fixture
def other_citizen_id(app):
    with app.app_context():
        return create_user("other@example.com", first_name="Pedro", last_name="Cruz")


@pytest.fixture
def complaint_id(app, citizen_id):
    with app.app_context():
        return create_complaint(citizen_id, created_at=datetime(2024, 1, 10, 9, 0), updated_at=datetime(2024, 1, 10, 9, 0))


@pytest.fixture
def admin_client(app, admin_id):
    return login(app.test_client(), "admin@example.com")


@pytest.fixture
def citizen_client(app, citizen_id):
    return login(app.test_client(), "citizen@example.com")
