"""
API tests for report submission and the citizen account pages.
"""

import io
import os

import pytest

from extensions import db
from models import Complaint, ComplaintImage, Notification, User
from conftest import create_complaint, login

VALID_REPORT = {
    "category": "Road and Infrastructure",
    "location": "Rizal Street corner Mabini",
    "title": "Deep pothole on Rizal Street",
    "description": "A deep pothole has formed near the corner and motorcycles keep swerving into it.",
}


# ═══════════════════════════════════════════════════════════════════════════════
# REPORT SUBMISSION
# ═══════════════════════════════════════════════════════════════════════════════

class TestSubmitComplaint:
    def test_validation_errors(self, citizen_client):
        resp = citizen_client.post("/complaints", json={
            "category": "Aliens", "location": "", "title": "Hole", "description": "Too short",
        })
        assert resp.status_code == 400
        assert set(resp.get_json()["errors"]) == {"category", "location", "title", "description"}

    def test_logged_in_submission(self, app, citizen_client, citizen_id):
        resp = citizen_client.post("/complaints", json=dict(VALID_REPORT, is_anonymous=True))
        assert resp.status_code == 201
        complaint = resp.get_json()["complaint"]
        assert complaint["status"] == "pending"
        assert complaint["user_id"] == citizen_id
        assert complaint["is_anonymous"] is True
        # defaults to the reporter's barangay
        assert complaint["barangay"] == "San Isidro"

    def test_guest_submission_requires_contact(self, client):
        resp = client.post("/complaints", json=VALID_REPORT)
        assert resp.status_code == 400
        assert set(resp.get_json()["errors"]) == {"guest_name", "guest_phone"}

    def test_guest_submission(self, app, client):
        resp = client.post("/complaints", json=dict(
            VALID_REPORT, guest_name="Juan Dela Cruz", guest_phone="+63 917-123-4567", barangay="Mabini",
        ))
        assert resp.status_code == 201
        complaint_id = resp.get_json()["complaint"]["id"]
        with app.app_context():
            complaint = db.session.get(Complaint, complaint_id)
            assert complaint.user_id is None
            assert complaint.is_anonymous is True
            assert complaint.guest_name == "Juan Dela Cruz"
            assert complaint.author_name is None

    def test_bad_image_is_skipped(self, app, citizen_client):
        data = dict(VALID_REPORT)
        data["images"] = [
            (io.BytesIO(b"\x89PNG fake"), "pothole.png"),
            (io.BytesIO(b"MZ"), "virus.exe"),
            (io.BytesIO(b"fake jpeg"), "wide.JPG"),
        ]
        resp = citizen_client.post("/complaints", data=data, content_type="multipart/form-data")
        assert resp.status_code == 201

        images = resp.get_json()["complaint"]["images"]
        assert len(images) == 2
        assert all(path.startswith("uploads/complaints/") for path in images)
        assert sorted(path.rsplit(".", 1)[1] for path in images) == ["jpg", "png"]
        with app.app_context():
            assert ComplaintImage.query.count() == 2
            stored = os.listdir(os.path.join(app.config["UPLOAD_FOLDER"], "complaints"))
            assert len(stored) == 2

    def test_non_ascii_image_names(self, app, citizen_client):
        data = dict(VALID_REPORT)
        data["images"] = [
            (io.BytesIO(b"\x89PNG fake"), "写真.png"),
            (io.BytesIO(b"\x89PNG fake"), "ảnh-đường.PNG"),
        ]
        resp = citizen_client.post("/complaints", data=data, content_type="multipart/form-data")
        assert resp.status_code == 201

        images = resp.get_json()["complaint"]["images"]
        assert len(images) == 2
        assert all(path.endswith(".png") for path in images)
        with app.app_context():
            assert ComplaintImage.query.count() == 2

    def test_numeric_json_values(self, app, client):
        resp = client.post("/complaints", json=dict(
            VALID_REPORT, guest_name="Juan Dela Cruz", guest_phone=9171234567,
        ))
        assert resp.status_code == 201
        with app.app_context():
            complaint = db.session.get(Complaint, resp.get_json()["complaint"]["id"])
            assert complaint.guest_phone == "9171234567"

        resp = client.post("/complaints", json=dict(
            VALID_REPORT, title=123, guest_name="Juan Dela Cruz", guest_phone="09171234567",
        ))
        assert resp.status_code == 400
        assert set(resp.get_json()["errors"]) == {"title"}


# ═══════════════════════════════════════════════════════════════════════════════
# MY COMPLAINTS
# ═══════════════════════════════════════════════════════════════════════════════

class TestMyComplaints:
    def test_requires_login(self, client):
        assert client.get("/account/complaints").status_code == 401

    def test_lists_only_own_complaints(self, app, citizen_client, citizen_id, other_citizen_id):
        with app.app_context():
            create_complaint(citizen_id, title="Mine")
            create_complaint(other_citizen_id, title="Not mine")
        data = citizen_client.get("/account/complaints").get_json()
        assert [c["title"] for c in data["complaints"]] == ["Mine"]

    def test_search_filter(self, app, citizen_client, citizen_id):
        with app.app_context():
            create_complaint(citizen_id, title="Garbage pile at the plaza", category="Waste Management")
            create_complaint(citizen_id, title="Broken street light")
        data = citizen_client.get("/account/complaints?q=garbage").get_json()
        assert data["count"] == 1

    def test_admin_gets_redirect_hint(self, admin_client):
        data = admin_client.get("/account/complaints").get_json()
        assert data["redirect"] == "/admin/complaints"

    def test_detail_is_owner_only(self, app, other_citizen_id, complaint_id):
        client = login(app.test_client(), "other@example.com")
        assert client.get(f"/account/complaints/{complaint_id}").status_code == 404

    def test_detail_shows_feedback_only_while_rejected(self, admin_client, citizen_client, complaint_id):
        admin_client.post(
            f"/admin/complaints/{complaint_id}/status",
            json={"status": "rejected", "feedback": "insufficient detail"},
        )
        view = citizen_client.get(f"/account/complaints/{complaint_id}").get_json()
        assert view["status"] == "rejected"
        assert view["admin_feedback"] == "insufficient detail"

        admin_client.post(f"/admin/complaints/{complaint_id}/status", json={"status": "processing"})
        view = citizen_client.get(f"/account/complaints/{complaint_id}").get_json()
        assert view["status"] == "processing"
        assert view["admin_feedback"] is None

    def test_home_stats(self, app, citizen_client, citizen_id, other_citizen_id):
        with app.app_context():
            create_complaint(citizen_id, status="solved")
            create_complaint(citizen_id, status="pending")
            create_complaint(citizen_id, status="solved")
            create_complaint(other_citizen_id, status="processing")
        stats = citizen_client.get("/account/stats").get_json()
        assert stats == {"total": 3, "pending": 1, "processing": 0, "solved": 2, "resolved_percentage": 67}

    def test_admin_home_stats_cover_everything(self, app, admin_client, citizen_id, other_citizen_id):
        with app.app_context():
            create_complaint(citizen_id, status="solved")
            create_complaint(other_citizen_id, status="processing")
        assert admin_client.get("/account/stats").get_json()["total"] == 2


# ═══════════════════════════════════════════════════════════════════════════════
# PROFILE & NOTIFICATIONS
# ═══════════════════════════════════════════════════════════════════════════════

class TestProfile:
    def test_update_profile(self, citizen_client):
        resp = citizen_client.put("/account/profile", json={
            "first_name": "Maria Clara", "emergency_contact": "0918 765 4321", "birth_date": "1990-05-17",
        })
        assert resp.status_code == 200
        user = resp.get_json()["user"]
        assert user["first_name"] == "Maria Clara"
        assert user["birth_date"] == "1990-05-17"

    def test_invalid_profile_values(self, citizen_client):
        resp = citizen_client.put("/account/profile", json={"first_name": "M", "contact_number": "12345"})
        assert resp.status_code == 400
        assert set(resp.get_json()["errors"]) == {"first_name", "contact_number"}

    @pytest.mark.parametrize("changes, field", [
        ({"middle_name": "P2"}, "middle_name"),
        ({"barangay": ""}, "barangay"),
        ({"address": "Cal"}, "address"),
        ({"last_name": "Santos3"}, "last_name"),
        ({"birth_date": "17/05/1990"}, "birth_date"),
        ({"birth_date": "1850-01-01"}, "birth_date"),
        ({"contact_number": ""}, "contact_number"),
    ])
    def test_profile_follows_sign_up_rules(self, app, citizen_client, citizen_id, changes, field):
        resp = citizen_client.put("/account/profile", json=changes)
        assert resp.status_code == 400
        assert set(resp.get_json()["errors"]) == {field}
        with app.app_context():
            assert db.session.get(User, citizen_id).barangay == "San Isidro"

    def test_numeric_contact_number(self, citizen_client):
        resp = citizen_client.put("/account/profile", json={"contact_number": 9181234567, "address": "Purok 3, San Isidro"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["contact_number"] == "9181234567"

    def test_notifications_flow(self, app, admin_client, citizen_client, citizen_id, complaint_id):
        admin_client.post(f"/admin/complaints/{complaint_id}/status", json={"status": "processing"})
        data = citizen_client.get("/account/notifications").get_json()
        assert data["unread"] == 1

        assert citizen_client.post("/account/notifications/mark-all-read").status_code == 204
        with app.app_context():
            assert Notification.query.filter_by(user_id=citizen_id, is_read=False).count() == 0
