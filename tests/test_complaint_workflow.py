"""
Service-level tests for complaint status transitions, admin feedback and the
role gate.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from extensions import db
from models import Complaint, ComplaintFeedback, ComplaintStatusUpdate, Notification, User
from services import auth
from services.auth import is_admin
from services.complaint_workflow import (
    change_status,
    submit_feedback,
    current_feedback,
    visible_feedback,
    citizen_view,
    admin_view,
)
from services.errors import (
    AuthenticationRequired,
    AccessDenied,
    ComplaintNotFound,
    InvalidStatus,
    InvalidFeedback,
    FeedbackNotAllowed,
)


# ═══════════════════════════════════════════════════════════════════════════════
# ROLE GATE
# ═══════════════════════════════════════════════════════════════════════════════

class TestRoleGate:
    def test_admin_profile_is_admin(self, app, admin_id):
        with app.app_context():
            assert is_admin(admin_id) is True

    def test_citizen_profile_is_not_admin(self, app, citizen_id):
        with app.app_context():
            assert is_admin(citizen_id) is False

    def test_missing_profile_fails_closed(self, app):
        with app.app_context():
            assert is_admin(9999) is False
            assert is_admin(None) is False

    def test_role_is_reread_on_every_call(self, app, admin_id):
        with app.app_context():
            assert is_admin(admin_id) is True
            db.session.execute(db.update(User).where(User.id == admin_id).values(role="citizen"))
            db.session.commit()
            assert is_admin(admin_id) is False

    def test_lookup_error_fails_closed(self, app, admin_id, monkeypatch):
        def broken(user_id):
            raise OperationalError("SELECT", {}, Exception("database is down"))

        monkeypatch.setattr(auth, "get_profile", broken)
        with app.app_context():
            assert is_admin(admin_id) is False


# ═══════════════════════════════════════════════════════════════════════════════
# STATUS TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════════

class TestChangeStatus:
    @pytest.mark.parametrize("target", ["processing", "solved", "rejected"])
    def test_admin_moves_pending_complaint(self, app, admin_id, complaint_id, target):
        with app.app_context():
            complaint, changed = change_status(complaint_id, target, admin_id)
            assert changed is True
            assert db.session.get(Complaint, complaint_id).status == target

    def test_any_status_can_move_to_any_other(self, app, admin_id, complaint_id):
        path = ["solved", "pending", "rejected", "solved", "processing", "rejected", "pending"]
        with app.app_context():
            for status in path:
                change_status(complaint_id, status, admin_id)
                assert db.session.get(Complaint, complaint_id).status == status

    def test_transition_refreshes_updated_at(self, app, admin_id, complaint_id):
        with app.app_context():
            before = db.session.get(Complaint, complaint_id).updated_at
            complaint, _ = change_status(complaint_id, "processing", admin_id)
            assert complaint.updated_at > before
            assert complaint.created_at == before

    def test_same_status_is_not_a_transition(self, app, admin_id, complaint_id):
        with app.app_context():
            before = db.session.get(Complaint, complaint_id).updated_at
            complaint, changed = change_status(complaint_id, "pending", admin_id)
            assert changed is False
            assert complaint.updated_at == before
            assert ComplaintStatusUpdate.query.filter_by(complaint_id=complaint_id).count() == 0

    def test_transition_records_timeline_and_notifies_author(self, app, admin_id, citizen_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "processing", admin_id, remarks="Crew dispatched")
            update = ComplaintStatusUpdate.query.filter_by(complaint_id=complaint_id).one()
            assert update.from_status == "pending"
            assert update.status == "processing"
            assert update.remarks == "Crew dispatched"
            assert update.admin_id == admin_id

            notes = Notification.query.filter_by(user_id=citizen_id).all()
            assert len(notes) == 1
            assert "Processing" in notes[0].message

    def test_guest_complaint_transition_sends_no_notification(self, app, admin_id):
        from conftest import create_complaint

        with app.app_context():
            guest_complaint = create_complaint()
            change_status(guest_complaint, "solved", admin_id)
            assert Notification.query.count() == 0

    def test_invalid_status_rejected(self, app, admin_id, complaint_id):
        with app.app_context():
            with pytest.raises(InvalidStatus):
                change_status(complaint_id, "closed", admin_id)
            assert db.session.get(Complaint, complaint_id).status == "pending"

    def test_non_admin_cannot_change_status(self, app, citizen_id, complaint_id):
        with app.app_context():
            with pytest.raises(AccessDenied) as exc:
                change_status(complaint_id, "solved", citizen_id)
            assert exc.value.status_code == 403
            assert db.session.get(Complaint, complaint_id).status == "pending"

    def test_missing_actor_requires_authentication(self, app, complaint_id):
        with app.app_context():
            with pytest.raises(AuthenticationRequired):
                change_status(complaint_id, "solved", None)
            assert db.session.get(Complaint, complaint_id).status == "pending"

    def test_unknown_complaint(self, app, admin_id):
        with app.app_context():
            with pytest.raises(ComplaintNotFound):
                change_status(4242, "solved", admin_id)


# ═══════════════════════════════════════════════════════════════════════════════
# FEEDBACK
# ═══════════════════════════════════════════════════════════════════════════════

class TestFeedback:
    def test_first_submission_creates_then_updates_same_note(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            first = submit_feedback(complaint_id, "Missing photos", admin_id)
            first_id = first.id
            second = submit_feedback(complaint_id, "  Please add the exact address  ", admin_id)

            assert second.id == first_id
            rows = ComplaintFeedback.query.filter_by(complaint_id=complaint_id).all()
            assert len(rows) == 1
            assert rows[0].feedback == "Please add the exact address"

    def test_empty_feedback_rejected(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            with pytest.raises(InvalidFeedback):
                submit_feedback(complaint_id, "   ", admin_id)
            assert ComplaintFeedback.query.count() == 0

    def test_feedback_only_while_rejected(self, app, admin_id, complaint_id):
        with app.app_context():
            with pytest.raises(FeedbackNotAllowed) as exc:
                submit_feedback(complaint_id, "Too vague", admin_id)
            assert exc.value.status_code == 409
            assert ComplaintFeedback.query.count() == 0

    def test_non_admin_cannot_submit_feedback(self, app, admin_id, citizen_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            with pytest.raises(AccessDenied):
                submit_feedback(complaint_id, "I disagree", citizen_id)
            assert ComplaintFeedback.query.count() == 0

    def test_newest_note_is_shown(self, app, admin_id, complaint_id):
        base = datetime(2024, 2, 1, 8, 0)
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            db.session.add_all([
                ComplaintFeedback(complaint_id=complaint_id, admin_id=admin_id, feedback="old", created_at=base),
                ComplaintFeedback(complaint_id=complaint_id, admin_id=admin_id, feedback="newest",
                                  created_at=base + timedelta(hours=2)),
                ComplaintFeedback(complaint_id=complaint_id, admin_id=admin_id, feedback="middle",
                                  created_at=base + timedelta(hours=1)),
            ])
            db.session.commit()

            complaint = db.session.get(Complaint, complaint_id)
            assert visible_feedback(complaint).feedback == "newest"

            # the newest note is the one updated in place
            submit_feedback(complaint_id, "newest, edited", admin_id)
            texts = sorted(f.feedback for f in ComplaintFeedback.query.all())
            assert texts == ["middle", "newest, edited", "old"]

    def test_timestamp_tie_broken_by_id(self, app, admin_id, complaint_id):
        stamp = datetime(2024, 2, 1, 8, 0)
        with app.app_context():
            db.session.add(ComplaintFeedback(complaint_id=complaint_id, feedback="first", created_at=stamp))
            db.session.commit()
            db.session.add(ComplaintFeedback(complaint_id=complaint_id, feedback="second", created_at=stamp))
            db.session.commit()
            assert current_feedback(db.session.get(Complaint, complaint_id)).feedback == "second"

    def test_leaving_rejected_keeps_feedback_rows(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            submit_feedback(complaint_id, "Duplicate report", admin_id)
            for status in ("processing", "solved", "pending"):
                change_status(complaint_id, status, admin_id)
                complaint = db.session.get(Complaint, complaint_id)
                assert visible_feedback(complaint) is None
                assert ComplaintFeedback.query.filter_by(complaint_id=complaint_id).count() == 1


# ═══════════════════════════════════════════════════════════════════════════════
# CITIZEN / ADMIN VIEWS
# ═══════════════════════════════════════════════════════════════════════════════

class TestViews:
    def test_reject_then_reopen_scenario(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            submit_feedback(complaint_id, "insufficient detail", admin_id)

            view = citizen_view(db.session.get(Complaint, complaint_id))
            assert view["status"] == "rejected"
            assert view["admin_feedback"] == "insufficient detail"

            change_status(complaint_id, "processing", admin_id)
            view = citizen_view(db.session.get(Complaint, complaint_id))
            assert view["status"] == "processing"
            assert view["admin_feedback"] is None
            assert ComplaintFeedback.query.filter_by(complaint_id=complaint_id).count() == 1

    def test_citizen_view_step_and_timeline(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "processing", admin_id)
            change_status(complaint_id, "solved", admin_id)
            view = citizen_view(db.session.get(Complaint, complaint_id))
            assert view["step"] == 2
            assert view["status_label"] == "Solved"
            assert [u["status"] for u in view["status_updates"]] == ["solved", "processing"]

    def test_rejected_is_off_the_stepper(self, app, admin_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            assert citizen_view(db.session.get(Complaint, complaint_id))["step"] is None

    def test_admin_view_keeps_note_after_reopen(self, app, admin_id, citizen_id, complaint_id):
        with app.app_context():
            change_status(complaint_id, "rejected", admin_id)
            submit_feedback(complaint_id, "Wrong barangay", admin_id)
            change_status(complaint_id, "pending", admin_id)

            view = admin_view(db.session.get(Complaint, complaint_id))
            assert view["feedback"]["feedback"] == "Wrong barangay"
            assert view["author"]["email"] == "citizen@example.com"
