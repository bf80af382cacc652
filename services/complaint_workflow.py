"""Complaint status workflow and admin feedback.

Statuses form a flat state machine: an administrator may move a complaint
from any of ``pending``, ``processing``, ``solved`` and ``rejected`` to any
other. Feedback notes belong to the ``rejected`` state; they are never
deleted when a complaint leaves it, they simply stop being shown.
"""
from datetime import datetime
from flask import current_app
from extensions import db
from models import Complaint, ComplaintFeedback, ComplaintStatusUpdate, Notification, COMPLAINT_STATUSES
from services.auth import is_admin
from services.validation import clean
from services.errors import (
    AuthenticationRequired,
    AccessDenied,
    ComplaintNotFound,
    InvalidStatus,
    InvalidFeedback,
    FeedbackNotAllowed,
)

STATUS_LABELS = {
    "pending": "Pending",
    "processing": "Processing",
    "solved": "Solved",
    "rejected": "Rejected",
}

# Progress stepper shown to citizens; rejected is off the track
STATUS_STEPS = ("pending", "processing", "solved")


def _authorize(actor_id):
    if actor_id is None:
        raise AuthenticationRequired()
    if not is_admin(actor_id):
        raise AccessDenied()


def _get_complaint(complaint_id):
    complaint = db.session.get(Complaint, complaint_id)
    if complaint is None:
        raise ComplaintNotFound()
    return complaint


def change_status(complaint_id, new_status, actor_id, remarks=None):
    """Move a complaint to ``new_status``.

    Returns ``(complaint, changed)``. Asking for the current status writes
    nothing and returns ``changed=False``.
    """
    _authorize(actor_id)
    if new_status not in COMPLAINT_STATUSES:
        raise InvalidStatus(f"Invalid status. Allowed: {', '.join(COMPLAINT_STATUSES)}")
    complaint = _get_complaint(complaint_id)

    previous = complaint.status
    if previous == new_status:
        return complaint, False

    now = datetime.utcnow()
    complaint.status = new_status
    complaint.updated_at = now

    db.session.add(ComplaintStatusUpdate(
        complaint_id=complaint.id,
        admin_id=actor_id,
        from_status=previous,
        status=new_status,
        remarks=clean(remarks) or None,
        created_at=now,
    ))

    if complaint.user_id:
        db.session.add(Notification(
            user_id=complaint.user_id,
            message=f'Your complaint "{complaint.title[:100]}" is now {STATUS_LABELS[new_status]}.',
        ))

    db.session.commit()
    current_app.logger.info(
        "Complaint %s: %s -> %s by admin %s", complaint.id, previous, new_status, actor_id
    )
    return complaint, True


def current_feedback(complaint):
    """Newest note ever attached to the complaint, or ``None``."""
    return (
        ComplaintFeedback.query
        .filter_by(complaint_id=complaint.id)
        .order_by(ComplaintFeedback.created_at.desc(), ComplaintFeedback.id.desc())
        .first()
    )


def visible_feedback(complaint):
    if complaint.status != "rejected":
        return None
    return current_feedback(complaint)


def submit_feedback(complaint_id, text, actor_id):
    """Create the complaint's note, or update the newest one in place."""
    _authorize(actor_id)
    complaint = _get_complaint(complaint_id)

    text = clean(text)
    if not text:
        raise InvalidFeedback()
    if complaint.status != "rejected":
        raise FeedbackNotAllowed()

    note = current_feedback(complaint)
    if note is None:
        note = ComplaintFeedback(complaint_id=complaint.id, admin_id=actor_id, feedback=text)
        db.session.add(note)
    else:
        note.feedback = text
        note.admin_id = actor_id

    db.session.commit()
    return note


def _timeline(complaint):
    updates = (
        ComplaintStatusUpdate.query
        .filter_by(complaint_id=complaint.id)
        .order_by(ComplaintStatusUpdate.created_at.desc(), ComplaintStatusUpdate.id.desc())
        .all()
    )
    return [u.to_dict() for u in updates]


def citizen_view(complaint):
    data = complaint.to_dict()
    note = visible_feedback(complaint)
    data.update({
        "status_label": STATUS_LABELS[complaint.status],
        "step": STATUS_STEPS.index(complaint.status) if complaint.status in STATUS_STEPS else None,
        "admin_feedback": note.feedback if note else None,
        "status_updates": _timeline(complaint),
    })
    return data


def admin_view(complaint):
    data = complaint.to_dict()
    note = current_feedback(complaint)
    profile = complaint.user
    data.update({
        "status_label": STATUS_LABELS[complaint.status],
        "author": {
            "name": profile.name if profile else complaint.guest_name,
            "email": profile.email if profile else complaint.guest_email,
            "contact_number": profile.contact_number if profile else complaint.guest_phone,
            "address": profile.address if profile else None,
        },
        "feedback": note.to_dict() if note else None,
        "status_updates": _timeline(complaint),
    })
    return data
