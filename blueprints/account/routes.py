from flask import Blueprint, jsonify, request, abort
from flask_login import login_required, current_user
from extensions import db
from models.complaint import Complaint
from models.complaint_image import ComplaintImage
from models.notification import Notification
from services.auth import is_admin
from services.complaint_workflow import citizen_view, STATUS_LABELS
from services.statistics import home_stats
from services.filters import truthy, filter_complaints, group_by_barangay
from services.uploads import save_images
from services.validation import request_data, validate_complaint, validate_profile, clean, parse_date

account_bp = Blueprint("account", __name__)


#-------------------------------------------------------
# Report submission
@account_bp.route("/complaints", methods=["POST"])
def submit_complaint():
    data = request_data()
    guest = not current_user.is_authenticated
    errors = validate_complaint(data, guest=guest)
    if errors:
        return jsonify({"error": "Please fix the errors in the form", "errors": errors}), 400

    complaint = Complaint(
        title=clean(data.get("title")),
        content=clean(data.get("description")),
        category=clean(data.get("category")),
        location=clean(data.get("location")),
        status="pending",
        is_public=truthy(data.get("is_public", True)),
    )
    if guest:
        complaint.is_anonymous = True
        complaint.guest_name = clean(data.get("guest_name"))
        complaint.guest_email = clean(data.get("guest_email")) or None
        complaint.guest_phone = clean(data.get("guest_phone"))
        complaint.barangay = clean(data.get("barangay")) or None
    else:
        complaint.user_id = current_user.id
        complaint.is_anonymous = truthy(data.get("is_anonymous", False))
        complaint.barangay = clean(data.get("barangay")) or current_user.barangay

    db.session.add(complaint)
    db.session.commit()

    # Images after the complaint row exists; failures are skipped
    for path in save_images(request.files.getlist("images"), "complaints"):
        db.session.add(ComplaintImage(complaint_id=complaint.id, image_url=path))
    db.session.commit()

    return jsonify({"message": "Complaint submitted successfully!", "complaint": complaint.to_dict()}), 201

#-------------------------------------------------------
# My complaints
@account_bp.route("/account/complaints")
@login_required
def my_complaints():
    if is_admin(current_user.id):
        return jsonify({"redirect": "/admin/complaints", "complaints": []})

    complaints = (
        Complaint.query.filter_by(user_id=current_user.id)
        .order_by(Complaint.created_at.desc(), Complaint.id.desc())
        .all()
    )
    items = []
    for c in filter_complaints(complaints, request.args):
        item = c.to_dict()
        item["status_label"] = STATUS_LABELS[c.status]
        items.append(item)

    if request.args.get("group_by") == "barangay":
        return jsonify({"groups": group_by_barangay(items), "count": len(items)})
    return jsonify({"complaints": items, "count": len(items)})


@account_bp.route("/account/complaints/<int:complaint_id>")
@login_required
def my_complaint_detail(complaint_id):
    complaint = Complaint.query.filter_by(id=complaint_id, user_id=current_user.id).first()
    if complaint is None:
        abort(404, description="The complaint you're looking for doesn't exist or you don't have access to it.")
    return jsonify(citizen_view(complaint))


@account_bp.route("/account/stats")
@login_required
def dashboard_stats():
    query = db.session.query(Complaint.status)
    if not is_admin(current_user.id):
        query = query.filter(Complaint.user_id == current_user.id)
    return jsonify(home_stats([row.status for row in query.all()]))

#-------------------------------------------------------
# Profile settings
@account_bp.route("/account/profile", methods=["GET", "PUT", "POST"])
@login_required
def profile():
    if request.method == "GET":
        return jsonify(current_user.to_dict())

    data = request_data()
    errors = validate_profile(data)
    if errors:
        return jsonify({"error": "Please fix the errors in the form", "errors": errors}), 400

    for field in ("first_name", "middle_name", "last_name", "address", "barangay",
                  "contact_number", "emergency_contact", "gender"):
        if field in data:
            setattr(current_user, field, clean(data.get(field)) or None)
    if "birth_date" in data:
        current_user.birth_date = parse_date(data.get("birth_date"))

    db.session.commit()
    return jsonify({"message": "Profile updated successfully!", "user": current_user.to_dict()})

#-------------------------------------------------------
# Notifications
@account_bp.route("/account/notifications")
@login_required
def notifications():
    notifs = (
        Notification.query
        .filter_by(user_id=current_user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return jsonify({
        "notifications": [n.to_dict() for n in notifs],
        "unread": sum(1 for n in notifs if not n.is_read),
    })


@account_bp.route("/account/notifications/mark-all-read", methods=["POST"])
@login_required
def mark_all_read():
    Notification.query.filter_by(user_id=current_user.id, is_read=False).update({"is_read": True})
    db.session.commit()
    return "", 204
