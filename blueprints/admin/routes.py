from flask import Blueprint, jsonify, request, send_file, abort
from flask_login import current_user
from models.user import User
from models.complaint import Complaint
from models.article import Article
from models.article_image import ArticleImage
from models.emergency_hotline import EmergencyHotline
from models.agency import Agency, AGENCY_CATEGORIES
from extensions import db
from datetime import datetime
from services.auth import admin_check
from services.complaint_workflow import change_status, submit_feedback, admin_view, STATUS_LABELS
from services.filters import filter_complaints, group_by_barangay, truthy
from services.statistics import complaint_stats, user_demographics, system_stats, export_workbook
from services.uploads import save_images
from services.validation import request_data, validate_article, validate_hotline, clean

admin_bp = Blueprint("admin", __name__)


# Every admin request re-checks the role
@admin_bp.before_request
def restrict_to_admin():
    return admin_check()

#-------------------------------------------------------
# Complaints
@admin_bp.route("/complaints")
def manage_complaints():
    complaints = Complaint.query.order_by(Complaint.created_at.desc(), Complaint.id.desc()).all()

    items = []
    for c in filter_complaints(complaints, request.args):
        item = c.to_dict()
        item["status_label"] = STATUS_LABELS[c.status]
        item["author_name"] = c.user.name if c.user else c.guest_name
        item["guest_phone"] = c.guest_phone
        item["guest_email"] = c.guest_email
        items.append(item)

    if request.args.get("group_by") == "barangay":
        return jsonify({"groups": group_by_barangay(items), "count": len(items)})
    return jsonify({"complaints": items, "count": len(items)})


@admin_bp.route("/complaints/<int:complaint_id>")
def complaint_detail(complaint_id):
    complaint = db.get_or_404(Complaint, complaint_id, description="Complaint not found.")
    return jsonify(admin_view(complaint))


@admin_bp.route("/complaints/<int:complaint_id>/status", methods=["POST", "PUT"])
def update_complaint_status(complaint_id):
    data = request_data()
    complaint, changed = change_status(
        complaint_id, data.get("status"), current_user.id, remarks=data.get("remarks")
    )

    # Optional note in the same request when rejecting
    if complaint.status == "rejected" and clean(data.get("feedback")):
        submit_feedback(complaint.id, data.get("feedback"), current_user.id)

    return jsonify({"changed": changed, "complaint": admin_view(complaint)})


@admin_bp.route("/complaints/<int:complaint_id>/feedback", methods=["POST", "PUT"])
def complaint_feedback(complaint_id):
    note = submit_feedback(complaint_id, request_data().get("feedback"), current_user.id)
    return jsonify({"message": "Feedback saved.", "feedback": note.to_dict()})

#-------------------------------------------------------
# Articles
@admin_bp.route("/articles")
def manage_articles():
    query = Article.query if truthy(request.args.get("include_deleted")) else Article.active()
    q = (request.args.get("q") or "").strip().lower()

    articles = query.order_by(Article.created_at.desc(), Article.id.desc()).all()
    if q:
        articles = [a for a in articles if q in a.title.lower() or q in a.content.lower()]
    return jsonify({"articles": [a.to_dict() for a in articles]})


@admin_bp.route("/articles", methods=["POST"])
def create_article():
    data = request_data()
    errors = validate_article(data)
    if errors:
        return jsonify({"error": "Please fix the errors in the form", "errors": errors}), 400

    article = Article(
        title=clean(data.get("title")),
        content=clean(data.get("content")),
        user_id=current_user.id,
    )
    db.session.add(article)
    db.session.commit()

    for path in save_images(request.files.getlist("images"), "articles"):
        db.session.add(ArticleImage(article_id=article.id, image_url=path))
    db.session.commit()

    return jsonify({"message": "Article published!", "article": article.to_dict()}), 201


@admin_bp.route("/articles/<int:article_id>")
def article_detail(article_id):
    article = db.get_or_404(Article, article_id, description="Article not found")
    return jsonify(article.to_dict())


@admin_bp.route("/articles/<int:article_id>", methods=["PUT", "POST"])
def edit_article(article_id):
    article = db.get_or_404(Article, article_id, description="Article not found")
    if article.deleted_at is not None:
        abort(404, description="Article not found")

    data = request_data()
    merged = {
        "title": data.get("title", article.title),
        "content": data.get("content", article.content),
    }
    errors = validate_article(merged)
    if errors:
        return jsonify({"error": "Please fix the errors in the form", "errors": errors}), 400

    article.title = clean(merged["title"])
    article.content = clean(merged["content"])
    for path in save_images(request.files.getlist("images"), "articles"):
        db.session.add(ArticleImage(article_id=article.id, image_url=path))

    db.session.commit()
    return jsonify({"message": "Article updated!", "article": article.to_dict()})


@admin_bp.route("/articles/<int:article_id>", methods=["DELETE"])
@admin_bp.route("/articles/<int:article_id>/delete", methods=["POST"])
def delete_article(article_id):
    article = db.get_or_404(Article, article_id, description="Article not found")
    if article.deleted_at is None:
        article.deleted_at = datetime.utcnow()
        db.session.commit()
    return jsonify({"message": "Article deleted."})

#-------------------------------------------------------
# Emergency hotlines
@admin_bp.route("/hotlines")
def manage_hotlines():
    hotlines = EmergencyHotline.active().order_by(EmergencyHotline.created_at.desc()).all()
    return jsonify({"hotlines": [h.to_dict() for h in hotlines]})


def apply_hotline(hotline, data):
    hotline.label = clean(data.get("label"))
    hotline.number = clean(data.get("number"))
    hotline.sim_type = clean(data.get("sim_type"))
    hotline.barangay = clean(data.get("barangay")) or None
    hotline.category = data.get("category") or "other"


@admin_bp.route("/hotlines", methods=["POST"])
def create_hotline():
    data = request_data()
    errors = validate_hotline(data)
    if errors:
        return jsonify({"error": "Please fill in all required fields", "errors": errors}), 400

    hotline = EmergencyHotline()
    apply_hotline(hotline, data)
    db.session.add(hotline)
    db.session.commit()
    return jsonify(hotline.to_dict()), 201


@admin_bp.route("/hotlines/<int:hotline_id>", methods=["PUT", "POST"])
def edit_hotline(hotline_id):
    hotline = EmergencyHotline.active().filter_by(id=hotline_id).first_or_404(description="Hotline not found")
    data = request_data()
    errors = validate_hotline(data)
    if errors:
        return jsonify({"error": "Please fill in all required fields", "errors": errors}), 400

    apply_hotline(hotline, data)
    db.session.commit()
    return jsonify(hotline.to_dict())


@admin_bp.route("/hotlines/<int:hotline_id>", methods=["DELETE"])
def delete_hotline(hotline_id):
    hotline = EmergencyHotline.active().filter_by(id=hotline_id).first_or_404(description="Hotline not found")
    hotline.deleted_at = datetime.utcnow()
    db.session.commit()
    return jsonify({"message": "Hotline deleted."})

#-------------------------------------------------------
# Agencies
def agency_errors(data):
    errors = {}
    for field in ("name", "description", "external_link"):
        if not clean(data.get(field)):
            errors[field] = "This field is required"
    if (data.get("category") or "other") not in AGENCY_CATEGORIES:
        errors["category"] = "Invalid category"
    return errors


@admin_bp.route("/agencies")
def manage_agencies():
    agencies = Agency.query.order_by(Agency.name).all()
    return jsonify({"agencies": [a.to_dict() for a in agencies]})


@admin_bp.route("/agencies", methods=["POST"])
def create_agency():
    data = request_data()
    errors = agency_errors(data)
    if errors:
        return jsonify({"error": "Please fill in all required fields", "errors": errors}), 400

    agency = Agency(
        name=clean(data.get("name")),
        description=clean(data.get("description")),
        external_link=clean(data.get("external_link")),
        category=data.get("category") or "other",
    )
    db.session.add(agency)
    db.session.commit()
    return jsonify(agency.to_dict()), 201


@admin_bp.route("/agencies/<int:agency_id>", methods=["PUT", "POST"])
def edit_agency(agency_id):
    agency = db.get_or_404(Agency, agency_id, description="Agency not found")
    data = request_data()
    errors = agency_errors(data)
    if errors:
        return jsonify({"error": "Please fill in all required fields", "errors": errors}), 400

    agency.name = clean(data.get("name"))
    agency.description = clean(data.get("description"))
    agency.external_link = clean(data.get("external_link"))
    agency.category = data.get("category") or "other"
    db.session.commit()
    return jsonify(agency.to_dict())


@admin_bp.route("/agencies/<int:agency_id>", methods=["DELETE"])
def delete_agency(agency_id):
    agency = db.get_or_404(Agency, agency_id, description="Agency not found")
    db.session.delete(agency)
    db.session.commit()
    return jsonify({"message": "Agency deleted."})

#-------------------------------------------------------
# Statistics
def collect_statistics():
    complaints = Complaint.query.order_by(Complaint.created_at.desc()).all()
    profiles = User.query.all()
    now = datetime.utcnow()
    stats = {
        "complaints": complaint_stats(complaints, now=now),
        "users": user_demographics(profiles),
        "system": system_stats(
            profiles,
            complaints_total=len(complaints),
            agencies_total=Agency.query.count(),
            hotlines_total=EmergencyHotline.active().count(),
            articles_total=Article.active().count(),
            now=now,
        ),
        "last_updated": now.isoformat(),
    }
    return complaints, stats


@admin_bp.route("/statistics")
def statistics():
    _, stats = collect_statistics()
    return jsonify(stats)


@admin_bp.route("/statistics/export")
def export_statistics():
    complaints, stats = collect_statistics()
    output = export_workbook(complaints, stats)
    filename = f"Complaint_statistics_{datetime.now().strftime('%Y-%m-%d_%H-%M')}.xlsx"

    return send_file(
        output,
        as_attachment=True,
        download_name=filename,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
