from flask import Blueprint, jsonify, request, abort
from flask_login import login_required, current_user
from extensions import db
from models.article import Article
from models.complaint import Complaint
from models.complaint_reaction import ComplaintReaction, REACTION_TYPES
from models.complaint_comment import ComplaintComment
from models.emergency_hotline import EmergencyHotline, HOTLINE_CATEGORY_LABELS
from models.agency import Agency, AGENCY_CATEGORIES
from services.hub import hub_feed, reaction_summary, HUB_SORTS, HUB_FILTERS
from services.validation import request_data, clean

portal_bp = Blueprint("portal", __name__)


def public_complaint_or_404(complaint_id):
    complaint = Complaint.query.filter_by(id=complaint_id, is_public=True).first()
    if complaint is None:
        abort(404, description="Complaint not found.")
    return complaint

#-------------------------------------------------------
# News
@portal_bp.route("/news")
def news():
    q = (request.args.get("q") or "").strip().lower()
    limit = request.args.get("limit", type=int)

    articles = Article.active().order_by(Article.created_at.desc(), Article.id.desc()).all()
    if q:
        articles = [a for a in articles if q in a.title.lower() or q in a.content.lower()]
    if limit:
        articles = articles[:limit]

    return jsonify({"articles": [a.to_dict() for a in articles]})


@portal_bp.route("/news/<int:article_id>")
def news_detail(article_id):
    article = Article.active().filter_by(id=article_id).first()
    if article is None:
        abort(404, description="Article not found")

    article.view_count = (article.view_count or 0) + 1
    db.session.commit()
    return jsonify(article.to_dict())

#-------------------------------------------------------
# Hub: articles + public complaints
@portal_bp.route("/hub")
def hub():
    sort = request.args.get("sort", "latest")
    kind = request.args.get("filter", "all")
    if sort not in HUB_SORTS:
        return jsonify({"error": f"Invalid sort. Allowed: {', '.join(HUB_SORTS)}"}), 400
    if kind not in HUB_FILTERS:
        return jsonify({"error": f"Invalid filter. Allowed: {', '.join(HUB_FILTERS)}"}), 400

    items = hub_feed(sort=sort, kind=kind, q=request.args.get("q", ""))
    return jsonify({"items": items, "sort": sort, "filter": kind})


@portal_bp.route("/hub/complaints/<int:complaint_id>")
def hub_complaint(complaint_id):
    complaint = public_complaint_or_404(complaint_id)
    complaint.view_count = (complaint.view_count or 0) + 1
    db.session.commit()

    data = complaint.to_dict()
    data.pop("user_id")
    data["author_name"] = complaint.author_name
    data["reactions"] = reaction_summary(complaint)
    data["comments"] = [c.to_dict() for c in complaint.comments]
    return jsonify(data)


@portal_bp.route("/hub/complaints/<int:complaint_id>/reactions", methods=["POST"])
@login_required
def toggle_reaction(complaint_id):
    complaint = public_complaint_or_404(complaint_id)
    reaction_type = request_data().get("reaction_type")
    if reaction_type not in REACTION_TYPES:
        return jsonify({"error": f"Invalid reaction. Allowed: {', '.join(REACTION_TYPES)}"}), 400

    existing = ComplaintReaction.query.filter_by(
        complaint_id=complaint.id, user_id=current_user.id, reaction_type=reaction_type
    ).first()
    if existing:
        db.session.delete(existing)
        active = False
    else:
        db.session.add(ComplaintReaction(
            complaint_id=complaint.id, user_id=current_user.id, reaction_type=reaction_type
        ))
        active = True
    db.session.commit()
    db.session.refresh(complaint)

    return jsonify({"active": active, "reactions": reaction_summary(complaint)})


@portal_bp.route("/hub/complaints/<int:complaint_id>/comments", methods=["GET", "POST"])
def complaint_comments(complaint_id):
    complaint = public_complaint_or_404(complaint_id)
    if request.method == "GET":
        return jsonify({"comments": [c.to_dict() for c in complaint.comments]})

    if not current_user.is_authenticated:
        return jsonify({"error": "Authentication required."}), 401
    content = clean(request_data().get("content"))
    if not content:
        return jsonify({"error": "Comment must not be empty"}), 400

    comment = ComplaintComment(complaint_id=complaint.id, user_id=current_user.id, content=content)
    db.session.add(comment)
    db.session.commit()
    return jsonify(comment.to_dict()), 201

#-------------------------------------------------------
# Emergency hotlines
@portal_bp.route("/emergency")
def emergency():
    category = request.args.get("category", "all")
    q = (request.args.get("q") or "").strip().lower()
    user_barangay = current_user.barangay if current_user.is_authenticated else None

    hotlines = EmergencyHotline.active().order_by(EmergencyHotline.created_at.desc()).all()
    if category != "all":
        hotlines = [h for h in hotlines if (h.category or "other") == category]
    if q:
        hotlines = [
            h for h in hotlines
            if q in h.label.lower()
            or q in h.number
            or q in h.sim_type.lower()
            or q in (h.barangay or "").lower()
            or q in HOTLINE_CATEGORY_LABELS[h.category or "other"].lower()
        ]

    # Caller's barangay first, then city-wide, then the rest
    def rank(h):
        if user_barangay and h.barangay == user_barangay:
            return 0
        if h.barangay is None:
            return 1
        return 2

    hotlines.sort(key=rank)

    groups = {}
    for h in hotlines:
        groups.setdefault(h.category or "other", []).append(h.to_dict())
    grouped = [
        {"category": cat, "label": HOTLINE_CATEGORY_LABELS[cat], "hotlines": items}
        for cat, items in sorted(groups.items(), key=lambda kv: HOTLINE_CATEGORY_LABELS[kv[0]])
    ]
    return jsonify({"groups": grouped, "count": len(hotlines), "user_barangay": user_barangay})

#-------------------------------------------------------
# Agencies
@portal_bp.route("/agencies")
def agencies():
    category = request.args.get("category", "all")
    query = Agency.query
    if category != "all":
        if category not in AGENCY_CATEGORIES:
            return jsonify({"error": "Invalid category"}), 400
        query = query.filter_by(category=category)
    return jsonify({"agencies": [a.to_dict() for a in query.order_by(Agency.name).all()]})
