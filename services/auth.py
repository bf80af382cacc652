from flask import current_app, jsonify
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from models.user import User


def get_profile(user_id):
    if user_id is None:
        return None
    return db.session.get(User, user_id)


def is_admin(user_id):
    """Re-read the caller's role from the profile table on every call.

    A missing profile or a failed lookup counts as "not an admin".
    """
    try:
        profile = get_profile(user_id)
        if profile is None:
            return False
        db.session.refresh(profile, attribute_names=["role"])
    except SQLAlchemyError:
        current_app.logger.exception("Admin lookup failed for user %s", user_id)
        db.session.rollback()
        return False
    return profile.role == "admin"


def admin_check():
    """Return an error response for non-admin callers, ``None`` otherwise."""
    if not current_user.is_authenticated:
        return jsonify({"error": "Authentication required."}), 401
    if not is_admin(current_user.id):
        return jsonify({"error": "Access denied. Admin privileges required."}), 403
    return None

