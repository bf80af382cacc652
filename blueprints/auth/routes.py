from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from flask_mail import Message
from extensions import db, mail
from models.user import User
from models.password_reset import PasswordReset
from services.auth import is_admin
from services.validation import request_data, validate_sign_up, clean, as_text, parse_date
import hashlib, secrets

auth_bp = Blueprint("auth", __name__)


def hash_otp(otp):
    return hashlib.sha256(otp.encode("utf-8")).hexdigest()


def landing_page(user):
    return "/admin/complaints" if is_admin(user.id) else "/"

#-------------------------------------------------------
# Sign up
@auth_bp.route("/register", methods=["POST"])
def register():
    data = request_data()
    errors = validate_sign_up(data)
    if errors:
        return jsonify({"error": "Please fix the errors in the form", "errors": errors}), 400

    email = clean(data.get("email")).lower()
    if User.query.filter_by(email=email).first():
        return jsonify({"error": "Email already registered."}), 400

    user = User(
        email=email,
        first_name=clean(data.get("first_name")),
        middle_name=clean(data.get("middle_name")) or None,
        last_name=clean(data.get("last_name")),
        address=clean(data.get("address")) or None,
        barangay=clean(data.get("barangay")),
        contact_number=clean(data.get("contact_number")),
        birth_date=parse_date(data.get("birth_date")),
        gender=clean(data.get("gender")) or None,
    )
    user.set_password(as_text(data.get("password")))

    db.session.add(user)
    db.session.commit()

    return jsonify({"message": "Sign up successful.", "user": user.to_dict()}), 201

#-------------------------------------------------------
# Login / logout
@auth_bp.route("/login", methods=["POST"])
def login():
    data = request_data()
    email = clean(data.get("email")).lower()
    password = as_text(data.get("password"))

    if not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid email or password"}), 401

    login_user(user)
    return jsonify({
        "message": "Login successful",
        "user": user.to_dict(),
        "redirect": landing_page(user),
    }), 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out."}), 200


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict(), "redirect": landing_page(current_user)})

#-------------------------------------------------------
# Forgot password: 6-digit code by email
@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    data = request_data()
    email = clean(data.get("email")).lower()
    generic = {"message": "If the email is registered, password reset instructions have been sent."}

    user = User.query.filter_by(email=email).first() if email else None
    if not user:
        return jsonify(generic), 200

    # Older codes stop working once a new one is issued
    PasswordReset.query.filter_by(user_id=user.id, used=False).update({"used": True})

    otp = f"{secrets.randbelow(10 ** 6):06d}"
    db.session.add(PasswordReset.new_for(user.id, hash_otp(otp)))
    db.session.commit()

    try:
        msg = Message(
            subject="Password reset code",
            recipients=[user.email],
            body=f"""Hello {user.first_name},

Your password reset code is {otp}. It expires in {PasswordReset.ttl_minutes()} minutes.

If you did not request a password reset, you can ignore this email.
""",
        )
        mail.send(msg)
    except Exception:
        current_app.logger.exception("Failed to send password reset email to user %s", user.id)

    return jsonify(generic), 200


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    data = request_data()
    email = clean(data.get("email")).lower()
    code = clean(data.get("code"))
    password = as_text(data.get("password"))

    if len(password) < 6:
        return jsonify({"error": "Password must be at least 6 characters long"}), 400
    if password != as_text(data.get("repeat_password")):
        return jsonify({"error": "Passwords do not match"}), 400

    user = User.query.filter_by(email=email).first() if email else None
    reset = None
    if user:
        reset = (
            PasswordReset.query.filter_by(user_id=user.id, used=False)
            .order_by(PasswordReset.created_at.desc(), PasswordReset.id.desc())
            .first()
        )
    if not reset or not reset.is_usable():
        return jsonify({"error": "The reset code is invalid or has expired."}), 400

    if not secrets.compare_digest(reset.otp_hash, hash_otp(code)):
        reset.attempts = (reset.attempts or 0) + 1
        db.session.commit()
        return jsonify({"error": "The reset code is invalid or has expired."}), 400

    reset.used = True
    user.set_password(password)
    db.session.commit()
    return jsonify({"message": "Password has been reset. You can now log in."}), 200


@auth_bp.route("/update-password", methods=["POST"])
@login_required
def update_password():
    data = request_data()
    current = as_text(data.get("current_password"))
    new = as_text(data.get("new_password"))

    if not current_user.check_password(current):
        return jsonify({"error": "Current password is incorrect"}), 400
    if len(new) < 6:
        return jsonify({"error": "Password must be at least 6 characters long"}), 400
    if new != as_text(data.get("confirm_password")):
        return jsonify({"error": "New passwords do not match"}), 400

    current_user.set_password(new)
    db.session.commit()
    return jsonify({"message": "Password updated successfully!"}), 200
