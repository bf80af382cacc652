import os
from app import create_app
from extensions import db
from models.user import User


def ensure_admin(email, password):
    email = email.strip().lower()
    existing_admin = User.query.filter_by(email=email).first()
    if existing_admin:
        if existing_admin.role != "admin":
            existing_admin.role = "admin"
            db.session.commit()
            return f"✅ {email} promoted to admin."
        return "⚠️ Admin account already exists!"

    admin = User(
        email=email,
        first_name="Portal",
        last_name="Admin",
        barangay="Poblacion",
        contact_number="09171234567",
        role="admin"
    )
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    return "Admin account created successfully!"


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        print(ensure_admin(os.getenv("ADMIN_EMAIL", "admin@example.com"),
                           os.getenv("ADMIN_PASSWORD", "admin123")))
