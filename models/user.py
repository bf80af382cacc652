from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

USER_ROLES = ("admin", "citizen")


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)

    first_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100), nullable=False)

    address = db.Column(db.String(255))
    barangay = db.Column(db.String(100))
    contact_number = db.Column(db.String(20))
    emergency_contact = db.Column(db.String(20))
    birth_date = db.Column(db.Date)
    gender = db.Column(db.String(20))

    role = db.Column(db.Enum(*USER_ROLES, name="user_roles"), default="citizen", nullable=False)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    # Relationships
    complaints = db.relationship("Complaint", back_populates="user", lazy=True)
    articles = db.relationship("Article", back_populates="author", lazy=True)
    notifications = db.relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def name(self):
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "address": self.address,
            "barangay": self.barangay,
            "contact_number": self.contact_number,
            "emergency_contact": self.emergency_contact,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "gender": self.gender,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
