from extensions import db
from datetime import datetime

COMPLAINT_STATUSES = ("pending", "processing", "solved", "rejected")

COMPLAINT_CATEGORIES = (
    "Road and Infrastructure",
    "Street Lighting",
    "Waste Management",
    "Water and Drainage",
    "Public Safety",
    "Noise Complaint",
    "Other",
)


class Complaint(db.Model):
    __tablename__ = "complaints"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    barangay = db.Column(db.String(100))

    status = db.Column(
        db.Enum(*COMPLAINT_STATUSES, name="complaint_status"),
        default="pending",
        nullable=False,
    )

    is_anonymous = db.Column(db.Boolean, default=False, nullable=False)
    is_public = db.Column(db.Boolean, default=True, nullable=False)
    view_count = db.Column(db.Integer, default=0, nullable=False)

    # Guest submissions (no account)
    guest_name = db.Column(db.String(100))
    guest_email = db.Column(db.String(120))
    guest_phone = db.Column(db.String(20))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="complaints")
    images = db.relationship("ComplaintImage", back_populates="complaint", cascade="all, delete-orphan")
    feedback = db.relationship(
        "ComplaintFeedback",
        back_populates="complaint",
        order_by="[ComplaintFeedback.created_at.desc(), ComplaintFeedback.id.desc()]",
    )
    status_updates = db.relationship(
        "ComplaintStatusUpdate",
        back_populates="complaint",
        order_by="[ComplaintStatusUpdate.created_at.desc(), ComplaintStatusUpdate.id.desc()]",
    )
    reactions = db.relationship("ComplaintReaction", back_populates="complaint", cascade="all, delete-orphan")
    comments = db.relationship(
        "ComplaintComment",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintComment.created_at",
    )

    @property
    def author_name(self):
        if self.is_anonymous:
            return None
        if self.user:
            return self.user.name
        return self.guest_name

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "location": self.location,
            "barangay": self.barangay,
            "status": self.status,
            "is_anonymous": self.is_anonymous,
            "is_public": self.is_public,
            "view_count": self.view_count,
            "images": [img.image_url for img in self.images],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
