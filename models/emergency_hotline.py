from extensions import db
from datetime import datetime

HOTLINE_CATEGORIES = ("police", "fire", "medical", "rescue", "disaster", "utility", "other")

HOTLINE_CATEGORY_LABELS = {
    "police": "Police",
    "fire": "Fire",
    "medical": "Medical",
    "rescue": "Rescue",
    "disaster": "Disaster Response",
    "utility": "Utilities",
    "other": "Other",
}


class EmergencyHotline(db.Model):
    __tablename__ = "emergency_hotlines"

    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String(150), nullable=False)
    number = db.Column(db.String(50), nullable=False)
    sim_type = db.Column(db.String(50), nullable=False)  # Globe, Smart, Landline...
    barangay = db.Column(db.String(100))  # None = city-wide
    category = db.Column(db.Enum(*HOTLINE_CATEGORIES, name="hotline_categories"), default="other")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = db.Column(db.DateTime)

    @classmethod
    def active(cls):
        return cls.query.filter(cls.deleted_at.is_(None))

    def to_dict(self):
        return {
            "id": self.id,
            "label": self.label,
            "number": self.number,
            "sim_type": self.sim_type,
            "barangay": self.barangay,
            "category": self.category or "other",
            "created_at": self.created_at.isoformat(),
        }
