from extensions import db
from datetime import datetime

REACTION_TYPES = ("heart", "like", "thumbs_up", "thumbs_down")


class ComplaintReaction(db.Model):
    __tablename__ = "complaint_reactions"
    __table_args__ = (
        db.UniqueConstraint("complaint_id", "user_id", "reaction_type", name="uq_complaint_reaction"),
    )

    id = db.Column(db.Integer, primary_key=True)
    complaint_id = db.Column(db.Integer, db.ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reaction_type = db.Column(db.Enum(*REACTION_TYPES, name="reaction_types"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    complaint = db.relationship("Complaint", back_populates="reactions")
