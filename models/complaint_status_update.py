from extensions import db
from datetime import datetime
from models.complaint import COMPLAINT_STATUSES


class ComplaintStatusUpdate(db.Model):
    __tablename__ = "complaint_status_updates"

    id = db.Column(db.Integer, primary_key=True)
    complaint_id = db.Column(db.Integer, db.ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False, index=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))

    from_status = db.Column(db.Enum(*COMPLAINT_STATUSES, name="complaint_status"))
    status = db.Column(db.Enum(*COMPLAINT_STATUSES, name="complaint_status"), nullable=False)
    remarks = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    complaint = db.relationship("Complaint", back_populates="status_updates")

    def to_dict(self):
        return {
            "id": self.id,
            "from_status": self.from_status,
            "status": self.status,
            "remarks": self.remarks,
            "created_at": self.created_at.isoformat(),
        }
