from extensions import db


class ComplaintImage(db.Model):
    __tablename__ = "complaint_images"

    id = db.Column(db.Integer, primary_key=True)
    complaint_id = db.Column(db.Integer, db.ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False)
    image_url = db.Column(db.String(255), nullable=False)  # path under static/uploads

    complaint = db.relationship("Complaint", back_populates="images")
