from extensions import db

AGENCY_CATEGORIES = ("healthcare", "transport", "finance", "legal", "government", "social_services", "other")


class Agency(db.Model):
    __tablename__ = "agencies"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    external_link = db.Column(db.String(255), nullable=False)
    category = db.Column(db.Enum(*AGENCY_CATEGORIES, name="agency_categories"), default="other", nullable=False)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "external_link": self.external_link,
            "category": self.category,
        }
