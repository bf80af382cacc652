from extensions import db


class ArticleImage(db.Model):
    __tablename__ = "article_images"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    image_url = db.Column(db.String(255), nullable=False)

    article = db.relationship("Article", back_populates="images")
