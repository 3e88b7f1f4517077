"""
Model: BlogPost

`content` is HTML produced by the admin rich-text editor and is rendered as-is.
"""

from db import db
from models.mixins import ContentMixin
from utils import isoformat


class BlogPost(ContentMixin, db.Model):
    __tablename__ = "blog_posts"

    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text, default="")
    image_url = db.Column(db.Text, default="")
    video_url = db.Column(db.Text)
    author = db.Column(db.String(100), default="Admin")
    publish_date = db.Column(db.Date)
    rating = db.Column(db.Float, default=0)
    affiliate_url = db.Column(db.Text)
    content = db.Column(db.Text, default="")

    comments = db.relationship(
        "Comment", backref="post", lazy="dynamic", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_dict(self):
        data = self._base_dict()
        data.update({
            "title": self.title,
            "summary": self.summary,
            "imageUrl": self.image_url,
            "videoUrl": self.video_url,
            "author": self.author,
            "publishDate": isoformat(self.publish_date),
            "rating": self.rating,
            "affiliateUrl": self.affiliate_url,
            "content": self.content,
        })
        return data
