"""
Model: Comment
"""

from db import db, now_utc
from utils import isoformat


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author = db.Column(db.String(50), nullable=False)
    avatar_url = db.Column(db.Text)
    date = db.Column(db.String(50))
    text = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), default="pending", nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=now_utc)

    def to_dict(self):
        return {
            "id": self.id,
            "postId": self.post_id,
            "author": self.author,
            "avatarUrl": self.avatar_url,
            "date": self.date,
            "text": self.text,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
        }
