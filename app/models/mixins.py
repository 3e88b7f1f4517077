"""
Model mixin: columns shared by the three catalog tables
"""

from db import db, now_utc
from utils import isoformat


class ContentMixin:
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    category = db.Column(db.String(100), index=True)
    is_pinned = db.Column(db.Boolean, default=False, nullable=False)
    view_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    def _base_dict(self):
        return {
            "id": self.id,
            "slug": self.slug,
            "category": self.category,
            "isPinned": bool(self.is_pinned),
            "viewCount": self.view_count or 0,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
