"""
Model: Ad (one row per placement)
"""

from db import db, now_utc
from utils import isoformat


class Ad(db.Model):
    __tablename__ = "ads"

    id = db.Column(db.Integer, primary_key=True)
    placement = db.Column(db.String(100), unique=True, nullable=False)
    code = db.Column(db.Text, default="")
    fallback_code = db.Column(db.Text, default="")
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    def to_dict(self):
        return {
            "placement": self.placement,
            "code": self.code or "",
            "fallback_code": self.fallback_code or "",
            "updatedAt": isoformat(self.updated_at),
        }
