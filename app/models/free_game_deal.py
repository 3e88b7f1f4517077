"""
Model: FreeGameDeal
"""

from db import db, now_utc
from utils import isoformat


class FreeGameDeal(db.Model):
    __tablename__ = "free_game_deals"
    __table_args__ = (db.UniqueConstraint("source", "source_deal_id", name="uq_free_game_deals_source"),)

    id = db.Column(db.Integer, primary_key=True)
    source = db.Column(db.String(50), nullable=False)
    source_deal_id = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    store = db.Column(db.String(100))
    platform = db.Column(db.String(50))
    image_url = db.Column(db.Text)
    deal_url = db.Column(db.Text)
    normal_price = db.Column(db.Float)
    sale_price = db.Column(db.Float, default=0)
    currency = db.Column(db.String(10), default="USD")
    tags = db.Column(db.JSON, default=list)
    ends_at = db.Column(db.DateTime)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    def to_dict(self):
        return {
            "id": self.id,
            "source": self.source,
            "sourceDealId": self.source_deal_id,
            "title": self.title,
            "store": self.store,
            "platform": self.platform,
            "imageUrl": self.image_url,
            "dealUrl": self.deal_url,
            "normalPrice": self.normal_price,
            "salePrice": self.sale_price,
            "currency": self.currency,
            "tags": self.tags or [],
            "endsAt": isoformat(self.ends_at),
            "isActive": bool(self.is_active),
            "createdAt": isoformat(self.created_at),
        }
