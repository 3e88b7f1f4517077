"""
Repository for ad placements
"""

from db import db, transaction, upsert
from models.ad import Ad
from utils import now_utc


class AdRepository:
    """Repository for Ad database operations"""

    @staticmethod
    def get_all():
        return Ad.query.order_by(Ad.placement).all()

    @staticmethod
    def get_by_placement(placement):
        return Ad.query.filter_by(placement=placement).first()

    @staticmethod
    def upsert_many(placements):
        """
        Save {placement: {"code": ..., "fallback_code": ...}} in one transaction.
        Either every placement is written or none is.
        """
        with transaction() as session:
            for placement, values in placements.items():
                upsert(
                    session,
                    Ad,
                    {
                        "placement": placement,
                        "code": values.get("code") or "",
                        "fallback_code": values.get("fallback_code") or "",
                        "updated_at": now_utc(),
                    },
                    index_elements=["placement"],
                    update_columns=["code", "fallback_code", "updated_at"],
                )
        return len(placements)

    @staticmethod
    def count():
        return db.session.query(Ad).count()
