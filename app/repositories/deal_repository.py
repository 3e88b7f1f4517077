"""
Repository for free game deals
"""

from sqlalchemy import String, cast, or_
from db import db, upsert
from models.free_game_deal import FreeGameDeal
from utils import now_utc


class DealRepository:
    """Repository for FreeGameDeal database operations"""

    @staticmethod
    def get_active_page(page=1, limit=12, store=None, platform=None, tag=None, sort_by="newest"):
        """Deals that are active and not expired, filtered and sorted, as (items, total)"""
        now = now_utc()
        query = FreeGameDeal.query.filter(
            FreeGameDeal.is_active.is_(True),
            or_(FreeGameDeal.ends_at.is_(None), FreeGameDeal.ends_at > now),
        )
        if store:
            query = query.filter(FreeGameDeal.store.ilike(f"%{store}%"))
        if platform:
            query = query.filter(FreeGameDeal.platform.ilike(f"%{platform}%"))
        if tag:
            # tags is a JSON list, match the quoted element
            query = query.filter(cast(FreeGameDeal.tags, String).ilike(f'%"{tag}"%'))

        if sort_by == "ending_soon":
            query = query.order_by(FreeGameDeal.ends_at.is_(None), FreeGameDeal.ends_at.asc())
        elif sort_by == "value":
            query = query.order_by(FreeGameDeal.normal_price.desc().nullslast(), FreeGameDeal.id.desc())
        else:
            query = query.order_by(FreeGameDeal.created_at.desc(), FreeGameDeal.id.desc())

        total = query.count()
        return query.offset((page - 1) * limit).limit(limit).all(), total

    @staticmethod
    def upsert_deal(session, values):
        values = dict(values, updated_at=now_utc(), is_active=True)
        return upsert(
            session,
            FreeGameDeal,
            values,
            index_elements=["source", "source_deal_id"],
            update_columns=[key for key in values if key not in ("source", "source_deal_id")],
        )

    @staticmethod
    def deactivate_missing(session, source, active_ids):
        """Flag deals of `source` that the latest sync no longer returned"""
        query = session.query(FreeGameDeal).filter(
            FreeGameDeal.source == source, FreeGameDeal.is_active.is_(True)
        )
        if active_ids:
            query = query.filter(FreeGameDeal.source_deal_id.notin_(list(active_ids)))
        return query.update({FreeGameDeal.is_active: False}, synchronize_session=False)

    @staticmethod
    def count_active():
        return db.session.query(FreeGameDeal).filter(FreeGameDeal.is_active.is_(True)).count()
