"""
Repository for catalog records (games, blog posts, products)

One instance per content type; the model, title column and search/sort
columns come from content_types.
"""

from sqlalchemy import asc, desc, or_
from db import db, transaction
from exceptions import NotFoundException
from slugs import unique_slug


class ContentRepository:
    """CRUD and listing queries for one content type"""

    def __init__(self, content_type):
        self.content_type = content_type
        self.model = content_type.model

    def _title_column(self):
        return getattr(self.model, self.content_type.title_field)

    def get_page(self, page=1, limit=20, search=None, sort_by=None, sort_order="desc", category=None):
        """Return (items, total) for one page, pinned records first."""
        query = self.model.query

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(*[getattr(self.model, column).ilike(pattern) for column in self.content_type.search_fields])
            )
        if category:
            query = query.filter(self.model.category == category)

        if sort_by not in self.content_type.sort_fields:
            sort_by = "id"
        direction = asc if str(sort_order).lower() == "asc" else desc
        query = query.order_by(self.model.is_pinned.desc(), direction(getattr(self.model, sort_by)))

        total = query.count()
        items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total

    def get_by_id(self, id):
        return db.session.get(self.model, id)

    def get_or_404(self, id):
        record = self.get_by_id(id)
        if record is None:
            raise NotFoundException(self.model.__name__, id)
        return record

    def get_by_slug(self, slug):
        return self.model.query.filter_by(slug=slug).first()

    def create(self, payload):
        """Insert a record built from a payload, with a fresh unique slug"""
        with transaction() as session:
            record = self.model(**payload.columns())
            record.slug = unique_slug(session, self.model, self.content_type.title_of(payload))
            session.add(record)
        return record

    def update(self, id, payload):
        """Replace a record's fields; the slug follows the title when it changes"""
        record = self.get_or_404(id)
        old_title = getattr(record, self.content_type.title_field)
        new_title = self.content_type.title_of(payload)

        with transaction() as session:
            for key, value in payload.columns().items():
                setattr(record, key, value)
            if new_title != old_title:
                record.slug = unique_slug(session, self.model, new_title, exclude_id=record.id)
        return record

    def delete(self, id):
        record = self.get_or_404(id)
        with transaction() as session:
            session.delete(record)
        return True

    def increment_views(self, slug):
        """Bump view_count for `slug`; False when no record has it"""
        with transaction() as session:
            updated = (
                session.query(self.model)
                .filter(self.model.slug == slug)
                .update({self.model.view_count: db.func.coalesce(self.model.view_count, 0) + 1},
                        synchronize_session=False)
            )
        return updated > 0

    def related(self, record, limit=4):
        """Other records of the same category, most viewed first"""
        if not record.category:
            return []
        return (
            self.model.query.filter(self.model.category == record.category, self.model.id != record.id)
            .order_by(self.model.view_count.desc(), self.model.id.desc())
            .limit(limit)
            .all()
        )

    def trending(self, limit=5):
        return self.model.query.order_by(self.model.view_count.desc(), self.model.id.desc()).limit(limit).all()

    def count(self):
        return self.model.query.count()

    def category_counts(self):
        """{category: number of records}"""
        rows = (
            db.session.query(self.model.category, db.func.count(self.model.id))
            .filter(self.model.category.isnot(None), self.model.category != "")
            .group_by(self.model.category)
            .all()
        )
        return {category: count for category, count in rows}
