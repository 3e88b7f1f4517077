"""
Repository for category display settings (icon, sidebar visibility, order)
"""

from db import db, transaction, upsert
from constants import CATEGORY_DEFAULT_ICONS
from content_types import CONTENT_TYPES
from models.category_setting import CategorySetting
from repositories.content_repository import ContentRepository
from utils import now_utc
import logging

logger = logging.getLogger("main")


class CategoryRepository:
    """Repository for CategorySetting database operations"""

    @staticmethod
    def sync_from_content():
        """Create settings rows for categories used by content but not configured yet"""
        existing = {(row.section, row.name) for row in CategorySetting.query.all()}
        created = 0
        with transaction() as session:
            for section, content_type in CONTENT_TYPES.items():
                for name in ContentRepository(content_type).category_counts():
                    if (section, name) in existing:
                        continue
                    session.add(CategorySetting(
                        section=section,
                        name=name,
                        icon_name=CATEGORY_DEFAULT_ICONS[section],
                        show_in_sidebar=True,
                        sort_order=0,
                    ))
                    created += 1
        if created:
            logger.info(f"Registered {created} new categories")
        return created

    @staticmethod
    def get_all_with_counts():
        counts = {
            section: ContentRepository(content_type).category_counts()
            for section, content_type in CONTENT_TYPES.items()
        }
        rows = CategorySetting.query.order_by(
            CategorySetting.section, CategorySetting.sort_order, CategorySetting.name
        ).all()
        return [row.to_dict(item_count=counts.get(row.section, {}).get(row.name, 0)) for row in rows]

    @staticmethod
    def get_sidebar(section):
        return (
            CategorySetting.query.filter_by(section=section, show_in_sidebar=True)
            .order_by(CategorySetting.sort_order, CategorySetting.name)
            .all()
        )

    @staticmethod
    def save(section, name, icon_name=None, show_in_sidebar=True, sort_order=0):
        with transaction() as session:
            upsert(
                session,
                CategorySetting,
                {
                    "section": section,
                    "name": name,
                    "icon_name": icon_name or CATEGORY_DEFAULT_ICONS.get(section),
                    "show_in_sidebar": show_in_sidebar,
                    "sort_order": sort_order,
                    "updated_at": now_utc(),
                },
                index_elements=["section", "name"],
                update_columns=["icon_name", "show_in_sidebar", "sort_order", "updated_at"],
            )
        return db.session.get(CategorySetting, (section, name))

    @staticmethod
    def count(section):
        return CategorySetting.query.filter_by(section=section).count()
