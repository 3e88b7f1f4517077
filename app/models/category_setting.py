"""
Model: CategorySetting
"""

from db import db, now_utc


class CategorySetting(db.Model):
    __tablename__ = "category_settings"

    section = db.Column(db.String(20), primary_key=True)
    name = db.Column(db.String(100), primary_key=True)
    icon_name = db.Column(db.String(50))
    show_in_sidebar = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    def to_dict(self, item_count=None):
        data = {
            "section": self.section,
            "name": self.name,
            "iconName": self.icon_name,
            "showInSidebar": bool(self.show_in_sidebar),
            "sortOrder": self.sort_order or 0,
        }
        if item_count is not None:
            data["count"] = item_count
        return data
