"""
Repository for storefront settings (key/value)
"""

from db import db, transaction, upsert
from constants import SITE_SETTING_DEFAULTS
from models.site_setting import SiteSetting


class SiteSettingsRepository:
    """Repository for SiteSetting database operations"""

    @staticmethod
    def get_all():
        """Stored values merged over the defaults"""
        settings = dict(SITE_SETTING_DEFAULTS)
        for row in SiteSetting.query.all():
            settings[row.key] = row.value if row.value is not None else ""
        return settings

    @staticmethod
    def get(key, default=None):
        row = db.session.get(SiteSetting, key)
        if row is None:
            return SITE_SETTING_DEFAULTS.get(key, default)
        return row.value

    @staticmethod
    def set_many(values):
        with transaction() as session:
            for key, value in values.items():
                upsert(session, SiteSetting, {"key": key, "value": value},
                       index_elements=["key"], update_columns=["value"])
        return SiteSettingsRepository.get_all()
