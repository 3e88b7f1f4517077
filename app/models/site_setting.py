"""
Model: SiteSetting (key/value store for storefront settings)
"""

from db import db


class SiteSetting(db.Model):
    __tablename__ = "site_settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text)
