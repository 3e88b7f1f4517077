"""
Model: SocialLink
"""

from db import db


class SocialLink(db.Model):
    __tablename__ = "social_links"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    url = db.Column(db.Text, nullable=False)
    icon_svg = db.Column(db.Text)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "url": self.url, "icon_svg": self.icon_svg}
