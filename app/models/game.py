"""
Model: Game
"""

from db import db
from models.mixins import ContentMixin


class Game(ContentMixin, db.Model):
    __tablename__ = "games"

    title = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.Text, default="")
    tags = db.Column(db.JSON, default=list)
    theme = db.Column(db.String(20), default="dark")
    accent_color = db.Column(db.String(20))
    description = db.Column(db.Text, default="")
    video_url = db.Column(db.Text)
    download_url = db.Column(db.Text, default="#")
    download_url_ios = db.Column(db.Text)
    gallery = db.Column(db.JSON, default=list)
    platform = db.Column(db.String(20), default="pc")
    requirements = db.Column(db.JSON)
    icon_url = db.Column(db.Text)
    background_url = db.Column(db.Text)
    rating = db.Column(db.Float, default=95)
    downloads_count = db.Column(db.Integer, default=1000)

    def to_dict(self):
        data = self._base_dict()
        data.update({
            "title": self.title,
            "imageUrl": self.image_url,
            "tags": self.tags or [],
            "theme": self.theme,
            "accentColor": self.accent_color,
            "description": self.description,
            "videoUrl": self.video_url,
            "downloadUrl": self.download_url,
            "downloadUrlIos": self.download_url_ios,
            "gallery": self.gallery or [],
            "platform": self.platform,
            "requirements": self.requirements,
            "iconUrl": self.icon_url,
            "backgroundUrl": self.background_url,
            "rating": self.rating,
            "downloadsCount": self.downloads_count,
        })
        return data
