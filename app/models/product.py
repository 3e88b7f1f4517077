"""
Model: Product
"""

from db import db
from models.mixins import ContentMixin


class Product(ContentMixin, db.Model):
    __tablename__ = "products"

    name = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.Text, default="")
    price = db.Column(db.Float, default=0)
    url = db.Column(db.Text, default="#")
    description = db.Column(db.Text, default="")
    gallery = db.Column(db.JSON, default=list)

    def to_dict(self):
        data = self._base_dict()
        data.update({
            "name": self.name,
            "imageUrl": self.image_url,
            "price": self.price,
            "url": self.url,
            "description": self.description,
            "gallery": self.gallery or [],
        })
        return data
