"""
Repository for SocialLink database operations
"""

from db import db, transaction
from exceptions import NotFoundException
from models.social_link import SocialLink


class SocialLinkRepository:
    """Repository for SocialLink database operations"""

    @staticmethod
    def get_all():
        return SocialLink.query.order_by(SocialLink.id).all()

    @staticmethod
    def get_or_404(id):
        link = db.session.get(SocialLink, id)
        if link is None:
            raise NotFoundException("Social link", id)
        return link

    @staticmethod
    def create(**kwargs):
        with transaction() as session:
            link = SocialLink(**kwargs)
            session.add(link)
        return link

    @staticmethod
    def update(id, **kwargs):
        link = SocialLinkRepository.get_or_404(id)
        with transaction():
            for key, value in kwargs.items():
                setattr(link, key, value)
        return link

    @staticmethod
    def delete(id):
        link = SocialLinkRepository.get_or_404(id)
        with transaction() as session:
            session.delete(link)
        return True

    @staticmethod
    def count():
        return SocialLink.query.count()
