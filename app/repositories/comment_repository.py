"""
Repository for blog comments
"""

from db import db, transaction
from exceptions import NotFoundException
from models.comment import Comment


class CommentRepository:
    """Repository for Comment database operations"""

    @staticmethod
    def create(**kwargs):
        with transaction() as session:
            comment = Comment(**kwargs)
            session.add(comment)
        return comment

    @staticmethod
    def get_approved_for_post(post_id):
        return (
            Comment.query.filter_by(post_id=post_id, status="approved")
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    @staticmethod
    def get_page(page=1, limit=20, status=None):
        query = Comment.query
        if status:
            query = query.filter_by(status=status)
        query = query.order_by(Comment.created_at.desc(), Comment.id.desc())
        total = query.count()
        return query.offset((page - 1) * limit).limit(limit).all(), total

    @staticmethod
    def get_or_404(id):
        comment = db.session.get(Comment, id)
        if comment is None:
            raise NotFoundException("Comment", id)
        return comment

    @staticmethod
    def set_status(id, status):
        comment = CommentRepository.get_or_404(id)
        with transaction():
            comment.status = status
        return comment

    @staticmethod
    def delete(id):
        comment = CommentRepository.get_or_404(id)
        with transaction() as session:
            session.delete(comment)
        return True

    @staticmethod
    def count(status=None):
        query = Comment.query
        if status:
            query = query.filter_by(status=status)
        return query.count()
