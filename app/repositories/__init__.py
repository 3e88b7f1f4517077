"""
Repositories package
Database queries, kept out of the models and the routes

Each repository wraps the queries for one table:
- content_repository.py (games, blog posts, products)
- deal_repository.py
- etc.

Usage:
    from repositories.content_repository import ContentRepository
    items, total = ContentRepository(get_content_type('games')).get_page()
"""
