"""
Models package

One module per table. The catalog tables share ContentMixin.
"""

from .game import Game
from .blog_post import BlogPost
from .product import Product
from .comment import Comment
from .social_link import SocialLink
from .site_setting import SiteSetting
from .ad import Ad
from .category_setting import CategorySetting
from .free_game_deal import FreeGameDeal

__all__ = [
    "Game",
    "BlogPost",
    "Product",
    "Comment",
    "SocialLink",
    "SiteSetting",
    "Ad",
    "CategorySetting",
    "FreeGameDeal",
]
