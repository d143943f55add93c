"""
Storefront content: blog categories, URL redirects and settings
"""
from pymongo import ASCENDING, IndexModel

from .base import MongoModel


class BlogCategory(MongoModel):
    __collection__ = "blog_categories"
    __indexes__ = [
        IndexModel([("slug", ASCENDING)], unique=True),
    ]


class RedirectConfig(MongoModel):
    """Old storefront URL -> new URL"""
    __collection__ = "redirect_configs"
    __indexes__ = [
        IndexModel([("source", ASCENDING)], unique=True),
    ]


class Setting(MongoModel):
    """Key/value settings editable from the admin"""
    __collection__ = "settings"
    __indexes__ = [
        IndexModel([("key", ASCENDING)], unique=True),
    ]
