"""
Catalog collections: products, their tags and related products
"""
from pymongo import ASCENDING, DESCENDING, IndexModel, TEXT

from .base import MongoModel


class Product(MongoModel):
    __collection__ = "products"
    __indexes__ = [
        IndexModel([("sku", ASCENDING)], unique=True),
        IndexModel([("slug", ASCENDING)], unique=True, sparse=True),
        IndexModel([("tags", ASCENDING)]),
        IndexModel([("is_active", ASCENDING), ("created_at", DESCENDING)]),
        IndexModel([("name", TEXT), ("description", TEXT)]),
    ]


class ProductTag(MongoModel):
    __collection__ = "product_tags"
    __indexes__ = [
        IndexModel([("slug", ASCENDING)], unique=True),
    ]


class RelatedProducts(MongoModel):
    """Products shown next to a given product"""
    __collection__ = "related_products"
    __indexes__ = [
        IndexModel([("product_id", ASCENDING)], unique=True),
    ]
