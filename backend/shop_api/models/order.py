"""
Order collections
"""
from pymongo import ASCENDING, DESCENDING, IndexModel

from .base import MongoModel


class Order(MongoModel):
    __collection__ = "orders"
    __indexes__ = [
        IndexModel([("order_number", ASCENDING)], unique=True),
        IndexModel([("customer_id", ASCENDING), ("created_at", DESCENDING)]),
        IndexModel([("status", ASCENDING), ("created_at", DESCENDING)]),
        IndexModel([("payment_status", ASCENDING)]),
        IndexModel([("tags", ASCENDING)]),
    ]


class OrderTag(MongoModel):
    __collection__ = "order_tags"
    __indexes__ = [
        IndexModel([("slug", ASCENDING)], unique=True),
    ]
