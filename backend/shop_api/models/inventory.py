"""
Stock collections
"""
from pymongo import ASCENDING, DESCENDING, IndexModel

from .base import MongoModel


class Inventory(MongoModel):
    """Stock per product and warehouse"""
    __collection__ = "inventories"
    __indexes__ = [
        IndexModel([("product_id", ASCENDING), ("warehouse_id", ASCENDING)], unique=True),
        IndexModel([("updated_at", DESCENDING)]),
    ]


class SellerProcessResult(MongoModel):
    """Outcome of a seller's order processing step (picking, packing, delivery)"""
    __collection__ = "seller_process_results"
    __indexes__ = [
        IndexModel([("order_id", ASCENDING)]),
        IndexModel([("seller_id", ASCENDING), ("created_at", DESCENDING)]),
    ]
