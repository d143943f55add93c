"""
User and customer address collections
"""
from pymongo import ASCENDING, DESCENDING, IndexModel

from .base import MongoModel


class User(MongoModel):
    """
    Customers and staff share one collection, told apart by user_type.
    Staff accounts carry a role and a list of permissions.
    """
    __collection__ = "users"
    __indexes__ = [
        IndexModel([("email", ASCENDING)], unique=True, sparse=True),
        IndexModel([("phone", ASCENDING)], sparse=True),
        IndexModel([("user_type", ASCENDING), ("is_active", ASCENDING)]),
        IndexModel([("created_at", DESCENDING)]),
    ]
    __private_fields__ = ("password", "password_hash")


class CustomerAddress(MongoModel):
    """Delivery addresses of a customer"""
    __collection__ = "customer_addresses"
    __indexes__ = [
        IndexModel([("customer_id", ASCENDING), ("is_default", DESCENDING)]),
    ]
