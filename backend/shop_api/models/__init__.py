"""
MongoDB collections

Importing this package registers every model; register_models(db) then
creates their indexes.
"""
from .base import MongoModel, register_models, registered_models
from .catalog import Product, ProductTag, RelatedProducts
from .content import BlogCategory, RedirectConfig, Setting
from .inventory import Inventory, SellerProcessResult
from .order import Order, OrderTag
from .user import CustomerAddress, User

__all__ = [
    "MongoModel",
    "register_models",
    "registered_models",
    "ProductTag",
    "OrderTag",
    "User",
    "Order",
    "Product",
    "RelatedProducts",
    "SellerProcessResult",
    "Inventory",
    "CustomerAddress",
    "BlogCategory",
    "RedirectConfig",
    "Setting",
]
