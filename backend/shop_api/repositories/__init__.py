"""
Repository Layer - Data Access

Repositories hide MongoDB queries from the API and return domain models
or API-shaped dicts (see to_json).
"""
from shop_api.repositories.base import MongoRepository, parse_object_id, to_json
from shop_api.repositories.user_repository import UserRepository

__all__ = [
    "MongoRepository",
    "UserRepository",
    "parse_object_id",
    "to_json",
]
