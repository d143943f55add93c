"""
Base repository and JSON serialization for MongoDB documents

to_json is applied to every document a repository returns:
- _id becomes id (string)
- the __v version key is dropped
- private fields (passwords, hashes) are dropped
- ObjectIds anywhere in the document become strings
"""
from typing import Any, Iterable, Optional, Type

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection

from shop_api.core.database import get_collection
from shop_api.models.base import MongoModel

ALWAYS_PRIVATE = ("password",)


def _clean(value: Any, private: frozenset) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return to_json(value, private)
    if isinstance(value, list):
        return [_clean(item, private) for item in value]
    return value


def to_json(document: Optional[dict], private_fields: Iterable[str] = ()) -> Optional[dict]:
    """Convert a raw document to its API shape"""
    if document is None:
        return None

    private = frozenset(private_fields) | frozenset(ALWAYS_PRIVATE)
    result = {}

    if "_id" in document:
        result["id"] = _clean(document["_id"], private)

    for key, value in document.items():
        if key in ("_id", "__v") or key in private:
            continue
        result[key] = _clean(value, private)

    return result


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId from a string, None when it is not a valid id"""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class MongoRepository:
    """
    Repository over one registered collection

    Subclasses set `model`; reads go through to_json with the model's
    private fields removed.
    """

    model: Type[MongoModel]

    def _collection(self) -> Collection:
        return get_collection(self.model.__collection__)

    def _to_json(self, document: Optional[dict]) -> Optional[dict]:
        return to_json(document, self.model.__private_fields__)

    def find_one_raw(self, query: dict) -> Optional[dict]:
        return self._collection().find_one(query)

    def find_one(self, query: dict) -> Optional[dict]:
        return self._to_json(self.find_one_raw(query))

    def count(self, query: Optional[dict] = None) -> int:
        return self._collection().count_documents(query or {})
