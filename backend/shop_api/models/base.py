"""
Collection registry

Each model declares its collection name and indexes. Subclasses register
themselves on definition, so importing a model module is enough to have
its indexes created at startup.
"""
import logging
from typing import Dict, List, Tuple, Type

from pymongo import IndexModel
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

_registry: Dict[str, Type["MongoModel"]] = {}


class MongoModel:
    """Base class for registered collections"""

    __collection__: str = ""
    __indexes__: List[IndexModel] = []
    # Fields never returned by the API
    __private_fields__: Tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.__collection__:
            raise TypeError(f"{cls.__name__} must define __collection__")
        if cls.__collection__ in _registry and _registry[cls.__collection__] is not cls:
            raise ValueError(
                f"Collection '{cls.__collection__}' already registered by "
                f"{_registry[cls.__collection__].__name__}"
            )
        _registry[cls.__collection__] = cls


def registered_models() -> Dict[str, Type[MongoModel]]:
    """Registered models keyed by collection name"""
    return dict(_registry)


def register_models(db: Database) -> Dict[str, bool]:
    """
    Create the declared indexes for every registered model.

    Returns:
        Mapping collection name -> whether its indexes were created
    """
    results = {}
    for name, model in _registry.items():
        if not model.__indexes__:
            results[name] = True
            continue
        try:
            db[name].create_indexes(model.__indexes__)
            results[name] = True
        except PyMongoError as e:
            logger.error(f"Could not create indexes for {name}: {e}")
            results[name] = False
    logger.info(f"Registered {len(results)} models")
    return results
