"""
Internal endpoints for other services (master key)
"""
from fastapi import APIRouter, Depends
from pymongo.database import Database

from shop_api.core import database
from shop_api.core.auth import MASTER_KEY, Principal, authenticate
from shop_api.core.config import settings
from shop_api.core.database import get_db
from shop_api.models import registered_models

router = APIRouter(prefix="/internal", tags=["Internal"])


@router.get("/status")
def get_status(
    principal: Principal = Depends(authenticate(MASTER_KEY)),
    db: Database = Depends(get_db),
):
    """Database reachability and registered collections"""
    return {
        "success": True,
        "data": {
            "environment": settings.ENVIRONMENT,
            "version": settings.API_VERSION,
            "database": "connected" if database.ping() else "disconnected",
            "database_name": db.name,
            "collections": sorted(registered_models()),
        },
    }
