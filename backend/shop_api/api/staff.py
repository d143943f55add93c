"""
Staff endpoints

/me only needs a valid staff account, so accounts still waiting for a role
can see who they are. Anything else requires a role.
"""
from fastapi import APIRouter, Depends

from shop_api.core.auth import (
    JWT_STAFF,
    JWT_STAFF_WITHOUT_ROLE,
    Principal,
    authenticate,
)

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get("/me")
def get_me(principal: Principal = Depends(authenticate(JWT_STAFF_WITHOUT_ROLE))):
    """Current staff member, with or without a role"""
    return {"success": True, "data": principal.user.to_dict()}


@router.get("/permissions")
def get_permissions(principal: Principal = Depends(authenticate(JWT_STAFF))):
    """Role and permissions of the current staff member"""
    user = principal.user
    return {
        "success": True,
        "data": {
            "role": user.role,
            "permissions": user.permissions,
        },
    }
