"""
Customer endpoints (customer JWT)
"""
from fastapi import APIRouter, Depends

from shop_api.core.auth import JWT_CUSTOMER, Principal, authenticate

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("/me")
def get_me(principal: Principal = Depends(authenticate(JWT_CUSTOMER))):
    """Current customer profile"""
    return {"success": True, "data": principal.user.to_dict()}
