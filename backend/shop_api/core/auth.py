"""
Authentication for the Shop API backend

Stateless JWT authentication with named strategies. A strategy is a
callable (request, bearer credentials) -> Principal | None:
- returns None when the request carries nothing it can verify
- raises 401/403 when it carries credentials that fail verification
- returns a Principal on success

Strategies are registered by name at startup and selected per route:

    @router.get("/orders")
    def list_orders(principal: Principal = Depends(authenticate("jwtStaff"))):
        ...

    # several names: the first strategy that authenticates wins
    @router.get("/orders/{order_id}")
    def get_order(principal: Principal = Depends(authenticate("jwtCustomer", "jwtStaff"))):
        ...
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from shop_api.core.config import settings
from shop_api.domain.user import User, UserType
from shop_api.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

JWT_CUSTOMER = "jwtCustomer"
JWT_STAFF = "jwtStaff"
MASTER_KEY = "masterKey"
JWT_STAFF_WITHOUT_ROLE = "jwtStaffWithoutRole"

MASTER_KEY_HEADER = "x-api-key"


class Principal(BaseModel):
    """Who is calling: a user (customer or staff) or an internal service"""
    strategy: str
    user: Optional[User] = None
    is_internal: bool = False


Strategy = Callable[[Request, Optional[HTTPAuthorizationCredentials]], Optional[Principal]]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# =============================================================================
# Tokens
# =============================================================================

def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    """Sign an access token for a user"""
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_ACCESS_EXPIRATION_MINUTES
    payload = {
        "sub": user.id,
        "type": user.user_type.value,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and validate an access token.

    Raises:
        HTTPException 401 when the token is expired or invalid
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise _unauthorized("Invalid token")


# =============================================================================
# Strategies
# =============================================================================

class JwtStrategy:
    """
    Bearer JWT strategy for one kind of user.

    Tokens of another kind are ignored (None) so that a route accepting
    several strategies can try the next one.
    """

    def __init__(self, name: str, user_type: UserType, require_role: bool = False):
        self.name = name
        self.user_type = user_type
        self.require_role = require_role

    def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> Optional[Principal]:
        if not credentials:
            return None

        payload = decode_token(credentials.credentials)
        if payload.get("type") != self.user_type.value:
            return None

        user_id = payload.get("sub")
        if not user_id:
            raise _unauthorized("Invalid token payload: missing subject")

        user = UserRepository().find_by_id(user_id)
        if not user or not user.is_active:
            raise _unauthorized("User not found or inactive")

        if user.user_type != self.user_type:
            raise _unauthorized("Token does not match the user type")

        if self.require_role and not user.role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Staff account has no role assigned",
            )

        return Principal(strategy=self.name, user=user)


def internal_strategy(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[Principal]:
    """
    Service-to-service calls authenticated with the shared master key,
    sent as x-api-key or as a bearer token.
    """
    if not settings.MASTER_KEY:
        return None

    provided = request.headers.get(MASTER_KEY_HEADER)
    if provided is None and credentials is not None:
        provided = credentials.credentials
    if provided is None:
        return None

    if not secrets.compare_digest(provided.encode(), settings.MASTER_KEY.encode()):
        raise _unauthorized("Invalid master key")

    return Principal(strategy=MASTER_KEY, is_internal=True)


customer_strategy = JwtStrategy(JWT_CUSTOMER, UserType.CUSTOMER)
staff_strategy = JwtStrategy(JWT_STAFF, UserType.STAFF, require_role=True)
staff_strategy_without_role = JwtStrategy(JWT_STAFF_WITHOUT_ROLE, UserType.STAFF)


# =============================================================================
# Registry
# =============================================================================

_strategies: Dict[str, Strategy] = {}


def register_strategy(name: str, strategy: Strategy) -> None:
    _strategies[name] = strategy
    logger.debug(f"Registered authentication strategy {name}")


def get_strategy(name: str) -> Strategy:
    """Raises KeyError for names that were never registered"""
    try:
        return _strategies[name]
    except KeyError:
        raise KeyError(f"Unknown authentication strategy '{name}'")


def registered_strategies() -> Dict[str, Strategy]:
    return dict(_strategies)


def authenticate(*names: str):
    """
    Dependency factory: authenticate with the named strategies, in order.

    Strategies are looked up per request, so routes can be declared before
    the strategies are registered.
    """
    if not names:
        raise ValueError("authenticate() needs at least one strategy name")

    def dependency(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ) -> Principal:
        failure: Optional[HTTPException] = None

        for name in names:
            strategy = get_strategy(name)
            try:
                principal = strategy(request, credentials)
            except HTTPException as e:
                failure = e
                continue
            if principal is not None:
                request.state.principal = principal
                return principal

        if failure is not None:
            raise failure
        raise _unauthorized("Authentication required")

    return dependency


def require_permissions(*permissions: str):
    """
    Dependency factory for permission checks on staff routes.

    Usage:
        @router.delete("/products/{product_id}")
        def delete_product(principal: Principal = Depends(require_permissions("product.delete"))):
            ...
    """
    staff = authenticate(JWT_STAFF)

    def permission_checker(principal: Principal = Depends(staff)) -> Principal:
        missing = [p for p in permissions if not principal.user.has_permission(p)]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Missing permissions: {', '.join(missing)}",
            )
        return principal

    return permission_checker
