"""
Authentication API endpoints
- Login for customers and staff (issues access tokens)
"""
import logging

from fastapi import APIRouter, HTTPException, status
from passlib.context import CryptContext
from pydantic import BaseModel

from shop_api.core.auth import create_access_token
from shop_api.core.config import settings
from shop_api.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Password hashing context (bcrypt, same hashes as the admin frontend)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """False for a wrong password or a stored value that is not a bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        logger.warning("Stored password is not a recognised hash")
        return False


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: dict


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest):
    """Exchange email and password for an access token"""
    found = UserRepository().find_credentials(credentials.email)
    if not found or not verify_password(credentials.password, found[1]):
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    user, _ = found
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    return LoginResponse(
        access_token=create_access_token(user),
        expires_in=settings.JWT_ACCESS_EXPIRATION_MINUTES * 60,
        user=user.to_dict(),
    )
