"""
User Repository - Data Access Layer for users

Returns User domain models; password hashes only leave this module
through find_credentials.
"""
import logging
from typing import Optional, Tuple

from pydantic import ValidationError

from shop_api.domain.user import User, UserType
from shop_api.models.user import User as UserModel
from shop_api.repositories.base import MongoRepository, parse_object_id

logger = logging.getLogger(__name__)


class UserRepository(MongoRepository):
    """Repository for the users collection"""

    model = UserModel

    @staticmethod
    def _map_document_to_user(document: dict) -> Optional[User]:
        """None for documents that do not describe a valid user"""
        try:
            return User(
                id=document["id"],
                email=document.get("email"),
                name=document.get("name"),
                phone=document.get("phone"),
                user_type=document.get("user_type", UserType.CUSTOMER),
                role=document.get("role") or None,
                permissions=document.get("permissions") or [],
                is_active=document.get("is_active", True),
                created_at=document.get("created_at"),
            )
        except ValidationError as e:
            logger.warning(f"Skipping malformed user document {document.get('id')}: {e.error_count()} invalid fields")
            return None

    def find_by_id(self, user_id: str) -> Optional[User]:
        """
        Find user by id

        Returns:
            User or None if not found or the id is malformed
        """
        object_id = parse_object_id(user_id)
        if object_id is None:
            return None

        document = self.find_one({"_id": object_id})
        if not document:
            return None
        return self._map_document_to_user(document)

    def find_by_email(self, email: str) -> Optional[User]:
        document = self.find_one({"email": email.strip().lower()})
        if not document:
            return None
        return self._map_document_to_user(document)

    def find_credentials(self, email: str) -> Optional[Tuple[User, str]]:
        """
        Find a user and its password hash for login

        Returns:
            (User, password_hash) or None when the user does not exist, is malformed
            or has no password
        """
        raw = self.find_one_raw({"email": email.strip().lower()})
        if not raw or not raw.get("password_hash"):
            return None
        user = self._map_document_to_user(self._to_json(raw))
        if user is None:
            return None
        return user, raw["password_hash"]
