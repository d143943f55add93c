"""
User Domain Model

Customers and staff members authenticate against the same users
collection. Staff carry a role and permissions; customers never do.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class UserType(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"


class User(BaseModel):
    """
    User domain model

    Fields:
        id: Document id (stringified ObjectId)
        email: Login email
        name: Display name
        phone: Phone number (customers usually log in with it)
        user_type: customer or staff
        role: Staff role (admin, seller, warehouse, ...), None for customers
        permissions: Staff permissions, "*" grants everything
        is_active: Disabled users cannot authenticate
    """

    id: str = Field(..., description="User id")
    email: Optional[str] = Field(None, description="Login email")
    name: Optional[str] = Field(None, description="Display name")
    phone: Optional[str] = Field(None, description="Phone number")
    user_type: UserType = Field(UserType.CUSTOMER, description="customer or staff")
    role: Optional[str] = Field(None, description="Staff role")
    permissions: List[str] = Field(default_factory=list, description="Staff permissions")
    is_active: bool = Field(True, description="Whether the user may log in")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    @property
    def is_staff(self) -> bool:
        return self.user_type == UserType.STAFF

    @property
    def is_customer(self) -> bool:
        return self.user_type == UserType.CUSTOMER

    def has_permission(self, permission: str) -> bool:
        return "*" in self.permissions or permission in self.permissions

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["is_staff"] = self.is_staff
        return data
