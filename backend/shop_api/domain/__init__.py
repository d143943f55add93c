"""
Domain Layer - Business Entities
"""
from .user import User, UserType

__all__ = ["User", "UserType"]
