"""SQLAlchemy models exposed by the store service."""
from .base import Base
from .employee import Employee
from .user import User

__all__ = ["Base", "Employee", "User"]
