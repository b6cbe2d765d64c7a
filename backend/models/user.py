"""User model definitions."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from backend.database import Base


class Role(str, enum.Enum):
    STUDENT = "student"
    ADMIN = "admin"


class User(Base):
    """Represents a portal account (student or admin)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.STUDENT.value)  # student/admin
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_approved(self) -> bool:
        # Admins are always effectively approved.
        return self.is_admin or bool(self.approved)
