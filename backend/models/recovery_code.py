"""Recovery code model definitions."""

from sqlalchemy import Column, DateTime, Integer, String
from backend.database import Base


class RecoveryCode(Base):
    """One-time password reset code; at most one row per email."""
    __tablename__ = "recovery_codes"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)  # naive UTC
