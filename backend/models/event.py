"""Event model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from backend.database import Base


class Event(Base):
    """Represents a campus event posted by an admin."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    photo = Column(String, default="")
    posted_by = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
