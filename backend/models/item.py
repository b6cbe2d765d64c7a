"""Lost and found item model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from backend.database import Base


class Item(Base):
    """Represents a lost or found item report."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)  # lost/found
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    photo = Column(String, default="")
    posted_by = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
