"""Task model."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from taskboard.database import Base


class TaskRecord(Base):
    """Persisted task row (local or pulled in by a sync cycle)."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_completed = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    synced_with_network = Column(Boolean, nullable=False, default=False)
