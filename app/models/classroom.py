"""Class: a named collection of files. Admin-owned, soft-archived via is_active (never deleted)."""
import uuid
from sqlalchemy import Boolean, Column, String, Text, DateTime, ForeignKey, JSON
from app.database import Base
from app.utils.clock import utcnow


class Class(Base):
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    allowed_file_types = Column(JSON, nullable=False, default=list)  # ["pdf", "xlsx"]
    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
