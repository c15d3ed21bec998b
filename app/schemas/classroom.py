from datetime import datetime
from pydantic import BaseModel


class ClassCreate(BaseModel):
    name: str
    description: str | None = None
    allowed_file_types: list[str]


class ClassUpdate(BaseModel):
    """All fields optional; only provided fields are changed."""
    name: str | None = None
    description: str | None = None
    allowed_file_types: list[str] | None = None


class ClassResponse(BaseModel):
    id: str
    name: str
    description: str | None
    allowed_file_types: list[str]
    created_by_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
