from datetime import datetime
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    kind: str
    title: str
    description: str | None
    related_request_id: str
    created_at: datetime
    read_at: datetime | None
    is_read: bool

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int
