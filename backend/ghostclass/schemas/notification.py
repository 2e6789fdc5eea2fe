"""
Schémas Pydantic pour les notifications in-app.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    title: str
    description: str
    topic: Optional[str]
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MarkReadRequest(BaseModel):
    id: Optional[int] = None   # None → toutes les notifications non lues


class MarkReadResult(BaseModel):
    updated: int


class UnreadCount(BaseModel):
    count: int
