"""
Router des notifications in-app.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ghostclass.database import get_db
from ghostclass.schemas.notification import (
    MarkReadRequest,
    MarkReadResult,
    NotificationResponse,
    UnreadCount,
)
from ghostclass.services import notification_service

router = APIRouter(prefix="/api/users/{auth_user_id}/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse], summary="Lister les notifications")
def list_notifications(
    auth_user_id: uuid.UUID,
    unread_only: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(15, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return notification_service.list_notifications(
        db, auth_user_id, unread_only, limit=limit, offset=(page - 1) * limit
    )


@router.get("/unread-count", response_model=UnreadCount, summary="Nombre de notifications non lues")
def unread_count(auth_user_id: uuid.UUID, db: Session = Depends(get_db)):
    return UnreadCount(count=notification_service.unread_count(db, auth_user_id))


@router.post("/read", response_model=MarkReadResult, summary="Marquer comme lu")
def mark_read(auth_user_id: uuid.UUID, data: MarkReadRequest, db: Session = Depends(get_db)):
    """Marque une notification (id fourni) ou toutes les non lues comme lues."""
    return MarkReadResult(updated=notification_service.mark_read(db, auth_user_id, data.id))
