"""
Service des notifications in-app (lecture et marquage comme lues).
"""

import uuid
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ghostclass.models.notification import Notification
from ghostclass.schemas.notification import NotificationResponse


def list_notifications(
    db: Session,
    auth_user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 15,
    offset: int = 0,
) -> List[NotificationResponse]:
    query = select(Notification).where(Notification.auth_user_id == auth_user_id)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    rows = db.execute(
        query.order_by(Notification.created_at.desc()).limit(limit).offset(offset)
    ).scalars().all()
    return [NotificationResponse.model_validate(n) for n in rows]


def unread_count(db: Session, auth_user_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count(Notification.id)).where(
            Notification.auth_user_id == auth_user_id,
            Notification.is_read.is_(False),
        )
    ).scalar() or 0


def mark_read(db: Session, auth_user_id: uuid.UUID, notification_id: Optional[int] = None) -> int:
    """Marque une notification (ou toutes les non lues si notification_id est None) comme lue."""
    stmt = update(Notification).where(Notification.auth_user_id == auth_user_id)
    if notification_id is not None:
        stmt = stmt.where(Notification.id == notification_id)
    else:
        stmt = stmt.where(Notification.is_read.is_(False))
    result = db.execute(stmt.values(is_read=True))
    db.commit()
    return result.rowcount or 0
