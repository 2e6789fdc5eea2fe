"""
Modèle SQLAlchemy pour les notifications in-app.
Créées par la synchronisation du tracker (conflits, mises à jour officielles).
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from ghostclass.database import Base


class Notification(Base):
    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    auth_user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    topic = Column(String(255), nullable=True)   # Clé de regroupement (ex: conflict-20260127|II)
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())
