"""
Modèle SQLAlchemy pour les réglages du calculateur d'absences.
Une ligne par utilisateur ; absente tant que l'utilisateur n'a rien modifié.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, func
from sqlalchemy.dialects.postgresql import UUID

from ghostclass.database import Base


class UserSettings(Base):
    """Objectif de présence et activation du calculateur pour un utilisateur."""
    __tablename__ = "user_settings"

    auth_user_id = Column(UUID(as_uuid=True), primary_key=True)
    target_percentage = Column(Float, nullable=False, default=75.0)
    bunk_calculator_enabled = Column(Boolean, nullable=False, default=True)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
