"""
Service des réglages du calculateur d'absences (objectif de présence).
"""

import uuid
import logging

from sqlalchemy.orm import Session

from ghostclass.config import settings
from ghostclass.models.user_settings import UserSettings
from ghostclass.schemas.user_settings import SettingsResponse, SettingsUpdate
from ghostclass.services.bunk_calculator import sanitize_target

logger = logging.getLogger(__name__)


def get_settings(db: Session, auth_user_id: uuid.UUID) -> SettingsResponse:
    """Réglages de l'utilisateur, valeurs par défaut si aucune ligne n'existe encore."""
    row = db.get(UserSettings, auth_user_id)
    if row is None:
        return SettingsResponse(
            target_percentage=clamp_target(settings.DEFAULT_TARGET_PERCENTAGE),
            bunk_calculator_enabled=True,
            min_target_percentage=settings.MIN_TARGET_PERCENTAGE,
        )
    return SettingsResponse(
        target_percentage=clamp_target(row.target_percentage),
        bunk_calculator_enabled=row.bunk_calculator_enabled,
        min_target_percentage=settings.MIN_TARGET_PERCENTAGE,
    )


def update_settings(db: Session, auth_user_id: uuid.UUID, data: SettingsUpdate) -> SettingsResponse:
    """Crée ou met à jour les réglages. L'objectif est borné à [MIN_TARGET_PERCENTAGE, 100]."""
    row = db.get(UserSettings, auth_user_id)
    if row is None:
        row = UserSettings(
            auth_user_id=auth_user_id,
            target_percentage=clamp_target(settings.DEFAULT_TARGET_PERCENTAGE),
            bunk_calculator_enabled=True,
        )
        db.add(row)

    if data.target_percentage is not None:
        row.target_percentage = clamp_target(data.target_percentage)
    if data.bunk_calculator_enabled is not None:
        row.bunk_calculator_enabled = data.bunk_calculator_enabled

    db.commit()
    logger.info("Objectif de présence mis à jour : %.1f%%", row.target_percentage)

    return SettingsResponse(
        target_percentage=row.target_percentage,
        bunk_calculator_enabled=row.bunk_calculator_enabled,
        min_target_percentage=settings.MIN_TARGET_PERCENTAGE,
    )


def clamp_target(value) -> float:
    return sanitize_target(value, settings.MIN_TARGET_PERCENTAGE)
