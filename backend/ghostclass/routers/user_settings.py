"""
Router des réglages du calculateur d'absences.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ghostclass.database import get_db
from ghostclass.schemas.user_settings import SettingsResponse, SettingsUpdate
from ghostclass.services import settings_service

router = APIRouter(prefix="/api/users/{auth_user_id}/settings", tags=["Réglages"])


@router.get("", response_model=SettingsResponse, summary="Lire les réglages")
def get_settings(auth_user_id: uuid.UUID, db: Session = Depends(get_db)):
    """Retourne l'objectif de présence (75 % par défaut) et l'état du calculateur."""
    return settings_service.get_settings(db, auth_user_id)


@router.put("", response_model=SettingsResponse, summary="Modifier les réglages")
def update_settings(auth_user_id: uuid.UUID, data: SettingsUpdate, db: Session = Depends(get_db)):
    """
    Met à jour l'objectif et/ou l'activation du calculateur.
    L'objectif est borné à [MIN_TARGET_PERCENTAGE, 100].
    """
    return settings_service.update_settings(db, auth_user_id, data)
