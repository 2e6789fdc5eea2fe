"""
Router du tracker d'un utilisateur : CRUD des corrections / séances extra,
tableau de bord réconcilié et synchronisation avec le relevé officiel.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ghostclass.database import get_db
from ghostclass.schemas.attendance import DashboardRequest, DashboardResponse
from ghostclass.schemas.sync import TrackerSyncRequest, TrackerSyncResult
from ghostclass.schemas.tracking import (
    TrackedEntryCreate,
    TrackedEntryResponse,
    TrackedEntryUpdate,
    TrackingCount,
)
from ghostclass.services import dashboard_service, tracker_sync_service, tracking_service

router = APIRouter(prefix="/api/users/{auth_user_id}", tags=["Tracker"])


def _raise_http(e: ValueError):
    msg = str(e)
    if "introuvable" in msg:
        raise HTTPException(status_code=404, detail=msg)
    if "existe déjà" in msg:
        raise HTTPException(status_code=409, detail=msg)
    raise HTTPException(status_code=400, detail=msg)


@router.get("/tracking", response_model=List[TrackedEntryResponse], summary="Lister les entrées du tracker")
def list_entries(
    auth_user_id: uuid.UUID,
    semester: Optional[str] = None,
    year: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Retourne les entrées de l'utilisateur, filtrables par semestre et année."""
    return tracking_service.list_entries(db, auth_user_id, semester, year)


@router.get("/tracking/count", response_model=TrackingCount, summary="Compter les entrées du tracker")
def count_entries(auth_user_id: uuid.UUID, db: Session = Depends(get_db)):
    return TrackingCount(count=tracking_service.count_entries(db, auth_user_id))


@router.post("/tracking", response_model=TrackedEntryResponse, status_code=201, summary="Ajouter une entrée")
def add_entry(auth_user_id: uuid.UUID, data: TrackedEntryCreate, db: Session = Depends(get_db)):
    """
    Ajoute une correction (remplace la présence officielle) ou une séance extra.
    Retourne 409 si l'utilisateur a déjà une entrée sur le même créneau.
    """
    try:
        return tracking_service.add_entry(db, auth_user_id, data)
    except ValueError as e:
        _raise_http(e)


@router.put("/tracking/{entry_id}", response_model=TrackedEntryResponse, summary="Modifier une entrée")
def update_entry(
    auth_user_id: uuid.UUID,
    entry_id: int,
    data: TrackedEntryUpdate,
    db: Session = Depends(get_db),
):
    try:
        return tracking_service.update_entry(db, auth_user_id, entry_id, data)
    except ValueError as e:
        _raise_http(e)


@router.delete("/tracking/{entry_id}", status_code=204, summary="Supprimer une entrée")
def delete_entry(auth_user_id: uuid.UUID, entry_id: int, db: Session = Depends(get_db)):
    """Retourne 404 si l'entrée n'existe pas ou appartient à un autre utilisateur."""
    try:
        tracking_service.delete_entry(db, auth_user_id, entry_id)
    except ValueError as e:
        _raise_http(e)


@router.delete("/tracking", response_model=TrackingCount, summary="Vider le tracker")
def delete_all(
    auth_user_id: uuid.UUID,
    semester: Optional[str] = None,
    year: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Supprime toutes les entrées de l'utilisateur ; renvoie le nombre supprimé."""
    return TrackingCount(count=tracking_service.delete_all(db, auth_user_id, semester, year))


@router.post("/dashboard", response_model=DashboardResponse, summary="Tableau de bord réconcilié")
def dashboard(auth_user_id: uuid.UUID, data: DashboardRequest, db: Session = Depends(get_db)):
    """
    Reçoit le relevé Ezygo récupéré par le client et renvoie, pour chaque cours :
    - les statistiques réconciliées avec le tracker de l'utilisateur
    - le conseil du calculateur (absences possibles / séances à rattraper)
    L'objectif de présence est celui des réglages de l'utilisateur.
    """
    return dashboard_service.get_user_dashboard(db, auth_user_id, data.report, data.aggregates)


@router.post("/tracking/sync", response_model=TrackerSyncResult, summary="Synchroniser le tracker")
def sync_tracker(auth_user_id: uuid.UUID, data: TrackerSyncRequest, db: Session = Depends(get_db)):
    """
    Compare le tracker au relevé officiel et nettoie les entrées devenues inutiles.

    - Supprime les entrées confirmées par le relevé officiel ou tombant sur une révision
    - Convertit en "correction" les séances extra contredites par le relevé
    - Crée les notifications correspondantes (emails si activés)
    """
    return tracker_sync_service.sync_user_tracker(
        db, auth_user_id, data.report, data.course_names, data.email, data.username
    )
