"""
Service métier pour le tracker (corrections et séances extra).
Toutes les requêtes sont filtrées par auth_user_id : jamais d'accès inter-utilisateurs.
"""

import uuid
import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ghostclass.models.tracker import TrackedEntry
from ghostclass.schemas.tracking import (
    TrackedEntryCreate,
    TrackedEntryResponse,
    TrackedEntryUpdate,
)
from ghostclass.services.sessions import generate_slot_key

logger = logging.getLogger(__name__)


def list_entries(
    db: Session,
    auth_user_id: uuid.UUID,
    semester: Optional[str] = None,
    year: Optional[str] = None,
) -> List[TrackedEntryResponse]:
    """Retourne les entrées de l'utilisateur, des plus récentes aux plus anciennes."""
    entries = get_entry_rows(db, auth_user_id, semester, year)
    return [TrackedEntryResponse.model_validate(e) for e in entries]


def get_entry_rows(
    db: Session,
    auth_user_id: uuid.UUID,
    semester: Optional[str] = None,
    year: Optional[str] = None,
) -> List[TrackedEntry]:
    """Lignes ORM brutes de l'utilisateur (utilisées par le dashboard et la synchronisation)."""
    query = select(TrackedEntry).where(TrackedEntry.auth_user_id == auth_user_id)
    if semester is not None:
        query = query.where(TrackedEntry.semester == semester)
    if year is not None:
        query = query.where(TrackedEntry.year == year)
    return db.execute(query.order_by(TrackedEntry.created_at.desc())).scalars().all()


def count_entries(db: Session, auth_user_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count(TrackedEntry.id)).where(TrackedEntry.auth_user_id == auth_user_id)
    ).scalar() or 0


def add_entry(db: Session, auth_user_id: uuid.UUID, data: TrackedEntryCreate) -> TrackedEntryResponse:
    """
    Ajoute une correction ou une séance extra.

    Le créneau est comparé après normalisation (cours, date AAAAMMJJ, séance en romain) :
    "2026-01-27 / 1st Hour" et "27/01/2026 / I" désignent le même créneau.
    Lève ValueError si l'utilisateur a déjà une entrée sur ce créneau.
    """
    key = generate_slot_key(data.course, data.date, data.session)
    existing = db.execute(
        select(TrackedEntry).where(
            TrackedEntry.auth_user_id == auth_user_id,
            TrackedEntry.course == str(data.course),
        )
    ).scalars().all()
    if any(generate_slot_key(e.course, e.date, e.session) == key for e in existing):
        raise ValueError(f"Une entrée existe déjà pour le créneau {key}.")

    entry = TrackedEntry(
        auth_user_id=auth_user_id,
        course=str(data.course),
        date=data.date,
        session=str(data.session),
        year=data.year,
        semester=data.semester,
        status=data.status.value,
        attendance=data.attendance,
        remarks=data.remarks,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info("Entrée tracker ajoutée : %s (%s)", key, entry.status)
    return TrackedEntryResponse.model_validate(entry)


def update_entry(
    db: Session,
    auth_user_id: uuid.UUID,
    entry_id: int,
    data: TrackedEntryUpdate,
) -> TrackedEntryResponse:
    """Met à jour le statut, le code ou les remarques d'une entrée. Lève ValueError si introuvable."""
    entry = _get_owned_entry(db, auth_user_id, entry_id)

    if data.status is not None:
        entry.status = data.status.value
    if data.attendance is not None:
        entry.attendance = data.attendance
    if data.remarks is not None:
        entry.remarks = data.remarks

    db.commit()
    db.refresh(entry)
    return TrackedEntryResponse.model_validate(entry)


def delete_entry(db: Session, auth_user_id: uuid.UUID, entry_id: int) -> None:
    """Supprime une entrée de l'utilisateur. Lève ValueError si introuvable."""
    entry = _get_owned_entry(db, auth_user_id, entry_id)
    db.delete(entry)
    db.commit()
    logger.info("Entrée tracker %d supprimée", entry_id)


def delete_all(
    db: Session,
    auth_user_id: uuid.UUID,
    semester: Optional[str] = None,
    year: Optional[str] = None,
) -> int:
    """Supprime toutes les entrées de l'utilisateur (éventuellement d'un semestre / d'une année)."""
    stmt = delete(TrackedEntry).where(TrackedEntry.auth_user_id == auth_user_id)
    if semester is not None:
        stmt = stmt.where(TrackedEntry.semester == semester)
    if year is not None:
        stmt = stmt.where(TrackedEntry.year == year)
    result = db.execute(stmt)
    db.commit()

    deleted = result.rowcount or 0
    logger.info("%d entrées tracker supprimées", deleted)
    return deleted


def _get_owned_entry(db: Session, auth_user_id: uuid.UUID, entry_id: int) -> TrackedEntry:
    entry = db.execute(
        select(TrackedEntry).where(
            TrackedEntry.id == entry_id,
            TrackedEntry.auth_user_id == auth_user_id,
        )
    ).scalar()
    if entry is None:
        raise ValueError(f"Entrée {entry_id} introuvable.")
    return entry
