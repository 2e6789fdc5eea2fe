"""
Synchronisation du tracker avec le relevé officiel Ezygo.

Quand Ezygo met à jour une séance, l'entrée correspondante du tracker devient
souvent inutile ou contradictoire. Pour chaque entrée, comparée au créneau
officiel (date + séance normalisées) :
- séance officielle de révision            → entrée supprimée (notifiée si "extra")
- "extra" sur un créneau d'un autre cours  → entrée supprimée, notification de conflit de cours
- officiel positif ou identique au tracker → entrée supprimée (notifiée si l'officiel
                                             passe à présent alors que le tracker disait absent)
- officiel absent, "extra" présent         → entrée convertie en "correction", conflit notifié

Le plan est calculé sans base de données, puis appliqué en un seul commit.
Les emails sont envoyés au mieux : un échec SMTP n'annule pas la synchronisation.
"""

import smtplib
import uuid
import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from ghostclass.config import settings
from ghostclass.models.notification import Notification
from ghostclass.models.tracker import TrackedEntry
from ghostclass.schemas.attendance import AttendanceReport, EntryStatus, TrackedRecord
from ghostclass.schemas.sync import PlannedNotification, TrackerSyncPlan, TrackerSyncResult
from ghostclass.services import email_service, tracking_service
from ghostclass.services.attendance_report import course_names as report_course_names
from ghostclass.services.attendance_report import flatten_sessions
from ghostclass.services.reconciliation import (
    REVISION_CLASS_TYPE,
    AttendanceCode,
    parse_code,
)
from ghostclass.services.sessions import normalize_date, normalize_session, to_roman

logger = logging.getLogger(__name__)

# Codes officiels qui rendent une saisie du tracker superflue (le congé "autre" inclus)
SETTLING_CODES = {AttendanceCode.PRESENT, AttendanceCode.DUTY_LEAVE, AttendanceCode.OTHER_LEAVE}

EMAILED_KINDS = {"revision", "course_mismatch", "conflict"}


def day_slot_key(date_value, session) -> str:
    """Clé date|séance, sans le cours (un créneau horaire n'a qu'un cours officiel)."""
    return f"{normalize_date(date_value)}|{to_roman(normalize_session(session))}"


def plan_tracker_sync(
    report: AttendanceReport,
    entries: Iterable[TrackedRecord],
    course_names: Optional[Dict[str, str]] = None,
) -> TrackerSyncPlan:
    """Calcule les suppressions, conversions et notifications à appliquer."""
    names = report_course_names(report)
    names.update(course_names or {})

    official: Dict[str, tuple] = {}
    revision_keys = set()
    for record in flatten_sessions(report):
        key = day_slot_key(record.date, record.session)
        if record.class_type == REVISION_CLASS_TYPE:
            revision_keys.add(key)
            continue
        code = parse_code(record.attendance)
        if code is not None:
            official[key] = (code, str(record.course))

    plan = TrackerSyncPlan()

    for item in entries:
        if item.id is None or item.date is None or item.session is None:
            continue
        key = day_slot_key(item.date, item.session)
        tracked_course = str(item.course)
        tracked_name = names.get(tracked_course, tracked_course)
        session_label = str(item.session)

        if key in revision_keys:
            plan.to_delete.append(item.id)
            if item.status == EntryStatus.EXTRA.value:
                plan.notifications.append(PlannedNotification(
                    title="Séance de révision non comptée",
                    description=(
                        f"{tracked_name} - {item.date} ({session_label}) : Ezygo a marqué cette séance "
                        f"comme révision. Elle ne compte pas, votre saisie a été supprimée."
                    ),
                    topic=f"revision-{key}",
                    kind="revision",
                    course_name=tracked_name,
                    date=item.date,
                    session=session_label,
                ))
            continue

        if key not in official:
            continue
        official_code, official_course = official[key]
        official_name = names.get(official_course, official_course)

        if item.status == EntryStatus.EXTRA.value and tracked_course != official_course:
            plan.to_delete.append(item.id)
            plan.notifications.append(PlannedNotification(
                title="Conflit de cours",
                description=(
                    f"{item.date} ({session_label}) : {tracked_name} supprimé. "
                    f"Cours officiel : {official_name}"
                ),
                topic=f"conflict-course-{key}",
                kind="course_mismatch",
                course_name=official_name,
                date=item.date,
                session=session_label,
            ))
            continue

        tracked_code = parse_code(item.attendance)
        official_positive = official_code in SETTLING_CODES
        tracked_positive = tracked_code in SETTLING_CODES

        if official_positive or official_code == tracked_code:
            plan.to_delete.append(item.id)
            if official_positive and not tracked_positive:
                plan.notifications.append(PlannedNotification(
                    title="Présence mise à jour",
                    description=(
                        f"{official_name} - {item.date} ({session_label}) : le relevé officiel "
                        f"indique présent. Saisie manuelle supprimée."
                    ),
                    topic=f"sync-surprise-{key}",
                    kind="updated",
                    course_name=official_name,
                    date=item.date,
                    session=session_label,
                ))
        elif (
            official_code == AttendanceCode.ABSENT
            and tracked_positive
            and item.status == EntryStatus.EXTRA.value
        ):
            plan.to_mark_correction.append(item.id)
            plan.notifications.append(PlannedNotification(
                title="Conflit de présence",
                description=(
                    f"{official_name} - {item.date} ({session_label}) : "
                    f"vous avez indiqué présent, le relevé officiel indique absent."
                ),
                topic=f"conflict-{key}",
                kind="conflict",
                course_name=official_name,
                date=item.date,
                session=session_label,
            ))

    return plan


def sync_user_tracker(
    db: Session,
    auth_user_id: uuid.UUID,
    report: AttendanceReport,
    course_names: Optional[Dict[str, str]] = None,
    email: Optional[str] = None,
    username: str = "",
) -> TrackerSyncResult:
    """
    Applique le plan de synchronisation aux entrées de l'utilisateur.

    1. Charge les entrées du tracker de l'utilisateur
    2. Calcule le plan (plan_tracker_sync)
    3. Supprime / convertit les entrées et insère les notifications (un seul commit)
    4. Envoie les emails de conflit si SEND_SYNC_EMAILS est activé
    """
    rows = tracking_service.get_entry_rows(db, auth_user_id)
    entries = [TrackedRecord.model_validate(row) for row in rows]
    plan = plan_tracker_sync(report, entries, course_names)

    if plan.to_delete:
        db.execute(
            delete(TrackedEntry).where(
                TrackedEntry.auth_user_id == auth_user_id,
                TrackedEntry.id.in_(plan.to_delete),
            )
        )
    if plan.to_mark_correction:
        db.execute(
            update(TrackedEntry)
            .where(
                TrackedEntry.auth_user_id == auth_user_id,
                TrackedEntry.id.in_(plan.to_mark_correction),
            )
            .values(status=EntryStatus.CORRECTION.value)
        )
    for planned in plan.notifications:
        db.add(Notification(
            auth_user_id=auth_user_id,
            title=planned.title,
            description=planned.description,
            topic=planned.topic,
        ))
    db.commit()

    emails_sent = 0
    if email and settings.SEND_SYNC_EMAILS:
        for planned in plan.notifications:
            if planned.kind not in EMAILED_KINDS:
                continue
            try:
                email_service.send_sync_email(email, username, planned)
                emails_sent += 1
            except (smtplib.SMTPException, OSError) as exc:
                logger.error("Échec d'envoi de l'email %s : %s", planned.topic, exc)

    logger.info(
        "Sync tracker : %d entrées, %d supprimées, %d converties, %d notifications",
        len(entries), len(plan.to_delete), len(plan.to_mark_correction), len(plan.notifications),
    )

    return TrackerSyncResult(
        processed=len(entries),
        deletions=len(plan.to_delete),
        updates=len(plan.to_mark_correction),
        conflicts=len(plan.to_mark_correction),
        notifications=len(plan.notifications),
        emails_sent=emails_sent,
    )
