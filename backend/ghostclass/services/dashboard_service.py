"""
Tableau de bord : enchaîne réconciliation puis calculateur d'absences pour chaque cours.

Flux :
1. Aplatit le relevé Ezygo en séances officielles
2. Réconcilie chaque cours avec les entrées du tracker
3. Calcule les absences possibles / séances à rattraper sur les totaux réconciliés
"""

import uuid
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ghostclass.config import settings
from ghostclass.schemas.attendance import (
    AttendanceReport,
    CourseDashboard,
    DashboardResponse,
    OfficialAggregate,
    TrackedRecord,
)
from ghostclass.services import settings_service, tracking_service
from ghostclass.services.attendance_report import course_ids, flatten_sessions
from ghostclass.services.bunk_calculator import calculate_attendance
from ghostclass.services.reconciliation import get_reconciled_stats

logger = logging.getLogger(__name__)


def build_dashboard(
    report: AttendanceReport,
    tracked_entries: Iterable[TrackedRecord],
    target_percentage: float,
    aggregates: Optional[Dict[str, OfficialAggregate]] = None,
) -> List[CourseDashboard]:
    """Statistiques réconciliées et conseil du calculateur pour chaque cours du relevé."""
    sessions = flatten_sessions(report)
    entries = list(tracked_entries)
    aggregates = aggregates or {}

    rows: List[CourseDashboard] = []
    for cid in course_ids(report, sessions):
        stats = get_reconciled_stats(cid, sessions, entries, aggregates.get(cid))
        bunk = calculate_attendance(
            stats.present,
            stats.total,
            target_percentage,
            min_target=settings.MIN_TARGET_PERCENTAGE,
        )
        course = _find_course(report, cid)
        rows.append(CourseDashboard(
            course_id=cid,
            name=course.name if course and course.name else cid,
            code=course.code if course else None,
            stats=stats,
            bunk=bunk,
        ))
    return rows


def get_user_dashboard(
    db: Session,
    auth_user_id: uuid.UUID,
    report: AttendanceReport,
    aggregates: Optional[Dict[str, OfficialAggregate]] = None,
) -> DashboardResponse:
    """Tableau de bord d'un utilisateur : charge son tracker et son objectif depuis la base."""
    user_settings = settings_service.get_settings(db, auth_user_id)
    entries = [
        TrackedRecord.model_validate(row)
        for row in tracking_service.get_entry_rows(db, auth_user_id)
    ]

    courses = build_dashboard(report, entries, user_settings.target_percentage, aggregates)
    logger.info("Dashboard calculé : %d cours, %d entrées tracker", len(courses), len(entries))

    return DashboardResponse(
        target_percentage=user_settings.target_percentage,
        bunk_calculator_enabled=user_settings.bunk_calculator_enabled,
        courses=courses,
    )


def _find_course(report: AttendanceReport, cid: str):
    for key, course in report.courses.items():
        if str(course.id) == cid or key == cid:
            return course
    return None
