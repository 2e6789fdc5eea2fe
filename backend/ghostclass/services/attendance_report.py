"""
Aplatissement du relevé détaillé Ezygo en séances officielles.

studentAttendanceData est indexé par date puis par clé de séance :
    {"20260127": {"1": {"course": 101, "attendance": 110, "session": "1st Hour"}}}
"""

import logging
from typing import Dict, List

from pydantic import ValidationError

from ghostclass.schemas.attendance import AttendanceReport, SessionRecord
from ghostclass.services.reconciliation import get_official_session_raw

logger = logging.getLogger(__name__)


def flatten_sessions(report: AttendanceReport) -> List[SessionRecord]:
    """
    Renvoie la liste plate des séances officielles du relevé.
    Les séances sans cours ou sans code de présence sont ignorées une par une.
    Les séances "Revision" sont conservées : c'est la réconciliation qui les écarte.
    """
    records: List[SessionRecord] = []
    skipped = 0

    for date_key, day in report.student_attendance_data.items():
        if not isinstance(day, dict):
            skipped += 1
            continue
        for session_key, raw in day.items():
            if not isinstance(raw, dict) or raw.get("course") is None or raw.get("attendance") is None:
                skipped += 1
                continue
            try:
                record = SessionRecord.model_validate({
                    "course": raw.get("course"),
                    "date": date_key,
                    "session": get_official_session_raw(raw, session_key),
                    "attendance": raw.get("attendance"),
                    "class_type": raw.get("class_type"),
                })
            except ValidationError:
                skipped += 1
                continue
            records.append(record)

    if skipped:
        logger.debug("Relevé Ezygo : %d séances malformées ignorées", skipped)
    return records


def course_ids(report: AttendanceReport, sessions: List[SessionRecord]) -> List[str]:
    """IDs des cours connus (déclarés dans le relevé puis rencontrés dans les séances), sans doublon."""
    ids: List[str] = []
    for key, course in report.courses.items():
        cid = str(course.id) if course.id is not None else str(key)
        if cid not in ids:
            ids.append(cid)
    for record in sessions:
        cid = str(record.course)
        if cid not in ids:
            ids.append(cid)
    return ids


def course_names(report: AttendanceReport) -> Dict[str, str]:
    """Correspondance ID de cours → nom, pour les notifications."""
    return {str(course.id): course.name or str(course.id) for course in report.courses.values()}
