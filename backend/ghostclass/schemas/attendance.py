"""
Schémas Pydantic du cœur de calcul : relevé officiel Ezygo, entrées du tracker,
statistiques réconciliées et résultat du calculateur d'absences.
"""

import enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EntryStatus(str, enum.Enum):
    """Nature d'une entrée du tracker."""
    CORRECTION = "correction"   # Remplace la présence officielle de la séance
    EXTRA = "extra"             # Séance absente du relevé officiel


class SessionRecord(BaseModel):
    """Une séance du relevé officiel Ezygo (lecture seule)."""
    course: Optional[Union[int, str]] = None
    date: Optional[str] = None
    session: Optional[Union[int, str]] = None
    attendance: Optional[Union[int, str]] = None   # Code Ezygo (110, 111, 112, 225)
    class_type: Optional[str] = None               # "Revision" → jamais comptée


class TrackedRecord(BaseModel):
    """
    Vue minimale d'une entrée du tracker pour la réconciliation.
    Les champs sont optionnels : une entrée incomplète est ignorée, pas rejetée.
    """
    id: Optional[int] = None
    course: Optional[Union[int, str]] = None
    date: Optional[str] = None
    session: Optional[Union[int, str]] = None
    status: Optional[str] = None
    attendance: Optional[Union[int, str]] = None

    model_config = {"from_attributes": True}


class OfficialAggregate(BaseModel):
    """Résumé officiel d'un cours, utilisé quand le calendrier est vide."""
    present: int = 0
    absent: int = 0
    total: int = 0


class CourseInfo(BaseModel):
    id: Union[int, str]
    name: str = ""
    code: Optional[str] = None


class AttendanceReport(BaseModel):
    """
    Relevé détaillé renvoyé par Ezygo (/attendancereports/student/detailed).
    studentAttendanceData : {date: {clé_séance: {course, attendance, session, class_type}}}
    Les séances sont gardées brutes et validées une par une au moment de l'aplatissement.
    """
    courses: Dict[str, CourseInfo] = Field(default_factory=dict)
    student_attendance_data: Dict[str, Any] = Field(
        default_factory=dict, alias="studentAttendanceData"
    )

    model_config = ConfigDict(populate_by_name=True)


class ReconciledStats(BaseModel):
    """Statistiques d'un cours après fusion du relevé officiel et du tracker."""
    present: int = 0
    absent: int = 0
    total: int = 0
    percentage: float = 0.0

    real_present: int = 0
    real_absent: int = 0
    real_total: int = 0
    real_dl: int = 0
    real_other: int = 0

    correction_present: int = 0
    correction_absent: int = 0
    saved_absent: int = 0
    correction_dl: int = 0

    extra_present: int = 0
    extra_absent: int = 0
    extra_dl: int = 0
    extras_count: int = 0

    official_percentage: float = 0.0


class AttendanceResult(BaseModel):
    """Résultat du calculateur : absences possibles ou séances à rattraper."""
    can_bunk: int
    required_to_attend: int
    target_percentage: float
    is_exact: bool
    is_borderline: bool


class BunkRequest(BaseModel):
    present: float
    total: float
    target_percentage: Optional[float] = None


class ReconcileRequest(BaseModel):
    course_id: Union[int, str]
    sessions: List[SessionRecord] = []
    tracked_entries: List[TrackedRecord] = []
    aggregate: Optional[OfficialAggregate] = None


class CourseDashboard(BaseModel):
    """Une ligne du tableau de bord : stats réconciliées + conseil du calculateur."""
    course_id: str
    name: str
    code: Optional[str]
    stats: ReconciledStats
    bunk: AttendanceResult


class DashboardRequest(BaseModel):
    report: AttendanceReport
    aggregates: Dict[str, OfficialAggregate] = {}


class DashboardResponse(BaseModel):
    target_percentage: float
    bunk_calculator_enabled: bool = True
    courses: List[CourseDashboard]
