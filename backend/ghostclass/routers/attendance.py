"""
Router du cœur de calcul (sans état) : calculateur d'absences, réconciliation
d'un cours et aplatissement d'un relevé Ezygo.
"""

from typing import List

from fastapi import APIRouter

from ghostclass.config import settings
from ghostclass.schemas.attendance import (
    AttendanceReport,
    AttendanceResult,
    BunkRequest,
    ReconciledStats,
    ReconcileRequest,
    SessionRecord,
)
from ghostclass.services import attendance_report
from ghostclass.services.bunk_calculator import calculate_attendance
from ghostclass.services.reconciliation import get_reconciled_stats

router = APIRouter(prefix="/api/attendance", tags=["Calcul de présence"])


@router.post("/bunk", response_model=AttendanceResult, summary="Calculer les absences possibles")
def bunk(data: BunkRequest):
    """
    Calcule combien de séances peuvent être manquées (can_bunk) ou combien doivent
    être suivies pour atteindre l'objectif (required_to_attend).

    Une entrée invalide (non finie, total <= 0, present < 0, present > total) renvoie des zéros.
    Sans objectif fourni, l'objectif par défaut de la configuration est utilisé ;
    l'objectif est borné à [MIN_TARGET_PERCENTAGE, 100] comme pour le tableau de bord.
    """
    target = (
        data.target_percentage
        if data.target_percentage is not None
        else settings.DEFAULT_TARGET_PERCENTAGE
    )
    return calculate_attendance(
        data.present, data.total, target, min_target=settings.MIN_TARGET_PERCENTAGE
    )


@router.post("/reconcile", response_model=ReconciledStats, summary="Réconcilier un cours")
def reconcile(data: ReconcileRequest):
    """
    Fusionne les séances officielles d'un cours avec les entrées du tracker
    et renvoie les compteurs réconciliés. Ne renvoie jamais d'erreur métier.
    """
    return get_reconciled_stats(data.course_id, data.sessions, data.tracked_entries, data.aggregate)


@router.post("/sessions", response_model=List[SessionRecord], summary="Aplatir un relevé Ezygo")
def sessions(report: AttendanceReport):
    """Transforme studentAttendanceData (date → séance → données) en liste de séances."""
    return attendance_report.flatten_sessions(report)
