"""
Réconciliation du relevé officiel Ezygo avec le tracker de l'étudiant.

Fusionne, créneau par créneau, les séances officielles d'un cours et les
entrées du tracker (corrections / séances extra) en un seul décompte
présent / absent / total, sans double comptage.

Règles :
- une séance "Revision" n'est jamais comptée
- une entrée du tracker sur un créneau officiel remplace le code officiel (total inchangé)
- une entrée "extra" sans créneau officiel ajoute une séance
- une "correction" sans créneau officiel est ignorée
- une seule entrée du tracker compte par créneau
- une donnée malformée est ignorée individuellement, la fonction ne lève jamais
"""

import enum
import logging
import math
from typing import Iterable, Optional, Union

from ghostclass.schemas.attendance import (
    EntryStatus,
    OfficialAggregate,
    ReconciledStats,
    SessionRecord,
    TrackedRecord,
)
from ghostclass.services.sessions import generate_slot_key

logger = logging.getLogger(__name__)

REVISION_CLASS_TYPE = "Revision"


class AttendanceCode(enum.IntEnum):
    """Codes de présence Ezygo (contrat externe, ne pas renuméroter)."""
    PRESENT = 110
    ABSENT = 111
    OTHER_LEAVE = 112
    DUTY_LEAVE = 225


ATTENDANCE_STATUS = {code.name: code.value for code in AttendanceCode}


def is_positive(code: int) -> bool:
    """Présent ou congé de service (duty leave)."""
    return code in (AttendanceCode.PRESENT, AttendanceCode.DUTY_LEAVE)


def is_absent(code: int) -> bool:
    # 0 n'est pas un état Ezygo documenté (valeur non initialisée) : pas une absence
    return code == AttendanceCode.ABSENT


def classify(code: int) -> str:
    """Catégorie d'affichage d'un code : present, duty_leave, absent, other_leave ou unknown."""
    try:
        member = AttendanceCode(code)
    except ValueError:
        return "unknown"
    if member is AttendanceCode.PRESENT:
        return "present"
    if member is AttendanceCode.DUTY_LEAVE:
        return "duty_leave"
    if member is AttendanceCode.ABSENT:
        return "absent"
    return "other_leave"


def get_official_session_raw(session_data, session_key: Union[str, int]) -> Union[str, int]:
    """Libellé de séance porté par l'enregistrement s'il est renseigné, sinon la clé brute."""
    if session_data is None:
        return session_key
    if isinstance(session_data, dict):
        value = session_data.get("session")
    else:
        value = getattr(session_data, "session", None)
    if value is not None and value != "":
        return value
    return session_key


def parse_code(value) -> Optional[int]:
    """Code de présence entier, ou None si absent / non numérique / décimal ("110.9")."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number != int(number):
        return None
    return int(number)


def _parse_status(value) -> Optional[EntryStatus]:
    try:
        return EntryStatus(value)
    except ValueError:
        return None


def get_reconciled_stats(
    course_id: Union[str, int],
    official_sessions: Optional[Iterable[SessionRecord]],
    tracked_entries: Optional[Iterable[TrackedRecord]],
    official_aggregate: Optional[OfficialAggregate] = None,
) -> ReconciledStats:
    """
    Calcule les statistiques réconciliées d'un cours.

    Étapes :
    1. Construit la table des créneaux officiels du cours (hors Revision)
    2. Si le calendrier est vide, part du résumé officiel (official_aggregate)
    3. Applique les entrées du tracker du cours (remplacement ou séance extra)
    4. Finalise : present = officiel + corrections + extras, total = officiel + extras
    """
    stats = ReconciledStats()
    course = str(course_id)

    official_map: dict = {}
    for record in official_sessions or []:
        if record.class_type == REVISION_CLASS_TYPE:
            continue
        if record.course is None or str(record.course) != course:
            continue
        code = parse_code(record.attendance)
        if code is None or not record.date or record.session in (None, ""):
            logger.debug("Séance officielle malformée ignorée : %s", record)
            continue

        official_map[generate_slot_key(course, record.date, record.session)] = code

        stats.real_total += 1
        if is_positive(code):
            stats.real_present += 1
        else:
            stats.real_absent += 1
        if code == AttendanceCode.DUTY_LEAVE:
            stats.real_dl += 1
        if code == AttendanceCode.OTHER_LEAVE:
            stats.real_other += 1

    if stats.real_total == 0 and official_aggregate is not None:
        stats.real_present = max(0, official_aggregate.present)
        stats.real_total = max(stats.real_present, official_aggregate.total)
        stats.real_absent = stats.real_total - stats.real_present

    seen_slots = set()
    for entry in tracked_entries or []:
        if entry.course is None or str(entry.course) != course:
            continue
        code = parse_code(entry.attendance)
        status = _parse_status(entry.status)
        if code is None or status is None or not entry.date or entry.session in (None, ""):
            logger.debug("Entrée du tracker malformée ignorée : %s", entry)
            continue

        key = generate_slot_key(course, entry.date, entry.session)
        if key in seen_slots:
            continue
        seen_slots.add(key)

        official_code = official_map.get(key)

        if official_code is None:
            if status is EntryStatus.CORRECTION:
                # Pas de séance officielle à corriger : on ne devine pas l'intention
                logger.debug("Correction sans séance officielle ignorée : %s", key)
                continue
            stats.extras_count += 1
            if is_positive(code):
                stats.extra_present += 1
            else:
                stats.extra_absent += 1
            if code == AttendanceCode.DUTY_LEAVE:
                stats.extra_dl += 1
            continue

        official_positive = is_positive(official_code)
        tracked_positive = is_positive(code)
        if not official_positive and tracked_positive:
            stats.correction_present += 1
            stats.saved_absent += 1
        elif official_positive and not tracked_positive:
            stats.correction_absent += 1
        if official_code != AttendanceCode.DUTY_LEAVE and code == AttendanceCode.DUTY_LEAVE:
            stats.correction_dl += 1

    stats.present = (
        stats.real_present + stats.correction_present - stats.correction_absent + stats.extra_present
    )
    stats.total = stats.real_total + stats.extras_count
    stats.absent = stats.total - stats.present

    stats.official_percentage = _percentage(stats.real_present, stats.real_total)
    stats.percentage = _percentage(stats.present, stats.total)
    return stats


def _percentage(present: int, total: int) -> float:
    return round(present / total * 100, 2) if total > 0 else 0.0
