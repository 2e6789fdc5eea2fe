"""
Calculateur d'absences ("bunk").

À partir des séances présentes / totales et d'un objectif de présence, calcule :
- combien de séances peuvent encore être manquées sans passer sous l'objectif
- ou combien de séances consécutives il faut suivre pour l'atteindre

Fonction pure : une entrée invalide renvoie un résultat neutre (zéros), jamais d'exception.
"""

import math

from ghostclass.schemas.attendance import AttendanceResult

DEFAULT_TARGET = 75.0

# Sous 0.9 séance de marge, l'étudiant est au-dessus de l'objectif mais ne peut
# rien manquer : on le signale comme "borderline". Entre 0.9 et 1 aucun marqueur.
BORDERLINE_THRESHOLD = 0.9

# (present / total) * 100 dérive de l'objectif d'un epsilon (ex : 75.00000000000001)
PERCENTAGE_EPSILON = 1e-9


def sanitize_target(target_percentage, min_target: float = 1.0) -> float:
    """Objectif borné à [min_target, 100] ; 75 si absent ou non fini."""
    try:
        target = float(target_percentage)
    except (TypeError, ValueError):
        return DEFAULT_TARGET
    if not math.isfinite(target):
        return DEFAULT_TARGET
    return min(100.0, max(min_target, target))


def calculate_attendance(
    present: float,
    total: float,
    target_percentage: float = DEFAULT_TARGET,
    min_target: float = 1.0,
) -> AttendanceResult:
    """
    Calcule les absences possibles ou les séances à rattraper.

    - Sous l'objectif : plus petit k tel que (present + k) / (total + k) >= T
    - Au-dessus : plus grand n tel que present / (total + n) >= T
    - Exactement à l'objectif (à epsilon près) : is_exact, compteurs à 0
    """
    safe_target = sanitize_target(target_percentage, min_target)
    result = AttendanceResult(
        can_bunk=0,
        required_to_attend=0,
        target_percentage=safe_target,
        is_exact=False,
        is_borderline=False,
    )

    if not math.isfinite(present) or not math.isfinite(total):
        return result
    if total <= 0 or present < 0 or present > total:
        return result

    current = present / total * 100

    if abs(current - safe_target) < PERCENTAGE_EPSILON:
        result.is_exact = True
        return result

    if current < safe_target:
        if safe_target >= 100:
            result.required_to_attend = math.ceil(total - present)
        else:
            required = math.ceil((safe_target * total - 100 * present) / (100 - safe_target))
            result.required_to_attend = max(0, required)
        return result

    bunkable_exact = (100 * present - safe_target * total) / safe_target
    bunkable = math.floor(bunkable_exact)
    result.can_bunk = max(0, bunkable)

    if 0 < bunkable_exact < BORDERLINE_THRESHOLD and bunkable == 0:
        result.is_borderline = True

    return result
