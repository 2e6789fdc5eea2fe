"""
Tests unitaires du calculateur d'absences.
Couverture : entrées invalides, objectif exact, sous / au-dessus de l'objectif,
zone borderline, bornage de l'objectif.
"""

import math

import pytest

from ghostclass.services.bunk_calculator import calculate_attendance, sanitize_target


# ============================================================
# Entrées invalides → résultat neutre
# ============================================================

@pytest.mark.parametrize("present, total", [(10, 0), (0, 0), (5, -3), (15, 10), (-5, 10)])
def test_entree_invalide_renvoie_zeros(present, total):
    result = calculate_attendance(present, total, 75)

    assert result.can_bunk == 0
    assert result.required_to_attend == 0
    assert result.is_exact is False
    assert result.is_borderline is False
    assert result.target_percentage == 75


@pytest.mark.parametrize("present, total", [
    (math.nan, 10), (5, math.nan), (math.inf, 10), (5, math.inf), (-math.inf, 10), (math.inf, math.inf),
])
def test_entree_non_finie_renvoie_zeros(present, total):
    result = calculate_attendance(present, total, 75)

    assert result.can_bunk == 0
    assert result.required_to_attend == 0
    assert result.is_exact is False
    assert result.target_percentage == 75


# ============================================================
# Objectif exactement atteint
# ============================================================

def test_exactement_a_l_objectif():
    result = calculate_attendance(75, 100, 75)

    assert result.is_exact is True
    assert result.can_bunk == 0
    assert result.required_to_attend == 0


def test_exact_18_sur_24():
    """18/24 = 75 % : aucune marge, rien à rattraper."""
    result = calculate_attendance(18, 24, 75)

    assert result.is_exact is True
    assert result.can_bunk == 0
    assert result.required_to_attend == 0


def test_exact_80_pourcent():
    assert calculate_attendance(80, 100, 80).is_exact is True


# ============================================================
# Sous l'objectif → séances à rattraper
# ============================================================

def test_60_pourcent_vise_75():
    """ceil((75 * 100 - 100 * 60) / (100 - 75)) = 60."""
    result = calculate_attendance(60, 100, 75)

    assert result.required_to_attend == 60
    assert result.can_bunk == 0


def test_objectif_100_pourcent():
    result = calculate_attendance(50, 100, 100)
    assert result.required_to_attend == 50


def test_objectif_80_pourcent():
    result = calculate_attendance(40, 100, 80)

    assert result.required_to_attend == 200
    assert result.target_percentage == 80


@pytest.mark.parametrize("present", range(0, 23))
def test_rattrapage_est_le_minimum_suffisant(present):
    """k séances suivies suffisent, k - 1 ne suffisent pas."""
    total = 30
    k = calculate_attendance(present, total, 75).required_to_attend

    assert k > 0
    assert (present + k) / (total + k) * 100 >= 75
    assert (present + k - 1) / (total + k - 1) * 100 < 75


# ============================================================
# Au-dessus de l'objectif → absences possibles
# ============================================================

def test_90_pourcent_vise_75():
    result = calculate_attendance(90, 100, 75)

    assert result.can_bunk == 20
    assert result.required_to_attend == 0


def test_20_sur_25():
    assert calculate_attendance(20, 25, 75).can_bunk == 1


@pytest.mark.parametrize("present", range(23, 31))
def test_absences_est_le_maximum_sur(present):
    """Après n absences on reste au-dessus de 75 %, pas après n + 1."""
    total = 30
    n = calculate_attendance(present, total, 75).can_bunk

    assert present / (total + n) * 100 >= 75
    assert present / (total + n + 1) * 100 < 75


# ============================================================
# Zone borderline
# ============================================================

def test_borderline_75_5():
    """Marge de 0.67 séance : au-dessus de l'objectif mais aucune absence possible."""
    result = calculate_attendance(75.5, 100, 75)

    assert result.is_borderline is True
    assert result.is_exact is False
    assert result.can_bunk == 0


def test_pas_borderline_76():
    """Marge de 1.33 séance → une absence possible, pas de marqueur."""
    result = calculate_attendance(76, 100, 75)

    assert result.is_borderline is False
    assert result.can_bunk == 1


def test_zone_morte_entre_0_9_et_1():
    """Marge de 0.95 séance : ni absence possible ni borderline."""
    # (100 * 75.7125 - 75 * 100) / 75 = 0.95
    result = calculate_attendance(75.7125, 100, 75)

    assert result.can_bunk == 0
    assert result.is_borderline is False


# ============================================================
# Objectif : bornage et valeurs par défaut
# ============================================================

def test_objectif_par_defaut():
    assert calculate_attendance(90, 100).target_percentage == 75


@pytest.mark.parametrize("value", [float("nan"), float("inf"), None, "abc"])
def test_objectif_non_fini_retombe_a_75(value):
    assert sanitize_target(value) == 75
    assert calculate_attendance(90, 100, value).target_percentage == 75


def test_objectif_borne_entre_1_et_100():
    assert calculate_attendance(90, 100, 150).target_percentage == 100
    assert calculate_attendance(90, 100, 0).target_percentage == 1
    assert calculate_attendance(90, 100, -20).target_percentage == 1


def test_objectif_minimum_configurable():
    result = calculate_attendance(90, 100, 30, min_target=50)

    assert result.target_percentage == 50
    assert result.can_bunk == 80


def test_fonction_pure():
    first = calculate_attendance(67, 91, 72.5)
    second = calculate_attendance(67, 91, 72.5)

    assert first == second
    assert math.isfinite(first.target_percentage)
