"""
Normalisation des séances et des dates pour faire correspondre le relevé officiel
Ezygo et les entrées du tracker.

Ezygo et les formulaires n'écrivent pas les séances de la même façon
("1st Hour", "Session 1", "I", 1) ni les dates ("20260127", "2026-01-27",
"27/01/2026"). Toutes les comparaisons passent par une clé de créneau :
    COURS_AAAAMMJJ_ROMAIN   (ex : 101_20260127_I)
"""

import re
from datetime import date, datetime
from typing import Union

_ROMAN_TO_INT = {
    "i": 1, "ii": 2, "iii": 3, "iv": 4, "v": 5,
    "vi": 6, "vii": 7, "viii": 8, "ix": 9, "x": 10,
}

_ROMAN_NUMERALS = [
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]

_SESSION_WORDS = re.compile(r"session|hour|lecture|lec|lab")
_ORDINAL_SUFFIX = re.compile(r"(?<=\d)(st|nd|rd|th)$")


def normalize_session(value) -> str:
    """
    Ramène un libellé de séance à son numéro : "Session 1" → "1", "2nd Hour" → "2",
    "III" → "3". Un libellé non numérique est renvoyé en majuscules ("Extra" → "EXTRA").
    """
    if value is None:
        return ""
    clean = _SESSION_WORDS.sub("", str(value).lower()).strip()
    clean = _ORDINAL_SUFFIX.sub("", clean).strip()

    if clean in _ROMAN_TO_INT:
        return str(_ROMAN_TO_INT[clean])
    if clean.isdigit():
        return str(int(clean))
    return clean.upper()


def to_roman(value) -> str:
    """Entier positif → chiffres romains majuscules ; toute autre valeur → sa forme texte."""
    try:
        number = int(str(value).strip())
    except ValueError:
        return str(value)
    if number <= 0:
        return str(value)

    parts = []
    for arabic, roman in _ROMAN_NUMERALS:
        while number >= arabic:
            parts.append(roman)
            number -= arabic
    return "".join(parts)


def normalize_date(value: Union[str, date, datetime, None]) -> str:
    """Renvoie la date au format AAAAMMJJ, quel que soit le format d'entrée ("" si vide)."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y%m%d")

    raw = str(value).strip()
    if not raw:
        return ""
    if "T" in raw:
        return raw.split("T")[0].replace("-", "")

    digits_only = re.sub(r"[^0-9]", "", raw)
    if len(digits_only) == 8 and "/" not in raw and "-" not in raw:
        return digits_only

    for separator in ("/", "-"):
        if separator in raw:
            parts = raw.split(separator)
            if len(parts) == 3:
                a, b, c = parts
                if len(a) == 4:
                    return f"{a}{b.zfill(2)}{c.zfill(2)}"
                if len(c) == 4:
                    return f"{c}{b.zfill(2)}{a.zfill(2)}"

    if len(digits_only) >= 8:
        return digits_only[-8:]
    return digits_only


def normalize_to_iso_date(value: str) -> str:
    """AAAA-MM-JJ à partir d'un datetime ISO, de JJ/MM/AAAA ou de AAAAMMJJ. Sinon inchangé."""
    if not value:
        return ""
    raw = value.strip()
    if "T" in raw:
        return raw.split("T")[0]
    if "/" in raw:
        parts = raw.split("/")
        if len(parts) != 3 or not all(parts) or len(parts[2]) != 4:
            return value
        day, month, year = parts
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    if len(raw) == 8 and raw.isdigit():
        return f"{raw[:4]}-{raw[4:6]}-{raw[6:]}"
    return value


def generate_slot_key(course, date_value, session) -> str:
    """Clé unique d'un créneau : COURS_AAAAMMJJ_ROMAIN."""
    return f"{str(course).strip()}_{normalize_date(date_value)}_{to_roman(normalize_session(session))}"


def format_session_name(name) -> str:
    """Libellé d'affichage : "II" → "2nd Hour", "21" → "21st Hour"."""
    if name is None or str(name) == "":
        return ""
    raw = str(name)
    clean = re.sub(r"session|hour", "", raw, flags=re.IGNORECASE).strip()

    lower = clean.lower()
    if lower in _ROMAN_TO_INT:
        return _ordinal(_ROMAN_TO_INT[lower]) + " Hour"
    if clean.isdigit() and int(clean) > 0:
        return _ordinal(int(clean)) + " Hour"

    return raw if "session" in raw.lower() else f"Session {raw}"


def get_session_number(name) -> int:
    """Numéro de tri d'une séance ; 999 si inconnu."""
    if name is None or str(name) == "":
        return 999
    clean = re.sub(r"session|hour", "", str(name).lower()).strip()
    if clean in _ROMAN_TO_INT:
        return _ROMAN_TO_INT[clean]
    match = re.search(r"\d+", clean)
    return int(match.group()) if match else 999


def _ordinal(number: int) -> str:
    if number % 10 == 1 and number % 100 != 11:
        return f"{number}st"
    if number % 10 == 2 and number % 100 != 12:
        return f"{number}nd"
    if number % 10 == 3 and number % 100 != 13:
        return f"{number}rd"
    return f"{number}th"
