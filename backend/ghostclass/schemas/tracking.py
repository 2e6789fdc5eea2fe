"""
Schémas Pydantic pour les entrées du tracker (corrections et séances extra).
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from ghostclass.schemas.attendance import EntryStatus

VALID_ATTENDANCE_CODES = {110, 111, 112, 225}


class TrackedEntryCreate(BaseModel):
    """Données saisies par l'étudiant via le formulaire d'ajout."""
    course: Union[int, str]
    date: str
    session: Union[int, str]
    year: Optional[str] = None
    semester: Optional[str] = None
    status: EntryStatus = EntryStatus.CORRECTION
    attendance: int = 110
    remarks: Optional[str] = None

    @field_validator("course", "date", "session")
    @classmethod
    def not_empty(cls, v):
        v = str(v).strip()
        if not v:
            raise ValueError("Champ obligatoire.")
        return v

    @field_validator("attendance")
    @classmethod
    def valid_code(cls, v: int) -> int:
        if v not in VALID_ATTENDANCE_CODES:
            raise ValueError(f"Code de présence invalide. Valeurs acceptées : {VALID_ATTENDANCE_CODES}")
        return v


class TrackedEntryUpdate(BaseModel):
    status: Optional[EntryStatus] = None
    attendance: Optional[int] = None
    remarks: Optional[str] = None

    @field_validator("attendance")
    @classmethod
    def valid_code(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in VALID_ATTENDANCE_CODES:
            raise ValueError(f"Code de présence invalide. Valeurs acceptées : {VALID_ATTENDANCE_CODES}")
        return v


class TrackedEntryResponse(BaseModel):
    id: int
    course: str
    date: str
    session: str
    year: Optional[str]
    semester: Optional[str]
    status: str
    attendance: int
    remarks: Optional[str]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TrackingCount(BaseModel):
    count: int
