"""
Schémas Pydantic pour les réglages du calculateur d'absences.
"""

import math
from typing import Optional

from pydantic import BaseModel, field_validator


class SettingsResponse(BaseModel):
    target_percentage: float
    bunk_calculator_enabled: bool
    min_target_percentage: float


class SettingsUpdate(BaseModel):
    target_percentage: Optional[float] = None
    bunk_calculator_enabled: Optional[bool] = None

    @field_validator("target_percentage")
    @classmethod
    def finite_target(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("L'objectif de présence doit être un nombre fini.")
        return v
