"""Datenmodell für eine Lehrveranstaltung (Pydantic v2)."""

import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from config.defaults import (
    DEFAULT_CREDIT_HOURS,
    DEFAULT_EXPECTED_STUDENTS,
    DEFAULT_SEMESTER,
    DEFAULT_YEAR,
)

# Kohorte: (Studienjahr, Semester)
GroupKey = tuple[int, int]

_FIELD_DEFAULTS = {
    "credit_hours": DEFAULT_CREDIT_HOURS,
    "expected_students": DEFAULT_EXPECTED_STUDENTS,
    "year": DEFAULT_YEAR,
    "semester": DEFAULT_SEMESTER,
}


class Course(BaseModel):
    """Repräsentiert einen Kurs mit seinem wöchentlichen Stundenbedarf."""

    id: str
    program_id: str
    name: str = ""
    code: str = ""
    credit_hours: int = Field(DEFAULT_CREDIT_HOURS, ge=1)
    year: int = Field(DEFAULT_YEAR, ge=1)
    semester: int = Field(DEFAULT_SEMESTER, ge=1)
    lecturer_id: Optional[str] = None            # feste Zuordnung (optional)
    expected_students: int = Field(DEFAULT_EXPECTED_STUDENTS, ge=0)

    @field_validator("credit_hours", "expected_students", "year", "semester",
                     mode="before")
    @classmethod
    def _fill_missing(cls, v, info):
        # Der Datenbestand liefert fehlende Felder teils als null
        return _FIELD_DEFAULTS[info.field_name] if v is None else v

    @field_validator("lecturer_id", mode="before")
    @classmethod
    def _empty_lecturer(cls, v):
        return v or None

    @property
    def group_key(self) -> GroupKey:
        """Kohorte (year, semester), gegen die Doppelbelegung geprüft wird."""
        return (self.year, self.semester)

    @property
    def label(self) -> str:
        return self.name or self.code or self.id

    def sessions_needed(self, session_length: int) -> int:
        """Anzahl Sitzungen pro Woche: ceil(credit_hours / session_length)."""
        return math.ceil(self.credit_hours / session_length)
