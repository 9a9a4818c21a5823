"""Datenmodell für einen Studiengang (Pydantic v2)."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class Program(BaseModel):
    """Repräsentiert einen Studiengang, für den ein Stundenplan erzeugt wird."""

    id: str
    name: str = ""
    # Studierendenzahl (Mindestkapazität bei consider_room_capacity)
    student_count: Optional[int] = Field(
        None, ge=0,
        validation_alias=AliasChoices("student_count", "num_students"),
    )
