"""Datenmodell für einen Raum (Pydantic v2)."""

from pydantic import BaseModel, Field, field_validator


class Room(BaseModel):
    """Repräsentiert einen Hörsaal, Seminarraum oder ein Labor."""

    id: str
    name: str = ""
    room_type: str = ""  # "Lecture Hall", "Computer Lab", ...
    capacity: int = Field(0, ge=0)

    @field_validator("capacity", mode="before")
    @classmethod
    def _default_capacity(cls, v):
        return 0 if v is None else v

    @property
    def label(self) -> str:
        return self.name or self.id
