"""Datenmodell für eine Lehrperson (Pydantic v2)."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from models.timeslot import TimeSlot, parse_timeslot


class Lecturer(BaseModel):
    """Repräsentiert eine Lehrperson samt Sperrzeiten."""

    id: str
    name: str = ""
    # Gesperrte Stunden (day, hour)
    unavailable_times: list[TimeSlot] = Field(
        default_factory=list,
        validation_alias=AliasChoices("unavailable_times", "unavailableTimes"),
    )
    # Individuelle Obergrenze pro Tag; None = Wert aus den Einstellungen
    max_daily_hours: Optional[int] = Field(None, ge=0, le=24)

    @field_validator("unavailable_times", mode="before")
    @classmethod
    def _parse_unavailable(cls, v):
        if v is None:
            return []
        # Einzelner String, ggf. kommagetrennt ("Monday 08:00, Friday 14:00")
        if isinstance(v, str):
            v = [t for t in v.split(",") if t.strip()]
        elif not isinstance(v, (list, tuple)):
            raise ValueError(f"Sperrzeiten als Liste erwartet, erhalten: {v!r}")
        slots: list[TimeSlot] = []
        for raw in v:
            slot = parse_timeslot(raw)
            if slot not in slots:
                slots.append(slot)
        return slots

    @property
    def label(self) -> str:
        return self.name or self.id

    def daily_cap(self, default: int) -> int:
        """Effektive Tagesobergrenze (individuell vor global)."""
        return self.max_daily_hours if self.max_daily_hours is not None else default

    def is_unavailable(self, slot: TimeSlot) -> bool:
        return slot in self.unavailable_times
