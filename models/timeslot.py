"""Datenmodell für einen Zeitslot im Wochenraster."""

from dataclasses import dataclass
from typing import Optional

from config.schema import Weekday


@dataclass(frozen=True)
class TimeSlot:
    """Repräsentiert eine einzelne Stunde im Wochenraster.

    Kombination aus Wochentag und voller Stunde (1-Stunden-Raster).
    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    """

    day: Weekday
    # Beginn als volle Stunde (8 = 08:00)
    hour: int

    @property
    def start_time(self) -> str:
        return f"{self.hour:02d}:00"

    @property
    def end_time(self) -> str:
        return f"{self.hour + 1:02d}:00"

    @property
    def slot_id(self) -> str:
        """Eindeutiger String-Bezeichner (z.B. "Monday_08")."""
        return f"{self.day.value}_{self.hour:02d}"

    def shifted(self, delta: int) -> Optional["TimeSlot"]:
        """Slot am selben Tag, delta Stunden versetzt (None außerhalb 0–23)."""
        hour = self.hour + delta
        if not 0 <= hour <= 23:
            return None
        return TimeSlot(self.day, hour)

    def __repr__(self) -> str:
        return f"TimeSlot({self.day.value}, {self.start_time})"

    def __str__(self) -> str:
        return f"{self.day.value} {self.start_time}"


# ─── Parsing ──────────────────────────────────────────────────────────────────

_DAY_PREFIXES = {d.value.lower()[:3]: d for d in Weekday}


def parse_day(raw: str) -> Weekday:
    """'Monday', 'monday', 'Mon' → Weekday.MONDAY."""
    key = raw.strip().lower()[:3]
    if key not in _DAY_PREFIXES:
        raise ValueError(f"Unbekannter Wochentag: {raw!r}")
    return _DAY_PREFIXES[key]


def parse_hour(raw: str) -> int:
    """'09:00', '9:00', '9:00 AM', '1:00 PM' → volle Stunde (24h)."""
    text = raw.strip().upper()
    suffix = None
    if text.endswith("AM") or text.endswith("PM"):
        suffix = text[-2:]
        text = text[:-2].strip()
    hour = int(text.partition(":")[0])
    if suffix == "PM" and hour != 12:
        hour += 12
    elif suffix == "AM" and hour == 12:
        hour = 0
    if not 0 <= hour <= 23:
        raise ValueError(f"Ungültige Uhrzeit: {raw!r}")
    return hour


def parse_timeslot(raw) -> TimeSlot:
    """Parst eine Sperrzeit aus den im Datenbestand üblichen Formaten.

    Unterstützt:
      - TimeSlot-Instanz
      - "Monday 09:00" / "Monday 9:00 AM"
      - {"day": "Monday", "time": "09:00"} bzw. {"day": ..., "hour": 9}
    """
    if isinstance(raw, TimeSlot):
        return raw
    if isinstance(raw, str):
        day_str, _, time_str = raw.strip().partition(" ")
        if not time_str:
            raise ValueError(f"Sperrzeit ohne Uhrzeit: {raw!r}")
        return TimeSlot(parse_day(day_str), parse_hour(time_str))
    if isinstance(raw, dict):
        day = raw.get("day")
        if day is None:
            raise ValueError(f"Sperrzeit ohne Tag: {raw!r}")
        day = day if isinstance(day, Weekday) else parse_day(str(day))
        if raw.get("hour") is not None:
            return TimeSlot(day, int(raw["hour"]))
        time_str = raw.get("time") or raw.get("start_time")
        if time_str is None:
            raise ValueError(f"Sperrzeit ohne Uhrzeit: {raw!r}")
        return TimeSlot(day, parse_hour(str(time_str)))
    raise ValueError(f"Sperrzeit in unbekanntem Format: {raw!r}")
