"""Gemeinsame Hilfsfunktionen für Terminal- und Excel-Ausgabe."""

from collections import Counter, defaultdict
from datetime import date

from config.defaults import DAY_SHORT_NAMES
from config.schema import GeneratorSettings, Weekday
from models.timetable import ScheduleEntry

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "year1":        "B3D4FF",
    "year2":        "FFF2B3",
    "year3":        "B3FFB3",
    "year4":        "FFB3E6",
    "sonstig":      "E0E0E0",
    "conflict":     "FF9999",
    "free":         "F5F5F5",
    "header":       "4472C4",
}


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


# ─── Wochenraster ─────────────────────────────────────────────────────────────

def build_hour_rows(settings: GeneratorSettings) -> list[int]:
    """Stunden des Zeitfensters (Zeilen des Wochenrasters)."""
    return list(range(settings.start_hour, settings.end_hour))


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00–{hour + 1:02d}:00"


def day_label(day: Weekday) -> str:
    return DAY_SHORT_NAMES.get(day, day.value[:2])


def group_label(year: int, semester: int) -> str:
    """(1, 2) → "Jahr 1 / Sem. 2"."""
    return f"Jahr {year} / Sem. {semester}"


def get_group_color(year: int) -> str:
    """Hex-Farbe je Studienjahr."""
    return COLORS.get(f"year{year}", COLORS["sonstig"])


def entries_by_slot(
    entries: list[ScheduleEntry],
) -> dict[tuple[Weekday, int], list[ScheduleEntry]]:
    """Gruppiert Einträge nach (Tag, Stunde)."""
    grid: dict[tuple[Weekday, int], list[ScheduleEntry]] = defaultdict(list)
    for e in entries:
        grid[(e.day, e.hour)].append(e)
    return grid


# ─── Zählungen ────────────────────────────────────────────────────────────────

def count_gaps(entries: list[ScheduleEntry]) -> int:
    """Zählt Freistunden (freie Stunden zwischen erster und letzter Sitzung pro Tag)."""
    by_day: dict[Weekday, list[int]] = defaultdict(list)
    for e in entries:
        by_day[e.day].append(e.hour)
    total = 0
    for hours in by_day.values():
        unique = sorted(set(hours))
        if len(unique) > 1:
            total += unique[-1] - unique[0] + 1 - len(unique)
    return total


def count_back_to_back(entries: list[ScheduleEntry]) -> int:
    """Zählt Paare direkt aufeinanderfolgender Stunden am selben Tag."""
    occupied = {(e.day, e.hour) for e in entries}
    return sum(1 for (day, hour) in occupied if (day, hour + 1) in occupied)


def count_room_usage(entries: list[ScheduleEntry]) -> dict[str, int]:
    """Belegte Stunden je Raum."""
    return dict(Counter(e.room_id for e in entries))


def count_lecturer_hours(entries: list[ScheduleEntry], lecturer_id: str) -> int:
    return sum(1 for e in entries if e.lecturer_id == lecturer_id)


# ─── Zelleninhalt-Formatierung ────────────────────────────────────────────────

def format_entry(entry: ScheduleEntry, mode: str = "group") -> str:
    """Formatiert einen einzelnen Entry als Zelleninhalt.

    mode='group':    "Kurs\nLehrperson\nRaum"
    mode='lecturer': "Kurs\nKohorte\nRaum"
    mode='room':     "Kurs\nLehrperson"
    """
    course = entry.course_label
    lecturer = entry.lecturer_name or entry.lecturer_id
    room = entry.room_name or entry.room_id

    if mode == "group":
        return f"{course}\n{lecturer}\n{room}"
    elif mode == "lecturer":
        return f"{course}\nJ{entry.year}/S{entry.semester}\n{room}"
    elif mode == "room":
        return f"{course}\n{lecturer}"
    return course


def format_entries(entries: list[ScheduleEntry], mode: str = "group") -> str:
    """Formatiert mehrere Entries für eine Zelle (getrennt durch ──)."""
    if not entries:
        return ""
    if len(entries) == 1:
        return format_entry(entries[0], mode)
    return "\n──\n".join(format_entry(e, mode) for e in entries)
