"""Gemeinsamer Renderer für die Terminal-Anzeige des Stundenplans.

Wird von cmd_show (Rich-Tabelle) verwendet.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solver.scheduler import TimetableSolution
    from models.timetable import ScheduleEntry


def _render_rows(
    entries: list["ScheduleEntry"],
    solution: "TimetableSolution",
    mode: str,
    mark_gaps: bool = False,
) -> list[list[str]]:
    """Wochenraster: eine Zeile pro Stunde, eine Spalte pro Tag.

    Jede Zeile: [time_label, Mo, Di, ...]
    """
    from export.helpers import build_hour_rows, entries_by_slot, format_entries, hour_label

    settings = solution.settings_snapshot
    days = settings.days
    grid = entries_by_slot(entries)

    gap_slots: set = set()
    if mark_gaps:
        by_day: dict = {}
        for e in entries:
            by_day.setdefault(e.day, set()).add(e.hour)
        for day, hours in by_day.items():
            for h in range(min(hours) + 1, max(hours)):
                if h not in hours:
                    gap_slots.add((day, h))

    rows: list[list[str]] = []
    for hour in build_hour_rows(settings):
        cells = [hour_label(hour)]
        for day in days:
            cell = grid.get((day, hour))
            if cell:
                cells.append(format_entries(cell, mode))
            elif (day, hour) in gap_slots:
                cells.append("↕ Freistunde")
            else:
                cells.append("—")
        rows.append(cells)
    return rows


def render_group_rows(
    year: int, semester: int, solution: "TimetableSolution"
) -> list[list[str]]:
    """Tabellenzeilen für den Stundenplan einer Kohorte."""
    return _render_rows(solution.get_group_schedule(year, semester), solution, "group")


def render_lecturer_rows(
    lecturer_id: str, solution: "TimetableSolution"
) -> list[list[str]]:
    """Tabellenzeilen für den Stundenplan einer Lehrperson.

    Freistunden werden als 'Freistunde' markiert.
    """
    return _render_rows(
        solution.get_lecturer_schedule(lecturer_id), solution, "lecturer", mark_gaps=True
    )


def render_room_rows(room_id: str, solution: "TimetableSolution") -> list[list[str]]:
    """Tabellenzeilen für die Belegung eines Raums."""
    return _render_rows(solution.get_room_schedule(room_id), solution, "room")


def header_row(solution: "TimetableSolution") -> list[str]:
    """Kopfzeile passend zu den render_*_rows-Zeilen."""
    from export.helpers import day_label

    return ["Zeit"] + [day_label(d) for d in solution.settings_snapshot.days]
