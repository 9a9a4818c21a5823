"""Vergleich zweier Zuteilungsläufe (Diff / Changelog).

Typischer Einsatz: Lauf mit angepassten Einstellungen wiederholen und
prüfen, welche Sitzungen hinzugekommen, weggefallen oder verschoben sind.
Gibt strukturierte Unterschiede zurück, die als Rich-Tabelle oder JSON
ausgegeben werden können.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.timetable import ScheduleEntry
    from solver.scheduler import TimetableSolution


def _place(entry: "ScheduleEntry") -> str:
    room = entry.room_name or entry.room_id
    return f"{entry.day.value} {entry.start_time} {room} ({entry.lecturer_id})"


@dataclass
class SessionRef:
    """Eine Sitzung, identifiziert über Kurs und Sitzungsnummer."""

    course_id: str
    session_index: int
    place: str


@dataclass
class SessionMove:
    """Eine Sitzung, die in beiden Läufen existiert, aber anders liegt."""

    course_id: str
    session_index: int
    old_place: str
    new_place: str


@dataclass
class SolutionDiff:
    """Vollständiger Diff zwischen zwei TimetableSolutions."""

    added: list[SessionRef] = field(default_factory=list)
    removed: list[SessionRef] = field(default_factory=list)
    moved: list[SessionMove] = field(default_factory=list)
    settings_changes: list[str] = field(default_factory=list)
    conflict_changes: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return (
            not self.added
            and not self.removed
            and not self.moved
            and not self.settings_changes
            and not self.conflict_changes
        )

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "added": [vars(s) for s in self.added],
            "removed": [vars(s) for s in self.removed],
            "moved": [vars(m) for m in self.moved],
            "settings_changes": self.settings_changes,
            "conflict_changes": self.conflict_changes,
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def print_rich(self) -> None:
        """Gibt den Diff als Rich-Tabelle aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        if self.is_empty():
            console.print("[green]Keine Unterschiede.[/green]")
            return

        table = Table(title="Stundenplan-Diff", box=box.ROUNDED)
        table.add_column("Änderung", width=10)
        table.add_column("Kurs", width=14)
        table.add_column("Sitzung", justify="right", width=7)
        table.add_column("Vorher")
        table.add_column("Nachher")
        for s in self.added:
            table.add_row("[green]neu[/green]", s.course_id, str(s.session_index), "", s.place)
        for s in self.removed:
            table.add_row("[red]entfällt[/red]", s.course_id, str(s.session_index), s.place, "")
        for m in self.moved:
            table.add_row("[yellow]verschoben[/yellow]", m.course_id,
                          str(m.session_index), m.old_place, m.new_place)
        console.print(table)

        for line in self.settings_changes + self.conflict_changes:
            console.print(f"  • {line}")


def diff_solutions(a: "TimetableSolution", b: "TimetableSolution") -> SolutionDiff:
    """Vergleicht zwei Lösungen und gibt einen strukturierten Diff zurück.

    Vergleicht:
    - Sitzungen (Schlüssel: course_id + session_index): neu / entfallen / verschoben
    - Einstellungen (settings_snapshot)
    - Konfliktzahlen je Art

    Args:
        a: Erste Lösung (Basis / alt).
        b: Zweite Lösung (neu).

    Returns:
        SolutionDiff mit allen gefundenen Unterschieden.
    """
    diff = SolutionDiff()

    # ── Sitzungen ────────────────────────────────────────────────────────────
    sessions_a = {(e.course_id, e.session_index): e for e in a.entries}
    sessions_b = {(e.course_id, e.session_index): e for e in b.entries}

    for key in sorted(set(sessions_b) - set(sessions_a)):
        diff.added.append(SessionRef(key[0], key[1], _place(sessions_b[key])))
    for key in sorted(set(sessions_a) - set(sessions_b)):
        diff.removed.append(SessionRef(key[0], key[1], _place(sessions_a[key])))
    for key in sorted(set(sessions_a) & set(sessions_b)):
        old, new = _place(sessions_a[key]), _place(sessions_b[key])
        if old != new:
            diff.moved.append(SessionMove(key[0], key[1], old, new))

    # ── Einstellungen ────────────────────────────────────────────────────────
    settings_a = a.settings_snapshot.model_dump()
    settings_b = b.settings_snapshot.model_dump()
    for name in settings_a:
        if settings_a[name] != settings_b.get(name):
            diff.settings_changes.append(
                f"{name}: {settings_a[name]!r} → {settings_b.get(name)!r}"
            )

    # ── Konflikte ────────────────────────────────────────────────────────────
    counts_a = a.conflict_counts()
    counts_b = b.conflict_counts()
    for kind in sorted(set(counts_a) | set(counts_b)):
        n_a, n_b = counts_a.get(kind, 0), counts_b.get(kind, 0)
        if n_a != n_b:
            diff.conflict_changes.append(f"{kind}: {n_a} → {n_b}")

    return diff
