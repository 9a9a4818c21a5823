"""SchedulingInput: Datensatz eines Zuteilungslaufs + Machbarkeits-Check (Pydantic v2)."""

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from config.schema import GeneratorSettings
from models.course import Course
from models.lecturer import Lecturer
from models.program import Program
from models.room import Room


class FeasibilityReport(BaseModel):
    """Ergebnis des Machbarkeits-Checks."""

    is_feasible: bool
    errors: list[str]      # Kritische Probleme (keine sinnvolle Zuteilung möglich)
    warnings: list[str]    # Hinweise (Konflikte zu erwarten)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_feasible:
            status = "[bold green]✓ ZUTEILBAR[/bold green]"
        else:
            status = "[bold red]✗ NICHT ZUTEILBAR[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler (kritisch):[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Machbarkeits-Check", border_style="cyan"))


class SchedulingInput(BaseModel):
    """Vollständige Eingabe eines Laufs: Studiengang, Kurse, Lehrende, Räume, Einstellungen."""

    program: Program
    courses: list[Course] = []
    lecturers: list[Lecturer] = []
    rooms: list[Room] = []
    settings: GeneratorSettings = Field(default_factory=GeneratorSettings)
    created_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Nachschlagen ───

    def course_by_id(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def lecturer_by_id(self, lecturer_id: str) -> Optional[Lecturer]:
        return next((l for l in self.lecturers if l.id == lecturer_id), None)

    def room_by_id(self, room_id: str) -> Optional[Room]:
        return next((r for r in self.rooms if r.id == room_id), None)

    def total_sessions_needed(self) -> int:
        length = self.settings.session_length
        return sum(c.sessions_needed(length) for c in self.courses)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        s = self.settings
        cohorts = sorted({c.group_key for c in self.courses})
        lines = [
            f"Studiengang: {self.program.name or self.program.id}"
            + (f" ({self.program.student_count} Studierende)"
               if self.program.student_count is not None else ""),
            f"Kurse: {len(self.courses)} in {len(cohorts)} Kohorten",
            f"Sitzungen benötigt: {self.total_sessions_needed()} "
            f"(Sitzungslänge {s.session_length}h)",
            f"Lehrende: {len(self.lecturers)}",
            f"Räume: {len(self.rooms)}"
            + (f" (max. Kapazität {max(r.capacity for r in self.rooms)})"
               if self.rooms else ""),
            f"Zeitfenster: {s.preferred_start_time}–{s.preferred_end_time}, "
            f"{len(s.days)} Tage",
        ]
        return "\n".join(lines)

    # ─── Machbarkeits-Check ───

    def validate_feasibility(self) -> FeasibilityReport:
        """Prüft vor dem Lauf, ob eine Zuteilung grundsätzlich möglich ist.

        Prüfungen:
        1. Kurse, Räume und Lehrende vorhanden
        2. Kapazitäts-Untergrenze (consider_room_capacity) erreichbar
        3. Raumslots ≥ Gesamtbedarf an Sitzungen
        4. Pro Kohorte: Sitzungen ≤ Slots der Woche
        5. Pro Lehrperson: feste Zuordnungen ≤ Tagesobergrenze × Tage
        6. Feste Zuordnungen verweisen auf vorhandene Lehrende
        7. Erwartete Studierende ≤ größter Raum
        """
        errors: list[str] = []
        warnings: list[str] = []

        s = self.settings
        length = s.session_length
        slots_per_week = s.hours_per_day * len(s.days)

        # ── 1. Stammdaten ────────────────────────────────────────────────
        if not self.courses:
            errors.append("Keine Kurse für den Studiengang vorhanden.")
        if not self.rooms:
            errors.append("Keine Räume vorhanden – keine Sitzung kann zugeteilt werden.")
        if not self.lecturers:
            errors.append("Keine Lehrenden vorhanden – jeder Kurs erhält 'LecturerMissing'.")

        # ── 2. Kapazitäts-Untergrenze ────────────────────────────────────
        needed_cap = self.program.student_count
        if s.consider_room_capacity and needed_cap is not None and self.rooms:
            if not any(r.capacity >= needed_cap for r in self.rooms):
                errors.append(
                    f"Kein Raum fasst die {needed_cap} Studierenden des Studiengangs "
                    f"(größter Raum: {max(r.capacity for r in self.rooms)}). "
                    f"consider_room_capacity deaktivieren oder größere Räume anlegen."
                )

        # ── 3. Raumslots gesamt ──────────────────────────────────────────
        total_need = self.total_sessions_needed()
        room_slots = len(self.rooms) * slots_per_week
        if self.rooms and total_need > room_slots:
            warnings.append(
                f"Raumengpass: {total_need} Sitzungen benötigt, aber nur {room_slots} "
                f"Raumslots ({len(self.rooms)} Räume × {slots_per_week} Slots)."
            )

        # ── 4. Kohorten ──────────────────────────────────────────────────
        cohort_need: Counter = Counter()
        for course in self.courses:
            cohort_need[course.group_key] += course.sessions_needed(length)
        for (year, semester), need in sorted(cohort_need.items()):
            if need > slots_per_week:
                warnings.append(
                    f"Kohorte Jahr {year}/Semester {semester}: {need} Sitzungen, "
                    f"aber nur {slots_per_week} Slots pro Woche."
                )

        # ── 5./6. Feste Zuordnungen ──────────────────────────────────────
        lecturer_map = {l.id: l for l in self.lecturers}
        pinned_need: Counter = Counter()
        for course in self.courses:
            if course.lecturer_id is None:
                continue
            if course.lecturer_id not in lecturer_map:
                warnings.append(
                    f"Kurs '{course.label}': Lehrperson '{course.lecturer_id}' unbekannt – "
                    f"Auswahl erfolgt nach Einstellung."
                )
                continue
            pinned_need[course.lecturer_id] += course.sessions_needed(length)

        for lecturer in self.lecturers:
            need = pinned_need.get(lecturer.id, 0)
            if not need:
                continue
            cap = lecturer.daily_cap(s.max_daily_hours) * len(s.days)
            free = slots_per_week - sum(
                1 for slot in lecturer.unavailable_times
                if slot.day in s.days and s.start_hour <= slot.hour < s.end_hour
            )
            limit = min(cap, free)
            if need > limit:
                warnings.append(
                    f"Lehrperson {lecturer.id} ({lecturer.label}): {need} Sitzungen fest "
                    f"zugeordnet, aber höchstens {limit} möglich."
                )

        # ── 7. Raumgröße ─────────────────────────────────────────────────
        if self.rooms:
            largest = max(r.capacity for r in self.rooms)
            for course in self.courses:
                if course.expected_students > largest:
                    warnings.append(
                        f"Kurs '{course.label}': {course.expected_students} erwartete "
                        f"Studierende, größter Raum fasst {largest}."
                    )

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        updated = self.model_copy(update={
            "created_at": self.created_at or datetime.now(timezone.utc),
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchedulingInput":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
