"""Post-Solve Validierung des fertigen Stundenplans.

Prüft die Lösung auf Verletzungen als Sicherheitsnetz unabhängig vom Solver.
"""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from models.scheduling_input import SchedulingInput
from models.timeslot import TimeSlot
from models.timetable import ScheduleEntry
from solver.scheduler import TimetableSolution
from solver.slots import build_slot_universe


class ValidationViolation(BaseModel):
    """Eine einzelne Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "lecturer_double_booking"
    description: str
    entity: str          # lecturer_id / room_id / course_id / Kohorte


class ValidationReport(BaseModel):
    """Ergebnis der Post-Solve Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Lösung-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=28)
        table.add_column("Entität", width=12)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


def _where(e: ScheduleEntry) -> str:
    return f"{e.day.value} {e.start_time}"


class SolutionValidator:
    """Prüft eine fertige TimetableSolution gegen die Eingabedaten."""

    def validate(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> ValidationReport:
        """Führt alle Validierungschecks durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        violations.extend(self._check_double_booking(
            solution, "room_double_booking", lambda e: e.room_id))
        violations.extend(self._check_double_booking(
            solution, "lecturer_double_booking", lambda e: e.lecturer_id))
        violations.extend(self._check_double_booking(
            solution, "group_double_booking",
            lambda e: f"J{e.year}/S{e.semester}"))
        violations.extend(self._check_session_counts(solution, data))
        violations.extend(self._check_unavailable_slots(solution, data))
        violations.extend(self._check_daily_hours(solution, data))
        violations.extend(self._check_room_capacity(solution, data))
        violations.extend(self._check_slot_universe(solution))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_double_booking(
        self, solution: TimetableSolution, constraint: str, key_of
    ) -> list[ValidationViolation]:
        """Keine Ressource darf zur selben Zeit zweimal belegt sein."""
        violations: list[ValidationViolation] = []
        seen: dict[tuple, list[ScheduleEntry]] = defaultdict(list)
        for e in solution.entries:
            seen[(key_of(e), e.day, e.start_time)].append(e)

        for (entity, _day, _start), entries in seen.items():
            if len(entries) > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint=constraint,
                    entity=entity,
                    description=(
                        f"{_where(entries[0])}: gleichzeitig "
                        f"{', '.join(e.course_label for e in entries)}."
                    ),
                ))
        return violations

    def _check_session_counts(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[ValidationViolation]:
        """Pro Kurs höchstens ceil(credit_hours / session_length) Sitzungen."""
        violations: list[ValidationViolation] = []
        length = solution.settings_snapshot.session_length
        counts: dict[str, int] = defaultdict(int)
        for e in solution.entries:
            counts[e.course_id] += 1

        for course in data.courses:
            needed = course.sessions_needed(length)
            actual = counts.get(course.id, 0)
            if actual > needed:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="session_overrun",
                    entity=course.id,
                    description=f"{actual} Sitzungen bei Bedarf {needed}.",
                ))
            elif actual < needed:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="session_underrun",
                    entity=course.id,
                    description=f"Nur {actual} von {needed} Sitzungen zugeteilt.",
                ))

        known = {c.id for c in data.courses}
        for course_id in sorted(set(counts) - known):
            violations.append(ValidationViolation(
                severity="error",
                constraint="unknown_course",
                entity=course_id,
                description="Eintrag zu einem Kurs, der nicht in den Daten steht.",
            ))
        return violations

    def _check_unavailable_slots(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[ValidationViolation]:
        """Keine Lehrperson darf in gesperrten Slots eingeplant sein."""
        violations: list[ValidationViolation] = []
        lecturer_map = {l.id: l for l in data.lecturers}
        for e in solution.entries:
            lecturer = lecturer_map.get(e.lecturer_id)
            if lecturer and lecturer.is_unavailable(TimeSlot(e.day, e.hour)):
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="unavailable_slot_violation",
                    entity=e.lecturer_id,
                    description=(
                        f"{_where(e)} ist gesperrt, aber {e.course_label} eingeplant."
                    ),
                ))
        return violations

    def _check_daily_hours(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[ValidationViolation]:
        """Tagesobergrenze je Lehrperson (individuell vor global)."""
        violations: list[ValidationViolation] = []
        default_cap = solution.settings_snapshot.max_daily_hours
        lecturer_map = {l.id: l for l in data.lecturers}
        per_day: dict[tuple, int] = defaultdict(int)
        for e in solution.entries:
            per_day[(e.lecturer_id, e.day)] += 1

        for (lecturer_id, day), hours in per_day.items():
            lecturer = lecturer_map.get(lecturer_id)
            cap = lecturer.daily_cap(default_cap) if lecturer else default_cap
            if hours > cap:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="daily_hours_exceeded",
                    entity=lecturer_id,
                    description=f"{day.value}: {hours}h > Obergrenze {cap}h.",
                ))
        return violations

    def _check_room_capacity(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[ValidationViolation]:
        """Raumkapazität < erwartete Studierende (nur Hinweis)."""
        violations: list[ValidationViolation] = []
        room_map = {r.id: r for r in data.rooms}
        course_map = {c.id: c for c in data.courses}
        for e in solution.entries:
            room = room_map.get(e.room_id)
            course = course_map.get(e.course_id)
            if room is None or course is None:
                continue
            if room.capacity < course.expected_students:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="room_too_small",
                    entity=e.room_id,
                    description=(
                        f"{_where(e)}: {course.expected_students} erwartet, "
                        f"Kapazität {room.capacity} ({e.course_label})."
                    ),
                ))
        return violations

    def _check_slot_universe(
        self, solution: TimetableSolution
    ) -> list[ValidationViolation]:
        """Einträge außerhalb des Zeitfensters bzw. der erlaubten Tage."""
        universe = set(build_slot_universe(solution.settings_snapshot))
        violations: list[ValidationViolation] = []
        for e in solution.entries:
            if TimeSlot(e.day, e.hour) not in universe:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="outside_time_window",
                    entity=e.course_id,
                    description=f"{_where(e)} liegt außerhalb des Zeitfensters.",
                ))
        return violations
