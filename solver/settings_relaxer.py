"""Diagnose offener Konflikte durch schrittweise Lockerung der Einstellungen.

Unterstützt den Ablauf "Lauf mit angepassten Einstellungen wiederholen":
jede Variante ändert genau eine Einstellung, der Greedy-Solver läuft erneut
und der Bericht zeigt, wie viele Sitzungen danach noch offen sind.
"""

import time
import logging
from typing import Callable

from pydantic import BaseModel

from config.schema import GeneratorSettings
from models.scheduling_input import SchedulingInput
from solver.scheduler import TimetableSolution, TimetableSolver

logger = logging.getLogger(__name__)


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class RelaxResult(BaseModel):
    """Ergebnis einer einzelnen Lockerung."""
    name: str
    description: str
    settings_update: dict
    sessions_scheduled: int
    open_sessions: int
    conflicts: int
    solve_time: float

    @property
    def resolves_all(self) -> bool:
        return self.open_sessions == 0 and self.conflicts == 0


class RelaxReport(BaseModel):
    """Vollständiger Bericht der Einstellungs-Lockerung."""
    original_open_sessions: int
    original_conflicts: int
    relaxations: list[RelaxResult]
    recommendation: str

    def print_rich(self) -> None:
        """Gibt den Bericht als Rich-Tabelle aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Einstellungs-Lockerung", box=box.ROUNDED)
        table.add_column("Variante", style="cyan")
        table.add_column("Beschreibung")
        table.add_column("Offen", justify="right")
        table.add_column("Konflikte", justify="right")
        table.add_row(
            "original", "Aktuelle Einstellungen",
            str(self.original_open_sessions), str(self.original_conflicts),
        )
        for r in self.relaxations:
            style = "green" if r.resolves_all else (
                "yellow" if r.open_sessions < self.original_open_sessions else "")
            table.add_row(
                r.name, r.description,
                f"[{style}]{r.open_sessions}[/{style}]" if style else str(r.open_sessions),
                str(r.conflicts),
            )
        console.print(table)
        console.print(f"\n[bold]Empfehlung:[/bold] {self.recommendation}")


def _widened_window(settings: GeneratorSettings) -> dict:
    start = max(0, settings.start_hour - 2)
    end = min(24, settings.end_hour + 2)
    return {
        "preferred_start_time": f"{start:02d}:00",
        "preferred_end_time": f"{end:02d}:00",
    }


# Name, Beschreibung, Änderung der Einstellungen
RELAXATIONS: list[tuple[str, str, Callable[[GeneratorSettings], dict]]] = [
    ("allow_weekends", "Samstag und Sonntag zulassen",
     lambda s: {"allow_weekends": True}),
    ("no_back_to_back", "Back-to-Back-Stunden erlauben",
     lambda s: {"avoid_back_to_back": False}),
    ("higher_daily_cap", "Tagesobergrenze auf 12 Stunden",
     lambda s: {"max_daily_hours": 12}),
    ("wider_window", "Zeitfenster um je 2 Stunden erweitern",
     _widened_window),
    ("no_spread_cap", "Keine Begrenzung der Sitzungen pro Tag",
     lambda s: {"spread_courses_across_days": False}),
    ("no_capacity_floor", "Räume nicht nach Studierendenzahl filtern",
     lambda s: {"consider_room_capacity": False}),
]


# ─── SettingsRelaxer ──────────────────────────────────────────────────────────

class SettingsRelaxer:
    """Testet Lockerungen der Einstellungen einzeln und kombiniert.

      1. Wochenenden erlauben
      2. Back-to-Back erlauben
      3. Höhere Tagesobergrenze
      4. Breiteres Zeitfenster
      5. Keine Tagesbegrenzung pro Kurs
      6. Keine Kapazitäts-Untergrenze
      7. Alle obigen kombiniert
    """

    def __init__(self, data: SchedulingInput) -> None:
        self.data = data

    def diagnose(self) -> RelaxReport:
        """Führt alle Lockerungen durch und erstellt einen Bericht."""
        original = self._run(self.data.settings)
        settings = self.data.settings

        results: list[RelaxResult] = []
        combined: dict = {}
        for name, description, make_update in RELAXATIONS:
            update = make_update(settings)
            combined.update(update)
            results.append(self._test_relaxation(name, description, update))

        results.append(self._test_relaxation(
            "all_combined", "Alle Lockerungen kombiniert", combined,
        ))

        recommendation = self._build_recommendation(original, results)
        logger.info(f"SettingsRelaxer: {recommendation}")

        return RelaxReport(
            original_open_sessions=self._open_sessions(original),
            original_conflicts=len(original.conflicts),
            relaxations=results,
            recommendation=recommendation,
        )

    # ─── Solver-Ausführung ────────────────────────────────────────────────────

    def _test_relaxation(self, name: str, description: str, update: dict) -> RelaxResult:
        """Testet eine einzelne Lockerung."""
        t0 = time.time()
        relaxed = GeneratorSettings.model_validate(
            {**self.data.settings.model_dump(), **update}
        )
        solution = self._run(relaxed)
        elapsed = time.time() - t0

        result = RelaxResult(
            name=name,
            description=description,
            settings_update=update,
            sessions_scheduled=solution.sessions_scheduled,
            open_sessions=self._open_sessions(solution),
            conflicts=len(solution.conflicts),
            solve_time=elapsed,
        )
        logger.info(
            f"  Lockerung '{name}': {result.open_sessions} offen, "
            f"{result.conflicts} Konflikte ({elapsed:.2f}s)"
        )
        return result

    def _run(self, settings: GeneratorSettings) -> TimetableSolution:
        data = self.data.model_copy(update={"settings": settings})
        return TimetableSolver(data).solve()

    def _open_sessions(self, solution: TimetableSolution) -> int:
        length = solution.settings_snapshot.session_length
        needed = sum(c.sessions_needed(length) for c in self.data.courses)
        return needed - solution.sessions_scheduled

    # ─── Empfehlung ───────────────────────────────────────────────────────────

    def _build_recommendation(
        self, original: TimetableSolution, results: list[RelaxResult]
    ) -> str:
        """Erstellt eine lesbare Empfehlung basierend auf den Ergebnissen."""
        if not original.conflicts:
            return "Keine Konflikte – Lockerung nicht nötig."

        singles = [r for r in results if r.name != "all_combined"]
        fixes = [r for r in singles if r.resolves_all]
        if fixes:
            return "Einzeln ausreichend:\n" + "\n".join(
                f"  • {r.description} ({r.name})" for r in fixes
            )

        original_open = self._open_sessions(original)
        improving = sorted(
            (r for r in singles if r.open_sessions < original_open),
            key=lambda r: r.open_sessions,
        )
        combined = next(r for r in results if r.name == "all_combined")
        if improving:
            best = improving[0]
            text = (
                f"Größte Verbesserung: {best.description} "
                f"({original_open} → {best.open_sessions} offene Sitzungen)."
            )
            if combined.resolves_all:
                text += " Alle Lockerungen kombiniert lösen sämtliche Konflikte."
            return text

        if combined.resolves_all:
            return (
                "Erst alle Lockerungen kombiniert helfen. "
                "Mehrere Einstellungen begrenzen gleichzeitig."
            )
        return (
            "Lockerung der Einstellungen reicht nicht. "
            "Mehr Räume oder Lehrende anlegen bzw. Sperrzeiten prüfen."
        )
