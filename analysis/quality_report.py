"""Qualitätsbericht für fertige Stundenpläne.

Analysiert Lehrlast, Raumauslastung und Kohorten-Verteilung und berechnet
zusammenfassende Metriken.
"""

from collections import defaultdict

from pydantic import BaseModel

from models.scheduling_input import SchedulingInput
from solver.scheduler import TimetableSolution
from export.helpers import count_back_to_back, count_gaps, group_label


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class LecturerQualityMetrics(BaseModel):
    """Qualitäts-Metriken für eine einzelne Lehrperson."""

    lecturer_id: str
    name: str
    actual_hours: int
    hours_per_day: dict[str, int]
    back_to_back_pairs: int
    gaps_total: int
    free_days: int
    courses_taught: list[str]


class RoomQualityMetrics(BaseModel):
    """Auslastung eines Raums."""

    room_id: str
    name: str
    capacity: int
    occupied_hours: int
    utilisation: float      # belegte / verfügbare Slots
    avg_fill_rate: float    # Ø erwartete Studierende / Kapazität


class GroupQualityMetrics(BaseModel):
    """Verteilung einer Kohorte über die Woche."""

    group: str
    total_hours: int
    hours_per_day: dict[str, int]
    spread_score: float     # 0.0–1.0


class TimetableQualityReport(BaseModel):
    """Vollständiger Qualitätsbericht für eine TimetableSolution."""

    lecturer_metrics: list[LecturerQualityMetrics]
    room_metrics: list[RoomQualityMetrics]
    group_metrics: list[GroupQualityMetrics]
    load_fairness_index: float      # Jain's fairness index (1.0 = perfekt)
    scheduling_rate: float          # zugeteilte / benötigte Sitzungen
    sessions_needed: int
    sessions_scheduled: int
    conflicts: int
    status: str
    solve_time: float


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class QualityAnalyzer:
    """Berechnet Qualitätsmetriken für eine fertige TimetableSolution."""

    def analyze(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> TimetableQualityReport:
        """Hauptmethode: berechnet alle Metriken und gibt einen Report zurück."""
        lecturer_metrics = self._lecturer_metrics(solution, data)
        room_metrics = self._room_metrics(solution, data)
        group_metrics = self._group_metrics(solution)

        # Jain's Fairness Index: (Σ actual_i)² / (n * Σ actual_i²)
        actuals = [m.actual_hours for m in lecturer_metrics]
        n = len(actuals)
        sum_a = sum(actuals)
        sum_sq = sum(a * a for a in actuals)
        if sum_sq > 0:
            fairness = (sum_a ** 2) / (n * sum_sq)
        else:
            fairness = 1.0

        length = solution.settings_snapshot.session_length
        needed = sum(c.sessions_needed(length) for c in data.courses)
        scheduled = len(solution.entries)
        rate = scheduled / needed if needed > 0 else 1.0

        return TimetableQualityReport(
            lecturer_metrics=lecturer_metrics,
            room_metrics=room_metrics,
            group_metrics=group_metrics,
            load_fairness_index=round(fairness, 4),
            scheduling_rate=round(rate, 4),
            sessions_needed=needed,
            sessions_scheduled=scheduled,
            conflicts=len(solution.conflicts),
            status=solution.status,
            solve_time=round(solution.solve_time_seconds, 2),
        )

    def print_rich(self, report: TimetableQualityReport) -> None:
        """Gibt den Qualitätsbericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()

        fairness_color = (
            "green" if report.load_fairness_index >= 0.95
            else "yellow" if report.load_fairness_index >= 0.85
            else "red"
        )
        rate_color = (
            "green" if report.scheduling_rate >= 1.0
            else "yellow" if report.scheduling_rate >= 0.90
            else "red"
        )
        console.print(Panel(
            f"Status: [bold]{report.status}[/bold] | "
            f"Zeit: {report.solve_time}s | Konflikte: {report.conflicts}\n"
            f"Sitzungen: {report.sessions_scheduled}/{report.sessions_needed} "
            f"([{rate_color}]{report.scheduling_rate:.1%}[/{rate_color}])\n"
            f"Lehrlast-Fairness (Jain): "
            f"[{fairness_color}]{report.load_fairness_index:.4f}[/{fairness_color}] "
            f"(1.0 = perfekt)",
            title="Qualitätsbericht – Übersicht",
            border_style="cyan",
        ))

        l_table = Table(title="Lehrlast", box=box.ROUNDED, show_lines=False)
        l_table.add_column("ID", width=8)
        l_table.add_column("Name", width=25)
        l_table.add_column("Stunden", justify="right", width=8)
        l_table.add_column("Back-to-Back", justify="right", width=12)
        l_table.add_column("Freistd.", justify="right", width=8)
        l_table.add_column("Freie Tage", justify="right", width=10)

        for m in sorted(report.lecturer_metrics, key=lambda x: x.lecturer_id):
            l_table.add_row(
                m.lecturer_id, m.name,
                str(m.actual_hours),
                str(m.back_to_back_pairs),
                str(m.gaps_total),
                str(m.free_days),
            )
        console.print(l_table)

        r_table = Table(title="Raumauslastung", box=box.ROUNDED, show_lines=False)
        r_table.add_column("Raum", width=12)
        r_table.add_column("Kapazität", justify="right", width=9)
        r_table.add_column("Stunden", justify="right", width=8)
        r_table.add_column("Auslastung", justify="right", width=10)
        r_table.add_column("Ø Füllgrad", justify="right", width=10)

        for m in report.room_metrics:
            fill_color = (
                "red" if m.avg_fill_rate > 1.0
                else "green" if m.avg_fill_rate >= 0.6
                else "yellow"
            )
            r_table.add_row(
                m.name or m.room_id, str(m.capacity), str(m.occupied_hours),
                f"{m.utilisation:.1%}",
                f"[{fill_color}]{m.avg_fill_rate:.0%}[/{fill_color}]",
            )
        console.print(r_table)

        g_table = Table(title="Kohorten", box=box.ROUNDED, show_lines=False)
        g_table.add_column("Kohorte", width=18)
        g_table.add_column("Stunden", justify="right", width=8)
        g_table.add_column("Spread-Score", justify="right", width=12)
        for m in report.group_metrics:
            g_table.add_row(m.group, str(m.total_hours), f"{m.spread_score:.2f}")
        console.print(g_table)

    # ── Private Berechnungen ──────────────────────────────────────────────────

    def _lecturer_metrics(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[LecturerQualityMetrics]:
        """Berechnet Metriken für alle Lehrenden."""
        days = solution.settings_snapshot.days
        metrics = []

        for lecturer in data.lecturers:
            entries = solution.get_lecturer_schedule(lecturer.id)
            by_day: dict = defaultdict(int)
            for e in entries:
                by_day[e.day] += 1
            hours_per_day = {day.value: by_day.get(day, 0) for day in days}

            metrics.append(LecturerQualityMetrics(
                lecturer_id=lecturer.id,
                name=lecturer.name,
                actual_hours=len(entries),
                hours_per_day=hours_per_day,
                back_to_back_pairs=count_back_to_back(entries),
                gaps_total=count_gaps(entries),
                free_days=sum(1 for day in days if not by_day.get(day)),
                courses_taught=sorted({e.course_id for e in entries}),
            ))

        return metrics

    def _room_metrics(
        self, solution: TimetableSolution, data: SchedulingInput
    ) -> list[RoomQualityMetrics]:
        """Auslastung und Füllgrad je Raum."""
        settings = solution.settings_snapshot
        available = settings.hours_per_day * len(settings.days)
        expected = {c.id: c.expected_students for c in data.courses}
        metrics = []

        for room in data.rooms:
            entries = solution.get_room_schedule(room.id)
            fills = [
                expected.get(e.course_id, 0) / room.capacity
                for e in entries if room.capacity > 0
            ]
            metrics.append(RoomQualityMetrics(
                room_id=room.id,
                name=room.name,
                capacity=room.capacity,
                occupied_hours=len(entries),
                utilisation=round(len(entries) / available, 4) if available else 0.0,
                avg_fill_rate=round(sum(fills) / len(fills), 4) if fills else 0.0,
            ))

        return metrics

    def _group_metrics(self, solution: TimetableSolution) -> list[GroupQualityMetrics]:
        """Berechnet Metriken für alle Kohorten."""
        days = solution.settings_snapshot.days
        metrics = []

        for year, semester in solution.groups():
            entries = solution.get_group_schedule(year, semester)
            by_day: dict = defaultdict(int)
            for e in entries:
                by_day[e.day] += 1
            metrics.append(GroupQualityMetrics(
                group=group_label(year, semester),
                total_hours=len(entries),
                hours_per_day={day.value: by_day.get(day, 0) for day in days},
                spread_score=round(_compute_spread_score(entries, len(days)), 3),
            ))

        return metrics


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _compute_spread_score(entries, days_per_week: int) -> float:
    """Berechnet wie gleichmäßig Kurse über die Woche verteilt sind.

    Score 0.0–1.0:
    - 1.0 = jeder Kurs ist auf möglichst viele verschiedene Tage verteilt
    - 0.0 = alle Sitzungen eines Kurses liegen am selben Tag
    """
    course_days: dict[str, set] = defaultdict(set)
    course_hours: dict[str, int] = defaultdict(int)
    for e in entries:
        course_days[e.course_id].add(e.day)
        course_hours[e.course_id] += 1

    if not course_hours:
        return 1.0

    # Pro Kurs: Anzahl verschiedener Tage / min(Sitzungen, Tage pro Woche)
    scores = []
    for course_id, hours in course_hours.items():
        max_days = min(hours, days_per_week)
        actual_days = len(course_days[course_id])
        scores.append(actual_days / max_days if max_days > 0 else 1.0)

    return sum(scores) / len(scores)
