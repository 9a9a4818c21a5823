"""Greedy-Zuteilung von Kurs-Sitzungen auf (Tag, Stunde, Raum, Lehrperson).

Ablauf pro Lauf:
  - Kurse nach Priorität sortieren (prioritizer)
  - Slot-Universum aufbauen (Tag, dann Stunde)
  - Pro Kurs: Lehrperson wählen, Sitzungen berechnen, pro Sitzung den
    ersten passenden Slot mit freiem Raum festschreiben
  - Nicht zuteilbare Sitzungen als Konflikte erfassen, Überschneidungen
    nachprüfen

Ein einziger Durchlauf ohne Backtracking. Gleiche Eingabe und gleiche
Einstellungen ergeben gleiche Einträge und Konflikte.
"""

import time
import logging
from pathlib import Path
from typing import Callable, Literal, Optional

from pydantic import BaseModel

from config.schema import GeneratorSettings
from models.course import Course
from models.lecturer import Lecturer
from models.scheduling_input import SchedulingInput
from models.timeslot import TimeSlot
from models.timetable import Conflict, ConflictKind, ScheduleEntry
from solver.conflicts import ConflictReporter
from solver.prioritizer import prioritize_courses
from solver.selectors import LecturerSelector, RoomSelector
from solver.slots import build_slot_universe
from solver.tracker import ResourceTracker

logger = logging.getLogger(__name__)

SolveStatus = Literal["complete", "cancelled"]
ProgressCallback = Callable[[int], None]
CancelCheck = Callable[[], bool]


def sessions_needed(course: Course, settings: GeneratorSettings) -> int:
    """ceil(credit_hours / session_length), Sitzungslänge 2h bzw. 3h."""
    return course.sessions_needed(settings.session_length)


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class CourseAllocation(BaseModel):
    """Zuteilungsergebnis eines Kurses."""

    course_id: str
    course_label: str
    lecturer_id: Optional[str] = None
    sessions_needed: int
    sessions_scheduled: int = 0

    @property
    def is_complete(self) -> bool:
        return self.sessions_scheduled >= self.sessions_needed


class TimetableSolution(BaseModel):
    """Ergebnis eines Zuteilungslaufs."""

    entries: list[ScheduleEntry]
    conflicts: list[Conflict]
    status: SolveStatus
    course_results: list[CourseAllocation] = []
    lecturer_hours: dict[str, int] = {}
    solve_time_seconds: float = 0.0
    program_id: str = ""
    settings_snapshot: GeneratorSettings

    @property
    def sessions_needed(self) -> int:
        return sum(r.sessions_needed for r in self.course_results)

    @property
    def sessions_scheduled(self) -> int:
        return len(self.entries)

    def get_group_schedule(self, year: int, semester: int) -> list[ScheduleEntry]:
        """Alle Einträge einer Kohorte (year, semester)."""
        return [e for e in self.entries if e.year == year and e.semester == semester]

    def get_lecturer_schedule(self, lecturer_id: str) -> list[ScheduleEntry]:
        """Alle Einträge einer Lehrperson."""
        return [e for e in self.entries if e.lecturer_id == lecturer_id]

    def get_room_schedule(self, room_id: str) -> list[ScheduleEntry]:
        """Alle Einträge eines Raums."""
        return [e for e in self.entries if e.room_id == room_id]

    def conflicts_of_kind(self, kind: ConflictKind) -> list[Conflict]:
        return [c for c in self.conflicts if c.kind == ConflictKind(kind)]

    def conflict_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for c in self.conflicts:
            counts[c.kind.value] = counts.get(c.kind.value, 0) + 1
        return counts

    def groups(self) -> list[tuple[int, int]]:
        """Alle Kohorten mit Einträgen, sortiert."""
        return sorted({e.group_key for e in self.entries})

    def save_json(self, path: Path) -> None:
        """Speichert die Lösung als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "TimetableSolution":
        """Lädt eine gespeicherte Lösung aus JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Lösung nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())


# ─── Haupt-Solver ─────────────────────────────────────────────────────────────

class TimetableSolver:
    """Greedy-Solver für einen Studiengang.

    Verwendung:
        solver = TimetableSolver(scheduling_input)
        solution = solver.solve(on_progress=..., should_cancel=...)
    """

    def __init__(self, data: SchedulingInput) -> None:
        self.data = data
        self.settings = data.settings

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def solve(
        self,
        on_progress: Optional[ProgressCallback] = None,
        should_cancel: Optional[CancelCheck] = None,
    ) -> TimetableSolution:
        """Führt einen vollständigen Zuteilungslauf aus.

        on_progress(percent) wird nach jedem Kurs aufgerufen, should_cancel()
        nur an Kursgrenzen abgefragt. Bei Abbruch bleiben alle bereits
        festgeschriebenen Sitzungen erhalten (status="cancelled").
        """
        t0 = time.time()
        settings = self.settings
        program = self.data.program

        tracker = ResourceTracker(self.data.lecturers)
        reporter = ConflictReporter()
        entries: list[ScheduleEntry] = []
        results: list[CourseAllocation] = []
        status: SolveStatus = "complete"

        logger.info(
            f"Zuteilung gestartet: {len(self.data.courses)} Kurse, "
            f"{len(self.data.lecturers)} Lehrende, {len(self.data.rooms)} Räume"
        )

        rooms = self.data.rooms
        floor = program.student_count
        if settings.consider_room_capacity and floor is not None:
            rooms = [r for r in rooms if r.capacity >= floor]
            if not rooms:
                logger.warning(f"Kein Raum fasst {floor} Studierende – Lauf beendet")
                reporter.room_capacity(program, floor)
                return self._build_solution(entries, reporter, results, tracker, status, t0)

        slots = build_slot_universe(settings)
        lecturer_selector = LecturerSelector(self.data.lecturers, settings, tracker)
        room_selector = RoomSelector(rooms, settings, tracker)

        ordered = prioritize_courses(self.data.courses)
        total = len(ordered)
        for i, course in enumerate(ordered):
            if should_cancel is not None and should_cancel():
                logger.info(f"Zuteilung abgebrochen nach {i}/{total} Kursen")
                status = "cancelled"
                break

            result = CourseAllocation(
                course_id=course.id,
                course_label=course.label,
                sessions_needed=sessions_needed(course, settings),
            )
            results.append(result)
            lecturer = None
            try:
                lecturer = lecturer_selector.select(course)
                if lecturer is None:
                    reporter.lecturer_missing(course)
                else:
                    result.lecturer_id = lecturer.id
                    self._allocate_course(
                        course, lecturer, result, slots,
                        tracker, room_selector, reporter, entries,
                    )
            except Exception as exc:
                logger.exception(f"Kurs {course.id}: unerwarteter Fehler")
                reporter.error(course, exc, lecturer)

            logger.debug(
                f"Kurs {course.id}: {result.sessions_scheduled}/"
                f"{result.sessions_needed} Sitzungen"
            )
            if on_progress is not None:
                on_progress(int((i + 1) * 100 / total))

        reporter.check_overlaps(entries)
        return self._build_solution(entries, reporter, results, tracker, status, t0)

    # ─── Zuteilung eines Kurses ───────────────────────────────────────────────

    def _allocate_course(
        self,
        course: Course,
        lecturer: Lecturer,
        result: CourseAllocation,
        slots: list[TimeSlot],
        tracker: ResourceTracker,
        room_selector: RoomSelector,
        reporter: ConflictReporter,
        entries: list[ScheduleEntry],
    ) -> None:
        for session in range(1, result.sessions_needed + 1):
            placed = False
            for slot in slots:
                if not self._is_suitable(course, lecturer, slot, tracker):
                    continue
                room = room_selector.select(course, slot)
                if room is None:
                    continue
                tracker.commit(course, lecturer, room, slot)
                entries.append(ScheduleEntry(
                    course_id=course.id,
                    lecturer_id=lecturer.id,
                    room_id=room.id,
                    day=slot.day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    program_id=course.program_id,
                    year=course.year,
                    semester=course.semester,
                    session_index=session,
                    course_name=course.name,
                    course_code=course.code,
                    lecturer_name=lecturer.name,
                    room_name=room.name,
                    program_name=self.data.program.name,
                ))
                result.sessions_scheduled += 1
                placed = True
                break
            if not placed:
                reporter.scheduling_failure(course, lecturer, session)

        if result.sessions_scheduled < result.sessions_needed:
            reporter.incomplete(
                course, lecturer, result.sessions_scheduled, result.sessions_needed
            )

    def _is_suitable(
        self,
        course: Course,
        lecturer: Lecturer,
        slot: TimeSlot,
        tracker: ResourceTracker,
    ) -> bool:
        """Slot-Prüfung ohne Raum: Kohorte, Lehrperson, Tageslast, Abstände."""
        settings = self.settings
        if not tracker.is_group_free(course.group_key, slot):
            return False
        if not tracker.is_lecturer_free(lecturer.id, slot):
            return False
        cap = lecturer.daily_cap(settings.max_daily_hours)
        if tracker.daily_hours(lecturer.id, slot.day) >= cap:
            return False
        if settings.avoid_back_to_back and (
            tracker.is_teaching(lecturer.id, slot.shifted(-1))
            or tracker.is_teaching(lecturer.id, slot.shifted(1))
        ):
            return False
        if (
            settings.spread_courses_across_days
            and tracker.course_sessions_on(course.id, slot.day) >= settings.max_sessions_per_day
        ):
            return False
        return True

    # ─── Ergebnis ─────────────────────────────────────────────────────────────

    def _build_solution(
        self,
        entries: list[ScheduleEntry],
        reporter: ConflictReporter,
        results: list[CourseAllocation],
        tracker: ResourceTracker,
        status: SolveStatus,
        t0: float,
    ) -> TimetableSolution:
        elapsed = time.time() - t0
        logger.info(
            f"Zuteilung beendet ({status}): {len(entries)} Sitzungen, "
            f"{len(reporter.conflicts)} Konflikte | Zeit: {elapsed:.2f}s"
        )
        return TimetableSolution(
            entries=entries,
            conflicts=reporter.conflicts,
            status=status,
            course_results=results,
            lecturer_hours=tracker.lecturer_hours(),
            solve_time_seconds=elapsed,
            program_id=self.data.program.id,
            settings_snapshot=self.settings,
        )
