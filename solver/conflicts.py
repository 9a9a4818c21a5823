"""Sammeln von Konflikten und Überschneidungs-Nachprüfung."""

import logging
from collections import defaultdict
from typing import Optional

from models.course import Course
from models.lecturer import Lecturer
from models.program import Program
from models.timetable import Conflict, ConflictKind, ScheduleEntry

logger = logging.getLogger(__name__)


class ConflictReporter:
    """Erzeugt Konflikt-Datensätze in der Reihenfolge ihres Auftretens."""

    def __init__(self) -> None:
        self.conflicts: list[Conflict] = []

    def _add(self, conflict: Conflict) -> Conflict:
        self.conflicts.append(conflict)
        return conflict

    def lecturer_missing(self, course: Course) -> Conflict:
        return self._add(Conflict(
            kind=ConflictKind.LECTURER_MISSING,
            message=f"Keine Lehrperson für Kurs '{course.label}' verfügbar",
            course_id=course.id,
        ))

    def room_capacity(self, program: Program, student_count: int) -> Conflict:
        return self._add(Conflict(
            kind=ConflictKind.ROOM_CAPACITY,
            message=(
                f"Kein Raum mit ausreichender Kapazität für "
                f"{student_count} Studierende ({program.name or program.id})"
            ),
        ))

    def scheduling_failure(self, course: Course, lecturer: Lecturer, session: int) -> Conflict:
        logger.warning(f"Kurs {course.id}: Sitzung {session} nicht zuteilbar")
        return self._add(Conflict(
            kind=ConflictKind.SCHEDULING_FAILURE,
            message=(
                f"Kein passender Slot für Sitzung {session} von '{course.label}' "
                f"({lecturer.label})"
            ),
            course_id=course.id,
            lecturer_id=lecturer.id,
            session_index=session,
        ))

    def incomplete(
        self, course: Course, lecturer: Lecturer, scheduled: int, needed: int
    ) -> Conflict:
        return self._add(Conflict(
            kind=ConflictKind.INCOMPLETE_SCHEDULING,
            message=(
                f"Nur {scheduled} von {needed} Sitzungen für '{course.label}' zugeteilt"
            ),
            course_id=course.id,
            lecturer_id=lecturer.id,
        ))

    def error(self, course: Course, exc: BaseException,
              lecturer: Optional[Lecturer] = None) -> Conflict:
        return self._add(Conflict(
            kind=ConflictKind.ERROR,
            message=f"Fehler bei der Zuteilung von '{course.label}': {exc}",
            course_id=course.id,
            lecturer_id=lecturer.id if lecturer else None,
        ))

    def check_overlaps(self, entries: list[ScheduleEntry]) -> list[Conflict]:
        """Nachprüfung: mehrere Einträge einer Kohorte im selben Slot.

        Gruppiert nach (year, semester, day, start_time); jede Gruppe mit
        mehr als einem Eintrag ergibt genau einen Overlap-Konflikt.
        """
        groups: dict[tuple, list[ScheduleEntry]] = defaultdict(list)
        for entry in entries:
            groups[(entry.year, entry.semester, entry.day, entry.start_time)].append(entry)

        found: list[Conflict] = []
        for (year, semester, day, start), group in groups.items():
            if len(group) < 2:
                continue
            courses = ", ".join(e.course_label for e in group)
            found.append(self._add(Conflict(
                kind=ConflictKind.OVERLAP,
                message=(
                    f"Überschneidung Jahr {year}/Semester {semester} am "
                    f"{day.value} {start}: {courses}"
                ),
                entries=group,
            )))
        if found:
            logger.error(f"{len(found)} Überschneidungen im Ergebnis gefunden")
        return found
