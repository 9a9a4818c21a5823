"""Belegungszustand eines Zuteilungslaufs (Räume, Lehrende, Kohorten)."""

from collections import defaultdict
from typing import Iterable, Optional

from config.schema import Weekday
from models.course import Course, GroupKey
from models.lecturer import Lecturer
from models.room import Room
from models.timeslot import TimeSlot


class ResourceTracker:
    """Belegung über das Slot-Universum, gehört genau einem solve()-Aufruf.

    Alle Schlüssel sind Tupel, alle Abfragen O(1). Sperrzeiten der Lehrenden
    werden beim Anlegen als belegt eingetragen, zählen aber nicht als
    Unterricht (Back-to-Back-Prüfung nutzt nur _lecturer_teaching).
    """

    def __init__(self, lecturers: Iterable[Lecturer] = ()) -> None:
        self._room_busy: set[tuple[str, TimeSlot]] = set()
        self._lecturer_busy: set[tuple[str, TimeSlot]] = set()
        self._lecturer_teaching: set[tuple[str, TimeSlot]] = set()
        self._group_busy: set[tuple[GroupKey, TimeSlot]] = set()
        self._lecturer_daily: dict[tuple[str, Weekday], int] = defaultdict(int)
        self._lecturer_total: dict[str, int] = {}
        self._course_daily: dict[tuple[str, Weekday], int] = defaultdict(int)

        for lecturer in lecturers:
            self._lecturer_total.setdefault(lecturer.id, 0)
            for slot in lecturer.unavailable_times:
                self._lecturer_busy.add((lecturer.id, slot))

    # ─── Abfragen ───

    def is_room_free(self, room_id: str, slot: TimeSlot) -> bool:
        return (room_id, slot) not in self._room_busy

    def is_lecturer_free(self, lecturer_id: str, slot: TimeSlot) -> bool:
        return (lecturer_id, slot) not in self._lecturer_busy

    def is_teaching(self, lecturer_id: str, slot: Optional[TimeSlot]) -> bool:
        """True wenn die Lehrperson im Slot eine zugeteilte Sitzung hat."""
        return slot is not None and (lecturer_id, slot) in self._lecturer_teaching

    def is_group_free(self, group: GroupKey, slot: TimeSlot) -> bool:
        return (group, slot) not in self._group_busy

    def daily_hours(self, lecturer_id: str, day: Weekday) -> int:
        return self._lecturer_daily.get((lecturer_id, day), 0)

    def total_hours(self, lecturer_id: str) -> int:
        return self._lecturer_total.get(lecturer_id, 0)

    def course_sessions_on(self, course_id: str, day: Weekday) -> int:
        return self._course_daily.get((course_id, day), 0)

    def lecturer_hours(self) -> dict[str, int]:
        """Gesamtstunden je Lehrperson (Kopie)."""
        return dict(self._lecturer_total)

    # ─── Commit ───

    def commit(self, course: Course, lecturer: Lecturer, room: Room, slot: TimeSlot) -> None:
        """Trägt eine Sitzung in alle Belegungsstrukturen ein."""
        self._room_busy.add((room.id, slot))
        self._lecturer_busy.add((lecturer.id, slot))
        self._lecturer_teaching.add((lecturer.id, slot))
        self._group_busy.add((course.group_key, slot))
        self._lecturer_daily[(lecturer.id, slot.day)] += 1
        self._lecturer_total[lecturer.id] = self._lecturer_total.get(lecturer.id, 0) + 1
        self._course_daily[(course.id, slot.day)] += 1
