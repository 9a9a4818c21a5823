"""Auswahl von Lehrperson und Raum für einen Kurs bzw. Slot."""

import logging
from typing import Optional

from config.schema import GeneratorSettings
from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.timeslot import TimeSlot
from solver.tracker import ResourceTracker

logger = logging.getLogger(__name__)


class LecturerSelector:
    """Wählt einmal pro Kurs die Lehrperson für alle Sitzungen.

    Reihenfolge: feste Zuordnung (course.lecturer_id) → geringste Gesamtlast
    (balance_lecturer_load) → erste Lehrperson der Eingabe.
    """

    def __init__(
        self,
        lecturers: list[Lecturer],
        settings: GeneratorSettings,
        tracker: ResourceTracker,
    ) -> None:
        self.lecturers = list(lecturers)
        self.settings = settings
        self.tracker = tracker
        self._by_id = {l.id: l for l in self.lecturers}

    def select(self, course: Course) -> Optional[Lecturer]:
        if course.lecturer_id is not None:
            pinned = self._by_id.get(course.lecturer_id)
            if pinned is not None:
                return pinned
            logger.warning(
                f"Kurs {course.id}: zugeordnete Lehrperson '{course.lecturer_id}' "
                f"nicht gefunden – Auswahl nach Einstellung"
            )
        if not self.lecturers:
            return None
        if self.settings.balance_lecturer_load:
            # min() liefert bei Gleichstand den ersten in Eingabereihenfolge
            return min(self.lecturers, key=lambda l: self.tracker.total_hours(l.id))
        return self.lecturers[0]


class RoomSelector:
    """Wählt einen freien Raum für einen Slot."""

    def __init__(
        self,
        rooms: list[Room],
        settings: GeneratorSettings,
        tracker: ResourceTracker,
    ) -> None:
        self.rooms = list(rooms)
        self.settings = settings
        self.tracker = tracker

    def free_rooms(self, slot: TimeSlot) -> list[Room]:
        return [r for r in self.rooms if self.tracker.is_room_free(r.id, slot)]

    def select(self, course: Course, slot: TimeSlot) -> Optional[Room]:
        """Raum für course in slot oder None, wenn kein Raum frei ist.

        Mit prioritize_room_size: kleinster freier Raum mit ausreichender
        Kapazität, sonst der größte freie Raum. Ohne: erster freier Raum.
        """
        candidates = self.free_rooms(slot)
        if not candidates:
            return None
        if not self.settings.prioritize_room_size:
            return candidates[0]

        by_size = sorted(candidates, key=lambda r: r.capacity)
        for room in by_size:
            if room.capacity >= course.expected_students:
                return room
        return max(candidates, key=lambda r: r.capacity)
