"""Testdaten-Generator für den Stundenplan-Generator.

Erzeugt einen reproduzierbaren Studiengang (gleicher Seed → gleiche Daten)
mit Kursen über die Studienjahre 1–4 und Semester 1–2.

Absichtliche Engpässe:
  1. Großer Jahrgang 1: erwartete Studierende nahe an der größten Raumkapazität
  2. Sperrzeiten: jede Lehrperson hat einige gesperrte Stunden
  3. Eine stark eingeschränkte Lehrperson (Montag und Freitag gesperrt)
  4. Ein Teil der Kurse ist fest einer Lehrperson zugeordnet
"""

import random
from typing import Optional

from config.schema import GeneratorSettings
from models.course import Course
from models.lecturer import Lecturer
from models.program import Program
from models.room import Room
from models.scheduling_input import SchedulingInput
from models.timeslot import TimeSlot

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Bernd", "Christian", "Dieter", "Jürgen", "Markus", "Stefan",
    "Anna", "Birgit", "Christine", "Eva", "Kathrin", "Lena", "Sabine",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
]

_TITLES = ["Prof. Dr.", "Dr.", "Prof."]

# ─── Kurskatalog je Studienjahr ───────────────────────────────────────────────

_COURSE_CATALOG: dict[int, list[str]] = {
    1: ["Analysis", "Lineare Algebra", "Programmierung", "Technische Informatik",
        "Diskrete Strukturen", "Wissenschaftliches Arbeiten"],
    2: ["Algorithmen und Datenstrukturen", "Datenbanken", "Betriebssysteme",
        "Statistik", "Softwaretechnik", "Rechnernetze"],
    3: ["Theoretische Informatik", "Verteilte Systeme", "IT-Sicherheit",
        "Compilerbau", "Mensch-Computer-Interaktion", "Projektmanagement"],
    4: ["Maschinelles Lernen", "Cloud Computing", "Bildverarbeitung",
        "Wahlpflichtseminar", "Forschungsprojekt", "Recht und Ethik"],
}

# (Typ, Kapazität)
_ROOM_TYPES: list[tuple[str, int]] = [
    ("Lecture Hall", 120),
    ("Lecture Hall", 80),
    ("Seminar Room", 40),
    ("Seminar Room", 30),
    ("Computer Lab", 35),
    ("Seminar Room", 25),
]

# Erwartete Studierende je Studienjahr (Schwund über die Jahre)
_COHORT_SIZE = {1: 110, 2: 75, 3: 50, 4: 35}


class SampleDataGenerator:
    """Generiert einen vollständigen SchedulingInput für Demo und Tests."""

    def __init__(
        self,
        settings: Optional[GeneratorSettings] = None,
        seed: Optional[int] = None,
        num_lecturers: int = 12,
        courses_per_cohort: int = 4,
        num_rooms: int = 6,
    ) -> None:
        self.settings = settings or GeneratorSettings()
        self.rng = random.Random(seed)
        self.num_lecturers = num_lecturers
        self.courses_per_cohort = courses_per_cohort
        self.num_rooms = num_rooms

    # ─── Studiengang ──────────────────────────────────────────────────────────

    def _generate_program(self) -> Program:
        return Program(id="P-INF", name="Informatik (B.Sc.)", student_count=30)

    # ─── Räume ────────────────────────────────────────────────────────────────

    def _generate_rooms(self) -> list[Room]:
        rooms = []
        for i in range(self.num_rooms):
            room_type, capacity = _ROOM_TYPES[i % len(_ROOM_TYPES)]
            prefix = {"Lecture Hall": "HS", "Computer Lab": "PC"}.get(room_type, "SR")
            rooms.append(Room(
                id=f"R{i + 1:02d}",
                name=f"{prefix} {i + 1:02d}",
                room_type=room_type,
                capacity=capacity,
            ))
        return rooms

    # ─── Lehrende ─────────────────────────────────────────────────────────────

    def _random_unavailability(self, count: int) -> list[TimeSlot]:
        days = self.settings.days
        hours = list(range(self.settings.start_hour, self.settings.end_hour))
        slots: list[TimeSlot] = []
        while len(slots) < count:
            slot = TimeSlot(self.rng.choice(days), self.rng.choice(hours))
            if slot not in slots:
                slots.append(slot)
        return slots

    def _generate_lecturers(self) -> list[Lecturer]:
        lecturers = []
        used_names: set[str] = set()
        for i in range(self.num_lecturers):
            while True:
                name = (
                    f"{self.rng.choice(_TITLES)} {self.rng.choice(_FIRST_NAMES)} "
                    f"{self.rng.choice(_LAST_NAMES)}"
                )
                if name not in used_names:
                    used_names.add(name)
                    break
            unavailable = self._random_unavailability(self.rng.randint(0, 4))
            lecturers.append(Lecturer(
                id=f"L{i + 1:02d}",
                name=name,
                unavailable_times=unavailable,
            ))

        # Engpass 3: Montag und Freitag komplett gesperrt, max. 4h/Tag
        if lecturers:
            hours = range(self.settings.start_hour, self.settings.end_hour)
            blocked = [
                TimeSlot(day, h)
                for day in (self.settings.days[0], self.settings.days[4])
                for h in hours
            ]
            last = lecturers[-1]
            lecturers[-1] = last.model_copy(update={
                "unavailable_times": blocked,
                "max_daily_hours": 4,
            })
        return lecturers

    # ─── Kurse ────────────────────────────────────────────────────────────────

    def _generate_courses(
        self, program: Program, lecturers: list[Lecturer]
    ) -> list[Course]:
        courses = []
        for year in range(1, 5):
            for semester in (1, 2):
                names = self.rng.sample(
                    _COURSE_CATALOG[year],
                    min(self.courses_per_cohort, len(_COURSE_CATALOG[year])),
                )
                for n, name in enumerate(names, 1):
                    code = f"INF{year}{semester}{n}"
                    pinned = None
                    # Engpass 4: etwa jeder dritte Kurs fest zugeordnet
                    if lecturers and self.rng.random() < 0.35:
                        pinned = self.rng.choice(lecturers).id
                    base = _COHORT_SIZE[year]
                    courses.append(Course(
                        id=f"C-{code}",
                        program_id=program.id,
                        name=f"{name} {semester}" if year <= 2 else name,
                        code=code,
                        credit_hours=self.rng.choice([2, 3, 3, 4, 5]),
                        year=year,
                        semester=semester,
                        lecturer_id=pinned,
                        expected_students=max(5, base + self.rng.randint(-10, 10)),
                    ))
        return courses

    # ─── Vollständiger Datensatz ──────────────────────────────────────────────

    def generate(self) -> SchedulingInput:
        """Erzeugt den vollständigen Datensatz als SchedulingInput-Objekt."""
        program = self._generate_program()
        rooms = self._generate_rooms()
        lecturers = self._generate_lecturers()
        courses = self._generate_courses(program, lecturers)
        return SchedulingInput(
            program=program,
            courses=courses,
            lecturers=lecturers,
            rooms=rooms,
            settings=self.settings,
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: SchedulingInput) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Testdaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        pinned = sum(1 for c in data.courses if c.lecturer_id)
        cohorts = {c.group_key for c in data.courses}
        blocked = sum(len(l.unavailable_times) for l in data.lecturers)
        table.add_row("Studiengang", "1", data.program.name)
        table.add_row("Kurse", str(len(data.courses)),
                      f"{len(cohorts)} Kohorten, {pinned} fest zugeordnet")
        table.add_row("Sitzungen", str(data.total_sessions_needed()),
                      f"Sitzungslänge {data.settings.session_length}h")
        table.add_row("Lehrende", str(len(data.lecturers)),
                      f"{blocked} gesperrte Stunden")
        table.add_row("Räume", str(len(data.rooms)),
                      ", ".join(f"{r.name} ({r.capacity})" for r in data.rooms))

        console.print(table)
