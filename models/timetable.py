"""Ausgabe-Datensätze eines Zuteilungslaufs: Stundenplan-Einträge und Konflikte."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from config.schema import Weekday


class ScheduleEntry(BaseModel):
    """Eine zugeteilte Sitzung: Kurs × Lehrperson × Raum × Zeitslot.

    Wird ausschließlich vom Solver erzeugt. Die Anzeigefelder (Namen, Code)
    werden beim Commit aus den Stammdaten übernommen.
    """
    model_config = ConfigDict(frozen=True)

    course_id: str
    lecturer_id: str
    room_id: str
    day: Weekday
    start_time: str           # "HH:00"
    end_time: str             # "HH+1:00"
    program_id: str
    year: int
    semester: int
    session_index: int = 1    # 1-basiert innerhalb des Kurses

    course_name: str = ""
    course_code: str = ""
    lecturer_name: str = ""
    room_name: str = ""
    program_name: str = ""

    @property
    def hour(self) -> int:
        return int(self.start_time.partition(":")[0])

    @property
    def group_key(self) -> tuple[int, int]:
        return (self.year, self.semester)

    @property
    def course_label(self) -> str:
        return self.course_code or self.course_name or self.course_id


class ConflictKind(str, Enum):
    LECTURER_MISSING = "LecturerMissing"
    ROOM_CAPACITY = "RoomCapacity"
    SCHEDULING_FAILURE = "SchedulingFailure"
    INCOMPLETE_SCHEDULING = "IncompleteScheduling"
    OVERLAP = "Overlap"
    ERROR = "Error"


class Conflict(BaseModel):
    """Nicht erfüllbare Anforderung oder Auffälligkeit eines Laufs (Daten, keine Exception)."""

    kind: ConflictKind
    message: str
    course_id: Optional[str] = None
    lecturer_id: Optional[str] = None
    session_index: Optional[int] = None
    entries: list[ScheduleEntry] = []

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"
