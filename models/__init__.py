from models.program import Program
from models.course import Course, GroupKey
from models.lecturer import Lecturer
from models.room import Room
from models.timeslot import TimeSlot, parse_timeslot
from models.timetable import Conflict, ConflictKind, ScheduleEntry
from models.scheduling_input import SchedulingInput, FeasibilityReport

__all__ = [
    "Program",
    "Course",
    "GroupKey",
    "Lecturer",
    "Room",
    "TimeSlot",
    "parse_timeslot",
    "Conflict",
    "ConflictKind",
    "ScheduleEntry",
    "SchedulingInput",
    "FeasibilityReport",
]
