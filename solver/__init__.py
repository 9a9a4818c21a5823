"""Solver-Modul (Greedy-Zuteilung in einem Durchlauf)."""

from .scheduler import CourseAllocation, TimetableSolution, TimetableSolver, sessions_needed
from .prioritizer import prioritize_courses
from .slots import build_slot_universe
from .tracker import ResourceTracker
from .selectors import LecturerSelector, RoomSelector
from .conflicts import ConflictReporter
from .settings_relaxer import RelaxReport, RelaxResult, SettingsRelaxer

__all__ = [
    "CourseAllocation",
    "TimetableSolution",
    "TimetableSolver",
    "sessions_needed",
    "prioritize_courses",
    "build_slot_universe",
    "ResourceTracker",
    "LecturerSelector",
    "RoomSelector",
    "ConflictReporter",
    "RelaxReport",
    "RelaxResult",
    "SettingsRelaxer",
]
