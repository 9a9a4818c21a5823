"""Reihenfolge der Kurse für die Zuteilung."""

from models.course import Course


def priority_key(course: Course) -> tuple[int, int, int, int]:
    return (course.year, course.semester, course.credit_hours, course.expected_students)


def prioritize_courses(courses: list[Course]) -> list[Course]:
    """Sortiert absteigend nach (year, semester, credit_hours, expected_students).

    Stabil: Kurse mit gleichem Schlüssel behalten ihre Eingabereihenfolge.
    Die Eingabeliste wird nicht verändert.
    """
    return sorted(courses, key=priority_key, reverse=True)
