"""Aufbau des Slot-Universums (Scan-Reihenfolge des Solvers)."""

from config.schema import GeneratorSettings
from models.timeslot import TimeSlot


def build_slot_universe(settings: GeneratorSettings) -> list[TimeSlot]:
    """Alle 1-Stunden-Slots der Woche, sortiert nach Tag, dann Stunde.

    Tage: Montag–Freitag, Samstag/Sonntag nur mit allow_weekends.
    Stunden: preferred_start_time (inklusive) bis preferred_end_time (exklusive),
    maßgeblich ist nur die Stunde von "HH:MM".
    """
    return [
        TimeSlot(day, hour)
        for day in settings.days
        for hour in range(settings.start_hour, settings.end_hour)
    ]
