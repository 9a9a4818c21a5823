from config.schema import GeneratorSettings, PlannerConfig, Weekday


WORKDAYS: list[Weekday] = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
]

WEEKEND_DAYS: list[Weekday] = [Weekday.SATURDAY, Weekday.SUNDAY]

DAY_SHORT_NAMES: dict[Weekday, str] = {
    Weekday.MONDAY: "Mo",
    Weekday.TUESDAY: "Di",
    Weekday.WEDNESDAY: "Mi",
    Weekday.THURSDAY: "Do",
    Weekday.FRIDAY: "Fr",
    Weekday.SATURDAY: "Sa",
    Weekday.SUNDAY: "So",
}

# Werte für fehlende Felder in Kurs-Datensätzen
DEFAULT_CREDIT_HOURS = 3
DEFAULT_EXPECTED_STUDENTS = 0
DEFAULT_YEAR = 1
DEFAULT_SEMESTER = 1


def default_settings() -> GeneratorSettings:
    """Standard-Einstellungen des Generators.

    Raumgröße beachten, Back-to-Back vermeiden, Lehrlast ausgleichen,
    max. 8 Stunden pro Tag, Zeitfenster 08:00–18:00, keine Wochenenden.
    """
    return GeneratorSettings()


def default_planner_config() -> PlannerConfig:
    """Vollständige Default-Konfiguration."""
    return PlannerConfig(settings=default_settings())
