from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def index(self) -> int:
        """0-basierte Position in der Woche (0=Montag)."""
        return list(Weekday).index(self)


def parse_clock_hour(value: str) -> int:
    """Liefert die Stunde aus "HH:MM" / "H:MM" (Minuten werden ignoriert)."""
    hour_str, _, minute_str = value.strip().partition(":")
    hour = int(hour_str)
    if minute_str and not minute_str.isdigit():
        raise ValueError(f"Ungültige Uhrzeit: {value!r}")
    if not 0 <= hour <= 24:
        raise ValueError(f"Stunde außerhalb 0–24: {value!r}")
    return hour


# ─── GENERATOR-EINSTELLUNGEN ───

class GeneratorSettings(BaseModel):
    """Einstellungen für einen Zuteilungslauf.

    Unveränderlich (frozen): der Solver erhält genau einen Wert pro Lauf.
    Abgewandelte Varianten entstehen über model_copy(update=...).
    """
    model_config = ConfigDict(frozen=True)

    # Kleinsten ausreichenden Raum wählen (sonst: erster freier Raum)
    prioritize_room_size: bool = Field(True,
        description="Raumgröße an erwartete Studierende anpassen")
    # Keine direkt aufeinanderfolgenden Stunden für Lehrende
    avoid_back_to_back: bool = Field(True,
        description="Back-to-Back-Stunden für Lehrende vermeiden")
    # Lehrende ohne feste Zuordnung nach geringster Last wählen
    balance_lecturer_load: bool = Field(True,
        description="Lehrlast gleichmäßig verteilen")
    # Obergrenze Unterrichtsstunden pro Lehrperson und Tag
    max_daily_hours: int = Field(8, ge=0, le=12,
        description="Max. Unterrichtsstunden pro Tag und Lehrperson")
    # Beginn des Zeitfensters (inklusive)
    preferred_start_time: str = Field("08:00",
        description="Frühester Stundenbeginn")
    # Ende des Zeitfensters (exklusive)
    preferred_end_time: str = Field("18:00",
        description="Spätestes Stundenende")
    # Samstag und Sonntag zulassen
    allow_weekends: bool = Field(False,
        description="Wochenendveranstaltungen erlauben")
    # Sitzungen eines Kurses auf mehrere Tage verteilen
    spread_courses_across_days: bool = Field(False,
        description="Kurs-Sitzungen über die Woche verteilen")
    # Max. Sitzungen eines Kurses pro Tag (nur mit spread_courses_across_days)
    max_sessions_per_day: int = Field(1, ge=1,
        description="Max. Sitzungen eines Kurses pro Tag")
    # Sitzungslänge 2h (True) bzw. 3h (False) für die Sitzungsanzahl
    respect_credit_hours: bool = Field(True,
        description="Credit Hours in 2h-Sitzungen umrechnen (sonst 3h)")
    # Räume vorab nach Studierendenzahl des Studiengangs filtern
    consider_room_capacity: bool = Field(False,
        description="Räume nach Studierendenzahl des Studiengangs filtern")

    @field_validator("preferred_start_time", "preferred_end_time")
    @classmethod
    def _check_clock(cls, v: str) -> str:
        parse_clock_hour(v)
        return v.strip()

    @model_validator(mode="after")
    def _check_window(self):
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"Zeitfenster leer: Beginn {self.preferred_start_time} "
                f"liegt nicht vor Ende {self.preferred_end_time}"
            )
        return self

    @property
    def start_hour(self) -> int:
        return parse_clock_hour(self.preferred_start_time)

    @property
    def end_hour(self) -> int:
        return parse_clock_hour(self.preferred_end_time)

    @property
    def session_length(self) -> int:
        """Stunden pro Sitzung für die Umrechnung der Credit Hours."""
        return 2 if self.respect_credit_hours else 3

    @property
    def days(self) -> list[Weekday]:
        """Unterrichtstage in kanonischer Reihenfolge (Montag zuerst)."""
        days = list(Weekday)[:5]
        if self.allow_weekends:
            days += [Weekday.SATURDAY, Weekday.SUNDAY]
        return days

    @property
    def hours_per_day(self) -> int:
        return self.end_hour - self.start_hour


# ─── GESAMT-CONFIG ───

class PlannerConfig(BaseModel):
    """Gesamtkonfiguration des Stundenplan-Generators."""
    # Name der Hochschule (für Exporte)
    institution_name: str = Field("Muster-Hochschule",
        description="Name der Hochschule")
    # Studienjahr, z.B. "2025/26"
    academic_year: str = Field("2025/26",
        description="Studienjahr")
    # Einstellungen des Zuteilungslaufs
    settings: GeneratorSettings = Field(default_factory=GeneratorSettings)
