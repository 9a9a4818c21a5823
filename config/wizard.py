"""Interaktiver Setup-Wizard für die Ersteinrichtung des Stundenplan-Generators.

Führt den Nutzer Schritt für Schritt durch die Einstellungen eines Laufs.
Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import GeneratorSettings, PlannerConfig

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _yes_no(value: bool) -> str:
    return "[green]✓[/green]" if value else "[red]✗[/red]"


def _show_settings_table(settings: GeneratorSettings) -> None:
    """Zeigt die Generator-Einstellungen als rich-Tabelle an."""
    table = Table(title="Generator-Einstellungen", box=box.ROUNDED)
    table.add_column("Einstellung", style="bold")
    table.add_column("Wert", width=10)
    table.add_column("Bedeutung")

    for name, field in GeneratorSettings.model_fields.items():
        value = getattr(settings, name)
        shown = _yes_no(value) if isinstance(value, bool) else str(value)
        table.add_row(name, shown, field.description or "")
    console.print(table)


# ─── SCHRITT 1: Hochschule ───

def _wizard_institution() -> tuple[str, str]:
    _header("Schritt 1 — Hochschule")
    _info("Name und Studienjahr erscheinen in Exporten.")
    name = Prompt.ask("Name der Hochschule", default="Muster-Hochschule")
    academic_year = Prompt.ask("Studienjahr", default="2025/26")
    return name, academic_year


# ─── SCHRITT 2: Zeitfenster ───

def _wizard_time_window() -> dict:
    _header("Schritt 2 — Zeitfenster")
    _info("Sitzungen werden im 1-Stunden-Raster zwischen Beginn und Ende geplant.")
    while True:
        start = Prompt.ask("Frühester Stundenbeginn (HH:MM)", default="08:00")
        end = Prompt.ask("Spätestes Stundenende (HH:MM)", default="18:00")
        weekends = Confirm.ask("Wochenendveranstaltungen erlauben?", default=False)
        values = {
            "preferred_start_time": start,
            "preferred_end_time": end,
            "allow_weekends": weekends,
        }
        try:
            GeneratorSettings(**values)
        except ValueError as e:
            _warn(f"Ungültiges Zeitfenster: {e}")
            continue
        _success("Zeitfenster festgelegt.")
        return values


# ─── SCHRITT 3: Räume & Lehrende ───

def _wizard_resources() -> dict:
    _header("Schritt 3 — Räume & Lehrende")
    prioritize = Confirm.ask(
        "Kleinsten ausreichenden Raum wählen (Raumgröße beachten)?", default=True)
    capacity = Confirm.ask(
        "Räume vorab nach Studierendenzahl des Studiengangs filtern?", default=False)
    balance = Confirm.ask("Lehrlast gleichmäßig verteilen?", default=True)
    back_to_back = Confirm.ask(
        "Direkt aufeinanderfolgende Stunden für Lehrende vermeiden?", default=True)
    while True:
        max_daily = IntPrompt.ask(
            "Max. Unterrichtsstunden pro Tag und Lehrperson (0–12)", default=8)
        if 0 <= max_daily <= 12:
            break
        _warn("Bitte einen Wert zwischen 0 und 12 eingeben.")

    _success("Raum- und Lehrenden-Einstellungen abgeschlossen.")
    return {
        "prioritize_room_size": prioritize,
        "consider_room_capacity": capacity,
        "balance_lecturer_load": balance,
        "avoid_back_to_back": back_to_back,
        "max_daily_hours": max_daily,
    }


# ─── SCHRITT 4: Sitzungen ───

def _wizard_sessions() -> dict:
    _header("Schritt 4 — Sitzungen")
    _info(
        "Credit Hours werden in Sitzungen umgerechnet: 2h-Sitzungen (Standard)\n"
        "oder 3h-Sitzungen. Jede Sitzung belegt einen 1-Stunden-Slot."
    )
    respect = Confirm.ask("Credit Hours in 2h-Sitzungen umrechnen?", default=True)
    spread = Confirm.ask("Sitzungen eines Kurses über die Woche verteilen?", default=False)
    max_per_day = 1
    if spread:
        max_per_day = max(1, IntPrompt.ask("Max. Sitzungen eines Kurses pro Tag", default=1))

    _success("Sitzungs-Einstellungen abgeschlossen.")
    return {
        "respect_credit_hours": respect,
        "spread_courses_across_days": spread,
        "max_sessions_per_day": max_per_day,
    }


def wizard_settings() -> GeneratorSettings:
    """Fragt alle Generator-Einstellungen ab (Schritte 2–4)."""
    values: dict = {}
    values.update(_wizard_time_window())
    values.update(_wizard_resources())
    values.update(_wizard_sessions())
    return GeneratorSettings(**values)


# ─── ZUSAMMENFASSUNG ───

def _show_summary(config: PlannerConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED, title="Konfigurationsübersicht")
    table.add_column("Bereich", style="bold cyan")
    table.add_column("Wert")

    s = config.settings
    table.add_row("Hochschule", config.institution_name)
    table.add_row("Studienjahr", config.academic_year)
    table.add_row(
        "Zeitfenster",
        f"{s.preferred_start_time}–{s.preferred_end_time}, "
        f"{len(s.days)} Tage/Woche ({s.hours_per_day} Slots/Tag)"
    )
    table.add_row("Sitzungslänge", f"{s.session_length}h pro Sitzung")
    table.add_row("Max. Stunden/Tag", str(s.max_daily_hours))
    table.add_row(
        "Regeln",
        f"Raumgröße {_yes_no(s.prioritize_room_size)}  "
        f"Kapazitätsfilter {_yes_no(s.consider_room_capacity)}  "
        f"Lastausgleich {_yes_no(s.balance_lecturer_load)}  "
        f"Back-to-Back vermeiden {_yes_no(s.avoid_back_to_back)}"
    )
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[PlannerConfig]:
    """Führt den vollständigen interaktiven Setup-Wizard aus.

    Returns:
        Fertige PlannerConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen beim Hochschul-Stundenplan-Generator![/bold]\n\n"
        "Der Generator verteilt die Sitzungen aller Kurse eines Studiengangs\n"
        "in einem Durchlauf auf Tage, Stunden, Räume und Lehrende.\n\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Stundenplan-Generator[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt die Einstellungen festlegen?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        name, academic_year = _wizard_institution()
        settings = wizard_settings()

        config = PlannerConfig(
            institution_name=name,
            academic_year=academic_year,
            settings=settings,
        )

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
