"""Hochschul-Stundenplan-Generator: Haupt-CLI.

Verwendung:
  python main.py setup                    Ersteinrichtung (Wizard)
  python main.py config edit              Konfiguration bearbeiten
  python main.py config show              Konfiguration anzeigen
  python main.py generate                 Testdaten erzeugen und speichern
  python main.py import <datei>           Store-Export (JSON/Excel) importieren
  python main.py check                    Machbarkeits-Check vor dem Lauf
  python main.py solve                    Stundenplan berechnen
  python main.py show                     Stundenplan im Terminal anzeigen
  python main.py validate                 Lösung unabhängig nachprüfen
  python main.py relax                    Einstellungs-Lockerung testen
  python main.py diff <a.json> <b.json>   Zwei Läufe vergleichen
  python main.py export                   Excel exportieren
  python main.py run                      generate → solve → export
  python main.py scenario save <name>     Szenario speichern
  python main.py scenario load <name>     Szenario laden
  python main.py scenario list            Szenarien auflisten
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für Datensatz und Lösung
DEFAULT_DATA_JSON = Path("output/scheduling_input.json")
DEFAULT_SOLUTION_JSON = Path("output/timetable.json")
DEFAULT_EXCEL = Path("output/stundenplan.xlsx")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(json_path: str, config):
    """Lädt den Datensatz und übernimmt die Einstellungen der Konfiguration."""
    from models.scheduling_input import SchedulingInput

    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie [bold]python main.py generate[/bold] oder "
            "[bold]python main.py import <datei> --save-json[/bold]."
        )
        sys.exit(1)
    data = SchedulingInput.load_json(p)
    return data.model_copy(update={"settings": config.settings})


def _load_solution_or_abort(solution_path: str):
    from solver.scheduler import TimetableSolution

    p = Path(solution_path)
    if not p.exists():
        console.print(
            f"[red]Keine Lösung gefunden: {p}[/red]\n"
            "Führen Sie zunächst [bold]python main.py solve[/bold] aus."
        )
        sys.exit(1)
    return TimetableSolution.load_json(p)


def _import_or_abort(records: Path, program_id: Optional[str], config):
    from data.record_import import RecordImportError, import_records

    console.print(f"[bold]Importiere:[/bold] {records}")
    try:
        result = import_records(records, program_id=program_id, settings=config.settings)
    except RecordImportError as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    result.print_rich()
    return result


def _run_solver(data, max_seconds: Optional[float] = None):
    """Führt den Solver mit Fortschrittsbalken aus."""
    from solver.scheduler import TimetableSolver

    should_cancel = None
    if max_seconds is not None:
        deadline = time.monotonic() + max_seconds
        should_cancel = lambda: time.monotonic() > deadline  # noqa: E731

    with Progress(
        TextColumn("[bold cyan]Zuteilung"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("solve", total=100)
        solution = TimetableSolver(data).solve(
            on_progress=lambda percent: progress.update(task, completed=percent),
            should_cancel=should_cancel,
        )
    return solution


def _print_solution_summary(solution) -> None:
    status_color = "green" if solution.status == "complete" else "yellow"
    lines = [
        f"Status: [{status_color}]{solution.status}[/{status_color}]",
        f"Sitzungen: {solution.sessions_scheduled}/{solution.sessions_needed}",
        f"Konflikte: {len(solution.conflicts)}",
        f"Laufzeit: {solution.solve_time_seconds:.2f}s",
    ]
    console.print(Panel("\n".join(lines), title="Zuteilung", border_style="cyan"))

    counts = solution.conflict_counts()
    if counts:
        table = Table(title="Konflikte nach Art", box=box.ROUNDED)
        table.add_column("Art", style="bold")
        table.add_column("Anzahl", justify="right")
        for kind, n in counts.items():
            table.add_row(kind, str(n))
        console.print(table)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]python main.py config edit[/bold] zum Bearbeiten."
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.wizard import _show_settings_table

    mgr, config = _load_config_or_abort()
    s = config.settings
    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  Studienjahr {config.academic_year}\n"
        f"Zeitfenster {s.preferred_start_time}–{s.preferred_end_time}  |  "
        f"{len(s.days)} Tage  |  {s.hours_per_day} Slots/Tag  |  "
        f"Sitzungslänge {s.session_length}h",
        title="Konfiguration",
        border_style="cyan",
    ))
    _show_settings_table(s)


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config_or_abort()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--lecturers", "num_lecturers", default=12, help="Anzahl Lehrende.")
@click.option("--courses", "courses_per_cohort", default=4, help="Kurse pro Kohorte.")
@click.option("--rooms", "num_rooms", default=6, help="Anzahl Räume.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für den JSON-Datensatz.")
def cmd_generate(seed: int, num_lecturers: int, courses_per_cohort: int,
                 num_rooms: int, json_path: str):
    """Erzeugt einen Test-Datensatz (Studiengang, Kurse, Lehrende, Räume)."""
    mgr, config = _load_config_or_abort()
    from data.fake_data import SampleDataGenerator

    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = SampleDataGenerator(
        config.settings, seed=seed, num_lecturers=num_lecturers,
        courses_per_cohort=courses_per_cohort, num_rooms=num_rooms,
    )
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── IMPORT ───────────────────────────────────────────────────────────────────

@click.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.option("--program", "program_id", default=None,
              help="ID des Studiengangs (Standard: erster im Export).")
@click.option("--save-json", is_flag=True, default=False,
              help="Importierte Daten als JSON speichern.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_import(datei: Path, program_id: Optional[str], save_json: bool, json_path: str):
    """Importiert einen Store-Export (JSON oder Excel)."""
    mgr, config = _load_config_or_abort()
    result = _import_or_abort(datei, program_id, config)
    console.print(f"\n{result.data.summary()}")

    if save_json:
        out_path = Path(json_path)
        result.data.save_json(out_path)
        console.print(f"[green]✓[/green] Daten gespeichert: {out_path}")


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_check(json_path: str):
    """Führt einen Machbarkeits-Check auf dem aktuellen Datensatz durch."""
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path, config)

    console.print(f"\n{data.summary()}\n")
    report = data.validate_feasibility()
    report.print_rich()

    sys.exit(0 if report.is_feasible else 1)


# ─── SOLVE ────────────────────────────────────────────────────────────────────

@click.command("solve")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zum JSON-Datensatz.")
@click.option("--records", type=click.Path(exists=True, path_type=Path), default=None,
              help="Store-Export direkt importieren statt JSON-Datensatz.")
@click.option("--program", "program_id", default=None,
              help="Studiengang beim Import (Standard: erster).")
@click.option("--output", "-o", default=str(DEFAULT_SOLUTION_JSON),
              help="Ausgabepfad der Lösung.")
@click.option("--max-seconds", type=float, default=None,
              help="Lauf nach dieser Zeit an der nächsten Kursgrenze abbrechen.")
def cmd_solve(json_path: str, records: Optional[Path], program_id: Optional[str],
              output: str, max_seconds: Optional[float]):
    """Berechnet den Stundenplan (Greedy-Zuteilung)."""
    mgr, config = _load_config_or_abort()

    import_conflicts = []
    if records is not None:
        result = _import_or_abort(records, program_id, config)
        data, import_conflicts = result.data, result.conflicts
    else:
        data = _load_data_or_abort(json_path, config)

    report = data.validate_feasibility()
    if not report.is_feasible:
        report.print_rich()

    solution = _run_solver(data, max_seconds)
    if import_conflicts:
        solution = solution.model_copy(
            update={"conflicts": import_conflicts + solution.conflicts}
        )
    _print_solution_summary(solution)

    out_path = Path(output)
    solution.save_json(out_path)
    console.print(f"[green]✓[/green] Lösung gespeichert: {out_path}")


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.option("--solution", "solution_path", default=str(DEFAULT_SOLUTION_JSON),
              help="Pfad zur Lösung.")
@click.option("--year", type=int, default=None, help="Studienjahr der Kohorte.")
@click.option("--semester", type=int, default=None, help="Semester der Kohorte.")
@click.option("--lecturer", "lecturer_id", default=None, help="ID einer Lehrperson.")
@click.option("--room", "room_id", default=None, help="ID eines Raums.")
@click.option("--conflicts", "show_conflicts", is_flag=True, default=False,
              help="Konfliktliste anzeigen.")
def cmd_show(solution_path: str, year: Optional[int], semester: Optional[int],
             lecturer_id: Optional[str], room_id: Optional[str], show_conflicts: bool):
    """Zeigt den Stundenplan als Wochenraster im Terminal."""
    from export.helpers import group_label
    from export.tui_renderer import (
        header_row, render_group_rows, render_lecturer_rows, render_room_rows,
    )

    solution = _load_solution_or_abort(solution_path)

    views = []
    if lecturer_id:
        views.append((f"Lehrperson {lecturer_id}",
                      render_lecturer_rows(lecturer_id, solution)))
    if room_id:
        views.append((f"Raum {room_id}", render_room_rows(room_id, solution)))
    if year is not None or semester is not None:
        groups = [g for g in solution.groups()
                  if (year is None or g[0] == year)
                  and (semester is None or g[1] == semester)]
    elif not views:
        groups = solution.groups()
    else:
        groups = []
    for y, s in groups:
        views.append((group_label(y, s), render_group_rows(y, s, solution)))

    if not views:
        console.print("[dim]Keine passenden Einträge.[/dim]")

    header = header_row(solution)
    for title, rows in views:
        table = Table(title=title, box=box.ROUNDED, show_lines=True)
        for col in header:
            table.add_column(col)
        for row in rows:
            table.add_row(*row)
        console.print(table)

    if show_conflicts and solution.conflicts:
        table = Table(title="Konflikte", box=box.ROUNDED)
        table.add_column("Art", style="bold red")
        table.add_column("Kurs")
        table.add_column("Meldung")
        for c in solution.conflicts:
            table.add_row(c.kind.value, c.course_id or "—", c.message)
        console.print(table)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zum JSON-Datensatz.")
@click.option("--solution", "solution_path", default=str(DEFAULT_SOLUTION_JSON),
              help="Pfad zur Lösung.")
def cmd_validate(json_path: str, solution_path: str):
    """Prüft eine berechnete Lösung unabhängig vom Solver nach."""
    from analysis.solution_validator import SolutionValidator

    mgr, config = _load_config_or_abort()
    solution = _load_solution_or_abort(solution_path)
    data = _load_data_or_abort(json_path, config)
    data = data.model_copy(update={"settings": solution.settings_snapshot})

    report = SolutionValidator().validate(solution, data)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── RELAX ────────────────────────────────────────────────────────────────────

@click.command("relax")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zum JSON-Datensatz.")
def cmd_relax(json_path: str):
    """Testet gelockerte Einstellungen gegen offene Sitzungen."""
    from solver.settings_relaxer import SettingsRelaxer

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(json_path, config)

    console.print("[bold]Einstellungs-Varianten werden durchgerechnet...[/bold]")
    report = SettingsRelaxer(data).diagnose()
    report.print_rich()


# ─── DIFF ─────────────────────────────────────────────────────────────────────

@click.command("diff")
@click.argument("old", type=click.Path(exists=True, path_type=Path))
@click.argument("new", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Ergebnis als JSON ausgeben.")
def cmd_diff(old: Path, new: Path, as_json: bool):
    """Vergleicht zwei gespeicherte Lösungen."""
    from analysis.diff import diff_solutions
    from solver.scheduler import TimetableSolution

    result = diff_solutions(TimetableSolution.load_json(old), TimetableSolution.load_json(new))
    if as_json:
        click.echo(result.to_json())
    else:
        result.print_rich()


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zum JSON-Datensatz.")
@click.option("--solution", "solution_path", default=str(DEFAULT_SOLUTION_JSON),
              help="Pfad zur Lösung.")
@click.option("--output", "-o", default=str(DEFAULT_EXCEL),
              help="Ausgabepfad der Excel-Datei.")
@click.option("--quality/--no-quality", default=True,
              help="Qualitätsbericht berechnen und als Blatt einfügen.")
def cmd_export(json_path: str, solution_path: str, output: str, quality: bool):
    """Exportiert den Stundenplan als Excel-Datei."""
    mgr, config = _load_config_or_abort()
    solution = _load_solution_or_abort(solution_path)
    data = _load_data_or_abort(json_path, config)
    _export(solution, data, config, Path(output), quality)


def _export(solution, data, config, out_path: Path, quality: bool) -> None:
    from analysis.quality_report import QualityAnalyzer
    from export.excel_export import ExcelExporter

    report = None
    if quality:
        analyzer = QualityAnalyzer()
        report = analyzer.analyze(solution, data)
        analyzer.print_rich(report)

    ExcelExporter(solution, data, institution_name=config.institution_name).export(
        out_path, quality_report=report
    )
    console.print(f"[green]✓[/green] Excel gespeichert: {out_path}")


# ─── RUN ──────────────────────────────────────────────────────────────────────

@click.command("run")
@click.option("--seed", default=42, help="Zufalls-Seed für die Testdaten.")
@click.option("--records", type=click.Path(exists=True, path_type=Path), default=None,
              help="Store-Export importieren statt Testdaten zu erzeugen.")
@click.option("--program", "program_id", default=None,
              help="Studiengang beim Import (Standard: erster).")
def cmd_run(seed: int, records: Optional[Path], program_id: Optional[str]):
    """Führt generate (bzw. import) → solve → export aus."""
    mgr, config = _load_config_or_abort()
    console.print("[bold]Pipeline: generate → solve → export[/bold]")

    import_conflicts = []
    if records is not None:
        result = _import_or_abort(records, program_id, config)
        data, import_conflicts = result.data, result.conflicts
    else:
        from data.fake_data import SampleDataGenerator
        gen = SampleDataGenerator(config.settings, seed=seed)
        data = gen.generate()
        gen.print_summary(data)
    data.save_json(DEFAULT_DATA_JSON)

    solution = _run_solver(data)
    if import_conflicts:
        solution = solution.model_copy(
            update={"conflicts": import_conflicts + solution.conflicts}
        )
    _print_solution_summary(solution)
    solution.save_json(DEFAULT_SOLUTION_JSON)
    console.print(f"[green]✓[/green] Lösung gespeichert: {DEFAULT_SOLUTION_JSON}")

    _export(solution, data, config, DEFAULT_EXCEL, quality=True)


# ─── SCENARIO ─────────────────────────────────────────────────────────────────

@click.group("scenario")
def cmd_scenario():
    """Szenarien verwalten (speichern, laden, auflisten)."""


@cmd_scenario.command("save")
@click.argument("name")
@click.option("--description", "-d", default="", help="Beschreibung des Szenarios.")
def scenario_save(name: str, description: str):
    """Speichert die aktuelle Konfiguration als Szenario."""
    mgr, config = _load_config_or_abort()
    mgr.save_scenario(config, name, description)


@cmd_scenario.command("load")
@click.argument("name")
def scenario_load(name: str):
    """Lädt ein gespeichertes Szenario als aktive Konfiguration."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        config = mgr.load_scenario(name)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    mgr.save(config)
    console.print(f"[green]✓[/green] Szenario '{name}' als aktive Config gesetzt.")


@cmd_scenario.command("list")
def scenario_list():
    """Listet alle gespeicherten Szenarien auf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    scenarios = mgr.list_scenarios()

    if not scenarios:
        console.print("[dim]Keine Szenarien vorhanden.[/dim]")
        return

    table = Table(title="Gespeicherte Szenarien", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Erstellt")
    table.add_column("Beschreibung")
    for s in scenarios:
        table.add_row(s["name"], str(s.get("created", "")), s.get("description", ""))
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe (DEBUG).")
def cli(verbose: bool):
    """Stundenplan-Generator für Hochschul-Studiengänge.

    Starten Sie mit: python main.py setup
    """
    _setup_logging(verbose)


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Hochschul-Stundenplan-Generator![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_import)
cli.add_command(cmd_check)
cli.add_command(cmd_solve)
cli.add_command(cmd_show)
cli.add_command(cmd_validate)
cli.add_command(cmd_relax)
cli.add_command(cmd_diff)
cli.add_command(cmd_export)
cli.add_command(cmd_run)
cli.add_command(cmd_scenario)


if __name__ == "__main__":
    main()
