"""Verwaltung der Planer-Konfiguration als kommentierte YAML-Datei.

Aktive Konfiguration unter config/planner_config.yaml, benannte Varianten
(Szenarien) unter scenarios/<name>.yaml mit optionaler <name>.meta.yaml.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import GeneratorSettings, PlannerConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── Kommentare in der YAML-Datei ───

def _yaml_header() -> str:
    return (
        "# ============================================\n"
        "# Hochschul-Stundenplan-Generator: Konfiguration\n"
        f"# Stand: {date.today().isoformat()}\n"
        "# ============================================\n"
    )


_BLOCK_COMMENTS = {
    "institution_name": (
        "Hochschule",
        "Name und Studienjahr erscheinen in den Exporten.",
    ),
    "settings": (
        "Generator-Einstellungen",
        "Zeitfenster: Beginn inklusive, Ende exklusive, 1-Stunden-Raster.\n"
        "Alle Regeln gelten für genau einen Zuteilungslauf.",
    ),
}

_SETTINGS_EOL_COMMENTS = {
    "max_daily_hours": "Globaler Default, pro Lehrperson überschreibbar",
    "max_sessions_per_day": "Nur mit spread_courses_across_days",
    "consider_room_capacity": "Nutzt die Studierendenzahl des Studiengangs",
}

# Menüpunkt → (Text, Wizard-Schritt); None = Hochschule bearbeiten
_EDIT_MENU = {
    "1": ("Hochschule & Studienjahr", None),
    "2": ("Zeitfenster (Beginn, Ende, Wochenende)", "time_window"),
    "3": ("Räume & Lehrende", "resources"),
    "4": ("Sitzungen", "sessions"),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "planner_config.yaml"
    SCENARIOS_DIR = Path("scenarios")

    def first_run_check(self) -> bool:
        """True, solange keine aktive Konfiguration gespeichert ist."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Lesen & Schreiben ───

    def load(self, path: Optional[Path] = None) -> PlannerConfig:
        """Liest eine YAML-Konfiguration und validiert sie mit Pydantic.

        Raises:
            FileNotFoundError: Datei existiert nicht.
            ValueError: Inhalt verletzt das Schema.
        """
        source = Path(path) if path else self.DEFAULT_CONFIG
        if not source.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {source}\n"
                "Mit 'python main.py setup' wird eine neue angelegt."
            )
        with open(source, "r", encoding="utf-8") as f:
            content = yaml.load(f) or {}
        try:
            return PlannerConfig.model_validate(dict(content))
        except ValueError as e:
            raise ValueError(f"Ungültige Konfiguration in {source}:\n{e}") from e

    def save(self, config: PlannerConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration mit Abschnitts- und Zeilenkommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)
        document = self._build_commented_yaml(config)
        with open(target, "w", encoding="utf-8") as f:
            f.write(_yaml_header() + "\n")
            yaml.dump(document, f)
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: PlannerConfig) -> CommentedMap:
        document = CommentedMap(json.loads(config.model_dump_json()))
        for key, (title, text) in _BLOCK_COMMENTS.items():
            document.yaml_set_comment_before_after_key(
                key, before=f"\n─── {title} ───\n{text}"
            )

        settings = CommentedMap(document["settings"])
        for key, text in _SETTINGS_EOL_COMMENTS.items():
            settings.yaml_add_eol_comment(text, key)
        document["settings"] = settings
        return document

    # ─── Szenarien ───

    def _scenario_files(self, name: str) -> tuple[Path, Path]:
        return (
            self.SCENARIOS_DIR / f"{name}.yaml",
            self.SCENARIOS_DIR / f"{name}.meta.yaml",
        )

    def save_scenario(self, config: PlannerConfig, name: str,
                      description: str = "") -> None:
        """Legt die Konfiguration als benanntes Szenario ab (Rückfrage bei Bestand)."""
        config_file, meta_file = self._scenario_files(name)
        if config_file.exists() and not Confirm.ask(
            f"Szenario '{name}' gibt es schon. Ersetzen?", default=False
        ):
            console.print("[yellow]Szenario nicht gespeichert.[/yellow]")
            return

        self.save(config, config_file)
        if description:
            with open(meta_file, "w", encoding="utf-8") as f:
                yaml.dump({"description": description,
                           "created": date.today().isoformat()}, f)

    def _read_meta(self, meta_file: Path) -> dict:
        if not meta_file.exists():
            return {}
        with open(meta_file, "r", encoding="utf-8") as f:
            return dict(yaml.load(f) or {})

    def list_scenarios(self) -> list[dict]:
        """Name, Pfad, Beschreibung und Datum aller Szenarien (alphabetisch)."""
        if not self.SCENARIOS_DIR.is_dir():
            return []
        result = []
        for config_file in sorted(self.SCENARIOS_DIR.glob("*.yaml")):
            name = config_file.stem
            if name.endswith(".meta"):
                continue
            meta = self._read_meta(self._scenario_files(name)[1])
            result.append({
                "name": name,
                "path": str(config_file),
                "description": meta.get("description", ""),
                "created": meta.get("created", ""),
            })
        return result

    def load_scenario(self, name: str) -> PlannerConfig:
        config_file, _ = self._scenario_files(name)
        if not config_file.exists():
            known = ", ".join(s["name"] for s in self.list_scenarios()) or "keine"
            raise FileNotFoundError(
                f"Szenario '{name}' nicht gefunden (vorhanden: {known})"
            )
        return self.load(config_file)

    # ─── Interaktive Bearbeitung ───

    def edit_interactive(self, config: PlannerConfig) -> PlannerConfig:
        """Menü zum schrittweisen Ändern; '0' speichert und beendet."""
        while True:
            console.print(Panel("[bold]Konfiguration bearbeiten[/bold]",
                                border_style="cyan"))
            for key, (text, _) in _EDIT_MENU.items():
                console.print(f"  [bold]{key}.[/bold] {text}")
            console.print("  [bold]0.[/bold] Speichern & Beenden")

            choice = Prompt.ask("\nAuswahl", default="0")
            if choice == "0":
                self.save(config)
                return config
            if choice not in _EDIT_MENU:
                console.print(f"[yellow]Unbekannter Menüpunkt: {choice}[/yellow]")
                continue

            step = _EDIT_MENU[choice][1]
            if step is None:
                config = self._edit_institution(config)
            else:
                config = self._edit_settings(config, step)

    def _edit_institution(self, config: PlannerConfig) -> PlannerConfig:
        return config.model_copy(update={
            "institution_name": Prompt.ask("Name der Hochschule",
                                           default=config.institution_name),
            "academic_year": Prompt.ask("Studienjahr", default=config.academic_year),
        })

    def _edit_settings(self, config: PlannerConfig, step: str) -> PlannerConfig:
        """Wiederholt einen Wizard-Schritt und übernimmt die neuen Werte."""
        from config.wizard import (
            _show_settings_table, _wizard_resources, _wizard_sessions,
            _wizard_time_window,
        )
        console.print("\n[bold]Aktuelle Einstellungen:[/bold]")
        _show_settings_table(config.settings)

        ask = {
            "time_window": _wizard_time_window,
            "resources": _wizard_resources,
            "sessions": _wizard_sessions,
        }[step]
        merged = {**config.settings.model_dump(), **ask()}
        return config.model_copy(
            update={"settings": GeneratorSettings.model_validate(merged)}
        )
