"""Import von Datensätzen aus dem Export der Dokumenten-Datenbank.

Erwartetes Format (snake_case wie im Store):
  {
    "programs":  [{"id", "name", "num_students"}, ...]   (oder "program": {...})
    "courses":   [{"id", "program_id", "name", "code", "credit_hours", "year",
                   "semester", "lecturer_id", "expected_students", "selected"}]
    "lecturers": [{"id", "name" | "user_id", "unavailable_times"}]
    "rooms":     [{"id", "name", "room_type" | "type", "capacity", "selected"}]
    "users":     [{"id", "name"}]                        (optional, Namen der Lehrenden)
  }

Quellen: JSON-Datei, Excel-Arbeitsmappe (ein Blatt pro Sammlung) oder dict.
Ungültige Einzeldatensätze werden als Error-Konflikte gemeldet und übersprungen.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from config.schema import GeneratorSettings
from models.course import Course
from models.lecturer import Lecturer
from models.program import Program
from models.room import Room
from models.scheduling_input import SchedulingInput
from models.timetable import Conflict, ConflictKind

logger = logging.getLogger(__name__)

_COLLECTIONS = ("programs", "courses", "lecturers", "rooms", "users")


class RecordImportError(Exception):
    """Fehler beim Lesen der Importdatei."""


class ImportResult(BaseModel):
    """Ergebnis eines Imports: Datensatz, Fehler-Konflikte, übersprungene IDs."""

    data: SchedulingInput
    conflicts: list[Conflict] = []
    skipped: list[str] = []

    def print_rich(self) -> None:
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        d = self.data
        lines = [
            f"[green]Studiengang: {d.program.name or d.program.id}[/green]  "
            f"[green]Kurse: {len(d.courses)}[/green]  "
            f"[green]Lehrende: {len(d.lecturers)}[/green]  "
            f"[green]Räume: {len(d.rooms)}[/green]"
        ]
        if self.skipped:
            lines.append(f"\n[dim]Nicht ausgewählt: {', '.join(self.skipped)}[/dim]")
        if self.conflicts:
            lines.append("\n[red]Ungültige Datensätze:[/red]")
            for c in self.conflicts:
                lines.append(f"  [red]• {c.message}[/red]")
        console.print(Panel("\n".join(lines), title="Datensatz-Import", border_style="cyan"))


# ─── Dateien lesen ────────────────────────────────────────────────────────────

def _read_json(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordImportError(f"Ungültiges JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise RecordImportError(f"{path}: Objekt mit Sammlungen erwartet")
    return raw


def _read_workbook(path: Path) -> dict:
    """Liest ein Blatt pro Sammlung; erste Zeile = Feldnamen."""
    try:
        from openpyxl import load_workbook
        wb = load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise RecordImportError(f"Fehler beim Öffnen der Excel-Datei: {e}") from e

    raw: dict = {}
    for name in wb.sheetnames:
        key = name.strip().lower()
        if key not in _COLLECTIONS:
            continue
        rows = list(wb[name].iter_rows(values_only=True))
        if not rows:
            continue
        headers = [str(h).strip() if h is not None else "" for h in rows[0]]
        records = []
        for values in rows[1:]:
            if all(v is None or str(v).strip() == "" for v in values):
                continue
            records.append({h: v for h, v in zip(headers, values) if h})
        raw[key] = records
    wb.close()
    return raw


def load_records(path: Path) -> dict:
    """Lädt den Roh-Export aus JSON oder Excel."""
    path = Path(path)
    if not path.exists():
        raise RecordImportError(f"Datei nicht gefunden: {path}")
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return _read_workbook(path)
    return _read_json(path)


# ─── Datensätze umwandeln ─────────────────────────────────────────────────────

# Schlüssel- und Referenzfelder, die der Store bzw. Excel auch als Zahl liefert
_ID_FIELDS = ("id", "program_id", "lecturer_id", "user_id", "code")


def _id_text(value):
    """1 / 1.0 / " P1 " → "1" / "1" / "P1"; None bleibt None."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _with_text_ids(record: dict) -> dict:
    record = dict(record)
    for key in _ID_FIELDS:
        if key in record:
            record[key] = _id_text(record[key])
    return record


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def _invalid(
    kind: str, record: dict, exc: ValidationError, id_field: Optional[str] = None
) -> Conflict:
    record_id = record.get("id", "?")
    ids = {id_field: str(record_id)} if id_field and "id" in record else {}
    logger.warning(f"Ungültiger {kind}-Datensatz {record_id}: {_first_error(exc)}")
    return Conflict(
        kind=ConflictKind.ERROR,
        message=f"Ungültiger {kind}-Datensatz '{record_id}': {_first_error(exc)}",
        **ids,
    )


def _select_program(raw: dict, program_id: Optional[str]) -> Program:
    programs = raw.get("programs")
    if programs is None and raw.get("program") is not None:
        programs = [raw["program"]]
    if not programs:
        raise RecordImportError("Kein Studiengang im Export enthalten")

    programs = [_with_text_ids(p) for p in programs]
    if program_id is None:
        record = programs[0]
    else:
        record = next((p for p in programs if p.get("id") == program_id), None)
        if record is None:
            known = ", ".join(str(p.get("id")) for p in programs)
            raise RecordImportError(
                f"Studiengang '{program_id}' nicht gefunden (vorhanden: {known})"
            )
    try:
        return Program.model_validate(record)
    except ValidationError as e:
        raise RecordImportError(
            f"Ungültiger Studiengang '{record.get('id')}': {_first_error(e)}"
        ) from e


def import_records(
    source: Union[Path, str, dict],
    program_id: Optional[str] = None,
    settings: Optional[GeneratorSettings] = None,
) -> ImportResult:
    """Baut einen SchedulingInput aus einem Store-Export.

    Nur Kurse des gewählten Studiengangs (Standard: erster Studiengang);
    Kurse und Räume mit selected=false werden übersprungen.
    """
    raw = source if isinstance(source, dict) else load_records(Path(source))
    program = _select_program(raw, program_id)

    conflicts: list[Conflict] = []
    skipped: list[str] = []

    user_names = {
        _id_text(u.get("id")): u.get("name", "")
        for u in raw.get("users", []) or []
    }

    courses: list[Course] = []
    for record in raw.get("courses", []) or []:
        record = _with_text_ids(record)
        if record.get("program_id") != program.id:
            continue
        if record.get("selected") is False:
            skipped.append(str(record.get("id")))
            continue
        try:
            courses.append(Course.model_validate(record))
        except ValidationError as e:
            conflicts.append(_invalid("Kurs", record, e, "course_id"))

    lecturers: list[Lecturer] = []
    for record in raw.get("lecturers", []) or []:
        record = _with_text_ids(record)
        if not record.get("name") and record.get("user_id") is not None:
            record["name"] = user_names.get(record["user_id"], "")
        try:
            lecturers.append(Lecturer.model_validate(record))
        except ValidationError as e:
            conflicts.append(_invalid("Lehrenden", record, e, "lecturer_id"))

    rooms: list[Room] = []
    for record in raw.get("rooms", []) or []:
        record = _with_text_ids(record)
        if record.get("selected") is False:
            skipped.append(str(record.get("id")))
            continue
        if "room_type" not in record and "type" in record:
            record["room_type"] = record.pop("type")
        try:
            rooms.append(Room.model_validate(record))
        except ValidationError as e:
            conflicts.append(_invalid("Raum", record, e))

    logger.info(
        f"Import {program.id}: {len(courses)} Kurse, {len(lecturers)} Lehrende, "
        f"{len(rooms)} Räume, {len(conflicts)} ungültig, {len(skipped)} übersprungen"
    )
    data = SchedulingInput(
        program=program,
        courses=courses,
        lecturers=lecturers,
        rooms=rooms,
        settings=settings or GeneratorSettings(),
    )
    return ImportResult(data=data, conflicts=conflicts, skipped=skipped)
