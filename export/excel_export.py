"""Excel-Export für den Stundenplan (openpyxl)."""

import re
from pathlib import Path

from models.lecturer import Lecturer
from models.room import Room
from models.scheduling_input import SchedulingInput
from models.timetable import ScheduleEntry
from solver.scheduler import TimetableSolution

from export.helpers import (
    COLORS, build_hour_rows, count_gaps, count_lecturer_hours, count_room_usage,
    day_label, entries_by_slot, format_entries, get_group_color, group_label,
    hour_label, today_str,
)

_INVALID_TITLE_CHARS = re.compile(r"[\\/*?:\[\]]")


def _sheet_title(text: str) -> str:
    """Excel-taugliche Blattnamen (max. 31 Zeichen, ohne \\ / * ? : [ ])."""
    return _INVALID_TITLE_CHARS.sub("-", text)[:31]


class ExcelExporter:
    """Exportiert eine TimetableSolution in eine Excel-Datei.

    Blätter: Übersicht, optional Qualität, je Kohorte, je Lehrperson,
    je belegtem Raum und eine Konfliktliste.
    """

    # Spaltenbreiten (Excel-Einheiten)
    COL_ZEIT_W = 15
    COL_DAY_W  = 24

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H  = 22
    ROW_LESSON_H  = 48

    def __init__(
        self,
        solution: TimetableSolution,
        data: SchedulingInput,
        institution_name: str = "",
    ):
        self.solution  = solution
        self.data      = data
        self.settings  = solution.settings_snapshot
        self.days      = self.settings.days
        self.hours     = build_hour_rows(self.settings)
        self.institution_name = institution_name

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, quality_report=None) -> None:
        """Erstellt die Excel-Datei mit allen Sheets.

        quality_report: optionaler TimetableQualityReport – wenn angegeben,
        wird ein zusätzliches Qualitätsblatt eingefügt.
        """
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_uebersicht(wb)

        if quality_report is not None:
            self._sheet_qualitaet(wb, quality_report)

        for year, semester in self.solution.groups():
            self._sheet_kohorte(wb, year, semester)

        for lecturer in sorted(self.data.lecturers, key=lambda l: l.id):
            self._sheet_lehrperson(wb, lecturer)

        used_rooms = {e.room_id for e in self.solution.entries}
        for room in sorted(self.data.rooms, key=lambda r: r.id):
            if room.id in used_rooms:
                self._sheet_raum(wb, room)

        self._sheet_konflikte(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _setup_sheet(self, ws) -> None:
        """Setzt Spaltenbreiten für ein Wochenraster-Blatt."""
        from openpyxl.utils import get_column_letter
        ws.column_dimensions["A"].width = self.COL_ZEIT_W
        for col in range(2, 2 + len(self.days)):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_DAY_W

    def _write_table_header(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            c = ws.cell(row=row, column=col, value=text)
            c.fill = fill
            c.font = Font(bold=True, color="FFFFFF")
            c.border = border

    def _write_header_row(self, ws) -> None:
        """Schreibt die Kopfzeile (Zeit | Mo | Di | …)."""
        from openpyxl.styles import Font
        headers = ["Zeit"] + [day_label(d) for d in self.days]
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align(wrap=False)
            cell.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H

    def _cell_color(self, entries: list[ScheduleEntry]) -> str:
        """Gibt die Hintergrundfarbe für eine Zelle zurück."""
        if not entries:
            return COLORS["free"]
        if len(entries) > 1:
            return COLORS["conflict"]
        return get_group_color(entries[0].year)

    # ─── Wochenraster ─────────────────────────────────────────────────────────

    def _write_schedule_table(self, ws, entries: list[ScheduleEntry], mode: str) -> int:
        """Schreibt das Wochenraster; gibt die erste freie Excel-Zeile zurück.

        mode: 'group' | 'lecturer' | 'room'
        """
        from openpyxl.styles import Font

        grid = entries_by_slot(entries)
        border = self._thin_border()

        excel_row = 2   # Zeile 1 = Header
        for hour in self.hours:
            c = ws.cell(row=excel_row, column=1, value=hour_label(hour))
            c.alignment = self._center_align(wrap=False)
            c.border = border
            c.font = Font(bold=True, size=9)

            for col, day in enumerate(self.days, 2):
                here = grid.get((day, hour), [])
                c = ws.cell(row=excel_row, column=col, value=format_entries(here, mode))
                c.fill = self._fill(self._cell_color(here))
                c.alignment = self._center_align()
                c.border = border
                c.font = Font(size=8)

            ws.row_dimensions[excel_row].height = self.ROW_LESSON_H
            excel_row += 1

        return excel_row

    # ─── Sheet: Übersicht ─────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb) -> None:
        from openpyxl.styles import Font
        ws = wb.create_sheet(title="Übersicht", index=0)
        border = self._thin_border()
        program = self.data.program

        row = 1
        title = self.institution_name or program.name or program.id
        ws.cell(row=row, column=1, value=title).font = Font(bold=True, size=14)
        row += 1
        ws.cell(row=row, column=1, value=f"Studiengang: {program.name or program.id}")
        ws.cell(row=row, column=3, value=f"Erstellt: {today_str()}")
        row += 1
        ws.cell(row=row, column=1, value=f"Status: {self.solution.status}")
        ws.cell(row=row, column=2, value=(
            f"Sitzungen: {self.solution.sessions_scheduled}/"
            f"{self.solution.sessions_needed}"
        ))
        ws.cell(row=row, column=3, value=f"Konflikte: {len(self.solution.conflicts)}")
        ws.cell(row=row, column=4, value=f"Zeit: {self.solution.solve_time_seconds:.2f}s")
        row += 2

        # Lehrlast
        self._write_table_header(ws, row, ["ID", "Name", "Stunden", "Freistd.", "Max/Tag"])
        row += 1
        for lecturer in sorted(self.data.lecturers, key=lambda l: l.id):
            entries = self.solution.get_lecturer_schedule(lecturer.id)
            ws.cell(row=row, column=1, value=lecturer.id).border = border
            ws.cell(row=row, column=2, value=lecturer.name).border = border
            ws.cell(row=row, column=3,
                    value=count_lecturer_hours(self.solution.entries, lecturer.id)).border = border
            ws.cell(row=row, column=4, value=count_gaps(entries)).border = border
            ws.cell(row=row, column=5,
                    value=lecturer.daily_cap(self.settings.max_daily_hours)).border = border
            row += 1

        row += 1

        # Raumauslastung
        ws.cell(row=row, column=1, value="Raumauslastung").font = Font(bold=True)
        row += 1
        self._write_table_header(
            ws, row, ["Raum-ID", "Name", "Typ", "Kapazität", "Belegte Slots", "Auslastung"]
        )
        row += 1

        max_slots = len(self.hours) * len(self.days)
        room_usage = count_room_usage(self.solution.entries)
        for room in sorted(self.data.rooms, key=lambda r: r.id):
            occupied = room_usage.get(room.id, 0)
            pct = f"{occupied / max_slots * 100:.0f}%" if max_slots else "–"
            ws.cell(row=row, column=1, value=room.id).border = border
            ws.cell(row=row, column=2, value=room.name).border = border
            ws.cell(row=row, column=3, value=room.room_type).border = border
            ws.cell(row=row, column=4, value=room.capacity).border = border
            ws.cell(row=row, column=5, value=occupied).border = border
            ws.cell(row=row, column=6, value=pct).border = border
            row += 1

        ws.column_dimensions["A"].width = 14
        ws.column_dimensions["B"].width = 30
        ws.column_dimensions["C"].width = 22
        ws.column_dimensions["D"].width = 14
        ws.column_dimensions["E"].width = 14
        ws.column_dimensions["F"].width = 12

    # ─── Sheet: Kohorte ───────────────────────────────────────────────────────

    def _sheet_kohorte(self, wb, year: int, semester: int) -> None:
        ws = wb.create_sheet(title=_sheet_title(f"Kohorte J{year} S{semester}"))
        self._setup_sheet(ws)
        self._write_header_row(ws)
        entries = self.solution.get_group_schedule(year, semester)
        last_row = self._write_schedule_table(ws, entries, mode="group")
        ws.cell(row=last_row + 1, column=1, value=group_label(year, semester))

    # ─── Sheet: Lehrperson ────────────────────────────────────────────────────

    def _sheet_lehrperson(self, wb, lecturer: Lecturer) -> None:
        ws = wb.create_sheet(title=_sheet_title(f"Lehrende {lecturer.id}"))
        self._setup_sheet(ws)
        self._write_header_row(ws)
        entries = self.solution.get_lecturer_schedule(lecturer.id)
        last_row = self._write_schedule_table(ws, entries, mode="lecturer")

        # Stat-Box unter dem Raster
        from openpyxl.styles import Font
        last_row += 1
        ws.cell(row=last_row, column=1, value="Stunden:").font = Font(bold=True)
        ws.cell(row=last_row, column=2, value=f"{len(entries)}h")
        ws.cell(row=last_row, column=3, value="Freistunden:").font = Font(bold=True)
        ws.cell(row=last_row, column=4, value=str(count_gaps(entries)))
        if lecturer.unavailable_times:
            last_row += 1
            ws.cell(row=last_row, column=1, value="Gesperrt:").font = Font(bold=True)
            ws.cell(row=last_row, column=2,
                    value=", ".join(str(s) for s in lecturer.unavailable_times))

    # ─── Sheet: Raum ──────────────────────────────────────────────────────────

    def _sheet_raum(self, wb, room: Room) -> None:
        ws = wb.create_sheet(title=_sheet_title(f"Raum {room.id}"))
        self._setup_sheet(ws)
        self._write_header_row(ws)
        self._write_schedule_table(ws, self.solution.get_room_schedule(room.id), mode="room")

    # ─── Sheet: Konflikte ─────────────────────────────────────────────────────

    def _sheet_konflikte(self, wb) -> None:
        ws = wb.create_sheet(title="Konflikte")
        border = self._thin_border()
        self._write_table_header(ws, 1, ["Art", "Kurs", "Lehrperson", "Sitzung", "Meldung"])
        row = 2
        for conflict in self.solution.conflicts:
            values = [
                conflict.kind.value,
                conflict.course_id or "",
                conflict.lecturer_id or "",
                conflict.session_index if conflict.session_index is not None else "",
                conflict.message,
            ]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=row, column=col, value=value)
                c.border = border
            ws.cell(row=row, column=1).fill = self._fill(COLORS["conflict"])
            row += 1

        ws.column_dimensions["A"].width = 22
        ws.column_dimensions["B"].width = 14
        ws.column_dimensions["C"].width = 14
        ws.column_dimensions["D"].width = 8
        ws.column_dimensions["E"].width = 80

    # ─── Sheet: Qualität ──────────────────────────────────────────────────────

    def _sheet_qualitaet(self, wb, report) -> None:
        """Erstellt ein Qualitätsblatt mit KPI-, Lehrlast- und Raumtabelle."""
        from openpyxl.styles import Font

        ws = wb.create_sheet(title="Qualität")
        border = self._thin_border()
        row = 1

        ws.cell(row=row, column=1, value="Qualitätsbericht").font = Font(bold=True, size=13)
        row += 1
        ws.cell(row=row, column=1, value=f"Erstellt: {today_str()}")
        ws.cell(row=row, column=3, value=f"Status: {report.status}")
        row += 2

        self._write_table_header(ws, row, ["KPI", "Wert", "Bewertung"])
        row += 1
        kpis = [
            ("Zuteilungsrate", f"{report.scheduling_rate:.1%}",
             "gut" if report.scheduling_rate >= 1.0 else "mittel"
             if report.scheduling_rate >= 0.9 else "schlecht"),
            ("Lehrlast-Fairness (Jain)", f"{report.load_fairness_index:.4f}",
             "gut" if report.load_fairness_index >= 0.95 else "mittel"),
            ("Konflikte", str(report.conflicts),
             "gut" if report.conflicts == 0 else "prüfen"),
        ]
        for name, value, rating in kpis:
            ws.cell(row=row, column=1, value=name).border = border
            ws.cell(row=row, column=2, value=value).border = border
            ws.cell(row=row, column=3, value=rating).border = border
            row += 1

        row += 2
        ws.cell(row=row, column=1, value="Lehrlast").font = Font(bold=True, size=11)
        row += 1
        self._write_table_header(
            ws, row, ["ID", "Name", "Stunden", "Back-to-Back", "Freistd.", "Freie Tage"]
        )
        row += 1
        for m in sorted(report.lecturer_metrics, key=lambda x: x.lecturer_id):
            values = [m.lecturer_id, m.name, m.actual_hours,
                      m.back_to_back_pairs, m.gaps_total, m.free_days]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border
            row += 1

        row += 2
        ws.cell(row=row, column=1, value="Räume").font = Font(bold=True, size=11)
        row += 1
        self._write_table_header(
            ws, row, ["Raum", "Kapazität", "Stunden", "Auslastung", "Ø Füllgrad"]
        )
        row += 1
        for m in report.room_metrics:
            values = [m.name or m.room_id, m.capacity, m.occupied_hours,
                      f"{m.utilisation:.1%}", f"{m.avg_fill_rate:.0%}"]
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border
            if m.avg_fill_rate > 1.0:
                ws.cell(row=row, column=5).fill = self._fill("FFCCCC")
            row += 1

        ws.column_dimensions["A"].width = 26
        ws.column_dimensions["B"].width = 28
        ws.column_dimensions["C"].width = 12
