"""Tests für Konfiguration, Datenmodelle und CLI."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.prompt import PromptBase

from config.defaults import (
    DAY_SHORT_NAMES,
    WEEKEND_DAYS,
    WORKDAYS,
    default_planner_config,
    default_settings,
)
from config.manager import ConfigManager
from config.schema import GeneratorSettings, PlannerConfig, Weekday, parse_clock_hour
from models import (
    Course,
    Lecturer,
    Program,
    Room,
    SchedulingInput,
    TimeSlot,
    parse_timeslot,
)


def make_manager(tmp_path: Path) -> ConfigManager:
    mgr = ConfigManager()
    mgr.CONFIG_DIR = tmp_path
    mgr.DEFAULT_CONFIG = tmp_path / "planner_config.yaml"
    mgr.SCENARIOS_DIR = tmp_path / "scenarios"
    return mgr


@pytest.fixture
def accept_defaults(monkeypatch):
    """Alle rich-Prompts liefern ihren Default-Wert."""
    monkeypatch.setattr(PromptBase, "ask", lambda *args, **kwargs: kwargs.get("default"))


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_settings(self):
        """Standardwerte: 08:00–18:00, Mo–Fr, 2h-Sitzungen, max. 8h/Tag."""
        s = default_settings()
        assert s.start_hour == 8
        assert s.end_hour == 18
        assert s.days == WORKDAYS
        assert s.session_length == 2
        assert s.max_daily_hours == 8
        assert s.prioritize_room_size and s.avoid_back_to_back and s.balance_lecturer_load
        assert not (s.allow_weekends or s.spread_courses_across_days
                    or s.consider_room_capacity)

    def test_weekend_days(self):
        s = GeneratorSettings(allow_weekends=True)
        assert s.days == WORKDAYS + WEEKEND_DAYS

    def test_day_short_names_complete(self):
        assert set(DAY_SHORT_NAMES) == set(Weekday)

    def test_default_planner_config(self):
        config = default_planner_config()
        assert config.settings == GeneratorSettings()
        assert config.institution_name

    def test_weekday_index(self):
        assert Weekday.MONDAY.index == 0
        assert Weekday.SUNDAY.index == 6


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_settings_frozen(self):
        """GeneratorSettings ist unveränderlich."""
        s = GeneratorSettings()
        with pytest.raises(ValidationError):
            s.max_daily_hours = 3

    def test_model_copy_variant(self):
        s = GeneratorSettings()
        variant = s.model_copy(update={"allow_weekends": True})
        assert variant.allow_weekends and not s.allow_weekends

    def test_max_daily_hours_range(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(max_daily_hours=13)
        with pytest.raises(ValidationError):
            GeneratorSettings(max_daily_hours=-1)

    def test_max_sessions_per_day_minimum(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(max_sessions_per_day=0)

    def test_invalid_clock(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(preferred_start_time="acht")
        with pytest.raises(ValidationError):
            GeneratorSettings(preferred_end_time="25:00")

    def test_window_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(preferred_start_time="18:00", preferred_end_time="08:00")

    def test_parse_clock_hour(self):
        assert parse_clock_hour("9:15") == 9
        assert parse_clock_hour(" 17:00 ") == 17


# ─── YAML SPEICHERN / LADEN ───────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Config speichern, laden und validieren (vollständiger Roundtrip)."""
        config = PlannerConfig(
            institution_name="TH Test",
            settings=GeneratorSettings(max_daily_hours=6, allow_weekends=True),
        )
        mgr = make_manager(tmp_path)

        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()

        loaded = mgr.load(mgr.DEFAULT_CONFIG)
        assert loaded == config

    def test_yaml_has_german_comments(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.save(default_planner_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Hochschul-Stundenplan-Generator" in text
        assert "─── Generator-Einstellungen ───" in text
        assert "Globaler Default" in text

    def test_first_run_check(self, tmp_path: Path):
        """first_run_check ist True ohne und False mit Config."""
        mgr = make_manager(tmp_path)
        assert mgr.first_run_check() is True
        mgr.save(default_planner_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Laden einer nicht-existenten Datei → FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        """Ungültige Werte → ValueError mit Pydantic-Meldung."""
        path = tmp_path / "bad.yaml"
        path.write_text("settings:\n  max_daily_hours: 99\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Ungültige Konfiguration"):
            ConfigManager().load(path)

    def test_scenario_save_and_load(self, tmp_path: Path):
        """Szenario speichern und laden (Roundtrip)."""
        config = default_planner_config().model_copy(update={"institution_name": "HS Szenario"})
        mgr = make_manager(tmp_path)

        mgr.save_scenario(config, "test_szenario", "Nur zum Testen")
        loaded = mgr.load_scenario("test_szenario")
        assert loaded.institution_name == "HS Szenario"

        scenarios = mgr.list_scenarios()
        assert [s["name"] for s in scenarios] == ["test_szenario"]
        assert scenarios[0]["description"] == "Nur zum Testen"

    def test_load_unknown_scenario(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="nicht gefunden"):
            make_manager(tmp_path).load_scenario("gibt_es_nicht")

    def test_list_scenarios_empty(self, tmp_path: Path):
        """Leeres Szenario-Verzeichnis → leere Liste."""
        assert make_manager(tmp_path).list_scenarios() == []


# ─── WIZARD ───────────────────────────────────────────────────────────────────

class TestWizard:
    def test_defaults_give_default_settings(self, accept_defaults):
        """Wizard mit allen Standardwerten ergibt die Standard-Einstellungen."""
        from config.wizard import wizard_settings
        assert wizard_settings() == GeneratorSettings()

    def test_run_wizard_returns_config(self, accept_defaults):
        from config.wizard import run_wizard
        config = run_wizard()
        assert isinstance(config, PlannerConfig)
        assert config.settings == GeneratorSettings()
        assert config.institution_name == "Muster-Hochschule"

    def test_edit_settings_step(self, tmp_path: Path, accept_defaults):
        """Bearbeiten eines Schritts übernimmt die Wizard-Werte."""
        mgr = make_manager(tmp_path)
        config = PlannerConfig(settings=GeneratorSettings(allow_weekends=True))
        edited = mgr._edit_settings(config, "time_window")
        assert edited.settings.allow_weekends is False


# ─── MODELLE ──────────────────────────────────────────────────────────────────

class TestModels:
    def test_course_defaults_for_null_fields(self):
        """Fehlende Felder (null) werden mit Standardwerten belegt."""
        c = Course.model_validate({
            "id": "C1", "program_id": "P1", "credit_hours": None,
            "expected_students": None, "year": None, "semester": None,
            "lecturer_id": "",
        })
        assert (c.credit_hours, c.expected_students, c.year, c.semester) == (3, 0, 1, 1)
        assert c.lecturer_id is None
        assert c.group_key == (1, 1)

    def test_course_rejects_zero_credits(self):
        with pytest.raises(ValidationError):
            Course(id="C1", program_id="P1", credit_hours=0)

    def test_course_label(self):
        assert Course(id="C1", program_id="P1", code="INF1").label == "INF1"
        assert Course(id="C1", program_id="P1").label == "C1"

    def test_program_num_students_alias(self):
        assert Program.model_validate({"id": "P1", "num_students": 40}).student_count == 40
        assert Program(id="P1").student_count is None

    def test_room_null_capacity(self):
        assert Room.model_validate({"id": "R1", "capacity": None}).capacity == 0

    def test_lecturer_unavailable_formats(self):
        """Sperrzeiten in allen Formaten, Duplikate werden entfernt."""
        lecturer = Lecturer.model_validate({
            "id": "L1",
            "unavailableTimes": [
                "Monday 09:00",
                {"day": "Tuesday", "time": "1:00 PM"},
                {"day": "Mon", "hour": 9},
            ],
        })
        assert lecturer.unavailable_times == [
            TimeSlot(Weekday.MONDAY, 9), TimeSlot(Weekday.TUESDAY, 13),
        ]
        assert lecturer.is_unavailable(TimeSlot(Weekday.TUESDAY, 13))

    def test_lecturer_unavailable_single_string(self):
        """Ein einzelner String ist eine Sperrzeit, keine Zeichenfolge."""
        lecturer = Lecturer.model_validate(
            {"id": "L1", "unavailable_times": "Monday 08:00"}
        )
        assert lecturer.unavailable_times == [TimeSlot(Weekday.MONDAY, 8)]

    @pytest.mark.parametrize("value", [5, 3.5, True])
    def test_lecturer_unavailable_wrong_type(self, value):
        with pytest.raises(ValidationError, match="Sperrzeiten"):
            Lecturer.model_validate({"id": "L1", "unavailable_times": value})

    def test_lecturer_daily_cap(self):
        assert Lecturer(id="L1").daily_cap(8) == 8
        assert Lecturer(id="L1", max_daily_hours=3).daily_cap(8) == 3

    @pytest.mark.parametrize("raw", ["Funday 09:00", "Monday", {"time": "09:00"}, 42])
    def test_parse_timeslot_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_timeslot(raw)

    def test_timeslot_shifted(self):
        slot = TimeSlot(Weekday.FRIDAY, 23)
        assert slot.shifted(-1) == TimeSlot(Weekday.FRIDAY, 22)
        assert slot.shifted(1) is None
        assert slot.slot_id == "Friday_23"


# ─── SCHEDULING INPUT ─────────────────────────────────────────────────────────

class TestSchedulingInput:
    def _make_data(self, **settings) -> SchedulingInput:
        return SchedulingInput(
            program=Program(id="P1", name="Informatik", student_count=40),
            courses=[
                Course(id="C1", program_id="P1", credit_hours=4, expected_students=30),
                Course(id="C2", program_id="P1", credit_hours=3, year=2,
                       lecturer_id="L2", expected_students=200),
            ],
            lecturers=[Lecturer(id="L1", name="Dr. Eins")],
            rooms=[Room(id="R1", capacity=50)],
            settings=GeneratorSettings(**settings),
        )

    def test_summary_contains_key_info(self):
        s = self._make_data().summary()
        assert "Informatik" in s
        assert "Kurse: 2" in s
        assert "Sitzungen benötigt: 4" in s

    def test_lookup(self):
        data = self._make_data()
        assert data.course_by_id("C2").year == 2
        assert data.lecturer_by_id("L9") is None
        assert data.room_by_id("R1").capacity == 50

    def test_feasibility_warnings(self):
        """Unbekannte feste Zuordnung und zu großer Kurs → Warnungen."""
        report = self._make_data().validate_feasibility()
        assert report.is_feasible
        assert any("L2" in w for w in report.warnings)
        assert any("200" in w for w in report.warnings)

    def test_feasibility_capacity_floor_error(self):
        report = self._make_data(consider_room_capacity=True).validate_feasibility()
        assert not report.is_feasible
        assert any("40 Studierenden" in e for e in report.errors)

    def test_feasibility_empty_data(self):
        data = SchedulingInput(program=Program(id="P1"))
        report = data.validate_feasibility()
        assert not report.is_feasible
        assert len(report.errors) == 3

    def test_feasibility_room_shortage(self):
        """Mehr Sitzungen als Raumslots → Warnung."""
        data = self._make_data(preferred_start_time="08:00", preferred_end_time="09:00")
        data = data.model_copy(update={"courses": [
            Course(id=f"C{i}", program_id="P1", credit_hours=2, year=i) for i in range(1, 8)
        ]})
        report = data.validate_feasibility()
        assert any("Raumengpass" in w for w in report.warnings)

    def test_save_and_load_json(self, tmp_path: Path):
        data = self._make_data()
        data = data.model_copy(update={"lecturers": [
            Lecturer(id="L1", unavailable_times=["Monday 08:00"])
        ]})
        path = tmp_path / "input.json"
        data.save_json(path)

        loaded = SchedulingInput.load_json(path)
        assert loaded.courses == data.courses
        assert loaded.lecturers[0].unavailable_times == [TimeSlot(Weekday.MONDAY, 8)]
        assert loaded.created_at is not None

    def test_load_json_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            SchedulingInput.load_json(tmp_path / "does_not_exist.json")


# ─── MAIN.PY CLI ──────────────────────────────────────────────────────────────

class TestCli:
    def test_help(self):
        """main.py --help gibt Usage aus."""
        from click.testing import CliRunner
        from main import cli
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_config_show_no_file(self):
        """config show ohne Konfiguration → Fehlermeldung."""
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "show"])
            assert result.exit_code == 1
            assert "Keine Konfiguration" in result.output

    @pytest.mark.parametrize("command", [
        "setup", "generate", "import", "check", "solve", "show", "validate",
        "relax", "diff", "export", "run",
    ])
    def test_command_registered(self, command):
        from click.testing import CliRunner
        from main import cli
        result = CliRunner().invoke(cli, [command, "--help"])
        assert result.exit_code == 0

    def test_scenario_list_command(self):
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["scenario", "list"])
            assert result.exit_code == 0
            assert "Keine Szenarien" in result.output

    def test_pipeline(self):
        """generate → check → solve → validate → export im leeren Verzeichnis."""
        from click.testing import CliRunner
        from main import cli
        runner = CliRunner()
        with runner.isolated_filesystem():
            ConfigManager().save(default_planner_config())

            result = runner.invoke(cli, ["generate", "--seed", "1"])
            assert result.exit_code == 0, result.output
            assert Path("output/scheduling_input.json").exists()

            result = runner.invoke(cli, ["solve"])
            assert result.exit_code == 0, result.output
            assert Path("output/timetable.json").exists()

            result = runner.invoke(cli, ["validate"])
            assert result.exit_code == 0, result.output

            result = runner.invoke(cli, ["show", "--year", "1"])
            assert result.exit_code == 0, result.output

            result = runner.invoke(cli, ["export", "--no-quality"])
            assert result.exit_code == 0, result.output
            assert Path("output/stundenplan.xlsx").exists()

            result = runner.invoke(cli, ["diff", "output/timetable.json",
                                         "output/timetable.json", "--json"])
            assert result.exit_code == 0, result.output
            assert '"added": []' in result.output
