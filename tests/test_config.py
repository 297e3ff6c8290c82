"""Tests für das Konfigurationssystem und die CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner
from pydantic import ValidationError

from config.schema import (
    ACADEMIC_WEEK,
    Currency,
    EngineConfig,
    PricingConfig,
    SchedulingConfig,
    Weekday,
)
from config.defaults import (
    DAY_ABBREVIATIONS,
    DAY_ORDER,
    default_engine_config,
)
from config.manager import ConfigManager
from main import cli


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_engine_config_valid(self):
        """Vollständige Default-Config ist valide."""
        config = default_engine_config()
        assert config.scheduling.allowed_days == ACADEMIC_WEEK
        assert config.scheduling.min_session_minutes == 60
        assert config.pricing.default_currency == Currency.EGP
        assert config.pricing.lectures_per_month == 4
        assert config.listing.items_per_page == 12

    def test_defaults_match_schema_defaults(self):
        assert default_engine_config() == EngineConfig()

    def test_day_tables_cover_academic_week(self):
        assert list(DAY_ABBREVIATIONS) == [d.value for d in ACADEMIC_WEEK]
        assert DAY_ORDER["Sunday"] == 0
        assert DAY_ORDER["Thursday"] == 4


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_empty_allowed_days_raises(self):
        with pytest.raises(ValidationError):
            SchedulingConfig(allowed_days=[])

    def test_interval_must_divide_hour(self):
        with pytest.raises(ValidationError):
            SchedulingConfig(time_option_interval=25)

    def test_lectures_per_month_positive(self):
        with pytest.raises(ValidationError):
            PricingConfig(lectures_per_month=0)

    def test_weekday_from_string(self):
        config = SchedulingConfig(allowed_days=["Monday", "Tuesday"])
        assert config.allowed_days == [Weekday.MONDAY, Weekday.TUESDAY]


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Gespeicherte Config lässt sich verlustfrei wieder laden."""
        config = default_engine_config().model_copy(update={"school_name": "Test-Akademie"})
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "engine_config.yaml"

        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "─── Termine ───" in text

        loaded = mgr.load(mgr.DEFAULT_CONFIG)
        assert loaded == config

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "engine_config.yaml"
        mgr.save(default_engine_config())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("pricing:\n  lectures_per_month: 0\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_load_or_default_without_file(self, tmp_path: Path):
        config = ConfigManager().load_or_default(tmp_path / "fehlt.yaml")
        assert config == default_engine_config()


# ─── CLI ──────────────────────────────────────────────────────────────────────

class TestCli:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("generate", "list", "show", "check-session", "assign", "price"):
            assert command in result.output

    def test_price_quick_calculation(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["price", "--monthly", "800:8"])
        assert result.exit_code == 0
        assert "1,600.00 EGP" in result.output

    @pytest.mark.parametrize("args", [
        ["--level", "-300"],
        ["--monthly", "-800:8"],
        ["--monthly", "800:0"],
    ])
    def test_price_invalid_subscription(self, args):
        """Ungültige Beträge/Lektionen → Fehlermeldung mit Feld, kein Traceback."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["price", *args])
        assert result.exit_code == 1
        assert "Ungültiges Abonnement" in result.output
        assert "BETRAG:LEKTIONEN" not in result.output

    def test_price_malformed_monthly(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["price", "--monthly", "800"])
        assert result.exit_code == 2
        assert "BETRAG:LEKTIONEN" in result.output

    def test_generate_list_show(self, tmp_path: Path):
        runner = CliRunner()
        data = str(tmp_path / "groups.json")
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["generate", "--count", "5", "--data", data])
            assert result.exit_code == 0, result.output

            result = runner.invoke(cli, ["list", "--data", data])
            assert result.exit_code == 0
            assert "5 Gruppe(n) gefunden." in result.output

            result = runner.invoke(cli, ["show", "group_fehlt", "--data", data])
            assert result.exit_code == 1
            assert "not found" in result.output

    def test_check_session_exit_code(self, tmp_path: Path):
        from services.group_service import GroupService
        from services.repository import JsonGroupRepository

        data = tmp_path / "groups.json"
        service = GroupService(JsonGroupRepository(data))
        group = service.add_group({"sessions": [
            {"day": "Sunday", "start_time": "09:00", "end_time": "11:00"},
        ]}).unwrap()

        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            ok = runner.invoke(cli, [
                "check-session", group.id, "--day", "Monday",
                "--start", "09:00", "--end", "10:00", "--data", str(data),
            ])
            clash = runner.invoke(cli, [
                "check-session", group.id, "--day", "Sunday",
                "--start", "15:00", "--end", "16:00", "--data", str(data),
            ])
        assert ok.exit_code == 0
        assert clash.exit_code == 1
        assert "A session already exists for Sunday" in clash.output
