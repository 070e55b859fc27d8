"""Tests for ConfigService."""

from __future__ import annotations

import json
import stat

import pytest

from railfocus.models.config_models import AppConfig, LedgerConfig, TimerConfig
from railfocus.services.config_service import ConfigService, get_config_service


def test_first_run_writes_defaults(tmp_dirs):
    service = ConfigService()
    config = service.load_config()

    assert config == AppConfig()
    assert service.config_path.exists()
    assert stat.S_IMODE(service.config_path.stat().st_mode) == 0o600


def test_load_existing_config(tmp_dirs):
    (tmp_dirs / "config.json").write_text(
        json.dumps({"timer": {"default_minutes": 50}, "ledger": {"count_interrupted": True}})
    )

    config = ConfigService().load_config()
    assert config.timer.default_minutes == 50
    assert config.timer.tick_interval == 1.0
    assert config.ledger.count_interrupted is True


def test_invalid_config_raises_runtime_error(tmp_dirs):
    (tmp_dirs / "config.json").write_text(json.dumps({"timer": {"default_minutes": 0}}))
    with pytest.raises(RuntimeError, match="Failed to load config"):
        ConfigService().load_config()


def test_database_path_default_and_override(tmp_dirs):
    service = ConfigService()
    assert service.database_path == tmp_dirs / "journeys.db"

    service.config.ledger.database = str(tmp_dirs / "elsewhere.db")
    assert service.database_path == tmp_dirs / "elsewhere.db"


def test_save_and_reset(tmp_dirs):
    service = ConfigService()
    service.config.timer.default_minutes = 45
    service.save_config()
    assert json.loads(service.config_path.read_text())["timer"]["default_minutes"] == 45

    service.reset_config()
    assert ConfigService().load_config().timer.default_minutes == 25


def test_get_config_service_is_cached(tmp_dirs):
    assert get_config_service() is get_config_service()


class TestConfigModels:
    def test_timer_bounds(self):
        with pytest.raises(ValueError):
            TimerConfig(default_minutes=601)
        with pytest.raises(ValueError):
            TimerConfig(tick_interval=0)

    def test_blank_database_rejected(self):
        with pytest.raises(ValueError):
            LedgerConfig(database="   ")
        assert LedgerConfig(database=" ~/j.db ").database == "~/j.db"


# ---------------------------------------------------------------------------
# Dotted keys
# ---------------------------------------------------------------------------


class TestDottedKeys:
    def test_get_value(self, tmp_dirs):
        service = ConfigService()
        assert service.get_value("timer.default_minutes") == 25
        assert service.get_value("ledger.database") is None

    @pytest.mark.parametrize("key", ["timer", "timer.nope", "nope", "timer.default_minutes.x"])
    def test_unknown_keys(self, tmp_dirs, key):
        with pytest.raises(KeyError):
            ConfigService().get_value(key)

    def test_set_value_coerces_and_saves(self, tmp_dirs):
        service = ConfigService()
        service.set_value("timer.default_minutes", "50")
        service.set_value("ledger.count_interrupted", "true")

        reloaded = ConfigService().load_config()
        assert reloaded.timer.default_minutes == 50
        assert reloaded.ledger.count_interrupted is True

    def test_set_invalid_value_changes_nothing(self, tmp_dirs):
        service = ConfigService()
        with pytest.raises(ValueError):
            service.set_value("timer.default_minutes", "0")
        assert service.config.timer.default_minutes == 25

    def test_reset_single_key(self, tmp_dirs):
        service = ConfigService()
        service.set_value("timer.tick_interval", "0.5")
        service.set_value("timer.default_minutes", "45")

        service.reset_config("timer.tick_interval")

        assert service.config.timer.tick_interval == 1.0
        assert service.config.timer.default_minutes == 45
