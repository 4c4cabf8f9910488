"""Tests for Settings validation."""

import pytest
from pydantic import ValidationError


def _make(tmp_path, **overrides):
    from config.settings import Settings
    values = dict(
        _env_file=None,
        storage_db_path=tmp_path / "novels.db",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path / "logs",
    )
    values.update(overrides)
    return Settings(**values)


class TestSettingsDefaults:
    def test_code_defaults(self, tmp_path):
        s = _make(tmp_path)
        assert s.version_history_capacity == 50
        assert s.autosave_debounce_seconds == 2.0
        assert s.snapshot_interval_seconds == 300.0
        assert s.save_status_display_seconds == 2.0
        assert s.export_extension == ".json"

    def test_default_model_names(self, tmp_path):
        s = _make(tmp_path)
        assert s.llm_model_writing == "claude-sonnet-4-5"
        assert s.llm_model_summary == "claude-haiku-4-5"

    def test_fixture_overrides(self, settings):
        assert settings.version_history_capacity == 5

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VERSION_HISTORY_CAPACITY", "20")
        assert _make(tmp_path).version_history_capacity == 20


class TestSettingsValidation:
    def test_capacity_zero_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="version_history_capacity"):
            _make(tmp_path, version_history_capacity=0)

    def test_negative_delay_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="positive"):
            _make(tmp_path, autosave_debounce_seconds=-1)

    def test_debounce_must_be_shorter_than_snapshot_interval(self, tmp_path):
        with pytest.raises(ValidationError, match="autosave_debounce_seconds"):
            _make(tmp_path, autosave_debounce_seconds=60, snapshot_interval_seconds=30)

    def test_extension_normalized(self, tmp_path):
        assert _make(tmp_path, export_extension=".JSON").export_extension == ".json"

    def test_bad_extension_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="export_extension"):
            _make(tmp_path, export_extension="json")

    def test_parent_dirs_created(self, tmp_path):
        _make(tmp_path, storage_db_path=tmp_path / "deep" / "novels.db")
        assert (tmp_path / "deep").is_dir()


class TestGetSettings:
    def test_cached(self, monkeypatch, tmp_path):
        import config.settings as settings_module
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(settings_module, "_settings_instance", None)
        first = settings_module.get_settings()
        assert settings_module.get_settings() is first
