"""Tests for configuration loading."""

import json

import pytest
from pydantic import ValidationError

from aicache.config import Settings, default_config_file, load_settings, save_settings
from aicache.models import SafetyTier


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.default_safety_tier == SafetyTier.CAUTION
        assert settings.exclude_patterns == []
        assert settings.max_depth == 1
        assert settings.show_notifications is True

    def test_max_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(max_depth=0)

    def test_tier_from_string(self):
        assert Settings(default_safety_tier="danger").default_safety_tier == SafetyTier.DANGER


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "config.json") == Settings()

    def test_loads_values(self, tmp_path):
        file = tmp_path / "config.json"
        file.write_text(json.dumps({"default_safety_tier": "safe", "exclude_patterns": ["tmp*"]}))

        settings = load_settings(file)

        assert settings.default_safety_tier == SafetyTier.SAFE
        assert settings.exclude_patterns == ["tmp*"]
        assert settings.max_depth == 1

    def test_corrupt_file_gives_defaults(self, tmp_path):
        file = tmp_path / "config.json"
        file.write_text("not json at all")
        assert load_settings(file) == Settings()

    def test_invalid_value_gives_defaults(self, tmp_path):
        file = tmp_path / "config.json"
        file.write_text(json.dumps({"default_safety_tier": "purple"}))
        assert load_settings(file) == Settings()

    def test_default_location_under_home(self, home):
        assert default_config_file() == home / ".aicache" / "config.json"


class TestSaveSettings:
    def test_round_trip(self, tmp_path):
        file = tmp_path / "sub" / "config.json"
        settings = Settings(default_safety_tier=SafetyTier.DANGER, max_depth=2)

        assert save_settings(settings, file)
        assert load_settings(file) == settings
        assert json.loads(file.read_text())["default_safety_tier"] == "danger"
