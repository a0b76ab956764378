"""
Settings tests

Tests speed presets, key construction and environment overrides.
"""

import pytest

from mdcstream.config import AppSettings, appsettings


class TestSpeeds:
    """Test speed preset resolution"""

    def test_default_presets(self):
        assert appsettings.speeds_get() == {"slow": 30, "normal": 15, "fast": 5}

    def test_resolve_case_insensitive(self):
        assert appsettings.interval_resolve("Slow") == 30

    def test_resolve_unknown(self):
        with pytest.raises(ValueError) as excinfo:
            appsettings.interval_resolve("ludicrous")
        assert "ludicrous" in str(excinfo.value)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MDCSTREAM_SPEED_FAST_MS", "2")
        monkeypatch.setenv("MDCSTREAM_DEFAULT_SPEED", "fast")
        settings = AppSettings()
        assert settings.interval_resolve("fast") == 2
        assert settings.default_speed == "fast"


class TestKeys:
    """Test structural key construction"""

    def test_key_make(self):
        assert appsettings.key_make("root-0", 1) == "root-0-1"

    def test_key_root(self):
        assert appsettings.key_root == "root"


class TestFields:
    """Test the configuration surface"""

    def test_every_field_is_used(self):
        """Only settings the streaming pipeline reads are exposed"""
        assert set(AppSettings.model_fields) == {
            "speed_slow_ms",
            "speed_normal_ms",
            "speed_fast_ms",
            "default_speed",
            "chunk_min",
            "chunk_max",
            "key_root",
            "key_separator",
            "fallback_label",
            "markdown_preset",
            "pygments_style",
        }
