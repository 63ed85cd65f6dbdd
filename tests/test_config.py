"""Tests for config.py EngineConfig resolution."""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

import pytest
import voluptuous as vol

from choreclock.config import EngineConfig, parse_touch_mode, resolve_time_zone


class TestTimeZone:
    """Test time zone resolution order and fallback."""

    def test_default_is_utc(self) -> None:
        """No option and no environment gives UTC."""
        config = EngineConfig.from_options(environ={})
        assert config.time_zone == ZoneInfo("UTC")
        assert config.touch_mode is False

    def test_environment(self) -> None:
        """TZ is used when no option is given."""
        config = EngineConfig.from_options(environ={"TZ": "Europe/Berlin"})
        assert config.time_zone == ZoneInfo("Europe/Berlin")

    def test_option_beats_environment(self) -> None:
        """An explicit option wins over TZ."""
        config = EngineConfig.from_options(
            {"time_zone": "America/New_York"}, environ={"TZ": "Europe/Berlin"}
        )
        assert config.time_zone == ZoneInfo("America/New_York")

    def test_invalid_zone_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown zone names log a warning and use UTC."""
        with caplog.at_level(logging.WARNING, logger="choreclock"):
            config = EngineConfig.from_options(environ={"TZ": "Mars/Olympus_Mons"})
        assert config.time_zone == ZoneInfo("UTC")
        assert "Invalid time zone 'Mars/Olympus_Mons'" in caplog.text

    def test_resolve_empty_name(self) -> None:
        """An empty name is the default, not an error."""
        assert resolve_time_zone("") == ZoneInfo("UTC")

    def test_option_must_be_string(self) -> None:
        """Explicit options are schema-validated."""
        with pytest.raises(vol.Invalid):
            EngineConfig.from_options({"time_zone": 5}, environ={})


class TestTouchMode:
    """Test touch mode parsing and resolution order."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("true", True),
            ("TRUE", True),
            ("1", True),
            ("yes", False),
            ("false", False),
            ("", False),
            (True, True),
            (False, False),
        ],
    )
    def test_parse(self, value: str | bool, expected: bool) -> None:
        """Only "true" (any case) and "1" switch it on."""
        assert parse_touch_mode(value) is expected

    def test_environment(self) -> None:
        """TOUCH is read when no option is given."""
        assert EngineConfig.from_options(environ={"TOUCH": "True"}).touch_mode is True

    def test_option_beats_environment(self) -> None:
        """An explicit option wins over TOUCH."""
        config = EngineConfig.from_options({"touch_mode": False}, environ={"TOUCH": "1"})
        assert config.touch_mode is False

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an explicit mapping the process environment is used."""
        monkeypatch.setenv("TOUCH", "1")
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        config = EngineConfig.from_options()
        assert config.touch_mode is True
        assert config.time_zone == ZoneInfo("Asia/Tokyo")
