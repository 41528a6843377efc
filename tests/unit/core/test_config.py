"""Tests for stormspine.core.config."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from stormspine.core.config import DEFAULT_WARNING_EVENTS, Settings, get_settings


class TestSettingsDefaults:
    """Default values."""

    def test_poll_defaults(self) -> None:
        """Events poll every 10 seconds and tick immediately."""
        settings = Settings()
        assert settings.poll_interval == 10.0
        assert settings.tick_on_start is True
        assert settings.fetch_timeout == 60.0
        assert settings.observer_timeout == 30.0

    def test_expiry_defaults(self) -> None:
        """Watches age out after a day, statements after six hours."""
        settings = Settings()
        assert settings.watch_expiry == timedelta(days=1)
        assert settings.statement_expiry == timedelta(hours=6)

    def test_warning_events_default(self) -> None:
        """The warning filter covers the convective and marine products."""
        settings = Settings()
        assert settings.warning_events == list(DEFAULT_WARNING_EVENTS)
        assert "tornado warning" in settings.warning_events
        assert "special weather statement" in settings.warning_events
        assert settings.include_custom_warnings is False

    def test_warning_events_not_shared(self) -> None:
        """Each Settings gets its own filter list."""
        a = Settings()
        b = Settings()
        a.warning_events.append("flood warning")
        assert "flood warning" not in b.warning_events


class TestSettingsEnvironment:
    """Environment variable loading."""

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """STORMSPINE_ variables override defaults."""
        monkeypatch.setenv("STORMSPINE_POLL_INTERVAL", "30")
        monkeypatch.setenv("STORMSPINE_LOG_FORMAT", "json")
        monkeypatch.setenv("STORMSPINE_INCLUDE_CUSTOM_WARNINGS", "true")

        settings = Settings()
        assert settings.poll_interval == 30.0
        assert settings.log_format == "json"
        assert settings.include_custom_warnings is True

    def test_list_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Complex fields are read as JSON."""
        monkeypatch.setenv("STORMSPINE_WARNING_EVENTS", '["tornado warning"]')
        assert Settings().warning_events == ["tornado warning"]


class TestSettingsValidation:
    """Invalid values are rejected at construction."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("poll_interval", 0),
            ("request_timeout", 0.5),
            ("rate_limit", 0),
            ("max_retries", -1),
            ("observer_timeout", 0),
            ("log_format", "xml"),
        ],
    )
    def test_rejects_invalid(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestGetSettings:
    def test_overrides(self) -> None:
        """get_settings passes overrides through."""
        settings = get_settings(request_timeout=15, log_level="DEBUG")
        assert settings.request_timeout == 15.0
        assert settings.log_level == "DEBUG"
