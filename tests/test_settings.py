"""Tests for settings loading and log masking."""

import pytest
from pydantic import ValidationError

from goalwatch.config.settings import AppSettings, load_settings
from goalwatch.logging import setup as logging_setup
from goalwatch.models.enums import LogoStrategy, SourceKind
from goalwatch.models.scope import MatchScope


class TestAppSettings:
    """Defaults, derived values and validation."""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)

        assert settings.match_source == SourceKind.LIVE
        assert settings.logo_strategy == LogoStrategy.SEARCH
        assert settings.revalidate_seconds == 3600
        assert settings.http_max_attempts == 1
        assert settings.openligadb_api_root == "https://api.openligadb.de"
        assert settings.sportsdb_api_root == "https://www.thesportsdb.com/api/v1/json/3"
        assert settings.uses_public_sportsdb_key
        assert settings.default_scope() == MatchScope(league="gb1")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LEAGUE_SHORTCUT", "BL1")
        monkeypatch.setenv("LEAGUE_SEASON", "2023")
        monkeypatch.setenv("LEAGUE_ROUND", "15")
        monkeypatch.setenv("SPORTSDB_API_KEY", "123456789")
        monkeypatch.setenv("MATCH_SOURCE", "fixture")

        settings = AppSettings(_env_file=None)

        assert settings.default_scope() == MatchScope(league="bl1", season=2023, round=15)
        assert settings.sportsdb_api_root.endswith("/json/123456789")
        assert not settings.uses_public_sportsdb_key
        assert settings.match_source == SourceKind.FIXTURE

    @pytest.mark.parametrize(
        "kwargs",
        [{"match_source": "ftp"}, {"logo_strategy": "guess"}, {"http_max_attempts": 0}, {"port": 0}],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, **kwargs)

    @pytest.mark.parametrize("raw, expected", [("debug", "DEBUG"), ("success", "SUCCESS"), ("chatty", "INFO")])
    def test_log_level_normalization(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_LEVEL", raw)
        assert load_settings().log_level == expected

    def test_broken_environment_exits(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        with pytest.raises(SystemExit):
            load_settings()


class TestSensitiveDataFilter:
    """Masking applied to every log record."""

    def test_masks_sensitive_extra_keys(self):
        record = {"message": "GET", "extra": {"api_key": "abcdefghijkl", "params": {"t": "Burnley"}}}

        assert logging_setup.sensitive_data_filter(record) is True
        assert record["extra"]["api_key"] == "abcd****ijkl"
        assert record["extra"]["params"] == {"t": "Burnley"}

    def test_masks_personal_api_key_in_messages(self, monkeypatch):
        monkeypatch.setattr(logging_setup, "settings", AppSettings(_env_file=None, sportsdb_api_key="987654321"))
        record = {"message": "GET https://www.thesportsdb.com/api/v1/json/987654321/searchteams.php", "extra": {}}

        logging_setup.sensitive_data_filter(record)

        assert "987654321" not in record["message"]

    def test_public_key_is_left_alone(self, monkeypatch):
        monkeypatch.setattr(logging_setup, "settings", AppSettings(_env_file=None, sportsdb_api_key="3"))
        record = {"message": "GET https://www.thesportsdb.com/api/v1/json/3/searchteams.php", "extra": {}}

        logging_setup.sensitive_data_filter(record)

        assert "/json/3/" in record["message"]
