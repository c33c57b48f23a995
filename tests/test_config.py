"""Tests for per-provider configuration and the error taxonomy."""
from dataclasses import FrozenInstanceError

import pytest

from bracket_pool.core.config import CronConfig, EspnConfig, HighlightlyConfig, SportsDataConfig
from bracket_pool.core.exceptions import ConfigurationError, SyncStepFailedError, UpstreamProviderError

from conftest import make_settings


class TestProviderConfig:

    def test_sportsdata_config(self):
        """Should strip a trailing slash from the base URL."""
        config = SportsDataConfig.from_settings(make_settings(SPORTSDATA_BASE_URL="https://sd.test/"))
        assert config.base_url == "https://sd.test"
        assert config.api_key == "sd-test-key"

    @pytest.mark.parametrize("factory,setting", [
        (SportsDataConfig, "SPORTSDATA_API_KEY"),
        (HighlightlyConfig, "RAPIDAPI_KEY"),
        (HighlightlyConfig, "HIGHLIGHTLY_HOST"),
        (EspnConfig, "ESPN_TEAMS_URL"),
        (CronConfig, "CRON_SECRET"),
    ])
    def test_missing_setting(self, factory, setting):
        """Should raise ConfigurationError naming the missing setting."""
        with pytest.raises(ConfigurationError) as exc_info:
            factory.from_settings(make_settings(**{setting: ""}))

        assert exc_info.value.message == f"{setting} is required."
        assert exc_info.value.status_code == 500

    def test_configs_are_frozen(self):
        config = CronConfig.from_settings(make_settings())
        with pytest.raises(FrozenInstanceError):
            config.secret = "changed"


class TestProductionSecrets:

    def test_reports_missing_in_production(self):
        settings = make_settings(
            ENVIRONMENT="production", CRON_SECRET="", SPORTSDATA_API_KEY="",
            DATABASE_URL="postgresql://prod/db",
        )
        assert settings.validate_required_secrets() == ["CRON_SECRET", "SPORTSDATA_API_KEY"]

    def test_nothing_required_outside_production(self):
        assert make_settings(CRON_SECRET="").validate_required_secrets() == []

    def test_no_wildcard_cors_in_production(self):
        settings = make_settings(ENVIRONMENT="production", CORS_ORIGINS_STR="*")
        assert settings.CORS_ORIGINS == []


class TestErrors:

    def test_upstream_error_keeps_body(self):
        error = UpstreamProviderError("sportsdata", 403, "Access denied")
        assert error.to_response() == {"ok": False, "error": "sportsdata error 403: Access denied"}

    def test_step_failure_adopts_cause_status(self):
        error = SyncStepFailedError("link", UpstreamProviderError("sportsdata", 500, "x"))
        assert error.status_code == 502
        assert error.to_response()["failedStep"] == "link"

    def test_step_failure_from_plain_exception(self):
        error = SyncStepFailedError("scores", RuntimeError("boom"))
        assert error.status_code == 500
        assert error.to_response() == {"ok": False, "error": "boom", "failedStep": "scores"}
