"""
Tests for settings parsing and deployment validation.
"""

import pytest

from infrastructure.config.settings import Settings

STRONG_SECRET = "s" * 40


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestValidateProductionSecrets:
    def test_development_is_never_blocked(self):
        _settings(environment="development", jwt_secret_key="short").validate_production_secrets()

    def test_weak_secret_in_production(self):
        with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
            _settings(environment="production", jwt_secret_key="short").validate_production_secrets()

    def test_s3_without_bucket(self):
        settings = _settings(environment="staging", jwt_secret_key=STRONG_SECRET, storage_type="s3")
        with pytest.raises(ValueError, match="S3_BUCKET"):
            settings.validate_production_secrets()

    def test_reports_every_problem(self):
        settings = _settings(environment="production", jwt_secret_key="short", database_echo=True)
        with pytest.raises(ValueError) as exc_info:
            settings.validate_production_secrets()
        assert "JWT_SECRET_KEY" in str(exc_info.value)
        assert "DATABASE_ECHO" in str(exc_info.value)

    def test_valid_production(self):
        _settings(
            environment="production", jwt_secret_key=STRONG_SECRET, billing_api_key="gw-key"
        ).validate_production_secrets()


class TestParsing:
    def test_postgres_url_uses_asyncpg(self):
        settings = _settings(database_url="postgres://u:p@db:5432/sport")
        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/sport"

    def test_supported_languages_list(self):
        assert _settings(supported_languages="en, am ,om,").supported_languages_list == ["en", "am", "om"]

    def test_cors_origins_accepts_json_list(self):
        settings = _settings(cors_origins='["https://dailysport.example/", "http://localhost:3000"]')
        assert settings.cors_origins_list == ["https://dailysport.example", "http://localhost:3000"]

    def test_cookie_lasts_at_least_as_long_as_token(self):
        settings = _settings(session_cookie_max_age_hours=1, session_token_expire_minutes=120)
        assert settings.session_cookie_max_age_seconds == 7200
