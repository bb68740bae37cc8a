"""Tests for settings parsing."""

from app.core.config import Settings


def test_cors_origins_from_comma_separated_string():
    settings = Settings(BACKEND_CORS_ORIGINS="http://localhost:3000, https://scisummary.app")

    assert [str(o).rstrip("/") for o in settings.BACKEND_CORS_ORIGINS] == [
        "http://localhost:3000",
        "https://scisummary.app",
    ]


def test_cors_origins_from_json_array():
    settings = Settings(BACKEND_CORS_ORIGINS='["http://localhost:3000"]')

    assert [str(o).rstrip("/") for o in settings.BACKEND_CORS_ORIGINS] == ["http://localhost:3000"]


def test_summary_defaults():
    settings = Settings()

    assert settings.SUMMARY_PROMPT_VERSION == "v1"
    assert settings.USER_CONTEXT_MIN_LENGTH == 10
    assert settings.USER_CONTEXT_MAX_LENGTH == 500
    assert settings.MAX_PDF_BYTES == 5 * 1024 * 1024
