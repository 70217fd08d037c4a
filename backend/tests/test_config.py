"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from tablefix.config import DEFAULT_CORS_ORIGINS, get_settings


ENV_VARS = [
    "TABLEFIX_CORS_ORIGINS",
    "TABLEFIX_LOG_LEVEL",
    "TABLEFIX_MAX_UPLOAD_BYTES",
    "TABLEFIX_SAMPLE_SIZE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = get_settings()

    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "INFO"
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.sample_size == 50


def test_values_read_from_environment(monkeypatch):
    monkeypatch.setenv("TABLEFIX_CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("TABLEFIX_LOG_LEVEL", "debug")
    monkeypatch.setenv("TABLEFIX_MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("TABLEFIX_SAMPLE_SIZE", "10")

    settings = get_settings()

    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.log_level == "DEBUG"
    assert settings.max_upload_bytes == 1024
    assert settings.sample_size == 10


def test_invalid_sample_size_rejected(monkeypatch):
    monkeypatch.setenv("TABLEFIX_SAMPLE_SIZE", "0")

    with pytest.raises(ValidationError):
        get_settings()


@pytest.mark.parametrize("name, value", [
    ("TABLEFIX_SAMPLE_SIZE", "ten"),
    ("TABLEFIX_MAX_UPLOAD_BYTES", "5MB"),
    ("TABLEFIX_MAX_UPLOAD_BYTES", "-1"),
])
def test_malformed_values_raise_validation_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        get_settings()


def test_empty_variable_keeps_default(monkeypatch):
    monkeypatch.setenv("TABLEFIX_LOG_LEVEL", "")

    assert get_settings().log_level == "INFO"


def test_values_read_from_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text(
        "TABLEFIX_SAMPLE_SIZE=7\nTABLEFIX_CORS_ORIGINS=https://c.example\n",
        encoding="utf-8",
    )

    settings = get_settings()

    assert settings.sample_size == 7
    assert settings.cors_origins == ["https://c.example"]
