"""Settings — defaults and validation of environment-driven configuration."""

import pytest
from pydantic import ValidationError

from tracker.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("STORE_PATH", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("REQUEST_ID_HEADER", raising=False)
    settings = Settings(_env_file=None)
    assert settings.store_path == "./track.db"
    assert settings.host == "127.0.0.1"
    assert settings.port == 3000
    assert settings.request_id_header == "x-request-id"
    assert settings.log_format == "json"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORE_PATH", "/data/drinks.db")
    monkeypatch.setenv("PORT", "8080")
    settings = Settings(_env_file=None)
    assert settings.store_path == "/data/drinks.db"
    assert settings.port == 8080


def test_header_name_lowercased():
    assert Settings(_env_file=None, request_id_header="X-Trace-Id").request_id_header == "x-trace-id"


def test_unknown_log_format_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")
