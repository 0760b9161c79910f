"""Tests for process startup."""
from __future__ import annotations

import pytest

from token_server import cli
from token_server.core import config


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    # Keep any developer .env out of the way.
    monkeypatch.chdir(tmp_path)
    for name in ("AGORA_APP_ID", "AGORA_APP_CERTIFICATE", "PORT", "HOST", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture
def log_levels(monkeypatch):
    levels: list[str] = []
    monkeypatch.setattr(cli, "configure_logging", lambda level="INFO": levels.append(level))
    return levels


@pytest.fixture
def served(monkeypatch, log_levels):
    calls: list[dict] = []

    def fake_run(app, **kwargs):
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    return calls


def test_missing_app_id_exits_before_serving(monkeypatch, served, caplog):
    monkeypatch.setenv("AGORA_APP_CERTIFICATE", "cert-value")

    assert cli.main() == 1
    assert served == []
    assert "AGORA_APP_ID" in caplog.text
    assert "cert-value" not in caplog.text


def test_serves_on_configured_port(monkeypatch, served, caplog):
    caplog.set_level("INFO", logger="token_server")
    monkeypatch.setenv("AGORA_APP_ID", "app-id")
    monkeypatch.setenv("AGORA_APP_CERTIFICATE", "cert-value")
    monkeypatch.setenv("PORT", "4100")

    assert cli.main() == 0
    assert len(served) == 1
    assert served[0]["port"] == 4100
    assert served[0]["app"].state.credentials.app_id == "app-id"
    assert "cert-value" not in caplog.text


def test_log_level_from_env_file_applies_to_app_loggers(tmp_path, served, log_levels):
    (tmp_path / ".env").write_text(
        "AGORA_APP_ID=app-id\nAGORA_APP_CERTIFICATE=cert-value\nLOG_LEVEL=debug\n"
    )

    assert cli.main() == 0
    assert log_levels[-1] == "DEBUG"
    assert served[0]["log_level"] == "debug"


def test_invalid_log_level_is_a_startup_error(monkeypatch, served, caplog):
    monkeypatch.setenv("AGORA_APP_ID", "app-id")
    monkeypatch.setenv("AGORA_APP_CERTIFICATE", "cert-value")
    monkeypatch.setenv("LOG_LEVEL", "loud")

    assert cli.main() == 1
    assert served == []
    assert "LOG_LEVEL" in caplog.text
