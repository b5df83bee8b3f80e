from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_log_window import cli as cli_module
from lib_log_window import config as window_config


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> None:
    """Reset shared dotenv state around each test."""

    window_config._reset_dotenv_state_for_testing()
    yield
    window_config._reset_dotenv_state_for_testing()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values that are not set yet."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_WINDOW_SUBJECTS=net,db\n")
    monkeypatch.chdir(nested)
    monkeypatch.delenv("LOG_WINDOW_SUBJECTS", raising=False)

    loaded = window_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LOG_WINDOW_SUBJECTS"] == "net,db"

    os.environ.pop("LOG_WINDOW_SUBJECTS", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    nested = tmp_path / "nested"
    nested.mkdir()
    (tmp_path / ".env").write_text("LOG_WINDOW_TERMINAL=xterm\n")
    monkeypatch.chdir(nested)
    monkeypatch.setenv("LOG_WINDOW_TERMINAL", "none")

    result = window_config.enable_dotenv()

    assert result is not None
    assert os.environ["LOG_WINDOW_TERMINAL"] == "none"


def test_enable_dotenv_loads_only_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("LOG_WINDOW_CONNECT_TIMEOUT=3\n")
    monkeypatch.delenv("LOG_WINDOW_CONNECT_TIMEOUT", raising=False)

    first = window_config.enable_dotenv(search_from=tmp_path)
    os.environ.pop("LOG_WINDOW_CONNECT_TIMEOUT", None)
    second = window_config.enable_dotenv(search_from=tmp_path)

    assert first == second
    assert "LOG_WINDOW_CONNECT_TIMEOUT" not in os.environ


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(window_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(window_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["info"])
    assert result.exit_code == 0
    assert calls == []

    env = {window_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["info"], env=env)
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env=env)
    assert result.exit_code == 0
    assert calls == []
