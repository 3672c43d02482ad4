from __future__ import annotations

import sys
from pathlib import Path

import pytest

from turix.main import _parse_config_args, launch, main
from turix.setup import _status_line, run_setup
from turix.storage.store import AppStore
from turix.wizard.permissions import PermissionSnapshot, check_system_permissions
from turix.wizard.probes import (
    GoogleCredentials,
    OllamaCredentials,
    ProbeResult,
    simulated_google_probe,
    simulated_ollama_probe,
)
from turix.wizard.status import ConnectionStatus


async def instant_ollama(credentials: OllamaCredentials) -> ProbeResult:
    return await simulated_ollama_probe(credentials, delay=0)


async def instant_google(credentials: GoogleCredentials) -> ProbeResult:
    return await simulated_google_probe(credentials, delay=0)


def _script_prompts(monkeypatch, answers: list[str]) -> list[str]:
    remaining = list(answers)

    def fake_prompt(*_args, **_kwargs):
        return remaining.pop(0)

    def fake_confirm(*_args, **kwargs):
        return kwargs.get("default", False)

    monkeypatch.setattr("turix.setup.Prompt.ask", fake_prompt)
    monkeypatch.setattr("turix.setup.Confirm.ask", fake_confirm)
    return remaining


def test_parse_config_args_supports_format_flags() -> None:
    assert _parse_config_args([]) == ("json", True)
    assert _parse_config_args(["--yaml"]) == ("yaml", True)
    assert _parse_config_args(["--yaml", "--json"]) == ("json", True)
    assert _parse_config_args(["--xml"])[1] is False


def test_status_line_renders_icon_and_message() -> None:
    assert _status_line(ConnectionStatus.failed("boom")) == "[red]x[/red] Failed: boom"
    assert _status_line(ConnectionStatus.success()).startswith("[green]")
    assert "[" not in ConnectionStatus.testing().message


def test_permissions_reported_granted_off_macos(monkeypatch) -> None:
    monkeypatch.setattr(sys, "platform", "linux")
    snapshot = check_system_permissions()
    assert snapshot.screen_recording is True
    assert snapshot.accessibility is True


def test_run_setup_skip_saves_defaults(tmp_path: Path, monkeypatch) -> None:
    _script_prompts(monkeypatch, ["skip"])
    store = AppStore(tmp_path)

    config = run_setup(store)

    assert config is not None
    assert store.is_setup_completed()
    assert store.load_configuration() == config


def test_run_setup_quit_saves_nothing(tmp_path: Path, monkeypatch) -> None:
    _script_prompts(monkeypatch, ["quit"])
    store = AppStore(tmp_path)
    assert run_setup(store) is None
    assert not store.config_path.exists()
    assert store.is_setup_completed() is False


def test_run_setup_full_hybrid_walkthrough(tmp_path: Path, monkeypatch) -> None:
    remaining = _script_prompts(monkeypatch, [
        "start",
        "c",                # permissions
        "3",                # hybrid
        "t", "c",           # ollama: test, continue
        "k", "abc", "t", "c",  # google: key, test, continue
        "c",                # model assignment
        "c",                # optional features
        "finish",
    ])
    store = AppStore(tmp_path)

    config = run_setup(
        store,
        ollama_probe=instant_ollama,
        google_probe=instant_google,
        permission_checker=lambda: PermissionSnapshot(screen_recording=True, accessibility=True),
    )

    assert remaining == []
    assert config is not None
    assert config.brain_llm.provider == "google_flash"
    assert config.brain_llm.api_key == "abc"
    assert config.actor_llm.provider == "ollama"
    assert store.is_setup_completed()


def test_run_setup_back_from_permissions_returns_to_welcome(tmp_path: Path, monkeypatch) -> None:
    remaining = _script_prompts(monkeypatch, ["start", "b", "quit"])
    result = run_setup(
        AppStore(tmp_path),
        permission_checker=lambda: PermissionSnapshot(screen_recording=False, accessibility=False),
    )
    assert result is None
    assert remaining == []


def test_launch_runs_wizard_then_chat(tmp_path: Path, monkeypatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr("turix.main._run_setup", lambda store: calls.append("setup") or 0)
    monkeypatch.setattr("turix.main._run_chat", lambda store: calls.append("chat") or 0)

    store = AppStore(tmp_path)
    assert launch(store) == 0
    assert calls == ["setup", "chat"]

    calls.clear()
    store.mark_setup_completed()
    assert launch(store) == 0
    assert calls == ["chat"]


def test_launch_stops_when_wizard_cancelled(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("turix.main._run_setup", lambda store: 1)
    monkeypatch.setattr("turix.main._run_chat", lambda store: pytest.fail("chat should not open"))
    assert launch(AppStore(tmp_path)) == 1


def test_main_reset_removes_marker(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TURIX_HOME", str(tmp_path))
    store = AppStore(tmp_path)
    store.mark_setup_completed()
    monkeypatch.setattr(sys, "argv", ["turix", "reset"])

    main()

    assert store.is_setup_completed() is False


def test_main_config_prints_yaml(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("TURIX_HOME", str(tmp_path))
    _script_prompts(monkeypatch, ["skip"])
    run_setup(AppStore(tmp_path))
    monkeypatch.setattr(sys, "argv", ["turix", "config", "--yaml"])

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "brain_llm:" in out
    assert "provider: google_flash" in out


def test_main_config_without_file_fails(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TURIX_HOME", str(tmp_path))
    monkeypatch.setattr(sys, "argv", ["turix", "config"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
