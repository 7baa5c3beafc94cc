from __future__ import annotations

import io
from pathlib import Path

import pytest

from hetzner_cli.config import ContextManager
from hetzner_cli.credentials import (
    read_password_from_stdin,
    resolve_cloud_token,
    resolve_robot_credentials,
    stored_robot_credentials,
)
from hetzner_cli.errors import AuthError, ConfigError
from hetzner_cli.settings import RuntimeSettings


@pytest.fixture
def manager(tmp_path: Path) -> ContextManager:
    store = ContextManager(tmp_path / "config.yml")
    store.create_context("prod", "prod-token")
    store.create_context("dev", "dev-token")
    return store


def test_flag_beats_env_and_context(manager: ContextManager, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HETZNER_CLOUD_TOKEN", "env-token")
    assert resolve_cloud_token("flag-token", manager=manager) == "flag-token"


def test_env_beats_context(manager: ContextManager, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HCLOUD_TOKEN", "env-token")
    assert resolve_cloud_token(manager=manager, settings=RuntimeSettings()) == "env-token"


def test_active_context_token(manager: ContextManager) -> None:
    assert resolve_cloud_token(manager=manager) == "prod-token"


def test_selected_context_overrides_active(manager: ContextManager) -> None:
    assert resolve_cloud_token(context="dev", manager=manager) == "dev-token"


def test_context_from_environment(manager: ContextManager, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HETZNER_CONTEXT", "dev")
    assert resolve_cloud_token(manager=manager, settings=RuntimeSettings()) == "dev-token"


def test_unknown_context_is_config_error(manager: ContextManager) -> None:
    with pytest.raises(ConfigError, match="Context 'staging' not found"):
        resolve_cloud_token(context="staging", manager=manager)


def test_nothing_configured_is_auth_error(tmp_path: Path) -> None:
    with pytest.raises(AuthError) as info:
        resolve_cloud_token(manager=ContextManager(tmp_path / "empty.yml"))
    assert "HETZNER_CLOUD_TOKEN" in str(info.value)


def test_robot_flags_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HETZNER_ROBOT_USER", "env-user")
    monkeypatch.setenv("HETZNER_ROBOT_PASSWORD", "env-pass")

    creds = resolve_robot_credentials("flag-user", "flag-pass", manager=ContextManager(tmp_path / "c.yml"))

    assert creds == ("flag-user", "flag-pass")


def test_robot_env_beats_stored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = ContextManager(tmp_path / "c.yml")
    store.save_robot_credentials("file-user", "file-pass", use_keychain=False)
    monkeypatch.setenv("HETZNER_ROBOT_USER", "env-user")
    monkeypatch.setenv("HETZNER_ROBOT_PASSWORD", "env-pass")

    assert stored_robot_credentials(manager=store) == ("env-user", "env-pass", "environment")


def test_robot_keychain_beats_file(tmp_path: Path, memory_keychain) -> None:
    store = ContextManager(tmp_path / "c.yml", keychain=memory_keychain)
    store.save_robot_credentials("file-user", "file-pass", use_keychain=False)
    memory_keychain.set_robot_credentials("kc-user", "kc-pass")

    assert stored_robot_credentials(manager=store) == ("kc-user", "kc-pass", "keychain")
    assert resolve_robot_credentials(manager=store) == ("kc-user", "kc-pass")


def test_robot_file_credentials(tmp_path: Path) -> None:
    store = ContextManager(tmp_path / "c.yml")
    store.save_robot_credentials("file-user", "file-pass", use_keychain=False)

    assert stored_robot_credentials(manager=store) == ("file-user", "file-pass", "file")


def test_password_dash_reads_stdin(tmp_path: Path) -> None:
    creds = resolve_robot_credentials(
        "u",
        "-",
        manager=ContextManager(tmp_path / "c.yml"),
        stdin=io.StringIO("piped-secret\n"),
    )
    assert creds == ("u", "piped-secret")


def test_empty_stdin_is_auth_error() -> None:
    with pytest.raises(AuthError, match="Failed to read password from stdin"):
        read_password_from_stdin(io.StringIO(""))


def test_prompt_is_last_resort(tmp_path: Path) -> None:
    store = ContextManager(tmp_path / "c.yml")
    creds = resolve_robot_credentials(manager=store, prompt=lambda _store: ("asked", "typed"))
    assert creds == ("asked", "typed")


def test_partial_flags_fall_through(tmp_path: Path) -> None:
    with pytest.raises(AuthError, match="No robot credentials found"):
        resolve_robot_credentials("only-user", None, manager=ContextManager(tmp_path / "c.yml"))
