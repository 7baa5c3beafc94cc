from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest
import yaml

from hetzner_cli.config import ContextManager, SDKConfig, load_config, save_config
from hetzner_cli.config.loader import default_config_candidates, legacy_config_paths
from hetzner_cli.errors import ConfigError


def test_runtime_dict_precedence_over_paths(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump({"active_context": "file", "contexts": {"file": {}}}), encoding="utf-8")

    cfg = load_config({"active_context": "runtime", "contexts": {"runtime": {}}}, config_path=path)

    assert cfg.source == "runtime-dict"
    assert cfg.data.active_context == "runtime"
    assert cfg.data.contexts["runtime"].name == "runtime"


def test_explicit_path_precedence_over_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / "env.json"
    env_path.write_text(json.dumps({"active_context": "env"}), encoding="utf-8")
    explicit_path = tmp_path / "explicit.toml"
    explicit_path.write_text('active_context = "explicit"\n[contexts.explicit]\n', encoding="utf-8")
    monkeypatch.setenv("HETZNER_CONFIG", str(env_path))

    cfg = load_config(config_path=explicit_path)

    assert cfg.source == "explicit-path"
    assert cfg.data.active_context == "explicit"


def test_env_path_used_before_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_path = tmp_path / "env.yaml"
    env_path.write_text("per_page: 25\n", encoding="utf-8")
    default = default_config_candidates()[0]
    default.parent.mkdir(parents=True)
    default.write_text("per_page: 10\n", encoding="utf-8")
    monkeypatch.setenv("HETZNER_CONFIG", str(env_path))

    cfg = load_config()

    assert cfg.source == "env:HETZNER_CONFIG"
    assert cfg.data.per_page == 25


def test_default_empty_when_nothing_exists() -> None:
    cfg = load_config()

    assert cfg.source == "default-empty"
    assert cfg.data.contexts == {}
    assert cfg.data.per_page == 50
    assert cfg.data.polling.interval_seconds == 1.0
    assert cfg.data.polling.timeout_seconds == 300.0


def test_missing_explicit_path_is_empty(tmp_path: Path) -> None:
    cfg = load_config(config_path=tmp_path / "nope.yml")
    assert cfg.source == "explicit-path-missing"
    assert cfg.data == SDKConfig()


def test_invalid_structure_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("per_page: 500\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid config structure"):
        load_config(config_path=path)


def test_non_mapping_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path=path)


def test_legacy_files_are_merged_and_migrated() -> None:
    credentials, contexts = legacy_config_paths()
    credentials.parent.mkdir(parents=True)
    credentials.write_text(json.dumps({"user": "ws-user", "password": "ws-pass"}), encoding="utf-8")
    contexts.write_text(
        json.dumps({"active": "prod", "contexts": {"prod": {"name": "prod", "token": "prod-token"}, "dev": {}}}),
        encoding="utf-8",
    )

    cfg = load_config()

    assert cfg.source == "legacy-migrated"
    assert cfg.path == default_config_candidates()[0].resolve()
    assert cfg.data.active_context == "prod"
    assert cfg.data.robot is not None and cfg.data.robot.user == "ws-user"
    assert cfg.data.contexts["dev"].name == "dev"

    written = yaml.safe_load(default_config_candidates()[0].read_text(encoding="utf-8"))
    assert written["contexts"]["prod"]["token"] == "prod-token"
    assert written["robot"]["password"] == "ws-pass"

    assert load_config().source == "default-path"


@pytest.mark.parametrize("suffix", [".yml", ".toml", ".json"])
def test_save_round_trips_and_restricts_permissions(tmp_path: Path, suffix: str) -> None:
    target = tmp_path / "nested" / f"config{suffix}"
    cfg = SDKConfig.model_validate(
        {"active_context": "prod", "contexts": {"prod": {"token": "abc"}}, "robot": {"user": "u", "password": "p"}}
    )

    written = save_config(cfg, path=target)
    loaded = load_config(config_path=written).data

    assert stat.S_IMODE(written.stat().st_mode) == 0o600
    assert loaded.contexts["prod"].token is not None
    assert loaded.contexts["prod"].token.get_secret_value() == "abc"
    assert loaded.robot is not None and loaded.robot.user == "u"


def test_secrets_are_masked_outside_json_dumps() -> None:
    cfg = SDKConfig.model_validate({"contexts": {"prod": {"token": "abc"}}})

    assert "abc" not in repr(cfg)
    assert cfg.model_dump()["contexts"]["prod"]["token"] != "abc"


def test_context_lifecycle_without_keychain(tmp_path: Path) -> None:
    manager = ContextManager(tmp_path / "config.yml")

    manager.create_context("prod", "prod-token")
    manager.create_context("dev", "dev-token")

    assert manager.active_context() == "prod"
    assert manager.list_contexts() == [{"name": "prod", "active": True}, {"name": "dev", "active": False}]
    assert manager.context_token("dev") == "dev-token"

    manager.use_context("dev")
    assert manager.active_context() == "dev"

    manager.delete_context("dev")
    assert manager.active_context() == "prod"
    assert [entry["name"] for entry in manager.list_contexts()] == ["prod"]


def test_unknown_context_is_config_error(tmp_path: Path) -> None:
    manager = ContextManager(tmp_path / "config.yml")

    with pytest.raises(ConfigError, match="Context 'ghost' not found"):
        manager.use_context("ghost")
    with pytest.raises(ConfigError):
        manager.delete_context("ghost")


def test_tokens_go_to_keychain_when_available(tmp_path: Path, memory_keychain) -> None:
    path = tmp_path / "config.yml"
    manager = ContextManager(path, keychain=memory_keychain)

    manager.create_context("prod", "prod-token")

    assert memory_keychain.secrets == {"cloud-token:prod": "prod-token"}
    assert "prod-token" not in path.read_text(encoding="utf-8")
    assert manager.context_token("prod") == "prod-token"

    manager.delete_context("prod")
    assert memory_keychain.secrets == {}


def test_robot_credentials_storage(tmp_path: Path, memory_keychain) -> None:
    path = tmp_path / "config.yml"
    file_only = ContextManager(path)

    assert file_only.save_robot_credentials("u", "p", use_keychain=False) == "file"
    assert file_only.robot_credentials_from_file() == ("u", "p")

    with_keychain = ContextManager(path, keychain=memory_keychain)
    assert with_keychain.migrate_robot_credentials_to_keychain() == ("u", "p")
    assert with_keychain.robot_credentials_from_file() is None
    assert memory_keychain.get_robot_credentials() == ("u", "p")

    with_keychain.clear_robot_credentials()
    assert memory_keychain.get_robot_credentials() is None


def test_robot_credentials_fall_back_to_file_without_keychain(tmp_path: Path) -> None:
    manager = ContextManager(tmp_path / "config.yml")

    assert manager.save_robot_credentials("u", "p") == "file"
    assert manager.migrate_robot_credentials_to_keychain() is None
