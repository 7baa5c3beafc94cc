from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
import yaml
from pydantic import ValidationError

from hetzner_cli.config.models import ConfigInput, ResolvedConfig, SDKConfig
from hetzner_cli.constants import DEFAULT_CONFIG_DIR, LEGACY_CONTEXTS_FILE, LEGACY_CREDENTIALS_FILE
from hetzner_cli.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENVS = ("HETZNER_CONFIG", "HETZNER_CONFIG_FILE")


def _default_config_dir() -> Path:
    return Path(DEFAULT_CONFIG_DIR).expanduser()


def default_config_candidates() -> list[Path]:
    base = _default_config_dir()
    return [
        base / "config.yml",
        base / "config.yaml",
        base / "config.toml",
        base / "config.json",
    ]


def legacy_config_paths() -> list[Path]:
    return [Path(LEGACY_CREDENTIALS_FILE).expanduser(), Path(LEGACY_CONTEXTS_FILE).expanduser()]


def _decode_raw(raw: str, *, suffix: str) -> dict[str, Any]:
    if suffix in {".yaml", ".yml"}:
        parsed = yaml.safe_load(raw) or {}
    elif suffix == ".json":
        parsed = json.loads(raw) if raw.strip() else {}
    elif suffix == ".toml":
        parsed = tomllib.loads(raw)
    else:
        for decode in (json.loads, tomllib.loads, yaml.safe_load):
            try:
                parsed = decode(raw) or {}
                break
            except (ValueError, yaml.YAMLError):
                continue
        else:
            raise ConfigError("failed to auto-detect config format (expected yaml/json/toml)")

    if not isinstance(parsed, dict):
        raise ConfigError("config must decode to an object/map")
    return parsed


def parse_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    raw = path.read_text(encoding="utf-8")
    return _decode_raw(raw, suffix=suffix)


def _validate(payload: dict[str, Any], *, origin: Path | str) -> SDKConfig:
    try:
        return SDKConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid config structure for '{origin}': {exc}") from exc


def _load_from_path(path: Path, *, source: str) -> ResolvedConfig:
    try:
        payload = parse_config_file(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to parse config file '{path}': {exc}") from exc

    return ResolvedConfig(source=source, path=path.resolve(), data=_validate(payload, origin=path))


def _migrate_legacy(existing: list[Path]) -> ResolvedConfig:
    """Merge the legacy credentials and contexts files into one config at the default path."""

    merged: dict[str, Any] = {}
    for path in existing:
        try:
            merged.update(parse_config_file(path))
        except (OSError, ValueError, ConfigError) as exc:
            # The old CLI treated unreadable files as empty.
            logger.warning("ignoring unreadable legacy config %s: %s", path, exc)

    data = _validate(merged, origin=", ".join(str(path) for path in existing))
    target = save_config(data, path=default_config_candidates()[0])
    logger.warning("migrated legacy config from %s to %s", ", ".join(str(path) for path in existing), target)
    return ResolvedConfig(source="legacy-migrated", path=target, data=data)


def load_config(
    config: ConfigInput | str | Path | None = None,
    *,
    config_path: str | Path | None = None,
) -> ResolvedConfig:
    """Load and validate configuration with precedence and legacy migration."""

    if isinstance(config, (str, Path)) and config_path is None:
        config_path = config
        config = None

    if config is not None:
        if isinstance(config, SDKConfig):
            return ResolvedConfig(source="runtime-model", data=config)
        return ResolvedConfig(source="runtime-dict", data=_validate(config, origin="runtime"))

    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
        if not path.exists():
            return ResolvedConfig(source="explicit-path-missing", path=path, data=SDKConfig())
        return _load_from_path(path, source="explicit-path")

    for env_name in CONFIG_PATH_ENVS:
        env_path = os.getenv(env_name)
        if not env_path:
            continue
        path = Path(env_path).expanduser().resolve()
        if not path.exists():
            return ResolvedConfig(source=f"env:{env_name}:missing", path=path, data=SDKConfig())
        return _load_from_path(path, source=f"env:{env_name}")

    for candidate in default_config_candidates():
        if candidate.exists():
            return _load_from_path(candidate.expanduser().resolve(), source="default-path")

    legacy = [path for path in legacy_config_paths() if path.exists()]
    if legacy:
        return _migrate_legacy(legacy)

    return ResolvedConfig(
        source="default-empty",
        path=default_config_candidates()[0].expanduser().resolve(),
        data=SDKConfig(),
    )


def save_config(config: SDKConfig, *, path: Path | None = None) -> Path:
    target = (path or default_config_candidates()[0]).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    suffix = target.suffix.lower()

    payload = config.model_dump(mode="json", by_alias=True, exclude_none=True)
    if suffix in {"", ".yaml", ".yml"}:
        rendered = yaml.safe_dump(payload, sort_keys=False)
    elif suffix == ".json":
        rendered = json.dumps(payload, indent=2) + "\n"
    elif suffix == ".toml":
        rendered = tomli_w.dumps(payload)
    else:
        raise ConfigError(f"unsupported config extension: {suffix}")

    target.write_text(rendered, encoding="utf-8")
    target.chmod(0o600)
    return target.resolve()
