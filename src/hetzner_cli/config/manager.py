from __future__ import annotations

import logging
from pathlib import Path

from pydantic import SecretStr

from hetzner_cli.config.keychain import KeychainStore, cloud_account
from hetzner_cli.config.loader import default_config_candidates, load_config, save_config
from hetzner_cli.config.models import CloudContext, RobotCredentials, SDKConfig
from hetzner_cli.errors import ConfigError

logger = logging.getLogger(__name__)


class ContextManager:
    """Manage Cloud contexts and stored Robot credentials persisted to file and keychain."""

    def __init__(self, config_file: str | Path | None = None, *, keychain: KeychainStore | None = None) -> None:
        self._explicit = config_file is not None
        raw = Path(config_file).expanduser() if config_file else default_config_candidates()[0].expanduser()
        self._path = raw
        self.keychain = keychain or KeychainStore()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SDKConfig:
        if self._explicit:
            resolved = load_config(config_path=self._path)
        else:
            resolved = load_config()
            if resolved.path is not None:
                self._path = resolved.path
        return resolved.data

    def save(self, config: SDKConfig) -> None:
        self._path = save_config(config, path=self._path)

    # Cloud contexts

    def list_contexts(self) -> list[dict[str, object]]:
        cfg = self.load()
        return [{"name": name, "active": name == cfg.active_context} for name in cfg.contexts]

    def active_context(self) -> str | None:
        return self.load().active_context

    def create_context(self, name: str, token: str) -> SDKConfig:
        cfg = self.load()
        entry = CloudContext(name=name)
        if not self.keychain.set(cloud_account(name), token):
            logger.warning("system keychain unavailable; cloud token stored in plaintext at %s", self._path)
            entry.token = SecretStr(token)
        cfg.contexts[name] = entry
        if not cfg.active_context:
            cfg.active_context = name
        self.save(cfg)
        return cfg

    def use_context(self, name: str) -> SDKConfig:
        cfg = self.load()
        if name not in cfg.contexts:
            raise ConfigError(
                f"Context '{name}' not found. Use 'hetzner cloud context list' to see available contexts."
            )
        cfg.active_context = name
        self.save(cfg)
        return cfg

    def delete_context(self, name: str) -> SDKConfig:
        cfg = self.load()
        if name not in cfg.contexts:
            raise ConfigError(f"Context '{name}' not found.")
        self.keychain.delete(cloud_account(name))
        del cfg.contexts[name]
        if cfg.active_context == name:
            cfg.active_context = next(iter(cfg.contexts), None)
        self.save(cfg)
        return cfg

    def context_token(self, name: str) -> str | None:
        token = self.keychain.get(cloud_account(name))
        if token:
            return token
        entry = self.load().contexts.get(name)
        if entry is None or entry.token is None:
            return None
        return entry.token.get_secret_value() or None

    # Robot credentials

    def robot_credentials_from_file(self) -> tuple[str, str] | None:
        robot = self.load().robot
        if robot is None or not robot.user or robot.password is None:
            return None
        password = robot.password.get_secret_value()
        return (robot.user, password) if password else None

    def save_robot_credentials(self, user: str, password: str, *, use_keychain: bool = True) -> str:
        """Persist Robot credentials and return where they went (``keychain`` or ``file``)."""

        if use_keychain and self.keychain.set_robot_credentials(user, password):
            return "keychain"
        if use_keychain:
            logger.warning("system keychain unavailable; robot credentials stored in plaintext at %s", self._path)
        cfg = self.load()
        cfg.robot = RobotCredentials(user=user, password=SecretStr(password))
        self.save(cfg)
        return "file"

    def clear_robot_credentials(self) -> None:
        self.keychain.clear_robot_credentials()
        cfg = self.load()
        if cfg.robot is not None:
            cfg.robot = None
            self.save(cfg)

    def migrate_robot_credentials_to_keychain(self) -> tuple[str, str] | None:
        """Move file-stored Robot credentials into the keychain; ``None`` when nothing moved."""

        from_file = self.robot_credentials_from_file()
        if from_file is None or not self.keychain.set_robot_credentials(*from_file):
            return None
        cfg = self.load()
        cfg.robot = None
        self.save(cfg)
        logger.info("robot credentials moved from %s to the system keychain", self._path)
        return from_file
