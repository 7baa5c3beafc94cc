from __future__ import annotations

import json
import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from hetzner_cli.constants import KEYCHAIN_CLOUD_ACCOUNT_PREFIX, KEYCHAIN_ROBOT_ACCOUNT, KEYCHAIN_SERVICE

logger = logging.getLogger(__name__)


def cloud_account(context_name: str) -> str:
    return f"{KEYCHAIN_CLOUD_ACCOUNT_PREFIX}{context_name}"


class KeychainStore:
    """Secrets in the OS keychain via ``keyring``.

    Every backend failure is reported as "unavailable" (``None`` / ``False``)
    so callers can fall back to the config file.
    """

    def __init__(self, service: str = KEYCHAIN_SERVICE) -> None:
        self.service = service

    def available(self) -> bool:
        try:
            keyring.get_password(self.service, KEYCHAIN_ROBOT_ACCOUNT)
        except KeyringError as exc:
            logger.debug("keychain unavailable: %s", exc)
            return False
        return True

    def get(self, account: str) -> str | None:
        try:
            return keyring.get_password(self.service, account)
        except KeyringError as exc:
            logger.debug("keychain read for %s failed: %s", account, exc)
            return None

    def set(self, account: str, secret: str) -> bool:
        try:
            keyring.set_password(self.service, account, secret)
        except KeyringError as exc:
            logger.debug("keychain write for %s failed: %s", account, exc)
            return False
        return True

    def delete(self, account: str) -> None:
        try:
            keyring.delete_password(self.service, account)
        except PasswordDeleteError:
            pass
        except KeyringError as exc:
            logger.debug("keychain delete for %s failed: %s", account, exc)

    def get_robot_credentials(self) -> tuple[str, str] | None:
        stored = self.get(KEYCHAIN_ROBOT_ACCOUNT)
        if not stored:
            return None
        try:
            parsed = json.loads(stored)
        except ValueError:
            logger.warning("ignoring malformed robot credentials in keychain")
            return None
        if not isinstance(parsed, dict):
            return None
        user, password = parsed.get("user"), parsed.get("password")
        if user and password:
            return str(user), str(password)
        return None

    def set_robot_credentials(self, user: str, password: str) -> bool:
        return self.set(KEYCHAIN_ROBOT_ACCOUNT, json.dumps({"user": user, "password": password}))

    def clear_robot_credentials(self) -> None:
        self.delete(KEYCHAIN_ROBOT_ACCOUNT)
