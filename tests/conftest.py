from __future__ import annotations

import os
from pathlib import Path

import keyring
import pytest
from keyring.backends.fail import Keyring as FailKeyring

from hetzner_cli.config import KeychainStore


class MemoryKeychain(KeychainStore):
    """Keychain double holding secrets in a dict."""

    def __init__(self) -> None:
        super().__init__()
        self.secrets: dict[str, str] = {}

    def available(self) -> bool:
        return True

    def get(self, account: str) -> str | None:
        return self.secrets.get(account)

    def set(self, account: str, secret: str) -> bool:
        self.secrets[account] = secret
        return True

    def delete(self, account: str) -> None:
        self.secrets.pop(account, None)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith(("HETZNER_", "HCLOUD_")):
            monkeypatch.delenv(name)
    keyring.set_keyring(FailKeyring())
    return home


@pytest.fixture
def memory_keychain() -> MemoryKeychain:
    return MemoryKeychain()
