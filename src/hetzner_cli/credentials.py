"""Credential resolution for the Cloud and Robot APIs."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from hetzner_cli.config import ContextManager
from hetzner_cli.errors import AuthError, ConfigError
from hetzner_cli.settings import RuntimeSettings

logger = logging.getLogger(__name__)

RobotPrompt = Callable[[ContextManager], tuple[str, str]]

NO_CLOUD_TOKEN_MESSAGE = (
    "No cloud token found. Use one of:\n"
    "  --token <token>                  Pass token directly\n"
    "  HETZNER_CLOUD_TOKEN=<token>      Set environment variable\n"
    "  hetzner cloud context create     Configure a named context"
)

NO_ROBOT_CREDENTIALS_MESSAGE = (
    "No robot credentials found. Use one of:\n"
    "  --user <user> --password <pw>    Pass credentials directly\n"
    "  HETZNER_ROBOT_USER / HETZNER_ROBOT_PASSWORD\n"
    "  hetzner robot login              Store credentials"
)


def _secret(value: object) -> str | None:
    if value is None:
        return None
    getter = getattr(value, "get_secret_value", None)
    raw = getter() if callable(getter) else value
    return str(raw) if raw else None


def resolve_cloud_token(
    token: str | None = None,
    *,
    context: str | None = None,
    settings: RuntimeSettings | None = None,
    manager: ContextManager | None = None,
) -> str:
    """Return the Cloud API token.

    Order: explicit ``token``, ``HETZNER_CLOUD_TOKEN``, then the selected
    context (``context`` / ``HETZNER_CONTEXT`` / the stored active one),
    whose token is read from the keychain before the config file.
    """

    if token:
        return token

    runtime = settings or RuntimeSettings()
    env_token = _secret(runtime.cloud_token)
    if env_token:
        return env_token

    contexts = manager or ContextManager(runtime.config_file)
    selected = context or runtime.context
    if selected:
        if selected not in {entry["name"] for entry in contexts.list_contexts()}:
            raise ConfigError(
                f"Context '{selected}' not found. Use 'hetzner cloud context list' to see available contexts."
            )
    else:
        selected = contexts.active_context()

    if selected:
        stored = contexts.context_token(selected)
        if stored:
            logger.debug("using cloud token from context %s", selected)
            return stored

    raise AuthError(NO_CLOUD_TOKEN_MESSAGE)


def read_password_from_stdin(stream: TextIO | None = None) -> str:
    source = stream or sys.stdin
    try:
        password = source.read().strip()
    except OSError as exc:
        raise AuthError("Failed to read password from stdin") from exc
    if not password:
        raise AuthError("Failed to read password from stdin")
    return password


def resolve_robot_credentials(
    user: str | None = None,
    password: str | None = None,
    *,
    settings: RuntimeSettings | None = None,
    manager: ContextManager | None = None,
    prompt: RobotPrompt | None = None,
    stdin: TextIO | None = None,
) -> tuple[str, str]:
    """Return ``(user, password)`` for the Robot API.

    Order: explicit arguments (``password="-"`` reads stdin), the
    ``HETZNER_ROBOT_*`` environment, the keychain, the config file, then
    ``prompt`` when one is supplied. Without a prompt, :class:`AuthError`.
    """

    if password == "-":
        password = read_password_from_stdin(stdin)
    if user and password:
        return user, password

    runtime = settings or RuntimeSettings()
    store = manager or ContextManager(runtime.config_file)
    stored = stored_robot_credentials(settings=runtime, manager=store)
    if stored is not None:
        found_user, found_password, source = stored
        logger.debug("using robot credentials from %s", source)
        return found_user, found_password

    if prompt is not None:
        return prompt(store)
    raise AuthError(NO_ROBOT_CREDENTIALS_MESSAGE)


def stored_robot_credentials(
    *,
    settings: RuntimeSettings | None = None,
    manager: ContextManager | None = None,
) -> tuple[str, str, str] | None:
    """Return ``(user, password, source)`` from env, keychain or config file, without prompting."""

    runtime = settings or RuntimeSettings()
    env_user, env_password = runtime.robot_user, _secret(runtime.robot_password)
    if env_user and env_password:
        return env_user, env_password, "environment"

    store = manager or ContextManager(runtime.config_file)
    from_keychain = store.keychain.get_robot_credentials()
    if from_keychain:
        return (*from_keychain, "keychain")

    from_file = store.robot_credentials_from_file()
    if from_file:
        return (*from_file, "file")
    return None
