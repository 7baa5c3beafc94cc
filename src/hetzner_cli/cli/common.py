from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable, Coroutine, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from hetzner_cli.client import AsyncAuctionClient, AsyncCloudClient, AsyncRobotClient
from hetzner_cli.config import ContextManager
from hetzner_cli.errors import HetznerError
from hetzner_cli.models.actions import Action
from hetzner_cli.utils.output import OutputFormat, emit
from hetzner_cli.utils.serialization import to_plain_data

T = TypeVar("T")

err_console = Console(stderr=True)


class CLIState:
    def __init__(
        self,
        *,
        config_file: Path | None,
        output: OutputFormat,
        verbose: bool = False,
    ) -> None:
        self.config_file = config_file
        self.output = output
        self.verbose = verbose
        self.token: str | None = None
        self.context: str | None = None
        self.user: str | None = None
        self.password: str | None = None


def configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def print_error(exc: BaseException) -> None:
    err_console.print(f"error: {exc}", style="red", markup=False, highlight=False)


@contextmanager
def handle_errors() -> Iterator[None]:
    try:
        yield
    except (HetznerError, ValidationError) as exc:
        print_error(exc)
        raise typer.Exit(code=1) from exc


def _run(awaitable: Coroutine[Any, Any, T]) -> T:
    with handle_errors():
        return asyncio.run(awaitable)


def _state(ctx: typer.Context) -> CLIState:
    obj = ctx.obj
    if not isinstance(obj, CLIState):
        raise typer.BadParameter("CLI context was not initialized")
    return obj


def _emit(value: Any, *, state: CLIState, columns: str | None = None) -> None:
    selected = [column.strip() for column in columns.split(",") if column.strip()] if columns else None
    emit(to_plain_data(value), output=state.output, columns=selected)


def manager(state: CLIState) -> ContextManager:
    return ContextManager(state.config_file)


def prompt_robot_login(store: ContextManager) -> tuple[str, str]:
    """Ask for Robot credentials and offer to remember them."""

    err_console.print("Hetzner Robot API authentication")
    err_console.print("Create a web service user at https://robot.hetzner.com under Settings > Web service settings.")
    err_console.print("This is separate from your main Hetzner login.")

    keychain = store.keychain.available()
    if keychain and store.robot_credentials_from_file() is not None:
        if typer.confirm("Migrate existing credentials to secure keychain storage?", default=True, err=True):
            migrated = store.migrate_robot_credentials_to_keychain()
            if migrated is not None:
                err_console.print("Credentials migrated to keychain.")
                return migrated

    user = typer.prompt("Web service username", err=True)
    password = typer.prompt("Web service password", hide_input=True, err=True)
    question = "Save credentials to secure keychain?" if keychain else f"Save credentials to {store.path}?"
    if typer.confirm(question, default=True, err=True):
        where = store.save_robot_credentials(user, password, use_keychain=keychain)
        err_console.print(f"Credentials saved to {where}.")
    return user, password


def _make_cloud_client(state: CLIState) -> AsyncCloudClient:
    return AsyncCloudClient(config_path=state.config_file, token=state.token, context=state.context)


def _make_robot_client(state: CLIState) -> AsyncRobotClient:
    return AsyncRobotClient(
        config_path=state.config_file,
        user=state.user,
        password=state.password,
        prompt=prompt_robot_login if sys.stdin.isatty() else None,
    )


def _make_auction_client(state: CLIState) -> AsyncAuctionClient:
    _ = state
    return AsyncAuctionClient()


def with_cloud(state: CLIState, call: Callable[[AsyncCloudClient], Awaitable[T]]) -> T:
    async def run() -> T:
        async with _make_cloud_client(state) as client:
            return await call(client)

    return _run(run())


def with_robot(state: CLIState, call: Callable[[AsyncRobotClient], Awaitable[T]]) -> T:
    async def run() -> T:
        async with _make_robot_client(state) as client:
            return await call(client)

    return _run(run())


async def finish(client: AsyncCloudClient, action: Action | None, wait: bool) -> Action | None:
    """Return ``action``, or its final state when ``wait`` is set."""

    if action is None or not wait:
        return action
    return await client.wait_for_action(action.id)


async def finish_all(client: AsyncCloudClient, actions: list[Action], wait: bool) -> list[Action]:
    if not wait:
        return actions
    return [await client.wait_for_action(action.id) for action in actions]


def confirm(message: str, yes: bool) -> None:
    if not yes:
        typer.confirm(message, abort=True)


def _parse_key_values(entries: list[str] | None) -> dict[str, str] | None:
    if not entries:
        return None
    parsed: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise typer.BadParameter(f"expected key=value format, got: {entry}")
        key, value = entry.split("=", 1)
        parsed[key.strip()] = value.strip()
    return parsed


def _parse_json(value: str | None, option: str, *, expect: type | tuple[type, ...] = dict) -> Any:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{option} is not valid JSON: {exc.msg}") from exc
    if not isinstance(parsed, expect):
        kinds = {dict: "object", list: "array"}
        wanted = " or ".join(kinds[t] for t in (expect if isinstance(expect, tuple) else (expect,)))
        raise typer.BadParameter(f"{option} must be a JSON {wanted}")
    return parsed
