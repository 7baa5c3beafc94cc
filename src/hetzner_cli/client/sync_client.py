"""Blocking facades over the async clients.

Sync methods use plain names; the wrapped async client stays reachable via ``.aio``.
"""

from __future__ import annotations

import asyncio
from typing import Any

from hetzner_cli.client.async_client import AsyncAuctionClient, AsyncCloudClient, AsyncRobotClient
from hetzner_cli.models.actions import Action

CLOUD_SERVICES = (
    "datacenters",
    "locations",
    "server_types",
    "load_balancer_types",
    "isos",
    "servers",
    "networks",
    "firewalls",
    "floating_ips",
    "primary_ips",
    "volumes",
    "load_balancers",
    "images",
    "ssh_keys",
    "certificates",
    "placement_groups",
    "actions",
)

ROBOT_SERVICES = (
    "servers",
    "reset",
    "boot",
    "ips",
    "subnets",
    "failover",
    "rdns",
    "keys",
    "firewall",
    "vswitch",
    "storagebox",
    "traffic",
    "wol",
    "ordering",
)


class _SyncRunner:
    """Persistent sync runner to keep all sync calls on a single event loop."""

    def __init__(self) -> None:
        self._runner = asyncio.Runner()
        self._closed = False

    def run(self, coro: Any) -> Any:
        if self._closed:
            coro.close()
            raise RuntimeError("sync client is closed")

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._runner.run(coro)

        coro.close()
        raise RuntimeError("sync client methods cannot run inside an active event loop")

    def close(self) -> None:
        if self._closed:
            return

        self._runner.close()
        self._closed = True


class _SyncAPIProxy:
    def __init__(self, target: Any, run_sync: Any) -> None:
        self._target = target
        self._run_sync = run_sync

    def __getattr__(self, item: str) -> Any:
        attr = getattr(self._target, item)
        if not callable(attr):
            return attr

        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return self._run_sync(attr(*args, **kwargs))

        return wrapper


class _SyncFacade:
    _async: Any
    _services: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._sync_runner = _SyncRunner()
        self._closed = False
        for name in self._services:
            setattr(self, name, _SyncAPIProxy(getattr(self._async, name), self._sync_runner.run))

    @property
    def aio(self) -> Any:
        return self._async

    def close(self) -> None:
        if self._closed:
            return

        try:
            self._sync_runner.run(self._async.aclose())
        finally:
            self._sync_runner.close()
            self._closed = True

    def __enter__(self) -> Any:
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()


class CloudClient(_SyncFacade):
    """Blocking Hetzner Cloud client."""

    _services = CLOUD_SERVICES

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._async = AsyncCloudClient(*args, **kwargs)
        super().__init__()

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._sync_runner.run(self._async.request_json(method, path, **kwargs))

    def list_all(self, path: str, resource_key: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return self._sync_runner.run(self._async.list_all(path, resource_key, params))

    def wait_for_action(self, action_id: int, *, timeout: float | None = None) -> Action:
        return self._sync_runner.run(self._async.wait_for_action(action_id, timeout=timeout))


class RobotClient(_SyncFacade):
    """Blocking Hetzner Robot client."""

    _services = ROBOT_SERVICES

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._async = AsyncRobotClient(*args, **kwargs)
        super().__init__()

    @property
    def user(self) -> str:
        return self._async.user

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._sync_runner.run(self._async.request_json(method, path, **kwargs))


class AuctionClient(_SyncFacade):
    """Blocking Server Auction client."""

    _services = ("auction",)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._async = AsyncAuctionClient(*args, **kwargs)
        super().__init__()
