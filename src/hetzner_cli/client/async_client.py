from __future__ import annotations

import asyncio
from collections.abc import Mapping
from contextlib import asynccontextmanager
from functools import cached_property
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from hetzner_cli.config import ConfigInput, ContextManager, SDKConfig, load_config
from hetzner_cli.constants import DEFAULT_REQUEST_TIMEOUT, MAX_PER_PAGE
from hetzner_cli.credentials import RobotPrompt, resolve_cloud_token, resolve_robot_credentials
from hetzner_cli.errors import ConfigError
from hetzner_cli.http import ActionPoller, BearerAuth, HetznerTransport, encode_form, list_all, robot_auth
from hetzner_cli.http.transport import FormData, QueryParams
from hetzner_cli.models.actions import Action
from hetzner_cli.services import (
    ActionsService,
    AuctionService,
    CertificatesService,
    DatacentersService,
    FailoverService,
    FirewallsService,
    FloatingIPsService,
    ImagesService,
    ISOsService,
    LoadBalancersService,
    LoadBalancerTypesService,
    LocationsService,
    NetworksService,
    OrderingService,
    PlacementGroupsService,
    PrimaryIPsService,
    RdnsService,
    RobotBootService,
    RobotFirewallService,
    RobotIPsService,
    RobotKeysService,
    RobotResetService,
    RobotServersService,
    RobotSubnetsService,
    ServersService,
    ServerTypesService,
    SSHKeysService,
    StorageBoxService,
    TrafficService,
    VolumesService,
    VSwitchService,
    WolService,
)
from hetzner_cli.settings import RuntimeSettings


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _runtime_settings() -> RuntimeSettings:
    try:
        return RuntimeSettings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid HETZNER_* environment settings: {exc}") from exc


class AsyncCloudClient:
    """Async Hetzner Cloud API client (Bearer token, JSON bodies, paginated lists, actions)."""

    def __init__(
        self,
        config: ConfigInput | None = None,
        *,
        config_path: str | Path | None = None,
        token: str | None = None,
        context: str | None = None,
        base_url: str | None = None,
        request_timeout_seconds: float | None = None,
        per_page: int | None = None,
        poll_interval_seconds: float | None = None,
        action_timeout_seconds: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        manager: ContextManager | None = None,
    ) -> None:
        self._runtime = _runtime_settings()
        self.config: SDKConfig = load_config(config, config_path=config_path).data

        self.token = resolve_cloud_token(
            token,
            context=context,
            settings=self._runtime,
            manager=manager or ContextManager(config_path),
        )
        self.base_url = base_url or self._runtime.fallback_cloud_url
        self.request_timeout_seconds = _first(
            request_timeout_seconds,
            self._runtime.request_timeout_seconds,
            self.config.request_timeout_seconds,
        )
        self.per_page = _first(per_page, self._runtime.per_page, self.config.per_page)
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise ConfigError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {self.per_page}")
        self.action_timeout_seconds = _first(
            action_timeout_seconds,
            self._runtime.action_timeout_seconds,
            self.config.polling.timeout_seconds,
        )

        self._transport = HetznerTransport(
            base_url=self.base_url,
            auth=BearerAuth(self.token),
            timeout=self.request_timeout_seconds,
            http_client=http_client,
        )
        self._poller = ActionPoller(
            self._fetch_action,
            poll_interval=_first(
                poll_interval_seconds,
                self._runtime.poll_interval_seconds,
                self.config.polling.interval_seconds,
            ),
        )

    @property
    def poller(self) -> ActionPoller:
        return self._poller

    @cached_property
    def datacenters(self) -> DatacentersService:
        return DatacentersService(self)

    @cached_property
    def locations(self) -> LocationsService:
        return LocationsService(self)

    @cached_property
    def server_types(self) -> ServerTypesService:
        return ServerTypesService(self)

    @cached_property
    def load_balancer_types(self) -> LoadBalancerTypesService:
        return LoadBalancerTypesService(self)

    @cached_property
    def isos(self) -> ISOsService:
        return ISOsService(self)

    @cached_property
    def servers(self) -> ServersService:
        return ServersService(self)

    @cached_property
    def networks(self) -> NetworksService:
        return NetworksService(self)

    @cached_property
    def firewalls(self) -> FirewallsService:
        return FirewallsService(self)

    @cached_property
    def floating_ips(self) -> FloatingIPsService:
        return FloatingIPsService(self)

    @cached_property
    def primary_ips(self) -> PrimaryIPsService:
        return PrimaryIPsService(self)

    @cached_property
    def volumes(self) -> VolumesService:
        return VolumesService(self)

    @cached_property
    def load_balancers(self) -> LoadBalancersService:
        return LoadBalancersService(self)

    @cached_property
    def images(self) -> ImagesService:
        return ImagesService(self)

    @cached_property
    def ssh_keys(self) -> SSHKeysService:
        return SSHKeysService(self)

    @cached_property
    def certificates(self) -> CertificatesService:
        return CertificatesService(self)

    @cached_property
    def placement_groups(self) -> PlacementGroupsService:
        return PlacementGroupsService(self)

    @cached_property
    def actions(self) -> ActionsService:
        return ActionsService(self)

    async def __aenter__(self) -> AsyncCloudClient:
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json_data: Any = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self._transport.request_json(
            method,
            path,
            params=params,
            json_data=json_data,
            extra_headers=extra_headers,
        )

    _request_json = request_json

    async def list_all(
        self,
        path: str,
        resource_key: str,
        params: QueryParams | None = None,
    ) -> list[dict[str, Any]]:
        return await list_all(self._transport, path, resource_key, params, per_page=self.per_page)

    async def _fetch_action(self, action_id: int) -> Any:
        return await self._transport.request_json("GET", f"/actions/{action_id}")

    async def wait_for_action(
        self,
        action_id: int,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Action:
        """Poll ``/actions/{id}`` until it succeeds; raise on error, timeout or cancellation."""

        budget = timeout if timeout is not None else self.action_timeout_seconds
        return await self._poller.wait(action_id, timeout=budget, cancel=cancel)


class AsyncRobotClient:
    """Async Hetzner Robot API client (HTTP Basic auth, form-encoded bodies)."""

    def __init__(
        self,
        *,
        config_path: str | Path | None = None,
        user: str | None = None,
        password: str | None = None,
        base_url: str | None = None,
        request_timeout_seconds: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        manager: ContextManager | None = None,
        prompt: RobotPrompt | None = None,
    ) -> None:
        self._runtime = _runtime_settings()
        self.config: SDKConfig = load_config(config_path=config_path).data

        self.user, password = resolve_robot_credentials(
            user,
            password,
            settings=self._runtime,
            manager=manager or ContextManager(config_path),
            prompt=prompt,
        )
        self.base_url = base_url or self._runtime.fallback_robot_url
        self.request_timeout_seconds = _first(
            request_timeout_seconds,
            self._runtime.request_timeout_seconds,
            self.config.request_timeout_seconds,
        )
        self._transport = HetznerTransport(
            base_url=self.base_url,
            auth=robot_auth(self.user, password),
            timeout=self.request_timeout_seconds,
            content_type="application/x-www-form-urlencoded",
            http_client=http_client,
        )

    @cached_property
    def servers(self) -> RobotServersService:
        return RobotServersService(self)

    @cached_property
    def reset(self) -> RobotResetService:
        return RobotResetService(self)

    @cached_property
    def boot(self) -> RobotBootService:
        return RobotBootService(self)

    @cached_property
    def ips(self) -> RobotIPsService:
        return RobotIPsService(self)

    @cached_property
    def subnets(self) -> RobotSubnetsService:
        return RobotSubnetsService(self)

    @cached_property
    def failover(self) -> FailoverService:
        return FailoverService(self)

    @cached_property
    def rdns(self) -> RdnsService:
        return RdnsService(self)

    @cached_property
    def keys(self) -> RobotKeysService:
        return RobotKeysService(self)

    @cached_property
    def firewall(self) -> RobotFirewallService:
        return RobotFirewallService(self)

    @cached_property
    def vswitch(self) -> VSwitchService:
        return VSwitchService(self)

    @cached_property
    def storagebox(self) -> StorageBoxService:
        return StorageBoxService(self)

    @cached_property
    def traffic(self) -> TrafficService:
        return TrafficService(self)

    @cached_property
    def wol(self) -> WolService:
        return WolService(self)

    @cached_property
    def ordering(self) -> OrderingService:
        return OrderingService(self)

    async def __aenter__(self) -> AsyncRobotClient:
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        form: FormData | None = None,
    ) -> Any:
        return await self._transport.request_json(
            method,
            path,
            params=params,
            form_data=encode_form(form) if form else None,
        )

    async def _request_form(self, method: str, path: str, *, form: FormData | None = None) -> Any:
        return await self.request_json(method, path, form=form)


class AsyncAuctionClient:
    """Client for the public Server Auction feed."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        request_timeout_seconds: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._runtime = _runtime_settings()
        self.base_url = base_url or self._runtime.fallback_auction_url
        self._transport = HetznerTransport(
            base_url=self.base_url,
            timeout=_first(request_timeout_seconds, self._runtime.request_timeout_seconds, DEFAULT_REQUEST_TIMEOUT),
            http_client=http_client,
        )

    @cached_property
    def auction(self) -> AuctionService:
        return AuctionService(self)

    async def __aenter__(self) -> AsyncAuctionClient:
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _request_json(self, method: str, path: str) -> Any:
        return await self._transport.request_json(method, path)


@asynccontextmanager
async def connect(*args: Any, **kwargs: Any):
    client = AsyncCloudClient(*args, **kwargs)
    try:
        yield client
    finally:
        await client.aclose()
