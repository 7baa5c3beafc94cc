from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from hetzner_cli.client import AsyncCloudClient, CloudClient, connect
from hetzner_cli.errors import APIError, AuthError, ConfigError, ResponseError

BASE = "https://api.example/v1"


def _server(server_id: int, name: str = "web") -> dict[str, Any]:
    return {"id": server_id, "name": f"{name}-{server_id}", "status": "running"}


def _action(action_id: int, status: str = "running", command: str = "start_server") -> dict[str, Any]:
    return {"id": action_id, "command": command, "status": status, "progress": 100 if status == "success" else 0}


@pytest.mark.asyncio
async def test_list_servers_follows_pages_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        page = int(request.url.params["page"])
        if page == 1:
            return httpx.Response(
                200,
                json={
                    "servers": [_server(i) for i in range(1, 51)],
                    "meta": {"pagination": {"page": 1, "next_page": 2}},
                },
            )
        return httpx.Response(
            200,
            json={"servers": [_server(i) for i in range(51, 56)], "meta": {"pagination": {"page": 2, "next_page": None}}},
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="cloud-token", base_url=BASE, http_client=http_client) as client:
            servers = await client.servers.list(label_selector="env=prod")

    assert [server.id for server in servers] == list(range(1, 56))
    assert len(seen) == 2
    assert all(request.headers["Authorization"] == "Bearer cloud-token" for request in seen)
    assert seen[0].url.params["label_selector"] == "env=prod"
    assert seen[0].url.params["per_page"] == "50"


@pytest.mark.asyncio
async def test_get_server_unwraps_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/servers/42"
        return httpx.Response(200, json={"server": _server(42)})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = AsyncCloudClient(token="t", base_url=BASE, http_client=http_client)
        server = await client.servers.get(42)
        await client.aclose()

    assert server.name == "web-42"
    assert server.status == "running"


@pytest.mark.asyncio
async def test_create_server_omits_unset_fields() -> None:
    bodies: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            201,
            json={
                "server": _server(7),
                "action": _action(100, command="create_server"),
                "next_actions": [_action(101)],
                "root_password": "hunter2",
            },
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="t", base_url=BASE, http_client=http_client) as client:
            result = await client.servers.create(
                name="web-7",
                server_type="cx22",
                image="ubuntu-24.04",
                ssh_keys=["laptop"],
                labels={"env": "dev"},
                firewalls=[5],
            )

    assert bodies == [
        {
            "name": "web-7",
            "server_type": "cx22",
            "image": "ubuntu-24.04",
            "ssh_keys": ["laptop"],
            "labels": {"env": "dev"},
            "firewalls": [{"firewall": 5}],
        }
    ]
    assert result.action is not None and result.action.id == 100
    assert [action.id for action in result.next_actions] == [101]
    assert result.root_password == "hunter2"


@pytest.mark.asyncio
async def test_server_action_posts_to_actions_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"action": _action(9, command="reboot_server")})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="t", base_url=BASE, http_client=http_client) as client:
            action = await client.servers.reboot(3)

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/servers/3/actions/reboot"
    assert action.command == "reboot_server"


@pytest.mark.asyncio
async def test_delete_without_action_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="t", base_url=BASE, http_client=http_client) as client:
            assert await client.ssh_keys.delete(12) is None


@pytest.mark.asyncio
async def test_wait_for_action_polls_until_success() -> None:
    statuses = iter(["running", "success"])

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/actions/55"
        return httpx.Response(200, json={"action": _action(55, status=next(statuses))})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(
            token="t",
            base_url=BASE,
            http_client=http_client,
            poll_interval_seconds=0.01,
        ) as client:
            action = await client.actions.wait(55, timeout=5)

    assert action.status == "success"


@pytest.mark.asyncio
async def test_api_error_surfaces_from_service() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"code": "forbidden", "message": "insufficient permissions"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="t", base_url=BASE, http_client=http_client) as client:
            with pytest.raises(APIError, match="forbidden: insufficient permissions"):
                await client.volumes.get(1)


def test_missing_token_raises_auth_error() -> None:
    with pytest.raises(AuthError, match="No cloud token found"):
        AsyncCloudClient(base_url=BASE)


def test_token_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HCLOUD_TOKEN", "from-env")
    client = AsyncCloudClient(base_url=BASE)
    assert client.token == "from-env"
    asyncio.run(client.aclose())


def test_sync_client_wraps_services() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"locations": [{"id": 1, "name": "fsn1"}]})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    with CloudClient(token="t", base_url=BASE, http_client=http_client) as client:
        locations = client.locations.list()
        assert [location.name for location in locations] == ["fsn1"]
        assert client.aio.token == "t"


@pytest.mark.asyncio
async def test_sync_client_refuses_running_loop() -> None:
    async with httpx.AsyncClient() as http_client:
        client = CloudClient(token="t", base_url=BASE, http_client=http_client)
        with pytest.raises(RuntimeError, match="active event loop"):
            client.request_json("GET", "/servers")


@pytest.mark.asyncio
async def test_connect_closes_owned_transport() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"action": _action(3, status="success")})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with connect(token="t", base_url=BASE, http_client=http_client) as client:
            action = await client.actions.get(3)

    assert action.status == "success"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"servers": []}, {"server": "not an object"}, []])
async def test_unexpected_body_shape_is_response_error(body: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncCloudClient(token="t", base_url=BASE, http_client=http_client) as client:
            with pytest.raises(ResponseError, match="unexpected Server response"):
                await client.servers.get(1)


@pytest.mark.parametrize("per_page", [0, 51])
def test_per_page_argument_outside_bounds_is_config_error(per_page: int) -> None:
    with pytest.raises(ConfigError, match="per_page must be between 1 and 50"):
        AsyncCloudClient(token="t", base_url=BASE, per_page=per_page)


def test_per_page_environment_outside_bounds_is_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HETZNER_PER_PAGE", "500")
    with pytest.raises(ConfigError, match="Invalid HETZNER_"):
        AsyncCloudClient(token="t", base_url=BASE)


def test_per_page_environment_within_bounds_is_used(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HETZNER_PER_PAGE", "25")
    client = AsyncCloudClient(token="t", base_url=BASE)
    assert client.per_page == 25
    asyncio.run(client.aclose())
