from __future__ import annotations

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from hetzner_cli.client import AsyncRobotClient
from hetzner_cli.errors import APIError, AuthError, ResponseError
from hetzner_cli.services.robot import firewall_rule_form

BASE = "https://robot.example"


def _basic(user: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{user}:{password}".encode()).decode()


@pytest.mark.asyncio
async def test_list_servers_unwraps_each_envelope() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"server": {"server_number": 321, "server_name": "db1", "server_ip": "192.0.2.10"}},
                {"server": {"server_number": 421, "server_name": "db2", "server_ip": "192.0.2.11"}},
            ],
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="ws-user", password="ws-pass", base_url=BASE, http_client=http_client) as client:
            servers = await client.servers.list()

    assert [server.server_number for server in servers] == [321, 421]
    assert seen[0].url.path == "/server"
    assert seen[0].headers["Authorization"] == _basic("ws-user", "ws-pass")


@pytest.mark.asyncio
async def test_form_body_is_urlencoded() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"rescue": {"server_number": 321, "active": True, "password": "rescue-pw", "os": "linux"}},
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="u", password="p", base_url=BASE, http_client=http_client) as client:
            rescue = await client.boot.activate_rescue(321, os="linux", authorized_keys=["aa:bb", "cc:dd"])

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/boot/321/rescue"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.content.decode()) == {"os": ["linux"], "authorized_key[]": ["aa:bb", "cc:dd"]}
    assert rescue.active is True
    assert rescue.password == "rescue-pw"


@pytest.mark.asyncio
async def test_reset_sends_type() -> None:
    bodies: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content.decode())
        return httpx.Response(200, json={"reset": {"server_number": 321, "type": "hw"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="u", password="p", base_url=BASE, http_client=http_client) as client:
            reset = await client.reset.execute(321, "hw")

    assert bodies == ["type=hw"]
    assert reset.type == "hw"


@pytest.mark.asyncio
async def test_vswitch_detail_without_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": 4321, "name": "backend", "vlan": 4000, "cancelled": False})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="u", password="p", base_url=BASE, http_client=http_client) as client:
            vswitch = await client.vswitch.get(4321)

    assert vswitch.name == "backend"
    assert vswitch.vlan == 4000


@pytest.mark.asyncio
async def test_robot_error_body_is_normalized() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"status": 404, "code": "SERVER_NOT_FOUND", "message": "server not found"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="u", password="p", base_url=BASE, http_client=http_client) as client:
            with pytest.raises(APIError) as info:
                await client.servers.get(999)

    assert info.value.code == "SERVER_NOT_FOUND"
    assert str(info.value) == "SERVER_NOT_FOUND: server not found"


def test_firewall_rules_flatten_to_indexed_fields() -> None:
    form = firewall_rule_form(
        [
            {"name": "ssh", "dst_port": "22", "action": "accept"},
            {"name": "drop rest", "action": "discard"},
        ]
    )

    assert form == {
        "rules[input][0][name]": "ssh",
        "rules[input][0][dst_port]": "22",
        "rules[input][0][action]": "accept",
        "rules[input][1][name]": "drop rest",
        "rules[input][1][action]": "discard",
    }


def test_missing_credentials_without_prompt_raise() -> None:
    with pytest.raises(AuthError, match="No robot credentials found"):
        AsyncRobotClient(base_url=BASE)


def test_prompt_supplies_credentials() -> None:
    calls: list[object] = []

    def prompt(store: object) -> tuple[str, str]:
        calls.append(store)
        return "prompted", "secret"

    client = AsyncRobotClient(base_url=BASE, prompt=prompt)

    assert client.user == "prompted"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_missing_envelope_key_is_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"unexpected": {"server_number": 321}}])

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncRobotClient(user="u", password="p", base_url=BASE, http_client=http_client) as client:
            with pytest.raises(ResponseError, match="unexpected RobotServer response"):
                await client.servers.list()
