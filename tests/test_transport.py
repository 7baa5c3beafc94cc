from __future__ import annotations

import json

import httpx
import pytest

from hetzner_cli.errors import APIError, RequestError
from hetzner_cli.http import BearerAuth, HetznerTransport, encode_form

BASE = "https://api.example/v1"


def _transport(handler, **kwargs) -> tuple[httpx.AsyncClient, HetznerTransport]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return http_client, HetznerTransport(base_url=BASE, http_client=http_client, **kwargs)


@pytest.mark.asyncio
async def test_structured_error_body_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"code": "not_found", "message": "server with ID 1 not found"}})

    http_client, transport = _transport(handler)
    async with http_client:
        with pytest.raises(APIError) as info:
            await transport.request_json("GET", "/servers/1")

    assert info.value.status_code == 404
    assert info.value.code == "not_found"
    assert info.value.structured is True
    assert str(info.value) == "not_found: server with ID 1 not found"


@pytest.mark.asyncio
async def test_error_body_without_fields_uses_defaults() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"error": {}})

    http_client, transport = _transport(handler)
    async with http_client:
        with pytest.raises(APIError) as info:
            await transport.request_json("POST", "/servers", json_data={"name": "x"})

    assert str(info.value) == "ERROR: Unknown error"


@pytest.mark.asyncio
async def test_unstructured_error_falls_back_to_status_line() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="<html>maintenance</html>")

    http_client, transport = _transport(handler)
    async with http_client:
        with pytest.raises(APIError) as info:
            await transport.request_json("GET", "/servers")

    assert info.value.structured is False
    assert str(info.value) == "HTTP 503: Service Unavailable"


@pytest.mark.asyncio
async def test_no_content_returns_empty_mapping() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    http_client, transport = _transport(handler)
    async with http_client:
        assert await transport.request_json("DELETE", "/ssh_keys/3") == {}


@pytest.mark.asyncio
async def test_unset_query_values_are_not_sent() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"servers": []})

    http_client, transport = _transport(handler)
    async with http_client:
        await transport.request_json("GET", "servers", params={"name": "web", "label_selector": None})

    assert seen[0].path == "/v1/servers"
    assert seen[0].params.get("name") == "web"
    assert "label_selector" not in seen[0].params


@pytest.mark.asyncio
async def test_bearer_auth_and_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"ssh_key": {"id": 1}})

    http_client, transport = _transport(handler, auth=BearerAuth("secret-token"))
    async with http_client:
        await transport.request_json("POST", "/ssh_keys", json_data={"name": "laptop"})

    assert seen[0].headers["Authorization"] == "Bearer secret-token"
    assert seen[0].headers["Content-Type"] == "application/json"
    assert json.loads(seen[0].content) == {"name": "laptop"}


@pytest.mark.asyncio
async def test_network_failure_is_request_error_not_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http_client, transport = _transport(handler)
    async with http_client:
        with pytest.raises(RequestError) as info:
            await transport.request_json("GET", "/servers")

    assert not isinstance(info.value, APIError)
    assert "request to https://api.example/v1/servers failed" in str(info.value)


@pytest.mark.asyncio
async def test_invalid_json_success_body_is_request_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    http_client, transport = _transport(handler)
    async with http_client:
        with pytest.raises(RequestError, match="not valid JSON"):
            await transport.request_json("GET", "/servers")


@pytest.mark.asyncio
async def test_url_for_joins_relative_paths() -> None:
    async with httpx.AsyncClient() as http_client:
        transport = HetznerTransport(base_url=BASE + "/", http_client=http_client)
        assert transport.url_for("/servers") == f"{BASE}/servers"
        assert transport.url_for("servers/1") == f"{BASE}/servers/1"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["https://other.example/steal", "http://other.example/x", "//other.example/x"])
async def test_absolute_urls_are_refused_before_sending(path: str) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    http_client, transport = _transport(handler, auth=BearerAuth("secret-token"))
    async with http_client:
        with pytest.raises(RequestError, match="absolute URL"):
            await transport.request_json("GET", path)

    assert seen == []


def test_encode_form_repeats_list_keys_and_drops_none() -> None:
    body = encode_form({"ip": ["1.2.3.4", "5.6.7.8"], "test": True, "skip": None, "name": "a b"})
    assert body == "ip%5B%5D=1.2.3.4&ip%5B%5D=5.6.7.8&test=true&name=a+b"


def test_encode_form_empty() -> None:
    assert encode_form(None) == ""
    assert encode_form({"only": None}) == ""
