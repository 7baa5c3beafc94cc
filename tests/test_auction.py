from __future__ import annotations

from typing import Any

import httpx
import pytest

from hetzner_cli.client import AsyncAuctionClient
from hetzner_cli.errors import APIError
from hetzner_cli.models.auction import AuctionFilter, AuctionServer
from hetzner_cli.services.auction import filter_servers, sort_servers

BASE = "https://auction.example/data"


def _offer(offer_id: int, **overrides: Any) -> dict[str, Any]:
    offer: dict[str, Any] = {
        "id": offer_id,
        "cpu": "Intel Core i7-6700",
        "cpu_count": 1,
        "ram_size": 64,
        "price": 40.0,
        "setup_price": 0.0,
        "hourly_price": 0.0641,
        "datacenter": "FSN1-DC14",
        "bandwidth": 1000,
        "hdd_count": 2,
        "serverDiskData": {"nvme": [], "sata": [512, 512], "hdd": [], "general": []},
        "is_ecc": False,
        "is_highio": False,
        "specials": [],
        "description": ["Intel Core i7-6700", "2x SSD SATA 512 GB"],
        "fixed_price": False,
        "next_reduce": 3600,
    }
    offer.update(overrides)
    return offer


def _servers(*offers: dict[str, Any]) -> list[AuctionServer]:
    return [AuctionServer.model_validate(offer) for offer in offers]


SAMPLE = _servers(
    _offer(1, price=55.0, ram_size=128, is_ecc=True, cpu="AMD Ryzen 9 5950X", datacenter="HEL1-DC7"),
    _offer(2, price=32.5, specials=["GPU"], serverDiskData={"nvme": [1024, 1024]}),
    _offer(3, price=40.0, hdd_count=4, serverDiskData={"hdd": [4000, 4000, 4000, 4000]}, specials=["iNIC"]),
    _offer(4, price=40.0, fixed_price=True, setup_price=79.0, description=["Dell PowerEdge", "ECC"]),
)


def _ids(servers: list[AuctionServer]) -> list[int]:
    return [server.id for server in servers]


def test_no_filters_keeps_everything_in_order() -> None:
    assert _ids(filter_servers(SAMPLE, AuctionFilter())) == [1, 2, 3, 4]


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        (AuctionFilter(max_price=40), [2, 3, 4]),
        (AuctionFilter(min_ram=100), [1]),
        (AuctionFilter(cpu="ryzen"), [1]),
        (AuctionFilter(datacenter="fsn1"), [2, 3, 4]),
        (AuctionFilter(disk_type="nvme"), [2]),
        (AuctionFilter(min_disk_size=10000), [3]),
        (AuctionFilter(min_disk_count=3), [3]),
        (AuctionFilter(ecc=True), [1]),
        (AuctionFilter(gpu=True), [2]),
        (AuctionFilter(gpu=False, inic=False), [1, 4]),
        (AuctionFilter(fixed_price=True), [4]),
        (AuctionFilter(max_setup_price=10), [1, 2, 3]),
        (AuctionFilter(text="poweredge"), [4]),
    ],
)
def test_filters(filters: AuctionFilter, expected: list[int]) -> None:
    assert _ids(filter_servers(SAMPLE, filters)) == expected


def test_sort_is_stable_and_reversible() -> None:
    ascending = sort_servers(SAMPLE, "price")
    assert _ids(ascending) == [2, 3, 4, 1]

    descending = sort_servers(SAMPLE, "price", descending=True)
    assert _ids(descending) == [1, 4, 3, 2]


def test_unknown_sort_field_falls_back_to_price() -> None:
    assert _ids(sort_servers(SAMPLE, "nonsense")) == [2, 3, 4, 1]


def test_sort_by_ram() -> None:
    assert _ids(sort_servers(SAMPLE, "ram", descending=True))[0] == 1


@pytest.mark.asyncio
async def test_fetch_reads_currency_feed() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"server": [_offer(10), _offer(11)], "serverCount": 2})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncAuctionClient(base_url=BASE, http_client=http_client) as client:
            response = await client.auction.fetch("USD")

    assert [request.url.path for request in seen] == ["/data/live_data_sb_USD.json"]
    assert "Authorization" not in seen[0].headers
    assert _ids(response.server) == [10, 11]


@pytest.mark.asyncio
async def test_fetch_failure_names_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        async with AsyncAuctionClient(base_url=BASE, http_client=http_client) as client:
            with pytest.raises(APIError) as info:
                await client.auction.fetch()

    assert str(info.value) == "Failed to fetch auction data: HTTP 502"
    assert info.value.status_code == 502
