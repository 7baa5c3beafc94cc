"""Hetzner Server Auction listing: fetch plus client-side filter and sort."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Literal

from pydantic import ValidationError

from hetzner_cli.errors import APIError, ResponseError
from hetzner_cli.models.auction import AuctionFilter, AuctionResponse, AuctionServer
from hetzner_cli.services.base import ServiceBase

Currency = Literal["EUR", "USD"]

SORT_FIELDS: dict[str, Callable[[AuctionServer], Any]] = {
    "price": lambda s: s.price,
    "hourly": lambda s: s.hourly_price,
    "setup": lambda s: s.setup_price,
    "ram": lambda s: s.ram_size,
    "disk": lambda s: s.serverDiskData.total_size,
    "disk_count": lambda s: s.hdd_count,
    "cpu": lambda s: s.cpu.casefold(),
    "cpu_count": lambda s: s.cpu_count,
    "datacenter": lambda s: s.datacenter.casefold(),
    "bandwidth": lambda s: s.bandwidth,
    "next_reduce": lambda s: s.next_reduce,
}


class AuctionService(ServiceBase):
    """Public auction feed; needs no credentials."""

    async def fetch(self, currency: Currency = "EUR") -> AuctionResponse:
        try:
            data = await self._client._request_json("GET", f"/live_data_sb_{currency}.json")
        except APIError as exc:
            raise APIError(
                status_code=exc.status_code,
                status_text=exc.status_text,
                summary=f"Failed to fetch auction data: HTTP {exc.status_code}",
            ) from exc
        try:
            return AuctionResponse.model_validate(data)
        except ValidationError as exc:
            raise ResponseError(f"unexpected auction data: {exc}") from exc


def _matches(server: AuctionServer, f: AuctionFilter) -> bool:
    if f.min_price is not None and server.price < f.min_price:
        return False
    if f.max_price is not None and server.price > f.max_price:
        return False
    if f.max_hourly_price is not None and server.hourly_price > f.max_hourly_price:
        return False
    if f.min_ram is not None and server.ram_size < f.min_ram:
        return False
    if f.max_ram is not None and server.ram_size > f.max_ram:
        return False
    if f.cpu and f.cpu.lower() not in server.cpu.lower():
        return False
    if f.datacenter and f.datacenter.lower() not in server.datacenter.lower():
        return False

    disk_total = server.serverDiskData.total_size
    if f.min_disk_size is not None and disk_total < f.min_disk_size:
        return False
    if f.max_disk_size is not None and disk_total > f.max_disk_size:
        return False
    if f.min_disk_count is not None and server.hdd_count < f.min_disk_count:
        return False
    if f.max_disk_count is not None and server.hdd_count > f.max_disk_count:
        return False
    if f.disk_type and not getattr(server.serverDiskData, f.disk_type):
        return False

    if f.ecc is not None and server.is_ecc != f.ecc:
        return False
    if f.gpu is not None and ("GPU" in server.specials) != f.gpu:
        return False
    if f.inic is not None and ("iNIC" in server.specials) != f.inic:
        return False
    if f.highio is not None and server.is_highio != f.highio:
        return False
    if f.specials:
        needle = f.specials.lower()
        if not any(needle in special.lower() for special in server.specials):
            return False
    if f.fixed_price is not None and server.fixed_price != f.fixed_price:
        return False
    if f.max_setup_price is not None and server.setup_price > f.max_setup_price:
        return False
    if f.min_cpu_count is not None and server.cpu_count < f.min_cpu_count:
        return False
    if f.max_cpu_count is not None and server.cpu_count > f.max_cpu_count:
        return False
    if f.min_bandwidth is not None and server.bandwidth < f.min_bandwidth:
        return False
    if f.text and f.text.lower() not in " ".join(server.description).lower():
        return False
    return True


def filter_servers(servers: Iterable[AuctionServer], filters: AuctionFilter) -> list[AuctionServer]:
    """Keep the servers matching every set filter, preserving feed order."""

    return [server for server in servers if _matches(server, filters)]


def sort_servers(servers: Iterable[AuctionServer], field: str = "price", descending: bool = False) -> list[AuctionServer]:
    """Stable ascending sort on ``field`` (unknown fields sort by price); ``descending`` reverses the result."""

    ordered = sorted(servers, key=SORT_FIELDS.get(field, SORT_FIELDS["price"]))
    if descending:
        ordered.reverse()
    return ordered
