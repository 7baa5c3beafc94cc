from __future__ import annotations

from typing import Literal

from pydantic import Field

from hetzner_cli.models.common import HetznerModel

DiskType = Literal["nvme", "sata", "hdd"]


class AuctionDiskData(HetznerModel):
    nvme: list[int] = Field(default_factory=list)
    sata: list[int] = Field(default_factory=list)
    hdd: list[int] = Field(default_factory=list)
    general: list[int] = Field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(self.nvme) + sum(self.sata) + sum(self.hdd)


class AuctionIpPrice(HetznerModel):
    Monthly: float | None = None
    Hourly: float | None = None
    Amount: float | None = None


class AuctionServer(HetznerModel):
    id: int
    key: int | None = None
    name: str | None = None
    description: list[str] = Field(default_factory=list)
    information: list[str] | None = None
    cpu: str = ""
    cpu_count: int = 0
    is_highio: bool = False
    is_ecc: bool = False
    traffic: str | None = None
    bandwidth: int = 0
    ram: list[str] = Field(default_factory=list)
    ram_size: int = 0
    price: float = 0.0
    setup_price: float = 0.0
    hourly_price: float = 0.0
    hdd_arr: list[str] = Field(default_factory=list)
    hdd_hr: list[str] = Field(default_factory=list)
    hdd_size: int = 0
    hdd_count: int = 0
    serverDiskData: AuctionDiskData = Field(default_factory=AuctionDiskData)
    datacenter: str = ""
    datacenter_hr: str | None = None
    specials: list[str] = Field(default_factory=list)
    dist: list[str] = Field(default_factory=list)
    fixed_price: bool = False
    next_reduce: int = 0
    next_reduce_hr: bool | str | None = None
    next_reduce_timestamp: int | None = None
    ip_price: AuctionIpPrice | None = None
    category: str | None = None
    cat_id: int | None = None


class AuctionResponse(HetznerModel):
    server: list[AuctionServer] = Field(default_factory=list)
    serverCount: int | None = None


class AuctionFilter(HetznerModel):
    """Client-side filters for the auction listing. Unset fields match everything."""

    min_price: float | None = None
    max_price: float | None = None
    max_hourly_price: float | None = None
    min_ram: int | None = None
    max_ram: int | None = None
    cpu: str | None = None
    datacenter: str | None = None
    min_disk_size: int | None = None
    max_disk_size: int | None = None
    min_disk_count: int | None = None
    max_disk_count: int | None = None
    disk_type: DiskType | None = None
    ecc: bool | None = None
    gpu: bool | None = None
    inic: bool | None = None
    highio: bool | None = None
    specials: str | None = None
    fixed_price: bool | None = None
    max_setup_price: float | None = None
    min_cpu_count: int | None = None
    max_cpu_count: int | None = None
    min_bandwidth: int | None = None
    text: str | None = None
