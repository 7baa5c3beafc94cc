from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HetznerModel(BaseModel):
    """Base model with permissive extra handling for upstream compatibility."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Protection(HetznerModel):
    delete: bool = False
    rebuild: bool | None = None


class IdRef(HetznerModel):
    id: int


class DnsPtr(HetznerModel):
    ip: str
    dns_ptr: str | None = None


class Price(HetznerModel):
    net: str
    gross: str


class LocationPrice(HetznerModel):
    location: str
    price_hourly: Price | None = None
    price_monthly: Price | None = None
    included_traffic: int | None = None
