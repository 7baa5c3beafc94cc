from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from hetzner_cli.models.common import HetznerModel, Price

ResetType = Literal["sw", "hw", "man", "power", "power_long"]


class ServerSubnet(HetznerModel):
    ip: str
    mask: str


class RobotServer(HetznerModel):
    server_ip: str | None = None
    server_ipv6_net: str | None = None
    server_number: int
    server_name: str | None = None
    product: str | None = None
    dc: str | None = None
    traffic: str | None = None
    status: str | None = None
    cancelled: bool = False
    paid_until: str | None = None
    ip: list[str] = Field(default_factory=list)
    subnet: list[ServerSubnet] | None = None

    # Only present on the detail endpoint.
    reset: bool | None = None
    rescue: bool | None = None
    vnc: bool | None = None
    windows: bool | None = None
    plesk: bool | None = None
    cpanel: bool | None = None
    wol: bool | None = None
    hot_swap: bool | None = None


class Cancellation(HetznerModel):
    server_ip: str | None = None
    server_number: int
    server_name: str | None = None
    earliest_cancellation_date: str | None = None
    cancelled: bool = False
    cancellation_date: str | None = None
    cancellation_reason: list[str] | str | None = None


class Reset(HetznerModel):
    server_ip: str | None = None
    server_ipv6_net: str | None = None
    server_number: int
    type: list[str] | str = Field(default_factory=list)
    operating_status: str | None = None


class BootOption(HetznerModel):
    """Shared shape of the rescue/linux/vnc/windows boot configurations."""

    server_ip: str | None = None
    server_ipv6_net: str | None = None
    server_number: int
    active: bool = False
    password: str | None = None
    os: list[str] | str | None = None
    dist: list[str] | str | None = None
    arch: list[int] | int | None = None
    lang: list[str] | str | None = None
    authorized_key: list[Any] = Field(default_factory=list)
    host_key: list[Any] = Field(default_factory=list)


class BootConfig(HetznerModel):
    rescue: BootOption | None = None
    linux: BootOption | None = None
    vnc: BootOption | None = None
    windows: BootOption | None = None
    plesk: BootOption | None = None
    cpanel: BootOption | None = None


class RobotIP(HetznerModel):
    ip: str
    server_ip: str | None = None
    server_number: int | None = None
    locked: bool = False
    separate_mac: str | None = None
    traffic_warnings: bool = False
    traffic_hourly: int | None = None
    traffic_daily: int | None = None
    traffic_monthly: int | None = None


class RobotSubnet(HetznerModel):
    ip: str
    mask: str | int
    gateway: str | None = None
    server_ip: str | None = None
    server_number: int | None = None
    failover: bool = False
    locked: bool = False
    traffic_warnings: bool = False
    traffic_hourly: int | None = None
    traffic_daily: int | None = None
    traffic_monthly: int | None = None


class Mac(HetznerModel):
    ip: str
    mac: str | None = None


class Failover(HetznerModel):
    ip: str
    netmask: str | None = None
    server_ip: str | None = None
    server_number: int | None = None
    active_server_ip: str | None = None


class Rdns(HetznerModel):
    ip: str
    ptr: str


class RobotSSHKey(HetznerModel):
    name: str
    fingerprint: str
    type: str | None = None
    size: int | None = None
    data: str | None = None


class RobotFirewallRule(HetznerModel):
    ip_version: str | None = None
    name: str | None = None
    dst_ip: str | None = None
    dst_port: str | None = None
    src_ip: str | None = None
    src_port: str | None = None
    protocol: str | None = None
    tcp_flags: str | None = None
    action: Literal["accept", "discard"]


class RobotFirewallRules(HetznerModel):
    input: list[RobotFirewallRule] = Field(default_factory=list)
    output: list[RobotFirewallRule] | None = None


class RobotFirewall(HetznerModel):
    server_ip: str | None = None
    server_number: int | None = None
    status: str
    filter_ipv6: bool = False
    whitelist_hos: bool = False
    port: str | None = None
    rules: RobotFirewallRules = Field(default_factory=RobotFirewallRules)


class FirewallTemplate(HetznerModel):
    id: int
    name: str
    filter_ipv6: bool = False
    whitelist_hos: bool = False
    is_default: bool = False
    rules: RobotFirewallRules | None = None


class VSwitchServer(HetznerModel):
    server_ip: str | None = None
    server_ipv6_net: str | None = None
    server_number: int
    status: str | None = None


class VSwitch(HetznerModel):
    id: int
    name: str
    vlan: int
    cancelled: bool = False
    server: list[VSwitchServer] = Field(default_factory=list)
    subnet: list[dict[str, Any]] = Field(default_factory=list)
    cloud_network: list[dict[str, Any]] = Field(default_factory=list)


class StorageBox(HetznerModel):
    id: int
    login: str | None = None
    name: str | None = None
    product: str | None = None
    cancelled: bool = False
    locked: bool = False
    location: str | None = None
    linked_server: int | None = None
    paid_until: str | None = None
    disk_quota: int | None = None
    disk_usage: int | None = None
    disk_usage_data: int | None = None
    disk_usage_snapshots: int | None = None
    webdav: bool | None = None
    samba: bool | None = None
    ssh: bool | None = None
    external_reachability: bool | None = None
    zfs: bool | None = None
    server: str | None = None
    host_system: str | None = None


class StorageBoxSnapshot(HetznerModel):
    name: str
    timestamp: str | None = None
    size: int | None = None
    size_formatted: str | None = None


class StorageBoxSnapshotPlan(HetznerModel):
    status: Literal["enabled", "disabled"]
    minute: int | None = None
    hour: int | None = None
    day_of_week: int | None = None
    day_of_month: int | None = None
    max_snapshots: int | None = None


class StorageBoxSubaccount(HetznerModel):
    username: str
    accountid: str | None = None
    server: str | None = None
    homedirectory: str | None = None
    samba: bool | None = None
    ssh: bool | None = None
    external_reachability: bool | None = None
    webdav: bool | None = None
    readonly: bool | None = None
    createtime: str | None = None
    comment: str | None = None


class Traffic(HetznerModel):
    type: str
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    data: dict[str, Any] | list[Any] = Field(default_factory=dict)


class Wol(HetznerModel):
    server_ip: str | None = None
    server_ipv6_net: str | None = None
    server_number: int


class ProductPrice(HetznerModel):
    location: str | None = None
    price: Price | None = None
    price_setup: Price | None = None


class ServerProduct(HetznerModel):
    id: str
    name: str
    description: list[str] = Field(default_factory=list)
    traffic: str | None = None
    dist: list[str] = Field(default_factory=list)
    arch: list[int] = Field(default_factory=list)
    lang: list[str] = Field(default_factory=list)
    location: list[str] = Field(default_factory=list)
    prices: list[ProductPrice] = Field(default_factory=list)
    orderable_addons: list[Any] = Field(default_factory=list)


class MarketProduct(HetznerModel):
    id: int
    name: str
    description: list[str] = Field(default_factory=list)
    traffic: str | None = None
    dist: list[str] = Field(default_factory=list)
    cpu: str | None = None
    memory_size: int | None = None
    hdd_size: int | None = None
    hdd_text: str | None = None
    hdd_count: int | None = None
    datacenter: str | None = None
    price: str | None = None
    price_setup: str | None = None
    fixed_price: bool | None = None
    next_reduce: int | None = None


class Transaction(HetznerModel):
    id: str
    date: str | None = None
    status: str
    server_number: int | None = None
    server_ip: str | None = None
    authorized_key: list[Any] = Field(default_factory=list)
    host_key: list[Any] = Field(default_factory=list)
    comment: str | None = None
    product: dict[str, Any] | None = None
    addons: list[Any] = Field(default_factory=list)
