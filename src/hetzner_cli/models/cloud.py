from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from hetzner_cli.models.actions import Action
from hetzner_cli.models.common import DnsPtr, HetznerModel, IdRef, LocationPrice, Protection


class Deprecation(HetznerModel):
    announced: datetime | None = None
    unavailable_after: datetime | None = None


class Location(HetznerModel):
    id: int
    name: str
    description: str | None = None
    country: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    network_zone: str | None = None


class DatacenterServerTypes(HetznerModel):
    supported: list[int] = Field(default_factory=list)
    available: list[int] = Field(default_factory=list)
    available_for_migration: list[int] = Field(default_factory=list)


class Datacenter(HetznerModel):
    id: int
    name: str
    description: str | None = None
    location: Location | None = None
    server_types: DatacenterServerTypes | None = None


class ServerType(HetznerModel):
    id: int
    name: str
    description: str | None = None
    cores: int | None = None
    memory: float | None = None
    disk: int | None = None
    storage_type: str | None = None
    cpu_type: str | None = None
    architecture: str | None = None
    deprecated: bool | None = None
    deprecation: Deprecation | None = None
    prices: list[LocationPrice] = Field(default_factory=list)


class LoadBalancerType(HetznerModel):
    id: int
    name: str
    description: str | None = None
    max_connections: int | None = None
    max_services: int | None = None
    max_targets: int | None = None
    max_assigned_certificates: int | None = None
    deprecated: str | None = None
    prices: list[LocationPrice] = Field(default_factory=list)


class ISO(HetznerModel):
    id: int
    name: str | None = None
    description: str | None = None
    type: str | None = None
    architecture: str | None = None
    deprecation: Deprecation | None = None


class ImageCreatedFrom(HetznerModel):
    id: int
    name: str


class Image(HetznerModel):
    id: int
    type: str
    status: str | None = None
    name: str | None = None
    description: str | None = None
    image_size: float | None = None
    disk_size: float | None = None
    created: datetime | None = None
    created_from: ImageCreatedFrom | None = None
    bound_to: int | None = None
    os_flavor: str | None = None
    os_version: str | None = None
    architecture: str | None = None
    rapid_deploy: bool | None = None
    protection: Protection = Field(default_factory=Protection)
    deprecated: datetime | None = None
    deleted: datetime | None = None
    labels: dict[str, str] = Field(default_factory=dict)


class SSHKey(HetznerModel):
    id: int
    name: str
    fingerprint: str | None = None
    public_key: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    created: datetime | None = None


class ServerIPv4(HetznerModel):
    ip: str
    dns_ptr: str | None = None
    blocked: bool = False


class ServerIPv6(HetznerModel):
    ip: str
    dns_ptr: list[DnsPtr] = Field(default_factory=list)
    blocked: bool = False


class ServerFirewallRef(HetznerModel):
    id: int
    status: str | None = None


class ServerPublicNet(HetznerModel):
    ipv4: ServerIPv4 | None = None
    ipv6: ServerIPv6 | None = None
    floating_ips: list[int] = Field(default_factory=list)
    firewalls: list[ServerFirewallRef] = Field(default_factory=list)


class ServerPrivateNet(HetznerModel):
    network: int
    ip: str | None = None
    alias_ips: list[str] = Field(default_factory=list)
    mac_address: str | None = None


class PlacementGroupRef(HetznerModel):
    id: int
    name: str | None = None
    type: str | None = None


class Server(HetznerModel):
    id: int
    name: str
    status: str
    public_net: ServerPublicNet = Field(default_factory=ServerPublicNet)
    private_net: list[ServerPrivateNet] = Field(default_factory=list)
    server_type: ServerType | None = None
    datacenter: Datacenter | None = None
    image: Image | None = None
    iso: ISO | None = None
    rescue_enabled: bool = False
    locked: bool = False
    backup_window: str | None = None
    outgoing_traffic: int | None = None
    ingoing_traffic: int | None = None
    included_traffic: int | None = None
    protection: Protection = Field(default_factory=Protection)
    labels: dict[str, str] = Field(default_factory=dict)
    volumes: list[int] = Field(default_factory=list)
    load_balancers: list[int] = Field(default_factory=list)
    primary_disk_size: int | None = None
    created: datetime | None = None
    placement_group: PlacementGroupRef | None = None


class NetworkSubnet(HetznerModel):
    type: str
    ip_range: str | None = None
    network_zone: str
    gateway: str | None = None
    vswitch_id: int | None = None


class NetworkRoute(HetznerModel):
    destination: str
    gateway: str


class Network(HetznerModel):
    id: int
    name: str
    ip_range: str
    subnets: list[NetworkSubnet] = Field(default_factory=list)
    routes: list[NetworkRoute] = Field(default_factory=list)
    servers: list[int] = Field(default_factory=list)
    load_balancers: list[int] = Field(default_factory=list)
    protection: Protection = Field(default_factory=Protection)
    labels: dict[str, str] = Field(default_factory=dict)
    created: datetime | None = None
    expose_routes_to_vswitch: bool = False


class LabelSelector(HetznerModel):
    selector: str


class FirewallRule(HetznerModel):
    direction: str
    protocol: str
    port: str | None = None
    source_ips: list[str] = Field(default_factory=list)
    destination_ips: list[str] = Field(default_factory=list)
    description: str | None = None


class FirewallResource(HetznerModel):
    type: str
    server: IdRef | None = None
    label_selector: LabelSelector | None = None


class Firewall(HetznerModel):
    id: int
    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    rules: list[FirewallRule] = Field(default_factory=list)
    applied_to: list[FirewallResource] = Field(default_factory=list)
    created: datetime | None = None


class FloatingIP(HetznerModel):
    id: int
    name: str | None = None
    description: str | None = None
    ip: str
    type: str
    server: int | None = None
    dns_ptr: list[DnsPtr] = Field(default_factory=list)
    home_location: Location | None = None
    blocked: bool = False
    protection: Protection = Field(default_factory=Protection)
    labels: dict[str, str] = Field(default_factory=dict)
    created: datetime | None = None


class PrimaryIP(HetznerModel):
    id: int
    name: str | None = None
    ip: str
    type: str
    assignee_id: int | None = None
    assignee_type: str | None = None
    auto_delete: bool = False
    blocked: bool = False
    datacenter: Datacenter | None = None
    dns_ptr: list[DnsPtr] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    protection: Protection = Field(default_factory=Protection)
    created: datetime | None = None


class Volume(HetznerModel):
    id: int
    name: str
    server: int | None = None
    status: str | None = None
    location: Location | None = None
    size: int
    linux_device: str | None = None
    protection: Protection = Field(default_factory=Protection)
    labels: dict[str, str] = Field(default_factory=dict)
    created: datetime | None = None
    format: str | None = None


class LoadBalancerTarget(HetznerModel):
    type: str
    server: IdRef | None = None
    label_selector: LabelSelector | None = None
    ip: dict[str, str] | None = None
    health_status: list[dict[str, Any]] = Field(default_factory=list)
    use_private_ip: bool = False


class LoadBalancerService(HetznerModel):
    protocol: str
    listen_port: int
    destination_port: int
    proxyprotocol: bool = False
    health_check: dict[str, Any] | None = None
    http: dict[str, Any] | None = None


class LoadBalancerAlgorithm(HetznerModel):
    type: str


class LoadBalancer(HetznerModel):
    id: int
    name: str
    public_net: dict[str, Any] = Field(default_factory=dict)
    private_net: list[dict[str, Any]] = Field(default_factory=list)
    location: Location | None = None
    load_balancer_type: LoadBalancerType | None = None
    protection: Protection = Field(default_factory=Protection)
    labels: dict[str, str] = Field(default_factory=dict)
    targets: list[LoadBalancerTarget] = Field(default_factory=list)
    services: list[LoadBalancerService] = Field(default_factory=list)
    algorithm: LoadBalancerAlgorithm | None = None
    outgoing_traffic: int | None = None
    ingoing_traffic: int | None = None
    included_traffic: int | None = None
    created: datetime | None = None


class CertificateStatus(HetznerModel):
    issuance: str | None = None
    renewal: str | None = None
    error: dict[str, Any] | None = None


class Certificate(HetznerModel):
    id: int
    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    type: str | None = None
    certificate: str | None = None
    created: datetime | None = None
    not_valid_before: datetime | None = None
    not_valid_after: datetime | None = None
    domain_names: list[str] = Field(default_factory=list)
    fingerprint: str | None = None
    status: CertificateStatus | None = None
    used_by: list[dict[str, Any]] = Field(default_factory=list)


class PlacementGroup(HetznerModel):
    id: int
    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    type: str
    servers: list[int] = Field(default_factory=list)
    created: datetime | None = None


class ServerCreateResult(HetznerModel):
    server: Server
    action: Action | None = None
    next_actions: list[Action] = Field(default_factory=list)
    root_password: str | None = None
