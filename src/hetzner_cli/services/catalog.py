from __future__ import annotations

from hetzner_cli.models.cloud import ISO, Datacenter, LoadBalancerType, Location, ServerType
from hetzner_cli.services.base import CloudCollectionService


class DatacentersService(CloudCollectionService[Datacenter]):
    path = "/datacenters"
    list_key = "datacenters"
    item_key = "datacenter"
    model = Datacenter


class LocationsService(CloudCollectionService[Location]):
    path = "/locations"
    list_key = "locations"
    item_key = "location"
    model = Location


class ServerTypesService(CloudCollectionService[ServerType]):
    path = "/server_types"
    list_key = "server_types"
    item_key = "server_type"
    model = ServerType


class LoadBalancerTypesService(CloudCollectionService[LoadBalancerType]):
    path = "/load_balancer_types"
    list_key = "load_balancer_types"
    item_key = "load_balancer_type"
    model = LoadBalancerType


class ISOsService(CloudCollectionService[ISO]):
    path = "/isos"
    list_key = "isos"
    item_key = "iso"
    model = ISO
