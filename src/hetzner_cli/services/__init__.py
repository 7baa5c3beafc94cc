from hetzner_cli.services.actions import ActionsService
from hetzner_cli.services.auction import AuctionService, filter_servers, sort_servers
from hetzner_cli.services.catalog import (
    DatacentersService,
    ISOsService,
    LoadBalancerTypesService,
    LocationsService,
    ServerTypesService,
)
from hetzner_cli.services.networking import (
    FirewallsService,
    FloatingIPsService,
    LoadBalancersService,
    NetworksService,
    PrimaryIPsService,
)
from hetzner_cli.services.robot import (
    FailoverService,
    OrderingService,
    RdnsService,
    RobotBootService,
    RobotFirewallService,
    RobotIPsService,
    RobotKeysService,
    RobotResetService,
    RobotServersService,
    RobotSubnetsService,
    StorageBoxService,
    TrafficService,
    VSwitchService,
    WolService,
)
from hetzner_cli.services.security import CertificatesService, PlacementGroupsService, SSHKeysService
from hetzner_cli.services.servers import ServersService
from hetzner_cli.services.storage import ImagesService, VolumesService

__all__ = [
    "ActionsService",
    "AuctionService",
    "CertificatesService",
    "DatacentersService",
    "FailoverService",
    "FirewallsService",
    "FloatingIPsService",
    "ISOsService",
    "ImagesService",
    "LoadBalancerTypesService",
    "LoadBalancersService",
    "LocationsService",
    "NetworksService",
    "OrderingService",
    "PlacementGroupsService",
    "PrimaryIPsService",
    "RdnsService",
    "RobotBootService",
    "RobotFirewallService",
    "RobotIPsService",
    "RobotKeysService",
    "RobotResetService",
    "RobotServersService",
    "RobotSubnetsService",
    "SSHKeysService",
    "ServerTypesService",
    "ServersService",
    "StorageBoxService",
    "TrafficService",
    "VSwitchService",
    "VolumesService",
    "WolService",
    "filter_servers",
    "sort_servers",
]
