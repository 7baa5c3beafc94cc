from hetzner_cli.models.actions import Action, ActionErrorDetail, ActionResource, Pagination, PaginationMeta
from hetzner_cli.models.auction import (
    AuctionDiskData,
    AuctionFilter,
    AuctionIpPrice,
    AuctionResponse,
    AuctionServer,
)
from hetzner_cli.models.cloud import (
    ISO,
    Certificate,
    Datacenter,
    Firewall,
    FloatingIP,
    Image,
    LoadBalancer,
    LoadBalancerType,
    Location,
    Network,
    PlacementGroup,
    PrimaryIP,
    Server,
    ServerCreateResult,
    ServerType,
    SSHKey,
    Volume,
)
from hetzner_cli.models.common import DnsPtr, HetznerModel, IdRef, LocationPrice, Price, Protection
from hetzner_cli.models.robot import (
    BootConfig,
    BootOption,
    Cancellation,
    Failover,
    FirewallTemplate,
    Mac,
    MarketProduct,
    Rdns,
    Reset,
    RobotFirewall,
    RobotFirewallRule,
    RobotIP,
    RobotServer,
    RobotSSHKey,
    RobotSubnet,
    ServerProduct,
    StorageBox,
    StorageBoxSnapshot,
    StorageBoxSnapshotPlan,
    StorageBoxSubaccount,
    Traffic,
    Transaction,
    VSwitch,
    Wol,
)

__all__ = [
    "Action",
    "ActionErrorDetail",
    "ActionResource",
    "AuctionDiskData",
    "AuctionFilter",
    "AuctionIpPrice",
    "AuctionResponse",
    "AuctionServer",
    "BootConfig",
    "BootOption",
    "Cancellation",
    "Certificate",
    "Datacenter",
    "DnsPtr",
    "Failover",
    "Firewall",
    "FirewallTemplate",
    "FloatingIP",
    "HetznerModel",
    "ISO",
    "IdRef",
    "Image",
    "LoadBalancer",
    "LoadBalancerType",
    "Location",
    "LocationPrice",
    "Mac",
    "MarketProduct",
    "Network",
    "Pagination",
    "PaginationMeta",
    "PlacementGroup",
    "Price",
    "PrimaryIP",
    "Protection",
    "Rdns",
    "Reset",
    "RobotFirewall",
    "RobotFirewallRule",
    "RobotIP",
    "RobotSSHKey",
    "RobotServer",
    "RobotSubnet",
    "SSHKey",
    "Server",
    "ServerCreateResult",
    "ServerProduct",
    "ServerType",
    "StorageBox",
    "StorageBoxSnapshot",
    "StorageBoxSnapshotPlan",
    "StorageBoxSubaccount",
    "Traffic",
    "Transaction",
    "VSwitch",
    "Volume",
    "Wol",
]
