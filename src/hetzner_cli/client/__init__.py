"""Client entrypoints."""

from hetzner_cli.client.async_client import AsyncAuctionClient, AsyncCloudClient, AsyncRobotClient, connect
from hetzner_cli.client.sync_client import AuctionClient, CloudClient, RobotClient

__all__ = [
    "AsyncAuctionClient",
    "AsyncCloudClient",
    "AsyncRobotClient",
    "AuctionClient",
    "CloudClient",
    "RobotClient",
    "connect",
]
