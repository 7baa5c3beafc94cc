from hetzner_cli.client import (
    AsyncAuctionClient,
    AsyncCloudClient,
    AsyncRobotClient,
    AuctionClient,
    CloudClient,
    RobotClient,
    connect,
)
from hetzner_cli.config import CloudContext, ContextManager, PollingConfig, RobotCredentials, SDKConfig
from hetzner_cli.errors import (
    ActionCancelledError,
    ActionError,
    ActionFailedError,
    ActionTimeoutError,
    APIError,
    AuthError,
    ConfigError,
    HetznerError,
    RequestError,
    ResponseError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "APIError",
    "ActionCancelledError",
    "ActionError",
    "ActionFailedError",
    "ActionTimeoutError",
    "AsyncAuctionClient",
    "AsyncCloudClient",
    "AsyncRobotClient",
    "AuctionClient",
    "AuthError",
    "CloudClient",
    "CloudContext",
    "ConfigError",
    "ContextManager",
    "HetznerError",
    "PollingConfig",
    "RequestError",
    "ResponseError",
    "RobotClient",
    "RobotCredentials",
    "SDKConfig",
    "connect",
]
