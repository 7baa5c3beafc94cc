from hetzner_cli.config.keychain import KeychainStore, cloud_account
from hetzner_cli.config.loader import (
    CONFIG_PATH_ENVS,
    default_config_candidates,
    legacy_config_paths,
    load_config,
    save_config,
)
from hetzner_cli.config.manager import ContextManager
from hetzner_cli.config.models import (
    CloudContext,
    ConfigInput,
    PollingConfig,
    ResolvedConfig,
    RobotCredentials,
    SDKConfig,
)

__all__ = [
    "CONFIG_PATH_ENVS",
    "CloudContext",
    "ConfigInput",
    "ContextManager",
    "KeychainStore",
    "PollingConfig",
    "ResolvedConfig",
    "RobotCredentials",
    "SDKConfig",
    "cloud_account",
    "default_config_candidates",
    "legacy_config_paths",
    "load_config",
    "save_config",
]
