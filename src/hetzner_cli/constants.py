from __future__ import annotations

CLOUD_BASE_URL = "https://api.hetzner.cloud/v1"
ROBOT_BASE_URL = "https://robot-ws.your-server.de"
AUCTION_BASE_URL = "https://www.hetzner.com/_resources/app/data/app"

DEFAULT_CONFIG_DIR = "~/.config/hetzner-cli"
DEFAULT_CONFIG_FILE = f"{DEFAULT_CONFIG_DIR}/config.yml"
LEGACY_CONFIG_DIR = "~/.hetzner-cli"
LEGACY_CREDENTIALS_FILE = f"{LEGACY_CONFIG_DIR}/config.json"
LEGACY_CONTEXTS_FILE = f"{LEGACY_CONFIG_DIR}/cloud-contexts.json"

KEYCHAIN_SERVICE = "hetzner-cli"
KEYCHAIN_ROBOT_ACCOUNT = "robot-api"
KEYCHAIN_CLOUD_ACCOUNT_PREFIX = "cloud-token:"

DEFAULT_PER_PAGE = 50
MAX_PER_PAGE = 50
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_ACTION_TIMEOUT = 300.0
DEFAULT_REQUEST_TIMEOUT = 30.0

USER_AGENT = "hetzner-cli/0.1.0"
