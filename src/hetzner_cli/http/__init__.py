from hetzner_cli.http.auth import BearerAuth, robot_auth
from hetzner_cli.http.pagination import list_all
from hetzner_cli.http.polling import ActionPoller
from hetzner_cli.http.transport import HetznerTransport, clean_params, encode_form, normalize_error

__all__ = [
    "ActionPoller",
    "BearerAuth",
    "HetznerTransport",
    "clean_params",
    "encode_form",
    "list_all",
    "normalize_error",
    "robot_auth",
]
