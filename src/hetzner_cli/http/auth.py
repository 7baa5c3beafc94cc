"""httpx auth flows for the Hetzner APIs."""

from __future__ import annotations

from collections.abc import Generator

import httpx


class BearerAuth(httpx.Auth):
    """Attach a static Cloud API token as a bearer credential."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


def robot_auth(user: str, password: str) -> httpx.BasicAuth:
    return httpx.BasicAuth(user, password)
