"""HTTP transport shared by the Cloud, Robot and Auction clients."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

import httpx

from hetzner_cli.constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from hetzner_cli.errors import APIError, RequestError

logger = logging.getLogger(__name__)

QueryValue = str | int | float | bool | None
QueryParams = Mapping[str, QueryValue]


def clean_params(params: QueryParams | None) -> dict[str, str | int | float | bool]:
    """Drop unset query values so they are never sent as empty strings."""

    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


FormValue = str | int | float | bool | None
FormData = Mapping[str, FormValue | Sequence[str | int]]


def _form_scalar(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_form(data: FormData | None) -> str:
    """Encode a Robot API form body.

    ``None`` values are omitted and list values become repeated ``key[]=value``
    pairs, which is how the Robot web service expects arrays.
    """

    if not data:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{key}[]", _form_scalar(item)) for item in value)
        else:
            pairs.append((key, _form_scalar(value)))
    return urlencode(pairs)


def normalize_error(response: httpx.Response) -> APIError:
    """Map a non-success response onto a single :class:`APIError`."""

    status_text = response.reason_phrase
    try:
        decoded = response.json()
    except ValueError:
        decoded = None

    error = decoded.get("error") if isinstance(decoded, dict) else None
    if not isinstance(error, Mapping):
        return APIError(status_code=response.status_code, status_text=status_text)

    code = error.get("code")
    message = error.get("message")
    return APIError(
        status_code=response.status_code,
        status_text=status_text,
        code=str(code) if code is not None else "ERROR",
        message=str(message) if message is not None else "Unknown error",
        structured=True,
    )


class HetznerTransport:
    """Async transport that authenticates requests and normalizes failures.

    Requests are never retried: a failed call surfaces as exactly one
    :class:`APIError` (non-2xx) or :class:`RequestError` (network failure).
    """

    def __init__(
        self,
        *,
        base_url: str,
        auth: httpx.Auth | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        content_type: str = "application/json",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.content_type = content_type
        self._auth = auth
        self._owns_http_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        """Join ``path`` onto the base URL.

        Absolute URLs are refused so credentials never leave the configured API.
        """

        if "://" in path or path.startswith("//"):
            raise RequestError(f"absolute URL {path!r} is not allowed; pass a path relative to {self.base_url}")
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        json_data: Any = None,
        form_data: str | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ) -> Any:
        method_upper = method.upper()
        url = self.url_for(path)

        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": self.content_type,
        }
        if extra_headers:
            headers.update(extra_headers)

        request_kwargs: dict[str, Any] = {"params": clean_params(params) or None, "headers": headers}
        if json_data is not None:
            request_kwargs["json"] = json_data
        elif form_data is not None:
            request_kwargs["content"] = form_data

        logger.debug("%s %s params=%s", method_upper, url, request_kwargs["params"])
        try:
            response = await self._client.request(
                method_upper,
                url,
                auth=self._auth or httpx.USE_CLIENT_DEFAULT,
                **request_kwargs,
            )
        except httpx.HTTPError as exc:
            raise RequestError(f"request to {url} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method_upper, url, response.status_code)
        if not response.is_success:
            raise normalize_error(response)

        if response.status_code == 204:
            return {}

        try:
            return response.json()
        except ValueError as exc:
            raise RequestError(f"response from {url} was not valid JSON") from exc
