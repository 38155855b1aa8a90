"""Authenticated HTTP wrapper around httpx.

Every request carries the bearer token and the browser-like headers the
API expects. Responses are always decoded as JSON and returned as-is: the
API reports failures inside the envelope, so status codes are logged but
never raised.

Examples:
    >>> with HtbClient.from_settings() as client:
    ...     envelope = client.get("machine", "list")
"""

import json
import logging
from typing import Any, Self

import httpx

from htbcli.config import Settings, get_settings
from htbcli.errors import TransportError

logger = logging.getLogger(__name__)

APP_ORIGIN = "https://app.hackthebox.com/"

BASE_HEADERS: dict[str, str] = {
    "Connection": "close",
    "Referer": APP_ORIGIN,
    "Origin": APP_ORIGIN,
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
}

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class HtbClient:
    """One httpx.Client bound to the API base URL and token."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            headers={**BASE_HEADERS, "Authorization": f"Bearer {api_key}"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> Self:
        """Build a client from the environment.

        Raises:
            MissingSettingError: If HTB_API_KEY is unset.
        """
        settings = settings or get_settings()
        return cls(
            settings.require_api_key(),
            base_url=settings.api_url,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )

    def url(self, *segments: str) -> str:
        return "/".join([self.base_url, *segments])

    def get(self, *segments: str) -> Any:
        return self._send("GET", segments)

    def post(self, *segments: str, body: dict[str, Any] | None = None) -> Any:
        content = json.dumps(body) if body is not None else None
        return self._send(
            "POST",
            segments,
            content=content,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    def _send(
        self,
        method: str,
        segments: tuple[str, ...],
        *,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        url = self.url(*segments)
        try:
            response = self._http.request(method, url, content=content, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url}: {e}") from e

        logger.debug("%s %s -> %d", method, url, response.status_code)

        try:
            return json.loads(response.content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TransportError(
                f"{method} {url}: invalid JSON body (HTTP {response.status_code})"
            ) from e

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
