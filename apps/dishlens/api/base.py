"""Shared HTTP plumbing for the DishLens API clients."""

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from apps.dishlens.config import settings
from apps.dishlens.config.settings import normalize_base_url
from apps.dishlens.exceptions import (
    DishLensAPIError,
    DishLensConnectionError,
    DishLensRateLimitError,
)

logger = logging.getLogger(__name__)

# (filename, content, content_type) as accepted by httpx multipart uploads
UploadFile = tuple[str, bytes, str]


def seg(value: object) -> str:
    """Encode one URL path segment."""
    return quote(str(value), safe="")


def parse_body(response: httpx.Response) -> Any:
    """JSON when the body parses as JSON, the raw text otherwise, None if empty."""
    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def error_message(data: Any, status_code: int) -> str:
    """Pick the most useful message out of an error response body."""
    if isinstance(data, dict) and data.get("message"):
        message = data["message"]
        if isinstance(message, list):
            return ", ".join(str(m) for m in message)
        return str(message)
    if isinstance(data, str) and data.strip():
        return data
    return f"Request failed ({status_code})"


class DishLensClient:
    """
    Base for every DishLens API surface (public, staff, kitchen, waiter,
    platform).

    Each surface is a thin wrapper: build the path, send, decode into a
    schema. Requests are never retried; pollers simply try again on their
    next tick.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root. Defaults to ``settings.API_BASE_URL``.
            token: Bearer token for staff endpoints.
            http_client: Optional HTTP client for dependency injection (testing).
            timeout: Request timeout in seconds when we create the client.
        """
        self.base_url = (
            normalize_base_url(base_url) if base_url else settings.API_BASE_URL
        )
        self.token = token
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.HTTP_TIMEOUT
        )
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DishLensClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _headers(self, auth: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        files: dict[str, UploadFile] | None = None,
        auth: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded body.

        Args:
            method: HTTP method.
            path: Path below the base URL, already segment-encoded.
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON request body.
            files: Multipart files, sent as form data.
            auth: Attach the bearer token when one is set.

        Returns:
            Parsed JSON (or text) body; None for empty responses.

        Raises:
            DishLensAPIError: On any non-2xx response.
            DishLensRateLimitError: On HTTP 429 or a rate-limit message.
            DishLensConnectionError: If the API cannot be reached.
        """
        url = f"{self.base_url}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            response = await self._client.request(
                method,
                url,
                headers=self._headers(auth),
                params=query or None,
                json=json_body,
                files=files,
            )
        except httpx.RequestError as e:
            raise DishLensConnectionError(
                f"Failed to fetch {url}. Check that the API is running and "
                f"DISHLENS_API_BASE_URL points at it: {e}",
                url=url,
            ) from e

        data = parse_body(response)
        if response.is_success:
            return data

        message = error_message(data, response.status_code)
        logger.debug("%s %s -> %s: %s", method, path, response.status_code, message)

        if response.status_code == 429 or "rate limit" in message.lower():
            retry_after = response.headers.get("Retry-After")
            raise DishLensRateLimitError(
                message,
                status_code=response.status_code,
                response_body=data,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        raise DishLensAPIError(
            message, status_code=response.status_code, response_body=data
        )

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)
