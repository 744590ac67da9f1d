"""Thin JSON-over-HTTP client for the storefront backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from storefront.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def error_message(self, default: str) -> str:
        if isinstance(self.body, dict) and self.body.get("error"):
            return str(self.body["error"])
        return default


class ApiClient:
    """Wraps an ``httpx.AsyncClient`` bound to the backend base URL.

    Transport failures and non-JSON bodies raise GatewayError; HTTP error
    statuses are returned to the caller, which knows what they mean.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    async def send(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        params: dict | None = None,
    ) -> ApiResponse:
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await self.client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise GatewayError(f"Could not reach the store server: {exc}") from exc

        try:
            body = response.json() if response.content else None
        except ValueError as exc:
            logger.warning(
                "%s %s returned a non-JSON body (status=%s)",
                method,
                path,
                response.status_code,
            )
            raise GatewayError(
                "The store server sent an unreadable response",
                status_code=response.status_code,
            ) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return ApiResponse(status_code=response.status_code, body=body)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
