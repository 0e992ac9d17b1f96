"""HTTP transport used to dispatch resolved requests."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, Tuple

import httpx

from .errors import NetworkError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Sends one request and returns ``(status_code, body_text)``."""

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any] = None,
    ) -> Tuple[int, str]:  # pragma: no cover - protocol definition
        ...


class HttpTransport:
    """Synchronous transport on top of ``httpx.Client``."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any] = None,
    ) -> Tuple[int, str]:
        logger.debug("dispatching %s %s", method, url)
        kwargs: Dict[str, Any] = {"headers": headers}
        if body is not None:
            kwargs["json"] = body
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to send request: {exc}") from exc
        logger.debug("received %s from %s", response.status_code, url)
        return response.status_code, response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["HttpTransport", "Transport"]
