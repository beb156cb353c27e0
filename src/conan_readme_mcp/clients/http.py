"""httpx plumbing shared by the registry clients.

Status codes are turned into typed errors here, at the point of failure, so
nothing downstream has to inspect messages to decide what went wrong.
"""

from __future__ import annotations

import logging
import time
import typing as t

import httpx

from conan_readme_mcp.errors import (
    NetworkError,
    PackageReadmeError,
    RateLimitError,
    ServiceUnavailableError,
    UpstreamError,
)
from conan_readme_mcp.monitoring.metrics import upstream_latency_seconds
from conan_readme_mcp.utils.config import HttpConfig

logger = logging.getLogger(__name__)


def parse_retry_after(value: t.Optional[str]) -> t.Optional[float]:
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        # HTTP-date form is not worth honouring here
        return None


def raise_for_status(response: httpx.Response, context: str) -> None:
    """Raise the typed error for a non-2xx ``response``. 404 is left to the caller."""
    status = response.status_code
    if response.is_success:
        return
    if status == 429:
        raise RateLimitError(context, parse_retry_after(response.headers.get("retry-after")))
    if status >= 500:
        raise ServiceUnavailableError(
            f"Service unavailable for {context} (HTTP {status})", status_code=status
        )
    raise UpstreamError(f"HTTP {status} from {context}: {response.reason_phrase}", status_code=status)


class RegistryHttpClient:
    """Base for the upstream API clients: owns one :class:`httpx.AsyncClient`.

    Subclasses set ``service`` and ``accept``. Pass ``transport`` to route
    requests elsewhere (tests use :class:`httpx.MockTransport`).
    """

    service = "upstream"
    accept = "application/json"

    def __init__(
        self,
        config: t.Optional[HttpConfig] = None,
        *,
        client: t.Optional[httpx.AsyncClient] = None,
        transport: t.Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or HttpConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent, "Accept": self.accept},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, context: str) -> httpx.Response:
        start = time.perf_counter()
        try:
            return await self._client.request(method, url)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request timeout in {context}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Connection failed in {context}: {exc}") from exc
        finally:
            upstream_latency_seconds.observe(time.perf_counter() - start, service=self.service)

    async def _get_json(self, url: str, context: str) -> t.Any:
        response = await self._request("GET", url, context)
        raise_for_status(response, context)
        try:
            return response.json()
        except ValueError as exc:
            raise PackageReadmeError(f"Invalid JSON from {context}") from exc
