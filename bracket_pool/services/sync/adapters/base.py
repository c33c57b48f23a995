"""
Base class for upstream provider clients.

A client wraps one provider: it owns the auth headers, issues GETs through
a shared ``httpx.AsyncClient`` and turns failures into
``UpstreamProviderError`` with the provider's body kept verbatim.

Requests are not retried. The caller (an external scheduler or a human)
re-invokes the job, which is always safe because every job write is
idempotent.
"""
from typing import Any, Dict, Optional

import httpx

from bracket_pool.core.exceptions import PayloadShapeError, UpstreamProviderError
from bracket_pool.core.logging import get_logger
from bracket_pool.core.metrics import provider_requests_total

logger = get_logger(__name__)


class ProviderClient:
    """
    Shared GET / error handling for provider clients.

    Attributes:
        provider: Short provider name used in logs, metrics and errors
        client: HTTP client (owned by the caller, closed by the caller)
        timeout: Per-request timeout in seconds
    """

    provider: str = "provider"

    def __init__(self, client: httpx.AsyncClient, timeout: float = 30.0):
        self.client = client
        self.timeout = timeout

    def headers(self) -> Dict[str, str]:
        """Auth headers sent with every request."""
        return {}

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        GET ``url`` and return the response when it is 2xx.

        Raises:
            UpstreamProviderError: Transport failure or non-2xx status
        """
        logger.debug(f"{self.provider} GET {url}", extra={"params": params})
        try:
            response = await self.client.get(
                url, params=params, headers=self.headers(), timeout=self.timeout
            )
        except httpx.RequestError as e:
            provider_requests_total.labels(self.provider, "transport_error").inc()
            logger.error(f"{self.provider} request to {url} failed: {e}")
            raise UpstreamProviderError(self.provider, None, str(e)) from e

        if response.is_error:
            provider_requests_total.labels(self.provider, "http_error").inc()
            logger.error(f"{self.provider} returned {response.status_code} for {url}")
            raise UpstreamProviderError(self.provider, response.status_code, response.text)

        provider_requests_total.labels(self.provider, "success").inc()
        return response

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Raises:
            UpstreamProviderError: Transport failure or non-2xx status
            PayloadShapeError: Body is empty or not JSON
        """
        response = await self.get(url, params)
        try:
            return response.json()
        except ValueError as e:
            raise PayloadShapeError(
                f"{self.provider} returned a body that is not JSON ({len(response.content)} bytes)"
            ) from e
