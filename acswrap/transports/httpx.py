"""httpx transport for asyncio applications."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..contracts import HttpResponse, RequestOptions, WebResource
from ..errors import TransportError
from .base import BaseHttpTransport

logger = logging.getLogger(__name__)


class HttpxTransport(BaseHttpTransport):
    """Sends requests through a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, verify=verify)
        self.timeout = timeout

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(
        self,
        web_resource: WebResource,
        request_options: RequestOptions,
        body: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> HttpResponse:
        options = options or {}
        kwargs: Dict[str, Any] = {"headers": request_options.headers}
        if body is not None:
            kwargs["content"] = body
        if options.get("timeout") is not None:
            kwargs["timeout"] = options["timeout"]

        try:
            response = await self._client.request(
                request_options.method, request_options.url, **kwargs
            )
        except httpx.TimeoutException as exc:
            logger.warning("Request to %s timed out", request_options.host)
            raise TransportError(f"Request to {request_options.host} timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", request_options.host, exc)
            raise TransportError(f"Request to {request_options.host} failed: {exc}") from exc

        return self.check_status(
            web_resource,
            HttpResponse(
                status_code=response.status_code,
                headers=dict(response.headers),
                body=response.content if web_resource.raw_response else response.text,
            ),
        )
