"""requests transport; blocking calls run in a worker thread."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import requests

from ..contracts import HttpResponse, RequestOptions, WebResource
from ..errors import TransportError
from .base import BaseHttpTransport

logger = logging.getLogger(__name__)


class RequestsTransport(BaseHttpTransport):
    """Sends requests through a ``requests.Session``."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

    async def aclose(self) -> None:
        if self._owns_session:
            self._session.close()

    def _send_sync(
        self, request_options: RequestOptions, body: Optional[str], timeout: float
    ) -> requests.Response:
        return self._session.request(
            request_options.method,
            request_options.url,
            data=body,
            headers=request_options.headers,
            timeout=timeout,
            verify=self.verify,
        )

    async def send(
        self,
        web_resource: WebResource,
        request_options: RequestOptions,
        body: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> HttpResponse:
        options = options or {}
        timeout = options.get("timeout")
        if timeout is None:
            timeout = self.timeout

        try:
            response = await asyncio.to_thread(
                self._send_sync, request_options, body, timeout
            )
        except requests.RequestException as exc:
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
