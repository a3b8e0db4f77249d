"""Base HTTP transport interface for acswrap."""

from __future__ import annotations

import abc
from typing import Any, Mapping, Optional

from ..contracts import HttpResponse, RequestOptions, WebResource
from ..errors import TransportError


class BaseHttpTransport(metaclass=abc.ABCMeta):
    """Abstract transport that performs one HTTP round trip per call."""

    async def __aenter__(self) -> "BaseHttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release network resources (no-op by default)."""
        pass

    @abc.abstractmethod
    async def send(
        self,
        web_resource: WebResource,
        request_options: RequestOptions,
        body: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> HttpResponse:
        """Send the request and return the raw response.

        Raises:
            TransportError: On network failure or when the status code differs
                from ``web_resource.ok_code``. The response, when there is
                one, is attached to the error.
        """
        raise NotImplementedError

    @staticmethod
    def check_status(web_resource: WebResource, response: HttpResponse) -> HttpResponse:
        if response.status_code != web_resource.ok_code:
            raise TransportError(
                f"Unexpected status {response.status_code} "
                f"(expected {web_resource.ok_code})",
                status_code=response.status_code,
                response=response,
            )
        return response
