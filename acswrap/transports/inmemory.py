"""In-memory transport for testing."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, List, Mapping, Optional, Tuple, Union

from ..contracts import HttpResponse, RequestOptions, WebResource
from .base import BaseHttpTransport

Outcome = Union[HttpResponse, BaseException]
SentRequest = Tuple[WebResource, RequestOptions, Optional[str], Mapping[str, Any]]


class InMemoryTransport(BaseHttpTransport):
    """Replays scripted responses and records what was sent."""

    def __init__(self, *outcomes: Outcome) -> None:
        self._outcomes: Deque[Outcome] = deque(outcomes)
        self.sent: List[SentRequest] = []

    def queue(self, outcome: Outcome) -> None:
        self._outcomes.append(outcome)

    async def send(
        self,
        web_resource: WebResource,
        request_options: RequestOptions,
        body: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> HttpResponse:
        """Return (or raise) the next scripted outcome."""
        self.sent.append((web_resource, request_options, body, dict(options or {})))
        if not self._outcomes:
            raise AssertionError("InMemoryTransport has no scripted response left")

        outcome = self._outcomes.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return self.check_status(web_resource, outcome)
