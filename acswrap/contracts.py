"""Request, response and token contracts for the WRAP exchange."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, NamedTuple, Optional, Union

from pydantic import BaseModel, Field

from .constants import HTTP_OK, WRAP_PORT, WRAP_PROTOCOL


class WebResource(BaseModel):
    """Describes one outbound request before it is bound to a host."""

    http_verb: str
    path: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    ok_code: int = HTTP_OK
    raw_response: bool = False

    @classmethod
    def post(cls, path: Optional[str] = None) -> "WebResource":
        return cls(http_verb="POST", path=path)

    def with_ok_code(self, ok_code: int) -> "WebResource":
        self.ok_code = ok_code
        return self

    def with_raw_response(self, raw_response: bool = True) -> "WebResource":
        self.raw_response = raw_response
        return self

    def has_header(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered and value for key, value in self.headers.items())

    def add_optional_header(self, name: str, value: str) -> "WebResource":
        """Set ``name`` only if the caller has not already provided it."""
        if not self.has_header(name):
            self.headers[name] = value
        return self


class RequestOptions(BaseModel):
    """Normalized request shape handed to an HTTP transport."""

    method: str
    path: str
    host: str
    port: int = WRAP_PORT
    headers: Dict[str, str] = Field(default_factory=dict)
    protocol: str = WRAP_PROTOCOL

    @property
    def url(self) -> str:
        return f"{self.protocol}{self.host}:{self.port}{self.path}"


class HttpResponse(BaseModel):
    """Transport response; ``body`` is bytes when raw output was requested."""

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Union[bytes, str] = ""


class AcsTokenResult(BaseModel):
    """Token issued by the Access Control Service."""

    token: str
    expires_in: Optional[int] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def parse(cls, body: Any) -> "AcsTokenResult":
        from .decoder import parse_wrap_response

        return parse_wrap_response(body)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def authorization_header(self) -> str:
        """Value for the ``Authorization`` header of a WRAP-protected call."""
        return f'WRAP access_token="{self.token}"'


class AcquisitionResult(NamedTuple):
    """Outcome of one token acquisition: ``(error, token_result, response)``."""

    error: Optional[BaseException]
    token_result: Optional[AcsTokenResult]
    response: Optional[HttpResponse]
