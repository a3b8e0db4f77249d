"""Decoder for WRAP v0.9 token responses.

A successful WRAP response is a form-encoded body such as::

    wrap_access_token=net.windows.servicebus.action%3d...&wrap_access_token_expires_in=1199
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from urllib.parse import parse_qs

from .contracts import AcsTokenResult
from .errors import DecodeError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_FIELD = "wrap_access_token"
EXPIRES_IN_FIELD = "wrap_access_token_expires_in"


def _single(fields: dict, name: str) -> Optional[str]:
    values = fields.get(name)
    if not values:
        return None
    if len(values) > 1:
        raise DecodeError(f"WRAP response repeats field '{name}'")
    return values[0]


def parse_wrap_response(
    body: Union[str, bytes, None], now: Optional[datetime] = None
) -> AcsTokenResult:
    """Decode a WRAP token response body into an :class:`AcsTokenResult`.

    Args:
        body: Raw response body as returned by the token endpoint.
        now: Reference time for ``expires_at``; defaults to the current UTC time.

    Raises:
        DecodeError: If the body is empty or is not WRAP output.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("WRAP response is not valid UTF-8") from exc

    if not body or not body.strip():
        raise DecodeError("WRAP response body is empty")

    fields = parse_qs(body.strip(), keep_blank_values=True)
    token = _single(fields, ACCESS_TOKEN_FIELD)
    if not token:
        raise DecodeError(f"WRAP response has no '{ACCESS_TOKEN_FIELD}'")

    expires_in: Optional[int] = None
    expires_at: Optional[datetime] = None
    raw_expiry = _single(fields, EXPIRES_IN_FIELD)
    if raw_expiry is not None:
        try:
            expires_in = int(raw_expiry)
        except ValueError as exc:
            raise DecodeError(
                f"'{EXPIRES_IN_FIELD}' is not an integer: {raw_expiry!r}"
            ) from exc
        if expires_in < 0:
            raise DecodeError(f"'{EXPIRES_IN_FIELD}' is negative: {expires_in}")
        now = now or datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=expires_in)
    else:
        logger.debug("WRAP response carries no expiry")

    return AcsTokenResult(token=token, expires_in=expires_in, expires_at=expires_at)
