from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple, Type

from ..contracts import AcquisitionResult
from ..errors import TransportError

if TYPE_CHECKING:
    from ..service import WrapService

logger = logging.getLogger(__name__)


def compute_backoff(attempt: int, base: float = 1.5, jitter: float = 0.5) -> float:
    """Compute exponential backoff with jitter."""
    delay = base ** attempt
    return delay + random.uniform(0, jitter)


async def schedule_retry(attempt: int) -> None:
    """Sleep for computed backoff delay before retrying."""
    delay = compute_backoff(attempt)
    await asyncio.sleep(delay)


async def acquire_with_retry(
    service: "WrapService",
    scope_uri: str,
    attempts: int = 3,
    options: Optional[Mapping[str, Any]] = None,
    retry_on: Tuple[Type[BaseException], ...] = (TransportError,),
) -> AcquisitionResult:
    """Call ``service.acquire_token`` until it succeeds or ``attempts`` run out.

    Only errors matching ``retry_on`` are retried; the last result is returned
    unchanged either way.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    result = await service.acquire_token(scope_uri, options)
    for attempt in range(1, attempts):
        if result.error is None or not isinstance(result.error, retry_on):
            break
        logger.info(
            "Retrying WRAP token request for %s (attempt %d of %d)",
            scope_uri,
            attempt + 1,
            attempts,
        )
        await schedule_retry(attempt)
        result = await service.acquire_token(scope_uri, options)
    return result
