"""Transport factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import AcsWrapConfig, load_config
from .base import BaseHttpTransport
from .inmemory import InMemoryTransport


def get_transport(
    backend: Optional[str] = None, config: Optional[AcsWrapConfig] = None
) -> BaseHttpTransport:
    """Factory function to get the configured transport."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("ACSWRAP_TRANSPORT")
        or config.transport.backend
    ).lower()

    if backend == "httpx":
        from .httpx import HttpxTransport

        return HttpxTransport(
            timeout=config.transport.timeout, verify=config.transport.verify
        )
    elif backend == "requests":
        from .requests import RequestsTransport

        return RequestsTransport(
            timeout=config.transport.timeout, verify=config.transport.verify
        )
    else:
        raise ValueError(f"Unsupported transport backend: {backend}")


__all__ = ["BaseHttpTransport", "InMemoryTransport", "get_transport"]
