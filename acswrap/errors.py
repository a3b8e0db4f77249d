"""Exceptions raised or reported by acswrap."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .contracts import HttpResponse


class AcsWrapError(Exception):
    """Base class for acswrap errors."""


class InvalidArgumentError(AcsWrapError, ValueError):
    """A required argument was missing or unusable."""


class TransportError(AcsWrapError):
    """The HTTP round trip failed or returned an unexpected status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional["HttpResponse"] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class DecodeError(AcsWrapError, ValueError):
    """The token endpoint answered with a body that is not WRAP output."""
