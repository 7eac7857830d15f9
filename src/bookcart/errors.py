"""Exceptions raised by bookcart."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core.codec import DecodeResult


class BookCartError(Exception):
    """Base error for this package."""


class DecodeError(BookCartError):
    """A line could not be decoded into a Book."""

    def __init__(self, result: DecodeResult) -> None:
        super().__init__(f"{result.message} (at offset {result.position})")
        self.result = result


class MalformedFieldError(DecodeError):
    """A quoted field, separator or price is malformed."""


class PrematureEndError(DecodeError):
    """Input ended before all four fields were read."""
