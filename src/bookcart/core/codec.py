"""Encode Book records to quoted text lines and decode them back.

One record per line:

    "9789998287532", "Over in the Meadow", "Ezra Jack Keats", 91.11

Text fields are double-quoted with backslash escapes for ``"`` and ``\\``.
Price is unquoted fixed-point. Decoding never raises for bad input: it
returns a :class:`DecodeResult` whose status says what went wrong, and it
only hands out a Book once all four fields were read.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, replace

import structlog

from ..errors import MalformedFieldError, PrematureEndError
from .models import Book

log = structlog.get_logger()

DEFAULT_PRECISION = 2
QUOTE = '"'
ESCAPE = "\\"
SEPARATOR = ","
SPACER = ", "

_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class DecodeStatus(enum.Enum):
    NO_ERROR = "no_error"
    MALFORMED_FIELD = "malformed_field"
    PREMATURE_END = "premature_end"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one line.

    ``book`` is set only on success. ``position`` is the offset in the input
    where decoding stopped.
    """

    status: DecodeStatus
    position: int
    book: Book | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.NO_ERROR

    def __bool__(self) -> bool:
        return self.ok


class _Failure(Exception):
    def __init__(self, status: DecodeStatus, position: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.position = position
        self.message = message


class _Cursor:
    """Reads the fields of one record from a string, left to right."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _fail(self, message: str) -> _Failure:
        status = DecodeStatus.PREMATURE_END if self.at_end() else DecodeStatus.MALFORMED_FIELD
        return _Failure(status, self.pos, message)

    def quoted(self, name: str) -> str:
        self.skip_space()
        if self.at_end() or self.text[self.pos] != QUOTE:
            raise self._fail(f"expected opening quote for {name}")
        self.pos += 1
        chars = []
        while not self.at_end():
            ch = self.text[self.pos]
            if ch == QUOTE:
                self.pos += 1
                return "".join(chars)
            if ch == ESCAPE:
                self.pos += 1
                if self.at_end():
                    break
                ch = self.text[self.pos]
            chars.append(ch)
            self.pos += 1
        raise _Failure(DecodeStatus.MALFORMED_FIELD, self.pos, f"unterminated {name}")

    def separator(self, after: str) -> None:
        self.skip_space()
        if self.at_end() or self.text[self.pos] != SEPARATOR:
            raise self._fail(f"expected ',' after {after}")
        self.pos += 1

    def number(self, name: str) -> float:
        self.skip_space()
        match = _NUMBER.match(self.text, self.pos)
        if match is None:
            raise self._fail(f"expected a number for {name}")
        value = float(match.group())
        if not math.isfinite(value):
            raise _Failure(
                DecodeStatus.MALFORMED_FIELD, self.pos, f"{name} is out of range"
            )
        self.pos = match.end()
        return value

    def finish(self) -> None:
        self.skip_space()
        if not self.at_end():
            raise _Failure(
                DecodeStatus.MALFORMED_FIELD, self.pos, "unexpected text after price"
            )


def quote(value: str) -> str:
    escaped = value.replace(ESCAPE, ESCAPE + ESCAPE).replace(QUOTE, ESCAPE + QUOTE)
    return f"{QUOTE}{escaped}{QUOTE}"


def format_price(price: float, precision: int = DEFAULT_PRECISION) -> str:
    """Fixed-point price with exactly ``precision`` fractional digits."""
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    return f"{price:.{precision}f}"


def encode(book: Book, precision: int = DEFAULT_PRECISION) -> str:
    """Render a Book as one line of the quoted, comma-separated format."""
    return SPACER.join(
        [
            quote(book.isbn),
            quote(book.title),
            quote(book.author),
            format_price(book.price, precision),
        ]
    )


def decode(text: str) -> DecodeResult:
    """Decode one line into a new Book.

    Fields are read into a scratch Book; it is only returned when every field
    was read and nothing but whitespace follows the price.
    """
    cursor = _Cursor(text)
    candidate = Book()
    try:
        candidate.isbn = cursor.quoted("isbn")
        cursor.separator("isbn")
        candidate.title = cursor.quoted("title")
        cursor.separator("title")
        candidate.author = cursor.quoted("author")
        cursor.separator("author")
        candidate.price = cursor.number("price")
        cursor.finish()
    except _Failure as e:
        log.debug(
            "decode_failed",
            status=e.status.value,
            position=e.position,
            reason=e.message,
        )
        return DecodeResult(status=e.status, position=e.position, message=e.message)

    return DecodeResult(
        status=DecodeStatus.NO_ERROR, position=cursor.pos, book=candidate
    )


def decode_into(text: str, book: Book) -> DecodeResult:
    """Decode one line and move the result into ``book``.

    On failure ``book`` is left exactly as it was.
    """
    result = decode(text)
    if not result.ok:
        return result
    decoded = result.book.move()
    book.set_isbn(decoded.isbn).set_title(decoded.title).set_author(
        decoded.author
    ).set_price(decoded.price)
    return replace(result, book=book)


def parse_book(text: str) -> Book:
    """Decode one line, raising instead of returning a failed result.

    Raises:
        MalformedFieldError, PrematureEndError
    """
    result = decode(text)
    if result.status is DecodeStatus.MALFORMED_FIELD:
        raise MalformedFieldError(result)
    if result.status is DecodeStatus.PREMATURE_END:
        raise PrematureEndError(result)
    return result.book
