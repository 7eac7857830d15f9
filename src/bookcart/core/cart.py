"""In-memory shopping cart filled from line-oriented text."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

import structlog

from .codec import DecodeResult, decode_into
from .compare import sort_key
from .models import Book

log = structlog.get_logger()


@dataclass
class FillOutcome:
    """What happened while filling a cart from a text source.

    ``error`` is None when the source simply ran out.
    """

    added: int = 0
    error: DecodeResult | None = None
    line_number: int = 0
    line: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class ShoppingCart:
    """Books in the order they were added.

    Books passed to the constructor are copied; ``add`` moves its argument in.
    """

    def __init__(self, books: Iterable[Book] = ()) -> None:
        self._books: list[Book] = [book.copy() for book in books]

    def add(self, book: Book) -> Book:
        """Move ``book`` into the cart and return the stored record."""
        stored = book.move()
        self._books.append(stored)
        return stored

    def __len__(self) -> int:
        return len(self._books)

    def __bool__(self) -> bool:
        return bool(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)

    def in_reverse(self) -> list[Book]:
        return self._books[::-1]

    def sorted(self) -> list[Book]:
        return sorted(self._books, key=sort_key)

    def fill(
        self,
        lines: Iterable[str],
        on_add: Callable[[Book], None] | None = None,
    ) -> FillOutcome:
        """Decode one book per line until input runs out or a line fails.

        Blank lines are skipped. A line that fails to decode ends the fill;
        it is reported in the outcome, never skipped, and the books added
        before it stay in the cart.
        """
        outcome = FillOutcome()
        scratch = Book()
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            result = decode_into(line, scratch)
            if not result.ok:
                outcome.error = result
                outcome.line_number = number
                outcome.line = line.rstrip("\r\n")
                log.warning(
                    "cart_fill_stopped",
                    line_number=number,
                    status=result.status.value,
                    reason=result.message,
                )
                break
            stored = self.add(scratch)
            outcome.added += 1
            if on_add:
                on_add(stored)
        log.info("cart_filled", added=outcome.added, total=len(self._books))
        return outcome
