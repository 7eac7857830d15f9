"""Equality and weak ordering over Book records.

Two separate predicates:

- equality is exact on all four fields, price included;
- ordering compares isbn, title, author as text, then price within EPSILON,
  so near-equal prices tie instead of ordering on floating-point noise.

A pair of books can therefore be order-equivalent without being equal.
"""

from __future__ import annotations

import enum
import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Book

# Prices are currency with two, maybe three decimals.
EPSILON = 1e-4


class Ordering(enum.IntEnum):
    LESS = -1
    EQUIVALENT = 0
    GREATER = 1


def floating_point_is_equal(lhs: float, rhs: float, epsilon: float = EPSILON) -> bool:
    """True when lhs and rhs are within epsilon of each other."""
    return abs(lhs - rhs) <= epsilon


def _compare_text(lhs: str, rhs: str) -> Ordering:
    if lhs < rhs:
        return Ordering.LESS
    if lhs > rhs:
        return Ordering.GREATER
    return Ordering.EQUIVALENT


def compare_prices(lhs: float, rhs: float, epsilon: float = EPSILON) -> Ordering:
    if floating_point_is_equal(lhs, rhs, epsilon):
        return Ordering.EQUIVALENT
    return Ordering.LESS if lhs < rhs else Ordering.GREATER


def compare(lhs: Book, rhs: Book) -> Ordering:
    """Three-way compare by isbn, title, author, then price within EPSILON."""
    for left, right in (
        (lhs.isbn, rhs.isbn),
        (lhs.title, rhs.title),
        (lhs.author, rhs.author),
    ):
        result = _compare_text(left, right)
        if result is not Ordering.EQUIVALENT:
            return result
    return compare_prices(lhs.price, rhs.price)


def books_equal(lhs: Book, rhs: Book) -> bool:
    """Exact equality on every field, price included."""
    # Cheapest and most likely to differ first.
    return (
        lhs.isbn == rhs.isbn
        and lhs.title == rhs.title
        and lhs.author == rhs.author
        and lhs.price == rhs.price
    )


sort_key = functools.cmp_to_key(compare)
