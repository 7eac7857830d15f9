"""Data model for a catalog book record."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .compare import Ordering, books_equal, compare


@dataclass(eq=False)
class Book:
    """A catalog record: ISBN, title, author and price.

    Fields are stored as given, nothing is validated or normalized. ``==`` is
    strict on every field including price; ``<`` and friends follow the
    tolerant weak order from :func:`bookcart.core.compare.compare`.
    """

    isbn: str = ""
    title: str = ""
    author: str = ""
    price: float = 0.0

    # Books are mutable through the setters, so they stay unhashable.
    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> Book:
        return replace(self)

    def move(self) -> Book:
        """Return a new Book holding this book's values and empty this one's text fields.

        The price is left as it was. Do not read the text fields of a
        moved-from book.
        """
        moved = Book(self.isbn, self.title, self.author, self.price)
        self.isbn = self.title = self.author = ""
        return moved

    # Consuming accessors: hand the value out and leave the field empty.

    def take_isbn(self) -> str:
        value, self.isbn = self.isbn, ""
        return value

    def take_title(self) -> str:
        value, self.title = self.title, ""
        return value

    def take_author(self) -> str:
        value, self.author = self.author, ""
        return value

    # Setters return the book so calls can be chained.

    def set_isbn(self, isbn: str) -> Book:
        self.isbn = isbn
        return self

    def set_title(self, title: str) -> Book:
        self.title = title
        return self

    def set_author(self, author: str) -> Book:
        self.author = author
        return self

    def set_price(self, price: float) -> Book:
        self.price = price
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return books_equal(self, other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return compare(self, other) is Ordering.LESS

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return compare(self, other) is not Ordering.GREATER

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return compare(self, other) is Ordering.GREATER

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return compare(self, other) is not Ordering.LESS

    def __str__(self) -> str:
        from .codec import encode

        return encode(self)
