"""Pytest configuration and fixtures."""

import pytest
import structlog

from bookcart.core.models import Book


@pytest.fixture(autouse=True)
def _reset_structlog():
    """cli.main() configures structlog globally; undo it after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def meadow():
    """The book from the store's sample input."""
    return Book("9789998287532", "Over in the Meadow", "Ezra Jack Keats", 91.11)


@pytest.fixture
def meadow_line():
    return '"9789998287532", "Over in the Meadow", "Ezra Jack Keats", 91.11'


@pytest.fixture
def cart_lines():
    return [
        '"9780000000002", "Second", "Author B", 12.50\n',
        '"9780000000001", "First", "Author A", 5.00\n',
        '"9780000000003", "Third", "Author C", 7.25\n',
    ]
