"""Console shopping cart.

Reads one book per line, echoes each accepted book, and on end of input (or
the first line that fails to decode) prints the cart, newest first.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from typing import IO

import structlog
from dotenv import load_dotenv

from .core.cart import ShoppingCart
from .core.codec import DEFAULT_PRECISION, encode
from .core.models import Book

load_dotenv()

log = structlog.get_logger()

BANNER = (
    "Welcome to Forgotten Books, a book store filled with books from all nations. "
    "Place books into your shopping cart by entering each book's information.\n"
    " enclose string entries in quotes, separate fields with comas\n"
    " Enter CTL-Z (Windows) or CTL-D (Linux) to quit\n"
)
PROMPT = "Enter ISBN, Title, Author, and Price"


def configure_logging(level: str) -> None:
    """Send structlog output to stderr so it never mixes with the cart."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _prompted(source: IO, out: IO[str], quiet: bool) -> Iterator[str]:
    while True:
        if not quiet:
            out.write(PROMPT + "\n")
            out.flush()
        line = source.readline()
        if not line:
            return
        # Binary sources are decoded one line at a time.
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        yield line


def run(
    source: IO,
    out: IO[str],
    precision: int = DEFAULT_PRECISION,
    sort: bool = False,
    quiet: bool = False,
) -> int:
    """Fill a cart from ``source`` and print it to ``out``.

    ``source`` may be text, or binary read as UTF-8. Returns 0 when input ran
    out cleanly, 1 when it stopped on a bad or undecodable line.
    """
    if not quiet:
        out.write(BANNER + "\n")

    def echo(book: Book) -> None:
        out.write(f"Item added to shopping cart: {encode(book, precision)}\n\n")

    cart = ShoppingCart()
    try:
        outcome = cart.fill(_prompted(source, out, quiet), on_add=echo)
    except UnicodeDecodeError as ex:
        # Undecodable input ends the cart like a bad line does.
        outcome = None
        log.error("input_unreadable", added=len(cart), reason=str(ex))

    for book in cart.sorted() if sort else cart.in_reverse():
        out.write(encode(book, precision) + "\n")

    if outcome is None:
        return 1
    if not outcome.ok:
        log.error(
            "input_rejected",
            line_number=outcome.line_number,
            line=outcome.line,
            status=outcome.error.status.value,
            reason=outcome.error.message,
        )
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="bookcart", description="Collect books into a shopping cart.")
    p.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin")
    p.add_argument(
        "--precision",
        type=int,
        default=os.environ.get("PRICE_PRECISION", str(DEFAULT_PRECISION)),
        help="Fractional digits shown for prices",
    )
    p.add_argument("--sort", action="store_true", help="Print the cart sorted instead of newest first")
    p.add_argument("--quiet", action="store_true", help="Suppress the banner and prompts")
    args = p.parse_args(argv)

    if args.precision < 0:
        p.error("--precision must be >= 0")

    configure_logging(os.environ.get("LOG_LEVEL", "WARNING"))

    if args.path == "-":
        return run(sys.stdin.buffer, sys.stdout, args.precision, args.sort, args.quiet)

    try:
        fh = open(args.path, "rb")
    except OSError as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2
    with fh:
        return run(fh, sys.stdout, args.precision, args.sort, quiet=True)


if __name__ == "__main__":
    raise SystemExit(main())
