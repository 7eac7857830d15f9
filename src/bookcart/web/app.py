"""FastAPI web application for the shopping cart."""

from __future__ import annotations

import os
import time
import uuid
from dataclasses import dataclass, field

import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .. import __version__
from ..core.cart import ShoppingCart
from ..core.codec import DEFAULT_PRECISION, encode
from ..core.models import Book

load_dotenv()

log = structlog.get_logger()

SESSION_TTL = 1800  # 30 minutes
MAX_SESSIONS = 500  # cap total sessions to bound memory
MAX_BODY_BYTES = 50_000  # ~50 KB max request body
MAX_LINES = 500


def _price_precision() -> int:
    raw = os.environ.get("PRICE_PRECISION", "")
    if raw.isdigit():
        return int(raw)
    if raw:
        log.warning("price_precision_ignored", value=raw, using=DEFAULT_PRECISION)
    return DEFAULT_PRECISION


PRICE_PRECISION = _price_precision()


@dataclass
class Session:
    cart: ShoppingCart
    created_at: float = field(default_factory=time.time)

    def expired(self, now: float) -> bool:
        return now - self.created_at > SESSION_TTL


# In-memory session store
sessions: dict[str, Session] = {}


def _drop_expired() -> None:
    now = time.time()
    for sid in [sid for sid, s in sessions.items() if s.expired(now)]:
        del sessions[sid]


def _live_session(session_id: str) -> Session | None:
    session = sessions.get(session_id)
    if session is not None and session.expired(time.time()):
        del sessions[session_id]
        return None
    return session


def _book_to_json(book: Book) -> dict:
    return {
        "isbn": book.isbn,
        "title": book.title,
        "author": book.author,
        "price": book.price,
        "encoded": encode(book, PRICE_PRECISION),
    }


app = FastAPI(title="Bookcart", docs_url=None, redoc_url=None)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "version": __version__,
        "sessions_active": len(sessions),
    }


@app.post("/api/cart")
async def create_cart(request: Request):
    # Request body size guard
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_BODY_BYTES:
        return JSONResponse({"error": "Request too large."}, status_code=413)

    body = await request.json()
    lines = body.get("lines", []) if isinstance(body, dict) else []
    if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
        return JSONResponse({"error": "lines must be a list of strings."}, status_code=400)

    if not any(line.strip() for line in lines):
        return JSONResponse({"error": "No books provided."}, status_code=400)

    if len(lines) > MAX_LINES:
        return JSONResponse(
            {"error": f"Maximum {MAX_LINES} lines per request."}, status_code=400
        )

    # Cap total sessions to bound memory
    _drop_expired()
    if len(sessions) >= MAX_SESSIONS:
        return JSONResponse(
            {"error": "Server is busy. Please try again in a few minutes."},
            status_code=503,
        )

    cart = ShoppingCart()
    outcome = cart.fill(lines)

    session_id = uuid.uuid4().hex[:12]
    sessions[session_id] = Session(cart=cart)
    log.info("cart_created", session_id=session_id, books=len(cart), ok=outcome.ok)

    error = None
    if outcome.error is not None:
        error = {
            "status": outcome.error.status.value,
            "message": outcome.error.message,
            "position": outcome.error.position,
            "line": outcome.line,
        }

    return {
        "session_id": session_id,
        "summary": {
            "added": outcome.added,
            "stopped_at_line": outcome.line_number or None,
            "error": error,
        },
        "books": [_book_to_json(b) for b in cart.in_reverse()],
    }


@app.get("/api/cart/download")
async def download_cart(session: str, order: str = "reverse"):
    s = _live_session(session)
    if not s:
        return JSONResponse({"error": "Session not found or expired."}, status_code=404)
    if order not in ("reverse", "sorted"):
        return JSONResponse({"error": "order must be 'reverse' or 'sorted'."}, status_code=400)
    books = s.cart.sorted() if order == "sorted" else s.cart.in_reverse()
    content = "".join(encode(b, PRICE_PRECISION) + "\n" for b in books)
    return Response(
        content=content,
        media_type="text/plain",
        headers={"Content-Disposition": 'attachment; filename="cart.txt"'},
    )


def main():
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
