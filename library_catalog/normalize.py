"""
Normalization of raw book documents into ``BookRecord`` instances.

The data-access layer hands over plain mappings in one of two shapes:
the current nested document (``book_info`` / ``stats`` / ``logs``
sections) or the older flat shape with ``title``, ``author`` and
``average_rating`` at the top level. Both are reduced to a
``BookRecord`` here. Malformed fields are dropped to neutral defaults
rather than failing the whole collection.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .schemas import AuthorRef, BookRecord


logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else {}


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-``None`` value."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _parse_authors(entries: Any) -> List[AuthorRef]:
    """Convert a list of author dicts or plain names into ``AuthorRef``s."""
    if not isinstance(entries, list):
        return []
    authors: List[AuthorRef] = []
    for entry in entries:
        if isinstance(entry, str):
            if entry.strip():
                authors.append(AuthorRef(name=entry.strip()))
        elif isinstance(entry, Mapping):
            name = _text(entry.get("name")) or ""
            ol_id = _first(entry, "openLibrary_id", "openLibraryId", "open_library_id")
            authors.append(AuthorRef(name=name, open_library_id=_text(ol_id) or ""))
    return authors


def _parse_categories(value: Any) -> List[str]:
    """Categories may be stored as a list or a single ``", "``-joined string."""
    if isinstance(value, str):
        return [c.strip() for c in value.split(",") if c.strip()]
    if isinstance(value, list):
        return [c for c in value if isinstance(c, str)]
    return []


def _parse_isbn(raw: Mapping[str, Any]) -> str:
    """ISBN-13 from ``identifiers``, then ISBN-10, then a top-level ``isbn``."""
    identifiers = _section(raw, "identifiers")
    for value in (identifiers.get("isbn_13"), identifiers.get("isbn_10"), raw.get("isbn")):
        if isinstance(value, list):
            value = value[0] if value else None
        text = _text(value)
        if text and text.strip():
            return text.strip()
    return ""


def _parse_float(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Accept datetimes, ISO-8601 strings and epoch seconds."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def normalize_book(raw: Any) -> Optional[BookRecord]:
    """Build a ``BookRecord`` from one raw loader document.

    Parameters
    ----------
    raw : Any
        A mapping in the nested or the flat document shape.

    Returns
    -------
    Optional[BookRecord]
        The normalized record, or ``None`` when ``raw`` is not a mapping.
    """
    if not isinstance(raw, Mapping):
        return None

    info = _section(raw, "book_info")
    stats = _section(raw, "stats")
    ratings = _section(stats, "ratings")
    summary = _section(ratings, "summary")

    book_id = _text(raw.get("id")) or _text(raw.get("book_id")) or ""
    title = _text(info.get("title")) or _text(raw.get("title")) or ""

    # Structured authors win for display; ``author`` keeps a flat string
    # built from them so search and sort still see every name.
    authors_data = _parse_authors(info.get("authors"))
    if authors_data:
        author = ", ".join(a.name for a in authors_data)
    else:
        author = _text(raw.get("author")) or ""
        authors_data = _parse_authors(_first(raw, "authorsData", "authors_data"))

    categories = _parse_categories(raw.get("subjects") or raw.get("categories"))

    if _parse_float(summary.get("average")):
        average_rating = _parse_float(summary.get("average"))
        ratings_count = _parse_count(ratings.get("count"))
    else:
        average_rating = _parse_float(_first(raw, "average_rating", "averageRating"))
        ratings_count = _parse_count(_first(raw, "ratings_count", "ratingsCount"))

    loans = _first(raw, "loan_count", "loanCount")
    loan_count = _parse_count(loans if loans is not None else stats.get("borrow_count"))
    created = _section(_section(raw, "logs"), "created")
    added = _first(raw, "addedDate", "added_date")
    added_date = _parse_datetime(added if added is not None else created.get("created_at"))

    status = _text(raw.get("status"))
    fields: Dict[str, Any] = dict(
        id=book_id,
        title=title,
        author=author,
        authors_data=authors_data,
        categories=categories,
        isbn=_parse_isbn(raw),
        status=status,
        average_rating=average_rating,
        ratings_count=ratings_count,
        added_date=added_date,
        loan_count=loan_count,
    )
    try:
        return BookRecord(**fields)
    except ValidationError as exc:
        logger.warning("Book %r has invalid fields, keeping basics only: %s", book_id, exc)
        return BookRecord(id=book_id, title=title, author=author, status=status)


def normalize_books(raws: Iterable[Any]) -> List[BookRecord]:
    """Normalize a loader collection, skipping entries that are not mappings."""
    books: List[BookRecord] = []
    skipped = 0
    for raw in raws or []:
        book = normalize_book(raw)
        if book is None:
            skipped += 1
            continue
        books.append(book)
    if skipped:
        logger.warning("Skipped %d raw book entries that were not mappings", skipped)
    logger.debug("Normalized %d books", len(books))
    return books
