"""
Catalog query engine.

``query()`` derives the list a catalog screen displays from the full
base collection and the current ``FilterState``. The pipeline always runs
in the same order: status filter, then free-text search, then a stable
sort. Nothing is cached between calls and the input collection is never
modified, so re-running ``query`` on the base collection after every
keystroke or chip tap can never drift from the canonical data.

Malformed or missing fields degrade to neutral values (empty string,
zero, the epoch) instead of raising.
"""

from __future__ import annotations

import logging
import math
from datetime import timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pyuca import Collator

from .schemas import (
    SEARCH_SCOPE_ADMIN,
    SEARCH_SCOPE_CATALOG,
    STATUS_ALL,
    SORT_ADDED_NEWEST,
    SORT_ADDED_OLDEST,
    SORT_AUTHOR_ASC,
    SORT_AUTHOR_DESC,
    SORT_MOST_LOANED,
    SORT_RATING_HIGH,
    SORT_RATING_LOW,
    SORT_TITLE_ASC,
    SORT_TITLE_DESC,
    BookRecord,
    FilterState,
)


logger = logging.getLogger(__name__)

# Unicode Collation Algorithm with the default (root) table.
_collator = Collator()


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive substring tests.

    Parameters
    ----------
    s : Optional[str]
        The string to normalize.

    Returns
    -------
    str
        The casefolded string, or an empty string when ``s`` is ``None``.
    """
    return (s or "").casefold()


def collation_key(s: Optional[str]) -> Tuple[int, ...]:
    """Build a sort key that orders text the way a reader expects.

    Keys come from the Unicode Collation Algorithm: letters compare first,
    then accents, then case with lowercase first. ``"émile"`` sorts
    between ``"Eddy"`` and ``"Zoe"``, ``"Øre"`` sits with the o words and
    ``"apple"`` precedes ``"Apple"``. ``None`` sorts as an empty string.
    """
    return tuple(_collator.sort_key(s or ""))


def _rating_value(book: BookRecord) -> float:
    rating = book.average_rating
    if rating is None or math.isnan(rating):
        return 0.0
    return rating


def _added_timestamp(book: BookRecord) -> float:
    added = book.added_date
    if added is None:
        return 0.0
    # Naive datetimes are taken as UTC so aware and naive values compare.
    if added.tzinfo is None:
        added = added.replace(tzinfo=timezone.utc)
    return added.timestamp()


# sort key -> (key function, descending)
_SORTERS: Dict[str, Tuple[Callable[[BookRecord], Any], bool]] = {
    SORT_TITLE_ASC: (lambda b: collation_key(b.title), False),
    SORT_TITLE_DESC: (lambda b: collation_key(b.title), True),
    SORT_AUTHOR_ASC: (lambda b: collation_key(b.author), False),
    SORT_AUTHOR_DESC: (lambda b: collation_key(b.author), True),
    SORT_RATING_HIGH: (_rating_value, True),
    SORT_RATING_LOW: (_rating_value, False),
    SORT_ADDED_NEWEST: (_added_timestamp, True),
    SORT_ADDED_OLDEST: (_added_timestamp, False),
    SORT_MOST_LOANED: (lambda b: b.loan_count, True),
}


def filter_by_status(books: Iterable[BookRecord], status: str) -> List[BookRecord]:
    """Keep the books whose status equals ``status`` exactly.

    ``"all"`` keeps every book. Books without a status never match a
    specific filter.
    """
    if status == STATUS_ALL:
        return list(books)
    return [b for b in books if b.status is not None and b.status == status]


def _matches(book: BookRecord, nq: str) -> bool:
    """Catalog search: title, legacy author or any category."""
    if book.title and nq in _norm(book.title):
        return True
    if book.author and nq in _norm(book.author):
        return True
    return any(nq in _norm(c) for c in (book.categories or []))


def _matches_admin(book: BookRecord, nq: str, raw: str) -> bool:
    """Admin list search: title, legacy author or the ISBN as typed."""
    if book.title and nq in _norm(book.title):
        return True
    if book.author and nq in _norm(book.author):
        return True
    # ISBNs are compared case-sensitively ("X" check digits).
    return bool(book.isbn) and raw in book.isbn


def search_books(
    books: Iterable[BookRecord],
    q: Optional[str],
    scope: str = SEARCH_SCOPE_CATALOG,
) -> List[BookRecord]:
    """Keep the books matching a free-text query.

    The query is trimmed only to decide whether it is blank; a blank query
    keeps every book. Otherwise the query is matched exactly as typed, so
    a trailing space must also appear in the field.

    In the catalog scope a book matches when the query is a
    case-insensitive substring of its title, its legacy ``author`` string
    or any of its categories. The admin scope matches title and author the
    same way plus the ISBN, case-sensitively, and ignores categories.
    Names in ``authors_data`` are searched in neither scope. Unknown
    scopes behave like the catalog scope.

    Parameters
    ----------
    books : Iterable[BookRecord]
        Books to search, typically the output of ``filter_by_status``.
    q : Optional[str]
        The text typed in the search bar.
    scope : str
        ``"catalog"`` or ``"admin"``.

    Returns
    -------
    List[BookRecord]
        The matching books in their input order.
    """
    raw = q or ""
    if not raw.strip():
        return list(books)
    nq = _norm(raw)
    if scope == SEARCH_SCOPE_ADMIN:
        return [b for b in books if _matches_admin(b, nq, raw)]
    return [b for b in books if _matches(b, nq)]


def sort_books(books: Iterable[BookRecord], sort_key: str) -> List[BookRecord]:
    """Stable-sort ``books`` by one of the catalog sort keys.

    Books with equal keys keep their input order in both ascending and
    descending sorts. An unknown key returns the books in input order.
    """
    items = list(books)
    sorter = _SORTERS.get(sort_key)
    if sorter is None:
        logger.warning("Unknown sort key %r; keeping input order", sort_key)
        return items
    key, descending = sorter
    # sorted() stays stable with reverse=True.
    return sorted(items, key=key, reverse=descending)


def query(collection: Iterable[BookRecord], state: FilterState) -> List[BookRecord]:
    """Derive the displayed list from the base collection.

    Parameters
    ----------
    collection : Iterable[BookRecord]
        The full, unfiltered collection supplied by the loader. It is
        never modified.
    state : FilterState
        The current status / search / sort selection.

    Returns
    -------
    List[BookRecord]
        A new list: status-filtered, then searched, then sorted.
    """
    items = filter_by_status(collection, state.status_filter)
    after_status = len(items)
    items = search_books(items, state.search_query, state.search_scope)
    logger.debug(
        "Catalog query status=%r q=%r sort=%r: %d after status, %d after search",
        state.status_filter,
        state.search_query,
        state.sort_key,
        after_status,
        len(items),
    )
    return sort_books(items, state.sort_key)
