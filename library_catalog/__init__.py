"""
Catalog engine for a library's book browsing screens.

The package turns the book collection supplied by a data-access layer
into the list a catalog screen shows: ``query()`` applies a status
filter, a free-text search and a stable sort, always starting from the
full collection. ``quantize()`` and ``rate()`` convert an average rating
into the full / half / empty stars drawn on each book card.
``CatalogStore`` wires both together for a screen that keeps its base
collection and current selection.
"""

from .normalize import normalize_book, normalize_books  # noqa: F401
from .query import filter_by_status, query, search_books, sort_books  # noqa: F401
from .rating import format_rating_label, quantize, rate, star_icons  # noqa: F401
from .schemas import AuthorRef, BookRecord, FilterState, StarBreakdown  # noqa: F401
from .store import CatalogStore  # noqa: F401
