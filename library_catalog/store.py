"""
In-memory catalog store.

``CatalogStore`` plays the role of the catalog screen's state: it holds
the canonical base collection handed over by the loader and the current
``FilterState``. Each user action (typing a query, tapping a status chip,
picking a sort order) builds a new state and recomputes the visible list
from the base collection with ``query()``. Filters are therefore never
applied on top of a previous result.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from . import config
from .normalize import normalize_books
from .query import query
from .rating import rate
from .schemas import BookRecord, FilterState, StarBreakdown


logger = logging.getLogger(__name__)


class CatalogStore:
    """Base collection plus the current selection of one catalog screen."""

    def __init__(
        self,
        books: Optional[Iterable[BookRecord]] = None,
        state: Optional[FilterState] = None,
    ) -> None:
        self._books: List[BookRecord] = list(books or [])
        self.state = state or FilterState(
            status_filter=config.DEFAULT_STATUS_FILTER,
            sort_key=config.DEFAULT_SORT_KEY,
        )
        self.visible: List[BookRecord] = query(self._books, self.state)

    @property
    def books(self) -> List[BookRecord]:
        """A copy of the base collection."""
        return list(self._books)

    def load(self, raws: Iterable[Any]) -> List[BookRecord]:
        """Replace the base collection with freshly loaded raw documents.

        The current selection is kept and re-applied, as a pull-to-refresh
        does on the catalog screen.
        """
        self._books = normalize_books(raws)
        logger.info("Catalog loaded with %d books", len(self._books))
        return self._refresh()

    def set_books(self, books: Iterable[BookRecord]) -> List[BookRecord]:
        """Replace the base collection with already normalized records."""
        self._books = list(books)
        return self._refresh()

    def apply(self, state: FilterState) -> List[BookRecord]:
        """Switch to ``state`` and recompute the visible list."""
        self.state = state
        return self._refresh()

    def search(self, text: str) -> List[BookRecord]:
        return self.apply(self.state.with_changes(search_query=text or ""))

    def filter_status(self, status: str) -> List[BookRecord]:
        return self.apply(self.state.with_changes(status_filter=status))

    def sort_by(self, sort_key: str) -> List[BookRecord]:
        return self.apply(self.state.with_changes(sort_key=sort_key))

    def reset(self) -> List[BookRecord]:
        """Clear the search and status filter, keeping the sort order and scope."""
        return self.apply(
            FilterState(sort_key=self.state.sort_key, search_scope=self.state.search_scope)
        )

    def stars_for(self, book: BookRecord) -> StarBreakdown:
        """Star breakdown and label for one displayed book."""
        return rate(book.average_rating, book.ratings_count)

    def _refresh(self) -> List[BookRecord]:
        self.visible = query(self._books, self.state)
        return self.visible
