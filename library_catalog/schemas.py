"""
Pydantic schema definitions for the catalog engine.

``BookRecord`` captures the fields the catalog screen needs to filter,
search, sort and render a book card. Field names are snake_case; the
camelCase names used by the data-access layer (``authorsData``,
``averageRating`` ...) are accepted as aliases so loader documents can be
validated directly. ``FilterState`` bundles the user's current status /
search / sort selection and ``StarBreakdown`` is the output of the rating
quantizer.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Library status values a book copy can carry.
STATUS_AVAILABLE = "available"
STATUS_LOANED = "loaned"
STATUS_BORROWED = "borrowed"
STATUS_UNAVAILABLE = "unavailable"
KNOWN_STATUSES = (STATUS_AVAILABLE, STATUS_LOANED, STATUS_BORROWED, STATUS_UNAVAILABLE)

# Pseudo status selecting every record.
STATUS_ALL = "all"

# Search scopes: the borrower catalog searches categories, the admin book
# list searches ISBNs instead.
SEARCH_SCOPE_CATALOG = "catalog"
SEARCH_SCOPE_ADMIN = "admin"

# Sort keys offered by the catalog sort menu.
SORT_TITLE_ASC = "title_asc"
SORT_TITLE_DESC = "title_desc"
SORT_AUTHOR_ASC = "author_asc"
SORT_AUTHOR_DESC = "author_desc"
SORT_RATING_HIGH = "rating_high"
SORT_RATING_LOW = "rating_low"
# Extra keys offered by the admin book list.
SORT_ADDED_NEWEST = "added_newest"
SORT_ADDED_OLDEST = "added_oldest"
SORT_MOST_LOANED = "most_loaned"

SORT_KEYS = (
    SORT_TITLE_ASC,
    SORT_TITLE_DESC,
    SORT_AUTHOR_ASC,
    SORT_AUTHOR_DESC,
    SORT_RATING_HIGH,
    SORT_RATING_LOW,
    SORT_ADDED_NEWEST,
    SORT_ADDED_OLDEST,
    SORT_MOST_LOANED,
)

MAX_STARS = 5


class AuthorRef(BaseModel):
    """One entry of a book's structured author list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    open_library_id: str = Field(
        default="",
        validation_alias=AliasChoices("open_library_id", "openLibraryId", "openLibrary_id"),
    )


class BookRecord(BaseModel):
    """A single catalog entry.

    Records are frozen: the query engine only ever reads them and builds
    new lists. ``author`` is the legacy single-author string and is what
    search and author sorting look at; ``authors_data`` only changes how
    the author line is displayed (see ``display_author``).

    ``average_rating`` is optional; ``None`` and ``0`` both mean "no
    rating" and sort as zero.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: Optional[str] = None
    author: Optional[str] = None
    authors_data: List[AuthorRef] = Field(
        default_factory=list,
        validation_alias=AliasChoices("authors_data", "authorsData"),
    )
    categories: List[str] = Field(default_factory=list)
    isbn: str = ""
    status: Optional[str] = None
    average_rating: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("average_rating", "averageRating"),
    )
    ratings_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("ratings_count", "ratingsCount"),
    )
    # Date the copy was added to the library; used by the admin sorts.
    added_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("added_date", "addedDate"),
    )
    loan_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("loan_count", "loanCount"),
    )

    @property
    def display_author(self) -> str:
        """Author line shown on the book card."""
        names = [a.name for a in self.authors_data if a.name]
        if names:
            return ", ".join(names)
        return self.author or ""


class FilterState(BaseModel):
    """The user's current status / search / sort selection.

    The calling screen rebuilds a state on every interaction (typically
    through ``with_changes``) and hands it to ``query`` together with the
    full base collection.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_filter: str = Field(
        default=STATUS_ALL,
        validation_alias=AliasChoices("status_filter", "statusFilter"),
    )
    search_query: str = Field(
        default="",
        validation_alias=AliasChoices("search_query", "searchQuery"),
    )
    sort_key: str = Field(
        default=SORT_TITLE_ASC,
        validation_alias=AliasChoices("sort_key", "sortKey"),
    )
    search_scope: str = Field(
        default=SEARCH_SCOPE_CATALOG,
        validation_alias=AliasChoices("search_scope", "searchScope"),
    )

    @property
    def is_active(self) -> bool:
        """True when a status filter or a non-blank search narrows the list."""
        return self.status_filter != STATUS_ALL or bool((self.search_query or "").strip())

    def with_changes(self, **changes) -> "FilterState":
        """Return a new, validated state with ``changes`` applied.

        ``changes`` use field names. ``None`` values reset a field to its
        default, so ``with_changes(search_query=None)`` clears the search.
        """
        data = self.model_dump()
        for name, value in changes.items():
            if value is None:
                data.pop(name, None)
            else:
                data[name] = value
        return FilterState.model_validate(data)


class StarBreakdown(BaseModel):
    """Discrete star counts for one rating; ``full + half + empty == 5``."""

    model_config = ConfigDict(frozen=True)

    full: int
    half: int
    empty: int
    label: str = ""
