"""Tests for the catalog store shell."""
from library_catalog.schemas import FilterState
from library_catalog.store import CatalogStore


RAW_BOOKS = [
    {"id": "1", "title": "Zed", "author": "Anna Karen", "status": "available",
     "average_rating": 4.6, "ratings_count": 12, "categories": ["Fiction"]},
    {"id": "2", "title": "Ann", "author": "Bob Smith", "status": "loaned",
     "average_rating": 2.0, "categories": ["History"]},
    {"id": "3", "title": "Moby Dick", "author": "Herman Melville", "status": "available",
     "average_rating": 3.5, "categories": ["Adventure", "Fiction"]},
]


def ids(books):
    return [b.id for b in books]


def make_store():
    store = CatalogStore(state=FilterState())
    store.load(RAW_BOOKS)
    return store


def test_load_applies_current_state():
    """Loading shows every book in the default title order."""
    store = make_store()

    assert ids(store.visible) == ["2", "3", "1"]
    assert len(store.books) == 3


def test_each_action_requeries_the_base_collection():
    """Filters are rebuilt from the full collection, never compounded."""
    store = make_store()

    assert ids(store.search("fiction")) == ["3", "1"]
    assert ids(store.filter_status("loaned")) == []
    assert ids(store.search("")) == ["2"]
    assert ids(store.filter_status("all")) == ["2", "3", "1"]


def test_sort_by_keeps_filters():
    store = make_store()
    store.filter_status("available")

    assert ids(store.sort_by("rating_low")) == ["3", "1"]
    assert store.state.status_filter == "available"


def test_reset_keeps_sort_order():
    """Reset clears the search and status but not the sort."""
    store = make_store()
    store.sort_by("title_desc")
    store.search("ann")

    assert store.state.is_active
    assert ids(store.reset()) == ["1", "3", "2"]
    assert not store.state.is_active


def test_states_are_replaced_not_mutated():
    store = make_store()
    first = store.state
    store.search("zed")

    assert first.search_query == ""
    assert store.state is not first


def test_stars_for_displayed_book():
    store = make_store()
    zed = store.search("zed")[0]
    stars = store.stars_for(zed)

    assert (stars.full, stars.half, stars.empty) == (4, 1, 0)
    assert stars.label == "4.60 (12)"


def test_default_state_comes_from_config(monkeypatch):
    monkeypatch.setattr("library_catalog.config.DEFAULT_SORT_KEY", "rating_high")
    monkeypatch.setattr("library_catalog.config.DEFAULT_STATUS_FILTER", "available")

    store = CatalogStore()
    store.load(RAW_BOOKS)

    assert ids(store.visible) == ["1", "3"]


def test_admin_scope_survives_reset():
    """The admin list keeps searching ISBNs after the filters are cleared."""
    store = CatalogStore(state=FilterState(search_scope="admin"))
    store.load(RAW_BOOKS + [{"id": "4", "title": "Dune", "identifiers": {"isbn_13": "9780441013593"}}])

    assert ids(store.search("0441")) == ["4"]
    store.reset()
    assert store.state.search_scope == "admin"
    assert ids(store.search("9780441")) == ["4"]
