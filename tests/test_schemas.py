"""Tests for the pydantic schemas."""
import pytest
from pydantic import ValidationError

from library_catalog.schemas import FilterState


def test_with_changes_returns_new_state():
    state = FilterState(status_filter="available")
    changed = state.with_changes(sort_key="rating_low")

    assert changed.sort_key == "rating_low"
    assert changed.status_filter == "available"
    assert state.sort_key == "title_asc"


def test_with_changes_none_resets_field():
    """A None update falls back to the field default instead of breaking the state."""
    state = FilterState(search_query="zed", search_scope="admin")
    cleared = state.with_changes(search_query=None)

    assert cleared.search_query == ""
    assert cleared.search_scope == "admin"
    assert not cleared.is_active


def test_with_changes_validates():
    with pytest.raises(ValidationError):
        FilterState().with_changes(search_query=["not", "text"])
