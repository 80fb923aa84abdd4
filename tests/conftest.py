"""Shared fixtures for the catalog engine tests."""
from datetime import datetime

import pytest

from library_catalog.schemas import AuthorRef, BookRecord


@pytest.fixture
def collection():
    """A small catalog covering every status and some missing fields."""
    return [
        BookRecord(
            id="1",
            title="Zed",
            author="Anna Karen",
            categories=["Fiction"],
            isbn="9780306406157",
            status="available",
            average_rating=4.6,
            ratings_count=12,
            added_date=datetime(2024, 3, 1),
            loan_count=4,
        ),
        BookRecord(
            id="2",
            title="Ann",
            author="Bob Smith",
            categories=["History", "Europe"],
            isbn="043942089X",
            status="loaned",
            average_rating=2.0,
            ratings_count=3,
            added_date=datetime(2023, 6, 15),
            loan_count=9,
        ),
        BookRecord(
            id="3",
            title="émile",
            author="Jean-Jacques Rousseau",
            authors_data=[AuthorRef(name="J.-J. Rousseau", open_library_id="OL123A")],
            categories=["Philosophy"],
            status="borrowed",
            average_rating=None,
        ),
        BookRecord(
            id="4",
            title=None,
            author=None,
            categories=[],
            status=None,
            average_rating=3.5,
        ),
        BookRecord(
            id="5",
            title="Eddy",
            author="Carla Diaz",
            categories=["Science Fiction"],
            status="unavailable",
            average_rating=0,
            loan_count=1,
        ),
    ]
