from datetime import date

import pytest

from cfa_tutor.models import Topic


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def catalog():
    """A small topic catalog independent of the seeded content."""
    return [
        Topic(id=1, name="Ethics"),
        Topic(id=2, name="Quantitative Methods"),
        Topic(id=3, name="Economics"),
        Topic(id=4, name="Fixed Income"),
    ]


@pytest.fixture
def start():
    return date(2026, 3, 2)
