import pytest

from tests.factories import make_record


@pytest.fixture
def record():
    """Factory fixture: record(nps=9, date="01/01/2024", ...)."""
    return make_record
