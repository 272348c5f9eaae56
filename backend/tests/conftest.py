import pytest

from planner.core.config import get_settings
from planner.schemas.slot import Slot
from planner.services.catalog import Catalog


@pytest.fixture(autouse=True)
def fresh_settings(): #settings are cached per process, so env changes in one test must not leak into the next
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def make_slot():
    def _make(subject="PS", type="lab", day="Monday", start=8, end=10, **extra):
        return Slot(subject=subject, type=type, day=day, start=start, end=end, **extra)

    return _make


@pytest.fixture()
def make_catalog(make_slot):
    def _make(*records):
        return Catalog(make_slot(**record) for record in records)

    return _make
