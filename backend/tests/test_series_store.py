"""Unit tests for series store implementations."""
import pytest
from app.config import Settings
from app.services.sample_data import generate_demo_series, sample_stores
from app.services.series_store import (
    LocalSeriesStore,
    SupabaseSeriesStore,
    is_table_missing_error,
)


class FakeQuery:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.filters = []

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def execute(self):
        if self.error:
            raise self.error
        return self


class FakeSupabase:
    """Minimal stand-in for the supabase client's table API."""

    def __init__(self, tables):
        self.tables = tables
        self.queries = []

    def table(self, name):
        query = self.tables[name]
        self.queries.append((name, query))
        return query


class TestLocalSeriesStore:
    """Test the local cache backed store."""

    def test_cached_series_preferred(self):
        store = LocalSeriesStore(series_by_store={"s1": [{"date": "2024-01-01", "sales": 1}]}, stores={})
        assert store.fetch_series("s1") == [{"date": "2024-01-01", "sales": 1}]

    def test_demo_series(self):
        store = LocalSeriesStore(series_by_store={}, stores={})
        rows = store.fetch_series("main-street-coffee")
        assert len(rows) == 60

    def test_unknown_store_is_empty(self):
        store = LocalSeriesStore(series_by_store={}, stores={})
        assert store.fetch_series("nope") == []

    def test_demo_disabled(self):
        store = LocalSeriesStore(series_by_store={}, stores={}, include_demo=False)
        assert store.fetch_series("main-street-coffee") == []
        assert store.list_stores() == []

    def test_list_stores_merges_cache_over_demo(self):
        store = LocalSeriesStore(
            series_by_store={},
            stores={"main-street-coffee": {"name": "Renamed Coffee"}, "s2": {"name": "Corner Shop"}},
        )
        profiles = {profile["id"]: profile for profile in store.list_stores()}

        assert set(profiles) == set(sample_stores) | {"s2"}
        assert profiles["main-street-coffee"]["name"] == "Renamed Coffee"


class TestSupabaseSeriesStore:
    """Test the Supabase backed store."""

    @pytest.fixture
    def settings(self):
        return Settings(supabase_url="", supabase_service_role_key="")

    def test_fetch_series(self, settings):
        query = FakeQuery(data=[{"store_id": "s1", "date": "2024-01-01", "sales": 10}])
        client = FakeSupabase({"store_series": query})

        rows = SupabaseSeriesStore(client, settings).fetch_series("s1")

        assert rows == [{"store_id": "s1", "date": "2024-01-01", "sales": 10}]
        assert query.filters == [("store_id", "s1")]

    def test_missing_table_falls_back(self, settings):
        client = FakeSupabase({
            "store_series": FakeQuery(error=RuntimeError("PGRST205: Could not find the table")),
        })
        fallback = LocalSeriesStore(series_by_store={"s1": [{"date": "2024-01-01"}]}, stores={})

        rows = SupabaseSeriesStore(client, settings, fallback=fallback).fetch_series("s1")
        assert rows == [{"date": "2024-01-01"}]

    def test_other_errors_propagate(self, settings):
        client = FakeSupabase({"store_series": FakeQuery(error=RuntimeError("connection reset"))})
        with pytest.raises(RuntimeError):
            SupabaseSeriesStore(client, settings).fetch_series("s1")

    def test_list_stores(self, settings):
        client = FakeSupabase({"stores": FakeQuery(data=[{"id": "s1", "name": "Shop"}])})
        assert SupabaseSeriesStore(client, settings).list_stores() == [{"id": "s1", "name": "Shop"}]


def test_is_table_missing_error():
    assert is_table_missing_error(Exception('relation "store_series" does not exist'))
    assert not is_table_missing_error(Exception("timeout"))


def test_demo_series_is_reproducible():
    assert generate_demo_series("pine-bluff-auto") == generate_demo_series("pine-bluff-auto")
