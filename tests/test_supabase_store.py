from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from collegegpt.core.errors import StoreError
from collegegpt.retrieval.store import (
    FACULTY_COLUMNS,
    PLACEMENT_COLUMNS,
    StoreSettings,
    SupabaseStore,
)


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.ops = []

    def select(self, columns):
        self.ops.append(("select", columns))
        return self

    def ilike(self, column, pattern):
        self.ops.append(("ilike", column, pattern))
        return self

    def eq(self, column, value):
        self.ops.append(("eq", column, value))
        return self

    def order(self, column, desc=False):
        self.ops.append(("order", column, desc))
        return self

    def limit(self, size):
        self.ops.append(("limit", size))
        return self

    def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.data)


class FakeClient:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.queries = []

    def table(self, name):
        query = FakeQuery(self.data, self.error)
        self.queries.append((name, query))
        return query

    @property
    def ops(self):
        return self.queries[-1][1].ops


def make_store(data=None, error=None, **settings):
    client = FakeClient(data, error)
    return SupabaseStore(client, StoreSettings(backend="supabase", **settings)), client


def test_faculty_department_listing_query():
    store, client = make_store([{"name": "Anita Patil", "department": "CSE"}])

    rows = store.faculty("cs", None, order_by_name=True)

    assert [r.name for r in rows] == ["Anita Patil"]
    assert client.queries[0][0] == "faculty_list"
    assert client.ops == [
        ("select", FACULTY_COLUMNS),
        ("ilike", "department", "%cs%"),
        ("order", "name", False),
    ]


def test_faculty_name_query_is_unordered():
    store, client = make_store([{"name": "Ramesh Kumar", "email": "ramesh@x.edu"}])

    rows = store.faculty(None, "ramesh")

    assert rows[0].email == "ramesh@x.edu"
    assert client.ops == [("select", FACULTY_COLUMNS), ("ilike", "name", "%ramesh%")]


def test_latest_placement_year_query():
    store, client = make_store([{"year": "2024-25"}], placements_table="Collage_placements")

    assert store.latest_placement_year() == "2024-25"
    assert client.queries[0][0] == "Collage_placements"
    assert client.ops == [("select", "year"), ("order", "year", True), ("limit", 1)]


def test_latest_placement_year_empty_table():
    store, _ = make_store([])
    assert store.latest_placement_year() is None


def test_highest_package_query():
    store, client = make_store(
        [{"year": "2024-25", "company_name": "Globex", "offers": 2, "salary_lpa": 9.0}]
    )

    rows = store.placements("2024-25", highest_only=True)

    assert rows[0].company_name == "Globex"
    assert client.ops == [
        ("select", PLACEMENT_COLUMNS),
        ("eq", "year", "2024-25"),
        ("order", "salary_lpa", True),
        ("limit", 1),
    ]


def test_company_offers_query():
    store, client = make_store([])

    assert store.placements("2024-25", company="infosys") == []
    assert ("ilike", "company_name", "%infosys%") in client.ops


def test_curriculum_query():
    store, client = make_store([{"branch": "CSE", "semester": "3", "subject": "Data Structures"}])

    rows = store.curriculum("cs", 3)

    assert rows[0].semester == 3
    assert client.ops[1:] == [
        ("ilike", "branch", "%cs%"),
        ("eq", "semester", 3),
        ("order", "semester", False),
    ]


def test_college_info_and_probe():
    store, _ = make_store([{"name": "HSIT", "address": "Nidasoshi"}])
    assert store.college_info().address == "Nidasoshi"
    assert store.probe() == {"rowsFetched": 1, "sampleRow": {"name": "HSIT", "address": "Nidasoshi"}}

    store, _ = make_store([])
    assert store.college_info() is None
    assert store.probe() == {"rowsFetched": 0, "sampleRow": None}


def test_missing_data_is_no_rows():
    store, _ = make_store(None)
    assert store.faqs() == []


def test_api_error_becomes_store_error():
    error = APIError({"message": "relation does not exist", "code": "42P01"})
    store, _ = make_store(error=error)

    with pytest.raises(StoreError, match="relation does not exist"):
        store.faqs()


def test_transport_error_becomes_store_error():
    store, _ = make_store(error=httpx.ConnectError("connection refused"))

    with pytest.raises(StoreError, match="store unreachable"):
        store.placements("2024-25")


def test_non_list_payload_is_store_error():
    store, _ = make_store({"name": "not a list"})

    with pytest.raises(StoreError, match="malformed response payload"):
        store.faculty(None, "x")


def test_malformed_row_is_store_error():
    store, _ = make_store([{"email": "x@y"}])

    with pytest.raises(StoreError, match="missing 'name'"):
        store.faculty(None, None)
