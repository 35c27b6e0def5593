"""
Tests for the filters module.
"""

import pytest

from framonitor.filters import (
    filter_records,
    get_state_data,
    matches_month,
    matches_state,
    matches_year,
    update_filters,
)
from framonitor.model import FilterState
from framonitor.states import canonical_state_name, state_centroid, state_key


@pytest.fixture
def records(record_factory):
    """Records across states, years and months."""
    return [
        record_factory(state="Madhya Pradesh", year=2025, month="June", claims=10),
        record_factory(state="Odisha", year=2025, month="May", claims=20),
        record_factory(state="Odisha", year=2024, month="June", claims=30),
        record_factory(state="Jammu & Kashmir", year=2025, month="June", claims=40),
    ]


def test_state_key():
    """Test state_key normalization."""
    assert state_key("Madhya Pradesh") == "madhya-pradesh"
    assert state_key("  Madhya   Pradesh ") == "madhya-pradesh"
    assert state_key("madhya-pradesh") == "madhya-pradesh"
    assert state_key("Jammu & Kashmir") == "jammu-&-kashmir"


def test_canonical_state_name():
    """Test canonical_state_name spelling."""
    assert canonical_state_name("MADHYA PRADESH") == "Madhya Pradesh"
    assert canonical_state_name("odisha ") == "Odisha"
    assert canonical_state_name("new   territory") == "New Territory"


def test_state_centroid():
    """Test state_centroid lookup."""
    assert state_centroid("Odisha") == (20.9517, 85.0985)
    assert state_centroid("Nowhere") is None


def test_filter_all_returns_everything(records):
    """Test that the default filter state passes every record."""
    filtered = filter_records(records, FilterState())

    assert filtered == records
    assert filtered is not records


def test_filter_by_state_key(records):
    """Test state filtering with a hyphenated key."""
    filtered = filter_records(records, FilterState(state="madhya-pradesh"))

    assert [r["totalClaimsReceived"] for r in filtered] == [10]


def test_filter_by_state_name(records):
    """Test state filtering with a spaced, mixed-case name."""
    filtered = filter_records(records, FilterState(state="ODISHA"))

    assert len(filtered) == 2
    assert all(r["state"] == "Odisha" for r in filtered)


def test_filter_by_year(records):
    """Test year filtering compares decimal strings."""
    filtered = filter_records(records, FilterState(year="2024"))

    assert len(filtered) == 1
    assert filtered[0]["totalClaimsReceived"] == 30


def test_filter_by_month_case_insensitive(records):
    """Test month filtering ignores case."""
    filtered = filter_records(records, FilterState(month="june"))

    assert [r["totalClaimsReceived"] for r in filtered] == [10, 30, 40]


def test_filter_combined(records):
    """Test that all three filters apply together."""
    filters = FilterState(state="odisha", year="2025", month="May")

    filtered = filter_records(records, filters)

    assert [r["totalClaimsReceived"] for r in filtered] == [20]


def test_filter_unknown_values(records):
    """Test that unknown filter values match nothing without raising."""
    assert filter_records(records, FilterState(state="atlantis")) == []
    assert filter_records(records, FilterState(year="1999")) == []
    assert filter_records(records, FilterState(month="Smarch")) == []


def test_filter_preserves_order(records):
    """Test that filtering keeps input order."""
    filtered = filter_records(records, FilterState(year="2025"))

    assert [r["state"] for r in filtered] == ["Madhya Pradesh", "Odisha", "Jammu & Kashmir"]


def test_matches_malformed_records():
    """Test matching records with missing or non-string fields."""
    assert not matches_state({"state": None}, "odisha")
    assert not matches_state({}, "odisha")
    assert matches_state({}, "all")
    assert not matches_year({}, "2025")
    assert matches_year({"year": "2025"}, "2025")
    assert not matches_month({"month": 6}, "June")


def test_update_filters_independent():
    """Test that update_filters only replaces the given field."""
    filters = FilterState(state="odisha", year="2025", month="June")

    updated = update_filters(filters, year="2024")

    assert updated == FilterState(state="odisha", year="2024", month="June")
    assert filters.year == "2025"


def test_update_filters_unknown_field():
    """Test that update_filters rejects unknown fields."""
    with pytest.raises(ValueError):
        update_filters(FilterState(), district="Koraput")


def test_get_state_data(records):
    """Test get_state_data selects one state's records."""
    data = get_state_data(records, "jammu-&-kashmir")

    assert len(data) == 1
    assert data[0]["state"] == "Jammu & Kashmir"
