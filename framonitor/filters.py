"""
Filter engine for FRA records.

Filters never raise for unknown values: a state, year or month that is
not present simply matches no records.
"""

from typing import Iterable, List

from framonitor.model import FilterState, FRARecord
from framonitor.states import state_key

ALL = "all"


def matches_state(record: FRARecord, state: str) -> bool:
    """
    Check a record against a state filter.

    Both sides are normalized with state_key(), so "Madhya   Pradesh"
    matches "madhya-pradesh".
    """
    if state == ALL:
        return True
    name = record.get("state")
    if not isinstance(name, str) or not isinstance(state, str):
        return False
    return state_key(name) == state_key(state)


def matches_year(record: FRARecord, year: str) -> bool:
    """Check a record's year against a year filter by its decimal string."""
    if year == ALL:
        return True
    value = record.get("year")
    if value is None:
        return False
    return str(value) == str(year)


def matches_month(record: FRARecord, month: str) -> bool:
    """Check a record's month against a month filter, ignoring case."""
    if month == ALL:
        return True
    value = record.get("month")
    if not isinstance(value, str) or not isinstance(month, str):
        return False
    return value.lower() == month.lower()


def matches(record: FRARecord, filters: FilterState) -> bool:
    """Whether a record passes every active filter."""
    return (
        matches_state(record, filters.state)
        and matches_year(record, filters.year)
        and matches_month(record, filters.month)
    )


def filter_records(records: Iterable[FRARecord], filters: FilterState) -> List[FRARecord]:
    """
    Narrow records to those matching the filter state.

    Args:
        records: Full record collection
        filters: Active filters

    Returns:
        New list of matching records, in input order
    """
    return [record for record in records if matches(record, filters)]


def update_filters(filters: FilterState, **changes) -> FilterState:
    """
    Return a new filter state with the given fields replaced.

    Fields are independent: changing one never touches another.

    Raises:
        ValueError: If a field name is not state, year or month
    """
    return filters.replace(**changes)


def get_state_data(records: Iterable[FRARecord], state: str) -> List[FRARecord]:
    """Records for one state, matched by normalized state key."""
    return [record for record in records if matches_state(record, state)]
