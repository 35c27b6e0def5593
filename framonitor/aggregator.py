"""
Aggregation of FRA records into dashboard views.

Every function here is pure: the same list of records always yields the
same result, nothing is read from or written to the store, and malformed
numeric fields (missing, None, non-numeric, negative) count as zero
instead of raising.
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from framonitor.model import FRARecord, StateGroup, Totals, TrendPoint
from framonitor.states import state_centroid, state_key

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_LOOKUP = {}
for _i, _name in enumerate(MONTHS, 1):
    _MONTH_LOOKUP[_name.lower()] = _i
    _MONTH_LOOKUP[_name[:3].lower()] = _i
    _MONTH_LOOKUP[str(_i)] = _i
    _MONTH_LOOKUP[f"{_i:02d}"] = _i
_MONTH_LOOKUP["sept"] = 9

# Sort position for month names missing from the table
UNKNOWN_MONTH = len(MONTHS) + 1

# (claims field, titles field) pairs for group_by_state
FieldPair = Tuple[str, str]
IFR_FIELDS: FieldPair = ("individualClaimsReceived", "individualTitlesDistributed")
CFR_FIELDS: FieldPair = ("communityClaimsReceived", "communityTitlesDistributed")
TOTAL_FIELDS: FieldPair = ("totalClaimsReceived", "totalTitlesDistributed")


def month_index(name: Any) -> Optional[int]:
    """
    Return the calendar position (1-12) of a month name.

    Accepts full names and three-letter abbreviations in any case, and
    the numbers 1-12. Returns None for anything else.
    """
    if name is None:
        return None
    return _MONTH_LOOKUP.get(str(name).strip().lower())


def numeric(value: Any):
    """
    Coerce a record field into a non-negative number.

    Args:
        value: Raw field value

    Returns:
        The number, or 0 when the value is missing, malformed or negative
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.replace(",", "").strip())
        except ValueError:
            return 0
        if value.is_integer():
            value = int(value)
    if not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value if value > 0 else 0


def _year(record: FRARecord) -> int:
    return int(numeric(record.get("year")))


def aggregate_totals(records: Iterable[FRARecord]) -> Totals:
    """
    Compute KPI totals for a set of records.

    The disposal rate is recomputed from totalClaimsDisposedOff and
    totalClaimsReceived; percentageClaimsDisposedOff is never read. It is
    0 when no claims were received, so a 0% rate alone does not mean
    nothing was disposed.

    Args:
        records: FRA records

    Returns:
        Totals with claims, titles, forest land, disposed, disposal rate
        and the number of distinct state strings
    """
    claims = 0
    titles = 0
    forest_land = 0.0
    disposed = 0
    states = set()

    for record in records:
        claims += numeric(record.get("totalClaimsReceived"))
        titles += numeric(record.get("totalTitlesDistributed"))
        forest_land += numeric(record.get("areaHaIFRTitlesDistributed"))
        forest_land += numeric(record.get("areaHaCFRTitlesDistributed"))
        disposed += numeric(record.get("totalClaimsDisposedOff"))
        if record.get("state") is not None:
            states.add(record["state"])

    return {
        "totalClaimsReceived": claims,
        "totalTitlesDistributed": titles,
        "totalForestLand": forest_land,
        "totalDisposed": disposed,
        "disposalRate": (disposed / claims) * 100 if claims > 0 else 0.0,
        "stateCount": len(states),
    }


def group_by_state(records: Iterable[FRARecord], fields: FieldPair = TOTAL_FIELDS) -> List[StateGroup]:
    """
    Sum a pair of fields per state.

    Args:
        records: FRA records
        fields: (claims field, titles field) to sum, e.g. IFR_FIELDS

    Returns:
        One {state, claims, titles} entry per distinct state, in the order
        each state first appears
    """
    claims_field, titles_field = fields
    groups: Dict[str, StateGroup] = {}

    for record in records:
        name = record.get("state")
        if name is None:
            continue
        group = groups.get(name)
        if group is None:
            group = {"state": name, "claims": 0, "titles": 0}
            groups[name] = group
        group["claims"] += numeric(record.get(claims_field))
        group["titles"] += numeric(record.get(titles_field))

    return list(groups.values())


def top_states(records: Iterable[FRARecord], fields: FieldPair = TOTAL_FIELDS, limit: int = 10) -> List[StateGroup]:
    """
    Rank states by claims, highest first.

    Ties keep their grouping order (sorted() is stable).
    """
    ranked = sorted(group_by_state(records, fields), key=lambda g: g["claims"], reverse=True)
    return ranked[:limit]


def monthly_trend(records: Iterable[FRARecord]) -> List[TrendPoint]:
    """
    Sum total claims and titles per reporting period.

    Periods are ordered by year, then by calendar month. Month names that
    are not in MONTHS sort after every known month of the same year, in
    the order they first appear.

    Args:
        records: FRA records

    Returns:
        One {year, month, claims, titles, count} entry per (year, month)
    """
    periods: Dict[Tuple[int, str], TrendPoint] = {}

    for record in records:
        year = _year(record)
        month = str(record.get("month") or "")
        point = periods.get((year, month))
        if point is None:
            point = {"year": year, "month": month, "claims": 0, "titles": 0, "count": 0}
            periods[(year, month)] = point
        point["claims"] += numeric(record.get("totalClaimsReceived"))
        point["titles"] += numeric(record.get("totalTitlesDistributed"))
        point["count"] += 1

    return sorted(
        periods.values(),
        key=lambda p: (p["year"], month_index(p["month"]) or UNKNOWN_MONTH),
    )


def state_lookup(records: Iterable[FRARecord]) -> Dict[str, Dict[str, Any]]:
    """
    Build a state-keyed summary for the map view.

    Keys are normalized state keys ("madhya-pradesh"), so differently
    spaced spellings of one state are merged.

    Args:
        records: FRA records

    Returns:
        Mapping of key to {name, claims, titles, forestLand, records, coordinates}
    """
    lookup: Dict[str, Dict[str, Any]] = {}

    for record in records:
        name = record.get("state")
        if not name:
            continue
        key = state_key(name)
        entry = lookup.get(key)
        if entry is None:
            entry = {
                "name": name,
                "claims": 0,
                "titles": 0,
                "forestLand": 0.0,
                "records": 0,
                "coordinates": state_centroid(name),
            }
            lookup[key] = entry
        entry["claims"] += numeric(record.get("totalClaimsReceived"))
        entry["titles"] += numeric(record.get("totalTitlesDistributed"))
        entry["forestLand"] += numeric(record.get("areaHaIFRTitlesDistributed"))
        entry["forestLand"] += numeric(record.get("areaHaCFRTitlesDistributed"))
        entry["records"] += 1

    return lookup


def marker_size(claims: float, max_claims: float, min_size: float = 8, max_size: float = 35) -> float:
    """Scale a map marker radius linearly with claims."""
    if max_claims <= 0:
        return min_size
    return min_size + (numeric(claims) / max_claims) * (max_size - min_size)


def disposal_breakdown(records: Iterable[FRARecord]) -> Dict[str, int]:
    """
    Split received claims into titles distributed, rejected and pending.

    Pending is what remains of received claims after titles and
    rejections, and is never negative.
    """
    received = 0
    titles = 0
    rejected = 0
    for record in records:
        received += numeric(record.get("totalClaimsReceived"))
        titles += numeric(record.get("totalTitlesDistributed"))
        rejected += numeric(record.get("claimsRejected"))

    return {
        "titlesDistributed": titles,
        "rejected": rejected,
        "pending": max(received - titles - rejected, 0),
    }


def available_years(records: Iterable[FRARecord]) -> List[str]:
    """Distinct reporting years present, newest first, as strings."""
    years = {_year(record) for record in records if record.get("year") is not None}
    return [str(year) for year in sorted(years, reverse=True)]


def available_months(records: Sequence[FRARecord], year: str = "all") -> List[str]:
    """
    Distinct month names present, in calendar order.

    Args:
        records: FRA records
        year: Restrict to one reporting year, or "all"

    Returns:
        Month names as first spelled in the data
    """
    seen: Dict[str, str] = {}
    for record in records:
        if year != "all" and str(record.get("year")) != year:
            continue
        month = record.get("month")
        if not month:
            continue
        seen.setdefault(str(month).lower(), str(month))

    return sorted(seen.values(), key=lambda m: month_index(m) or UNKNOWN_MONTH)
