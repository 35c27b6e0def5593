"""
Record construction and validation for FRA Monitor.

Extraction output is turned into FRA records here. Null counters ("NA/NR"
in the source table) become 0 and the aggregate TOTAL row is dropped, so
nothing downstream has to deal with either.
"""

import datetime
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from framonitor.aggregator import MONTHS, month_index
from framonitor.log import get_logger
from framonitor.model import FRARecord
from framonitor.states import canonical_state_name

logger = get_logger(__name__)

COUNT_FIELDS = [
    "individualClaimsReceived",
    "communityClaimsReceived",
    "totalClaimsReceived",
    "individualTitlesDistributed",
    "communityTitlesDistributed",
    "totalTitlesDistributed",
    "claimsRejected",
    "totalClaimsDisposedOff",
]

AREA_FIELDS = [
    "areaHaIFRTitlesDistributed",
    "areaHaCFRTitlesDistributed",
]

REQUIRED_FIELDS = ["date", "year", "month", "state"] + COUNT_FIELDS + AREA_FIELDS

DATE_PATTERN = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:$|[T ])")
_DMY_DATE = re.compile(r"^(\d{1,2})[./-](\d{1,2})[./-](\d{4})$")


def is_total_row(state: Optional[str]) -> bool:
    """Whether a table row is missing its state or is the aggregate TOTAL row."""
    return not state or not state.strip() or "TOTAL" in state.upper()


def coerce_count(value: Any) -> int:
    """
    Convert an extracted counter into an int.

    None and non-finite values become 0. Strings may carry digit grouping
    ("1,23,456").
    """
    return int(coerce_area(value))


def coerce_area(value: Any) -> float:
    """Convert an extracted area into a float, None and non-finite values becoming 0.0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip() or 0.0
    number = float(value)
    return number if math.isfinite(number) else 0.0


def format_report_date(when: datetime.datetime) -> str:
    """Format a timestamp as DD.MM.YYYY."""
    return when.strftime("%d.%m.%Y")


def normalize_report_date(value: Any) -> Optional[str]:
    """
    Rewrite a report date as DD.MM.YYYY.

    Accepts DD.MM.YYYY, D/M/YYYY, D-M-YYYY and ISO YYYY-MM-DD (with or
    without a time part).

    Args:
        value: Date as returned by the extraction model or read from the PDF

    Returns:
        The normalized date, or None when the value is missing, unparseable
        or not a real calendar date
    """
    if value is None:
        return None
    text = str(value).strip()

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = match.groups()
    else:
        match = _DMY_DATE.match(text)
        if not match:
            return None
        day, month, year = match.groups()

    try:
        return format_report_date(datetime.datetime(int(year), int(month), int(day)))
    except ValueError:
        return None


def canonical_month(month: Any, fallback: str) -> str:
    """
    Spell a month as its full calendar name.

    Unknown values are kept as given so they stay visible in the data.
    """
    if month is None or not str(month).strip():
        return fallback
    index = month_index(month)
    if index is None:
        return str(month).strip()
    return MONTHS[index - 1]


def build_records(
    report_info: Optional[Mapping[str, Any]],
    states_data: Iterable[Mapping[str, Any]],
    file_name: str,
    file_size: int,
    header_date: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> List[FRARecord]:
    """
    Build FRA records from one extracted document.

    Args:
        report_info: {date, year, month} from the report header, each optional
        states_data: One row per state as returned by the extraction model
        file_name: Source PDF filename
        file_size: Source PDF size in bytes
        header_date: DD.MM.YYYY read from the PDF, used when report_info has no
            usable date
        now: Ingestion time (defaults to the current UTC time)

    Returns:
        One record per state row, TOTAL rows excluded
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    info = dict(report_info or {})

    report_date = normalize_report_date(info.get("date"))
    if report_date is None:
        if info.get("date"):
            logger.warning(f"Unreadable report date {info['date']!r}, falling back")
        report_date = normalize_report_date(header_date)
    year = info.get("year")
    month = info.get("month")

    # Fill year/month from the report date before falling back to upload time
    if report_date:
        year = year or int(report_date[6:])
        if not month and month_index(report_date[3:5]):
            month = MONTHS[month_index(report_date[3:5]) - 1]

    date = report_date or format_report_date(now)
    year = year or now.year
    month = canonical_month(month, MONTHS[now.month - 1])

    upload_date = now.isoformat().replace("+00:00", "Z")

    records = []
    for row in states_data:
        state = row.get("state")
        if is_total_row(state):
            logger.debug(f"Skipping aggregate row: {state!r}")
            continue

        record: FRARecord = {
            "date": date,
            "year": int(year),
            "month": month,
            "state": canonical_state_name(state),
            "individualClaimsReceived": coerce_count(row.get("individualClaimsReceived")),
            "communityClaimsReceived": coerce_count(row.get("communityClaimsReceived")),
            "totalClaimsReceived": coerce_count(row.get("totalClaimsReceived")),
            "individualTitlesDistributed": coerce_count(row.get("individualTitlesDistributed")),
            "communityTitlesDistributed": coerce_count(row.get("communityTitlesDistributed")),
            "totalTitlesDistributed": coerce_count(row.get("totalTitlesDistributed")),
            # Not reported in the state-wise table format
            "claimsRejected": 0,
            "totalClaimsDisposedOff": 0,
            "percentageClaimsDisposedOff": 0,
            "areaHaIFRTitlesDistributed": coerce_area(row.get("areaHaIndividual")),
            "areaHaCFRTitlesDistributed": coerce_area(row.get("areaHaCommunity")),
            "uploadDate": upload_date,
            "fileName": file_name,
            "fileSize": file_size,
        }
        records.append(record)

    return records


def validate_records(records: List[FRARecord]) -> List[str]:
    """
    Check records against the FRA record contract.

    Problems are reported, not raised: the claim/title sums in particular
    are best-effort in the source reports.

    Args:
        records: Records to validate

    Returns:
        List of validation problems
    """
    errors = []

    for i, record in enumerate(records):
        label = record.get("state") or f"#{i}"

        for field in REQUIRED_FIELDS:
            if record.get(field) is None:
                errors.append(f"Record {label}: Missing {field}")

        if is_total_row(record.get("state")):
            errors.append(f"Record {label}: Aggregate row stored as a state")

        date = record.get("date")
        if date and not DATE_PATTERN.match(date):
            errors.append(f"Record {label}: Invalid date format: {date}")

        month = record.get("month")
        if month and month_index(month) is None:
            errors.append(f"Record {label}: Unrecognized month: {month}")

        for field in COUNT_FIELDS + AREA_FIELDS:
            value = record.get(field)
            if isinstance(value, (int, float)) and value < 0:
                errors.append(f"Record {label}: Negative {field}: {value}")

        for kind, parts in (
            ("claims", ("individualClaimsReceived", "communityClaimsReceived", "totalClaimsReceived")),
            ("titles", ("individualTitlesDistributed", "communityTitlesDistributed", "totalTitlesDistributed")),
        ):
            individual, community, total = (record.get(p) for p in parts)
            if None not in (individual, community, total) and individual + community != total:
                errors.append(
                    f"Record {label}: Total {kind} {total} != individual {individual} + community {community}"
                )

    return errors


def strip_store_fields(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of a record without store-assigned fields."""
    return {k: v for k, v in record.items() if k not in ("id", "_id")}
