"""
Patta holder registry for FRA Monitor.
"""

import datetime
import math
from typing import Any, Dict, Iterable, List, Mapping

from framonitor.model import ClaimType, PattaHolder, ValidationError

REQUIRED_FIELDS = [
    "claimNumber",
    "applicantName",
    "applicantAddress",
    "village",
    "district",
    "state",
    "claimType",
    "landArea",
    "landDescription",
    "coordinates",
]

TEXT_FIELDS = [
    "claimNumber",
    "applicantName",
    "applicantAddress",
    "village",
    "district",
    "state",
    "landDescription",
]


def _to_float(value: Any, field: str, message: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(message, field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message, field=field)
    if not math.isfinite(number):
        raise ValidationError(message, field=field)
    return number


def validate_patta_submission(body: Mapping[str, Any], now: datetime.datetime = None) -> PattaHolder:
    """
    Validate a patta holder submission and build the holder.

    Args:
        body: Submitted form fields
        now: Creation time (defaults to the current UTC time)

    Returns:
        Patta holder ready to be stored

    Raises:
        ValidationError: With a message naming the offending field
    """
    if not isinstance(body, Mapping):
        raise ValidationError("Request body must be a JSON object")

    for field in REQUIRED_FIELDS:
        value = body.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Missing required field: {field}", field=field)

    try:
        claim_type = ClaimType(body["claimType"])
    except ValueError:
        options = ", ".join(t.value for t in ClaimType)
        raise ValidationError(f"Invalid claim type: {body['claimType']} (expected {options})", field="claimType")

    land_area = _to_float(body["landArea"], "landArea", "Land area must be a number")
    if land_area <= 0:
        raise ValidationError("Land area must be greater than 0", field="landArea")

    coordinates = body["coordinates"]
    if not isinstance(coordinates, Mapping) or coordinates.get("lat") in (None, "") \
            or coordinates.get("lng") in (None, ""):
        raise ValidationError("Invalid coordinates provided", field="coordinates")

    lat = _to_float(coordinates["lat"], "coordinates", "Invalid coordinates provided")
    lng = _to_float(coordinates["lng"], "coordinates", "Invalid coordinates provided")
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError("Invalid coordinates provided", field="coordinates")

    stamp = (now or datetime.datetime.now(datetime.timezone.utc)).isoformat().replace("+00:00", "Z")

    holder: PattaHolder = {field: str(body[field]).strip() for field in TEXT_FIELDS}
    holder.update({
        "claimType": claim_type.value,
        "landArea": land_area,
        "coordinates": {"lat": lat, "lng": lng},
        "createdAt": stamp,
        "updatedAt": stamp,
    })
    return holder


def filter_holders(
    holders: Iterable[PattaHolder],
    search: str = "",
    state: str = "all",
    claim_type: str = "all",
) -> List[PattaHolder]:
    """
    Narrow the holder list for the registry view.

    Args:
        holders: Patta holders
        search: Case-insensitive substring of name, claim number, village or district
        state: Exact state name, or "all"
        claim_type: "Individual", "Community", or "all"

    Returns:
        Matching holders in input order
    """
    term = search.strip().lower()
    matched = []
    for holder in holders:
        if term and not any(
            term in str(holder.get(field, "")).lower()
            for field in ("applicantName", "claimNumber", "village", "district")
        ):
            continue
        if state != "all" and holder.get("state") != state:
            continue
        if claim_type != "all" and holder.get("claimType") != claim_type:
            continue
        matched.append(holder)
    return matched


def summarize_holders(holders: Iterable[PattaHolder]) -> Dict[str, Any]:
    """Count holders by claim type and sum their land area."""
    summary = {"total": 0, "individual": 0, "community": 0, "totalArea": 0.0}
    for holder in holders:
        summary["total"] += 1
        if holder.get("claimType") == ClaimType.INDIVIDUAL.value:
            summary["individual"] += 1
        elif holder.get("claimType") == ClaimType.COMMUNITY.value:
            summary["community"] += 1
        summary["totalArea"] += float(holder.get("landArea") or 0)
    return summary


def holder_states(holders: Iterable[PattaHolder]) -> List[str]:
    """Distinct holder states, sorted."""
    return sorted({h["state"] for h in holders if h.get("state")})
