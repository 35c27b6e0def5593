"""
Data models for FRA Monitor.
"""

from enum import Enum
from typing import NamedTuple, Optional, TypedDict


class FRARecord(TypedDict, total=False):
    """
    One state's Forest Rights Act statistics for one reporting month/year.
    """

    id: str  # Assigned by the store, absent before persistence
    date: str  # Format: DD.MM.YYYY
    year: int  # Reporting year
    month: str  # Month name, e.g. "June"
    state: str  # Proper-case state name, never "TOTAL"
    individualClaimsReceived: int
    communityClaimsReceived: int
    totalClaimsReceived: int
    individualTitlesDistributed: int
    communityTitlesDistributed: int
    totalTitlesDistributed: int
    claimsRejected: int
    totalClaimsDisposedOff: int
    percentageClaimsDisposedOff: float  # Informational only, never used for rates
    areaHaIFRTitlesDistributed: float  # Hectares
    areaHaCFRTitlesDistributed: float  # Hectares
    uploadDate: str  # ISO 8601 ingestion timestamp
    fileName: str  # Source PDF filename
    fileSize: int  # Source PDF size in bytes


class Coordinates(TypedDict):
    """
    Geographic position of a land grant.
    """

    lat: float  # [-90, 90]
    lng: float  # [-180, 180]


class PattaHolder(TypedDict, total=False):
    """
    A recognized title-holder with a specific land grant and location.
    """

    id: str
    claimNumber: str
    applicantName: str
    applicantAddress: str
    village: str
    district: str
    state: str
    claimType: str  # "Individual" or "Community"
    landArea: float  # Hectares, > 0
    landDescription: str
    coordinates: Coordinates
    createdAt: str
    updatedAt: str


class Totals(TypedDict):
    """
    Aggregated KPI figures for a set of records.
    """

    totalClaimsReceived: int
    totalTitlesDistributed: int
    totalForestLand: float
    totalDisposed: int
    disposalRate: float
    stateCount: int


class StateGroup(TypedDict):
    """
    Claims and titles summed for one state.
    """

    state: str
    claims: int
    titles: int


class TrendPoint(TypedDict):
    """
    Claims and titles summed for one (year, month) period.
    """

    year: int
    month: str
    claims: int
    titles: int
    count: int


class ClaimType(Enum):
    """
    Kinds of forest rights claims.
    """

    INDIVIDUAL = "Individual"
    COMMUNITY = "Community"


class FileStatus(Enum):
    """
    States of a queued upload.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FilterState(NamedTuple):
    """
    Active dashboard filters. Each field is a value or "all".
    """

    state: str = "all"
    year: str = "all"
    month: str = "all"

    def replace(self, **changes) -> "FilterState":
        """Return a copy with the given fields replaced."""
        return self._replace(**changes)

    def is_active(self) -> bool:
        """Whether any field narrows the record set."""
        return any(value != "all" for value in self)


class FRAMonitorError(Exception):
    """Base class for all framonitor exceptions."""

    pass


class ValidationError(FRAMonitorError):
    """Exception raised when boundary input is rejected."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ExtractionError(FRAMonitorError):
    """Exception raised when the extraction model fails."""

    pass


class RateLimitError(ExtractionError):
    """Exception raised when the extraction service throttles or runs out of quota."""

    pass


class StoreError(FRAMonitorError):
    """Exception raised for document store errors."""

    pass


class ConfigError(FRAMonitorError):
    """Exception raised for configuration errors."""

    pass


class OutputError(FRAMonitorError):
    """Exception raised for output errors."""

    pass
