"""
Dashboard session state for FRA Monitor.

A session holds the loaded record list and the active filters. Both are
replaced wholesale, never edited in place; every derived view is
recomputed from them through the aggregator.
"""

import datetime
from typing import Any, Callable, Dict, List, Optional

from framonitor import aggregator
from framonitor.filters import filter_records, update_filters
from framonitor.log import get_logger
from framonitor.model import FilterState, FRAMonitorError, FRARecord

logger = get_logger(__name__)

REFRESH_ERROR = "Failed to refresh data"


def apply_year_selection(filters: FilterState, year: str) -> FilterState:
    """
    Select a reporting year the way the dashboard does.

    Picking a specific year resets the month to "all", since the month
    list depends on the year. Picking "all" leaves the month alone.
    """
    if year != "all":
        return update_filters(filters, year=year, month="all")
    return update_filters(filters, year=year)


class Dashboard:
    """A dashboard session over a record source."""

    def __init__(self, loader: Callable[[], List[FRARecord]],
                 filters: Optional[FilterState] = None, top_n: int = 10):
        self.loader = loader
        self.filters = filters or FilterState()
        self.top_n = top_n
        self.records: List[FRARecord] = []
        self.error: Optional[str] = None
        self.loading = False
        self.last_updated: Optional[datetime.datetime] = None

    def refresh(self) -> bool:
        """
        Reload records from the source.

        On failure the last-known-good records stay in place and the
        error message is set.

        Returns:
            True if the reload succeeded
        """
        self.loading = True
        try:
            records = self.loader()
        except FRAMonitorError as e:
            logger.error(f"Error fetching data: {e}")
            self.error = REFRESH_ERROR
            return False
        finally:
            self.loading = False

        self.records = list(records)
        self.error = None
        self.last_updated = datetime.datetime.now()
        logger.info(f"Loaded {len(self.records)} records")
        return True

    def set_filters(self, **changes) -> FilterState:
        """Replace individual filter fields."""
        self.filters = update_filters(self.filters, **changes)
        return self.filters

    def select_year(self, year: str) -> FilterState:
        """Change the year, resetting the month for a specific year."""
        self.filters = apply_year_selection(self.filters, year)
        return self.filters

    def clear_filters(self) -> FilterState:
        self.filters = FilterState()
        return self.filters

    def add_record(self, record: FRARecord) -> None:
        """Show a freshly ingested record without a full reload."""
        self.records = [record] + self.records

    @property
    def filtered_records(self) -> List[FRARecord]:
        return filter_records(self.records, self.filters)

    def month_options(self) -> List[str]:
        """Months available for the selected year."""
        return aggregator.available_months(self.records, self.filters.year)

    def views(self) -> Dict[str, Any]:
        """
        Compute every derived view for the current filters.

        Returns:
            Dictionary of stats, rankings, trends, map data and filter options
        """
        visible = self.filtered_records
        lookup = aggregator.state_lookup(visible)
        max_claims = max((entry["claims"] for entry in lookup.values()), default=0)
        for entry in lookup.values():
            entry["size"] = aggregator.marker_size(entry["claims"], max_claims)

        return {
            "filters": self.filters._asdict(),
            "recordCount": len(visible),
            "stats": aggregator.aggregate_totals(visible),
            "ifrTopStates": aggregator.top_states(visible, aggregator.IFR_FIELDS, self.top_n),
            "cfrTopStates": aggregator.top_states(visible, aggregator.CFR_FIELDS, self.top_n),
            "monthlyTrend": aggregator.monthly_trend(visible),
            "claimsStatus": aggregator.disposal_breakdown(visible),
            "map": lookup,
            "availableYears": aggregator.available_years(self.records),
            "availableMonths": self.month_options(),
            "error": self.error,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }
