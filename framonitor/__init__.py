"""
FRA Monitor - Forest Rights Act Monitoring System.

A system for extracting state-wise FRA statistics from government PDF
reports and serving filterable analytics over them.
"""

__version__ = "0.1.0"

from framonitor.model import FRARecord, PattaHolder, FilterState, ClaimType
from framonitor.config import Config, MongoDBConfig, load_config
from framonitor.aggregator import aggregate_totals, group_by_state, monthly_trend, top_states
from framonitor.filters import filter_records, update_filters

__all__ = [
    "FRARecord",
    "PattaHolder",
    "FilterState",
    "ClaimType",
    "Config",
    "MongoDBConfig",
    "load_config",
    "aggregate_totals",
    "group_by_state",
    "monthly_trend",
    "top_states",
    "filter_records",
    "update_filters",
]
