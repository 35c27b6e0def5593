"""
Basic usage example for FRA Monitor.

Filters and aggregates the bundled sample records without a database.
"""

from framonitor import FilterState, aggregate_totals, filter_records, monthly_trend, top_states, update_filters
from framonitor.aggregator import CFR_FIELDS, IFR_FIELDS
from framonitor.sample_data import sample_records


def main():
    """
    Basic usage example.
    """
    records = sample_records()
    print(f"Loaded {len(records)} sample records")

    # All records
    totals = aggregate_totals(records)
    print(f"\nClaims received:    {totals['totalClaimsReceived']:,}")
    print(f"Titles distributed: {totals['totalTitlesDistributed']:,}")
    print(f"Disposal rate:      {totals['disposalRate']:.1f}%")
    print(f"States:             {totals['stateCount']}")

    print("\nTop states by community claims:")
    for group in top_states(records, CFR_FIELDS, limit=3):
        print(f"  {group['state']}: {group['claims']:,} claims, {group['titles']:,} titles")

    print("\nMonthly trend:")
    for point in monthly_trend(records):
        print(f"  {point['month']} {point['year']}: {point['claims']:,} claims ({point['count']} records)")

    # Narrow to one state, then one month
    filters = FilterState(state="madhya-pradesh")
    print(f"\nMadhya Pradesh: {len(filter_records(records, filters))} records")

    filters = update_filters(FilterState(), year="2025", month="june")
    june = filter_records(records, filters)
    print(f"June 2025: {len(june)} records")
    for group in top_states(june, IFR_FIELDS):
        print(f"  {group['state']}: {group['claims']:,} individual claims")


if __name__ == "__main__":
    main()
