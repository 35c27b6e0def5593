"""
Command-line interface for FRA Monitor.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

from framonitor import aggregator
from framonitor.config import Config, load_config
from framonitor.db.mongo import get_fra_records, save_fra_records, setup_mongodb
from framonitor.filters import filter_records
from framonitor.ingest import process_queue, queue_from_paths, summarize_queue
from framonitor.log import configure_logging, get_logger
from framonitor.model import FileStatus, FilterState
from framonitor.sample_data import sample_records
from framonitor.writers import write_outputs

logger = get_logger(__name__)


def _filters(args: argparse.Namespace) -> FilterState:
    return FilterState(state=args.state, year=args.year, month=args.month)


def _expand_inputs(patterns: List[str]) -> List[str]:
    files = []
    for pattern in patterns:
        path = Path(pattern)
        if path.is_file():
            files.append(str(path))
            continue
        for match in sorted(Path().glob(pattern)):
            if match.is_file():
                files.append(str(match))
    return files


def cmd_ingest(args: argparse.Namespace, config: Config) -> int:
    files = _expand_inputs(args.files)
    if not files:
        logger.error("No input files found")
        return 1

    queue = process_queue(queue_from_paths(files), config)
    completed, failed, saved = summarize_queue(queue)

    for queued in queue:
        if queued.status == FileStatus.COMPLETED:
            print(f"✓ {queued.name}: {queued.result.get_message()}")
        else:
            print(f"✗ {queued.name}: {queued.error}")

    logger.info(f"Processed {len(queue)} files ({completed} completed, {failed} failed), saved {saved} records")
    return 0 if failed == 0 else 1


def cmd_stats(args: argparse.Namespace, config: Config) -> int:
    records = filter_records(get_fra_records(config.mongodb), _filters(args))
    top_n = args.top or config.dashboard.top_n

    report = {
        "stats": aggregator.aggregate_totals(records),
        "ifrTopStates": aggregator.top_states(records, aggregator.IFR_FIELDS, top_n),
        "cfrTopStates": aggregator.top_states(records, aggregator.CFR_FIELDS, top_n),
        "monthlyTrend": aggregator.monthly_trend(records),
    }

    if args.json:
        print(json.dumps(report, indent=2))
        return 0

    stats = report["stats"]
    print(f"\nRecords:              {len(records)}")
    print(f"States:               {stats['stateCount']}")
    print(f"Claims received:      {stats['totalClaimsReceived']:,}")
    print(f"Titles distributed:   {stats['totalTitlesDistributed']:,}")
    print(f"Forest land (ha):     {stats['totalForestLand']:,.2f}")
    print(f"Disposal rate:        {stats['disposalRate']:.2f}%")

    print(f"\nTop {top_n} states by individual claims:")
    for i, group in enumerate(report["ifrTopStates"], 1):
        print(f"  {i:>2}. {group['state']:<20} claims {group['claims']:>10,}  titles {group['titles']:>10,}")

    print("\nMonthly trend:")
    for point in report["monthlyTrend"]:
        print(f"  {point['month']} {point['year']}: claims {point['claims']:,}, "
              f"titles {point['titles']:,} ({point['count']} records)")
    return 0


def cmd_seed(args: argparse.Namespace, config: Config) -> int:
    outcome = save_fra_records(sample_records(), config.mongodb)
    for entry in outcome["saved"]:
        logger.info(f"Created record with ID: {entry['recordId']}")
    for entry in outcome["failed"]:
        logger.error(f"Error creating record for {entry['state']}: {entry['error']}")
    return 0 if not outcome["failed"] else 1


def cmd_export(args: argparse.Namespace, config: Config) -> int:
    output = config.output.model_copy(update={
        key: value for key, value in (
            ("json_path", args.json),
            ("csv_path", args.csv),
            ("ndjson_path", args.ndjson),
        ) if value
    })
    records = filter_records(get_fra_records(config.mongodb), _filters(args))
    write_outputs(records, output)
    return 0


def cmd_setup_db(args: argparse.Namespace, config: Config) -> int:
    setup_mongodb(config.mongodb)
    return 0


def cmd_serve(args: argparse.Namespace, config: Config) -> int:
    from framonitor.server import run

    if args.port:
        config.server.port = args.port
    run(config)
    return 0


def cmd_ui(args: argparse.Namespace, config: Config) -> int:
    from framonitor.ui import create_ui

    create_ui(config).launch(server_port=args.port or config.server.ui_port, share=args.share)
    return 0


COMMANDS = {
    "ingest": cmd_ingest,
    "stats": cmd_stats,
    "seed": cmd_seed,
    "export": cmd_export,
    "setup-db": cmd_setup_db,
    "serve": cmd_serve,
    "ui": cmd_ui,
}


def process_command(args: argparse.Namespace) -> int:
    """
    Process command-line arguments.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    config = load_config(args.config)
    configure_logging(config, args.log_level)

    return COMMANDS[args.command](args, config)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--state", default="all", help="State name or key (e.g. madhya-pradesh)")
    parser.add_argument("--year", default="all", help="Reporting year")
    parser.add_argument("--month", default="all", help="Month name")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FRA Monitor")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    ingest_parser = subparsers.add_parser("ingest", help="Extract and store FRA data from PDF reports")
    ingest_parser.add_argument("files", nargs="+", help="PDF files or glob patterns")

    stats_parser = subparsers.add_parser("stats", help="Show aggregated statistics")
    _add_filter_arguments(stats_parser)
    stats_parser.add_argument("--top", type=int, help="Number of states in rankings")
    stats_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("seed", help="Store the sample records")

    export_parser = subparsers.add_parser("export", help="Export records to files")
    _add_filter_arguments(export_parser)
    export_parser.add_argument("--json", help="JSON output file")
    export_parser.add_argument("--csv", help="CSV output file")
    export_parser.add_argument("--ndjson", help="NDJSON output file")

    subparsers.add_parser("setup-db", help="Create MongoDB collections and indexes")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    ui_parser = subparsers.add_parser("ui", help="Run the dashboard UI")
    ui_parser.add_argument("--port", type=int, help="Port to run the UI on")
    ui_parser.add_argument("--share", action="store_true", help="Create a public link")

    return parser


def main(argv: List[str] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)

    try:
        return process_command(args)
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
