"""
Output writers for FRA Monitor.
"""

import csv
import json
import os
from typing import List

from framonitor.config import OutputConfig
from framonitor.log import get_logger
from framonitor.model import FRARecord, OutputError
from framonitor.records import AREA_FIELDS, COUNT_FIELDS, validate_records

logger = get_logger(__name__)

CSV_FIELDS = (
    ["id", "date", "year", "month", "state"]
    + COUNT_FIELDS
    + ["percentageClaimsDisposedOff"]
    + AREA_FIELDS
    + ["uploadDate", "fileName", "fileSize"]
)


def write_outputs(records: List[FRARecord], cfg: OutputConfig) -> None:
    """
    Write records to all configured output formats.

    Args:
        records: List of records to write
        cfg: Output configuration
    """
    logger.info(f"Writing {len(records)} records to outputs")

    for error in validate_records(records):
        logger.warning(f"Validation error: {error}")

    if cfg.json_path:
        write_json(records, cfg.json_path, cfg.pretty_json)

    if cfg.csv_path:
        write_csv(records, cfg.csv_path)

    if cfg.ndjson_path:
        write_ndjson(records, cfg.ndjson_path)


def _ensure_parent(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def write_json(records: List[FRARecord], path: str, pretty: bool = True) -> None:
    """
    Write records to a JSON file.

    Args:
        records: List of records to write
        path: Output file path
        pretty: Whether to pretty-print the JSON
    """
    logger.info(f"Writing JSON to {path}")

    try:
        _ensure_parent(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2 if pretty else None, ensure_ascii=False)
        logger.info(f"Wrote {len(records)} records to {path}")
    except (OSError, TypeError) as e:
        logger.error(f"Error writing JSON to {path}: {e}")
        raise OutputError(f"Error writing JSON to {path}: {e}")


def write_csv(records: List[FRARecord], path: str) -> None:
    """
    Write records to a CSV file, one row per record.

    Args:
        records: List of records to write
        path: Output file path
    """
    logger.info(f"Writing CSV to {path}")

    try:
        _ensure_parent(path)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
            writer.writeheader()
            for record in records:
                writer.writerow({field: record.get(field, "") for field in CSV_FIELDS})
        logger.info(f"Wrote {len(records)} rows to {path}")
    except OSError as e:
        logger.error(f"Error writing CSV to {path}: {e}")
        raise OutputError(f"Error writing CSV to {path}: {e}")


def write_ndjson(records: List[FRARecord], path: str) -> None:
    """
    Write records to an NDJSON file, one record per line.

    Args:
        records: List of records to write
        path: Output file path
    """
    logger.info(f"Writing NDJSON to {path}")

    try:
        _ensure_parent(path)
        with open(path, "w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        logger.info(f"Wrote {len(records)} lines to {path}")
    except (OSError, TypeError) as e:
        logger.error(f"Error writing NDJSON to {path}: {e}")
        raise OutputError(f"Error writing NDJSON to {path}: {e}")
