"""
Report ingestion example for FRA Monitor.

Requires GEMINI_API_KEY in the environment and a running MongoDB.
"""

import sys

from framonitor import Config, MongoDBConfig
from framonitor.db.mongo import get_fra_records, setup_mongodb
from framonitor.ingest import process_queue, queue_from_paths
from framonitor.log import configure_logging
from framonitor.model import FileStatus


def main():
    """
    Ingestion example.
    """
    configure_logging(level="INFO")

    cfg = Config(mongodb=MongoDBConfig(uri="mongodb://localhost:27017", database="fra_monitor"))
    setup_mongodb(cfg.mongodb)

    # Replace with your report paths
    paths = sys.argv[1:] or ["./reports/fra_progress_report.pdf"]

    try:
        queue = process_queue(queue_from_paths(paths), cfg)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}")
        print("Pass FRA report PDFs on the command line or place one in ./reports")
        return

    for queued in queue:
        if queued.status == FileStatus.COMPLETED:
            print(f"{queued.name}: {queued.result.get_message()}")
            for entry in queued.result.failed:
                print(f"  failed to save {entry['state']}: {entry['error']}")
        else:
            print(f"{queued.name}: {queued.error}")

    print(f"\nStore now holds {len(get_fra_records(cfg.mongodb))} records")


if __name__ == "__main__":
    main()
