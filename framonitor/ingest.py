"""
Ingestion of FRA report PDFs.

A document goes through upload validation, AI extraction, record
construction and per-state persistence. Uploads are processed one file at
a time because the extraction service is rate-limited.
"""

import os
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from framonitor.config import Config
from framonitor.db.mongo import save_fra_records
from framonitor.extraction import extract_pdf_data
from framonitor.log import get_logger
from framonitor.model import FileStatus, FRAMonitorError, FRARecord
from framonitor.pdfio import extract_report_date, validate_pdf_upload
from framonitor.records import build_records, normalize_report_date, validate_records

logger = get_logger(__name__)


class IngestResult:
    """Outcome of ingesting one document."""

    def __init__(self, file_name: str, records: List[FRARecord],
                 saved: List[Dict[str, str]], failed: List[Dict[str, str]]):
        self.file_name = file_name
        self.records = records
        self.saved = saved
        self.failed = failed

    @property
    def states(self) -> List[str]:
        return [entry["state"] for entry in self.saved]

    def get_message(self) -> str:
        """Get a human-readable summary."""
        message = f"Successfully extracted and saved FRA data for {len(self.saved)} states"
        if self.failed:
            message += f" ({len(self.failed)} failed to save)"
        return message

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to the upload response body."""
        return {
            "success": True,
            "recordsCount": len(self.saved),
            "states": self.states,
            "savedRecords": self.saved,
            "failedStates": self.failed,
            "message": self.get_message(),
        }


class QueuedFile:
    """One file waiting in, or already through, the upload queue."""

    def __init__(self, name: str, data: bytes, content_type: Optional[str] = None):
        self.id = uuid.uuid4().hex[:9]
        self.name = name
        self.data = data
        self.size = len(data) if data else 0
        self.content_type = content_type
        self.status = FileStatus.PENDING
        self.result: Optional[IngestResult] = None
        self.error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a status row, without the file content."""
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "status": self.status.value,
            "extractedData": self.result.to_dict() if self.result else None,
            "error": self.error,
        }


def ingest_pdf(data: bytes, file_name: str, cfg: Config, content_type: Optional[str] = None) -> IngestResult:
    """
    Extract and persist the state-wise records of one PDF report.

    A failure to save one state is recorded and does not stop the others.

    Args:
        data: PDF content
        file_name: Original file name
        cfg: Application configuration
        content_type: Declared MIME type of the upload

    Returns:
        Ingest result

    Raises:
        ValidationError: If the upload is not a usable PDF
        ExtractionError: If the AI model fails (RateLimitError when throttled)
    """
    validate_pdf_upload(data, file_name, content_type, cfg.extraction.max_upload_bytes)

    extracted = extract_pdf_data(data, cfg.extraction)
    report_info = extracted.reportInfo.model_dump() if extracted.reportInfo else {}

    header_date = None
    if normalize_report_date(report_info.get("date")) is None and cfg.extraction.header_date_fallback:
        header_date = extract_report_date(data)
        if header_date:
            logger.info(f"Using report date from PDF header: {header_date}")

    records = build_records(
        report_info,
        [row.model_dump() for row in extracted.statesData],
        file_name=file_name,
        file_size=len(data),
        header_date=header_date,
    )

    for problem in validate_records(records):
        logger.warning(f"Validation warning in {file_name}: {problem}")

    outcome = save_fra_records(records, cfg.mongodb)
    result = IngestResult(file_name, records, outcome["saved"], outcome["failed"])
    logger.info(result.get_message())
    return result


def process_queue(
    files: List[QueuedFile],
    cfg: Config,
    on_update: Optional[Callable[[QueuedFile], None]] = None,
) -> List[QueuedFile]:
    """
    Ingest queued files sequentially.

    A failed file is marked failed and the queue moves on. Nothing is
    retried.

    Args:
        files: Files to process, in order
        cfg: Application configuration
        on_update: Called whenever a file changes status

    Returns:
        The same files with status, result and error filled in
    """
    for queued in files:
        queued.status = FileStatus.PROCESSING
        if on_update:
            on_update(queued)

        logger.info(f"Starting file processing: {queued.name}")
        try:
            queued.result = ingest_pdf(queued.data, queued.name, cfg, queued.content_type)
            queued.status = FileStatus.COMPLETED
        except FRAMonitorError as e:
            logger.error(f"File processing error for {queued.name}: {e}")
            queued.status = FileStatus.FAILED
            queued.error = str(e)
        except Exception as e:
            logger.exception(f"Unexpected error processing {queued.name}: {e}")
            queued.status = FileStatus.FAILED
            queued.error = str(e) or "Unknown error"

        if on_update:
            on_update(queued)

    return files


def queue_from_paths(paths: List[str]) -> List[QueuedFile]:
    """
    Read files from disk into queue entries.
    """
    queued = []
    for path in paths:
        with open(path, "rb") as f:
            queued.append(QueuedFile(os.path.basename(path), f.read()))
    return queued


def summarize_queue(files: List[QueuedFile]) -> Tuple[int, int, int]:
    """Return (completed files, failed files, records saved)."""
    completed = sum(1 for f in files if f.status == FileStatus.COMPLETED)
    failed = sum(1 for f in files if f.status == FileStatus.FAILED)
    saved = sum(len(f.result.saved) for f in files if f.result)
    return completed, failed, saved
