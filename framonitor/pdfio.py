"""
PDF I/O utilities for FRA Monitor.
"""

import io
import re
from typing import Optional

import pdfplumber

from framonitor.log import get_logger
from framonitor.model import ValidationError

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF-"
PDF_CONTENT_TYPES = ("application/pdf", "application/x-pdf")

# "as on 31.05.2025", "As on: 30/06/2025", "dated 01-06-2025"
REPORT_DATE_PATTERN = re.compile(
    r"(?:as\s+on|dated|as\s+of)\s*:?\s*(\d{1,2})[./-](\d{1,2})[./-](\d{4})",
    re.IGNORECASE,
)
ANY_DATE_PATTERN = re.compile(r"\b(\d{1,2})[./-](\d{1,2})[./-](\d{4})\b")


def validate_pdf_upload(
    data: Optional[bytes],
    filename: Optional[str],
    content_type: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> None:
    """
    Reject uploads that are missing, not PDFs, or too large.

    Args:
        data: Uploaded file content
        filename: Uploaded file name
        content_type: Declared MIME type, if any
        max_bytes: Size limit, if any

    Raises:
        ValidationError: If the upload is unusable
    """
    if not data or not filename:
        raise ValidationError("No file provided", field="file")

    if content_type and content_type.split(";")[0].strip().lower() not in PDF_CONTENT_TYPES:
        raise ValidationError("Only PDF files are supported", field="file")

    if not data.startswith(PDF_MAGIC):
        raise ValidationError("Only PDF files are supported", field="file")

    if max_bytes is not None and len(data) > max_bytes:
        raise ValidationError(
            f"File too large: {len(data)} bytes (limit {max_bytes} bytes)", field="file"
        )


def read_first_page_text(data: bytes) -> str:
    """
    Extract the text layer of the first page.

    Args:
        data: PDF content

    Returns:
        Page text, empty for scanned pages without a text layer
    """
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        if not pdf.pages:
            return ""
        return pdf.pages[0].extract_text() or ""


def find_report_date(text: str) -> Optional[str]:
    """
    Find the report date in header text.

    Prefers dates introduced by "as on"/"dated", then any date.

    Returns:
        Date in DD.MM.YYYY format or None if not found
    """
    match = REPORT_DATE_PATTERN.search(text) or ANY_DATE_PATTERN.search(text)
    if not match:
        return None

    day, month, year = match.groups()
    if not (1 <= int(day) <= 31 and 1 <= int(month) <= 12):
        return None
    return f"{day.zfill(2)}.{month.zfill(2)}.{year}"


def extract_report_date(data: bytes) -> Optional[str]:
    """
    Extract the report date from a PDF.

    Scanned reports have no text layer, in which case None is returned
    and the caller falls back to the upload date.

    Args:
        data: PDF content

    Returns:
        Report date in DD.MM.YYYY format or None if not found
    """
    try:
        return find_report_date(read_first_page_text(data))
    except Exception as e:
        logger.warning(f"Failed to extract report date: {e}")
        return None
