"""
API handlers for FRA Monitor.

Each handler returns (status code, JSON body) so it can be served by any
web framework; framonitor.server wires them into FastAPI.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from framonitor.aggregator import aggregate_totals
from framonitor.config import Config
from framonitor.db.mongo import get_fra_records, get_patta_holders, save_patta_holder
from framonitor.filters import filter_records
from framonitor.ingest import ingest_pdf
from framonitor.log import get_logger
from framonitor.model import (
    ExtractionError,
    FilterState,
    FRAMonitorError,
    RateLimitError,
    StoreError,
    ValidationError,
)
from framonitor.patta import validate_patta_submission

logger = get_logger(__name__)

Response = Tuple[int, Dict[str, Any]]


def filters_from_params(params: Mapping[str, Optional[str]]) -> FilterState:
    """
    Build a filter state from query parameters.

    Missing or empty parameters mean "all".
    """
    return FilterState(
        state=params.get("state") or "all",
        year=params.get("year") or "all",
        month=params.get("month") or "all",
    )


def get_fra_data(params: Mapping[str, Optional[str]], cfg: Config) -> Response:
    """
    Serve filtered FRA records, or their statistics with action=statistics.

    Args:
        params: Query parameters state, year, month, action
        cfg: Application configuration

    Returns:
        (status, body)
    """
    filters = filters_from_params(params)

    try:
        records = filter_records(get_fra_records(cfg.mongodb), filters)
    except StoreError as e:
        logger.error(f"Error fetching FRA data: {e}")
        return 500, {"error": "Failed to fetch FRA data"}

    if params.get("action") == "statistics":
        return 200, dict(aggregate_totals(records))

    return 200, {"success": True, "data": records, "count": len(records)}


def list_patta_holders(cfg: Config) -> Response:
    """Serve every patta holder."""
    try:
        holders = get_patta_holders(cfg.mongodb)
    except StoreError as e:
        logger.error(f"Error fetching patta holders: {e}")
        return 500, {"success": False, "error": "Failed to fetch patta holders"}

    return 200, {"success": True, "data": holders}


def create_patta_holder(body: Any, cfg: Config) -> Response:
    """
    Validate and store a patta holder submission.

    Args:
        body: Parsed JSON body
        cfg: Application configuration

    Returns:
        (status, body)
    """
    try:
        holder = validate_patta_submission(body)
    except ValidationError as e:
        return 400, {"success": False, "error": str(e)}

    try:
        holder_id = save_patta_holder(holder, cfg.mongodb)
    except StoreError as e:
        logger.error(f"Error saving patta holder: {e}")
        return 500, {"success": False, "error": "Failed to save patta holder"}

    return 200, {
        "success": True,
        "data": {"id": holder_id, **holder},
        "message": "Patta holder added successfully",
    }


def extract_pdf(data: Optional[bytes], file_name: Optional[str],
                content_type: Optional[str], cfg: Config) -> Response:
    """
    Ingest an uploaded PDF report.

    Args:
        data: File content, None when no file was sent
        file_name: Uploaded file name
        content_type: Declared MIME type
        cfg: Application configuration

    Returns:
        (status, body)
    """
    try:
        result = ingest_pdf(data, file_name, cfg, content_type)
    except ValidationError as e:
        return 400, {"error": str(e)}
    except RateLimitError as e:
        logger.warning(f"Extraction throttled: {e}")
        return 429, {"error": "Service temporarily unavailable. Please try again later."}
    except ExtractionError as e:
        logger.error(f"Error processing PDF: {e}")
        return 500, {"error": "AI model error. Please try again."}
    except FRAMonitorError as e:
        logger.error(f"Error processing PDF: {e}")
        return 500, {"error": "Failed to process PDF. Please ensure the file contains FRA data tables."}
    except Exception as e:
        logger.exception(f"Unexpected error processing PDF: {e}")
        return 500, {"error": "Failed to process PDF. Please ensure the file contains FRA data tables."}

    return 200, result.to_dict()
