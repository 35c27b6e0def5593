"""
AI extraction of state-wise FRA tables from PDF reports.

The PDF is sent to a Gemini model which answers with JSON. The answer is
validated against ExtractionResult before anything is built from it.
"""

import json
import math
import re
from typing import List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from framonitor.config import ExtractionConfig
from framonitor.log import get_logger
from framonitor.model import ExtractionError, RateLimitError

logger = get_logger(__name__)

EXTRACTION_PROMPT = """You extract Forest Rights Act (FRA) statistics from Government of India progress reports.

The document contains a state-wise table with the columns
S.No. | States/UT | Claims received (Individual, Community, Total) |
Titles distributed (Individual, Community, Total) |
Extent of forest land for titles distributed in hectares (Individual, Community, Total).

Rules:
1. Return one entry in statesData for EVERY state row in the table (there are usually 20 or more).
2. Do not return the TOTAL row.
3. Write numbers without digit grouping: "1,23,456" is 123456.
4. Cells marked "NA", "NR", "NA/NR" or left blank are null, not 0.
5. Spell state names in proper case, e.g. "Andhra Pradesh", "Madhya Pradesh".
6. Read the report date (DD.MM.YYYY), year and month name from the header when present.

Answer with JSON only, shaped as:
{"reportInfo": {"date": "DD.MM.YYYY", "year": 2025, "month": "June"},
 "statesData": [{"state": "...", "individualClaimsReceived": 0, "communityClaimsReceived": 0,
   "totalClaimsReceived": 0, "individualTitlesDistributed": 0, "communityTitlesDistributed": 0,
   "totalTitlesDistributed": 0, "areaHaIndividual": 0, "areaHaCommunity": 0, "areaHaTotal": 0}]}
"""

NOT_AVAILABLE = {"", "na", "nr", "na/nr", "n/a", "-", "--", "nil"}

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ReportInfo(BaseModel):
    """
    Header information of a report.
    """

    date: Optional[str] = None  # DD.MM.YYYY
    year: Optional[int] = None
    month: Optional[str] = None

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return int(value) if value.isdigit() else None
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        return value

    @field_validator("month", mode="before")
    @classmethod
    def _month(cls, value):
        # Models sometimes answer with the month number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if math.isfinite(value) else None
        return value


class StateRow(BaseModel):
    """
    One state row of the extracted table. None means NA/NR.
    """

    state: str
    individualClaimsReceived: Optional[float] = None
    communityClaimsReceived: Optional[float] = None
    totalClaimsReceived: Optional[float] = None
    individualTitlesDistributed: Optional[float] = None
    communityTitlesDistributed: Optional[float] = None
    totalTitlesDistributed: Optional[float] = None
    areaHaIndividual: Optional[float] = None
    areaHaCommunity: Optional[float] = None
    areaHaTotal: Optional[float] = None

    @field_validator(
        "individualClaimsReceived",
        "communityClaimsReceived",
        "totalClaimsReceived",
        "individualTitlesDistributed",
        "communityTitlesDistributed",
        "totalTitlesDistributed",
        "areaHaIndividual",
        "areaHaCommunity",
        "areaHaTotal",
        mode="before",
    )
    @classmethod
    def _number(cls, value):
        if isinstance(value, str):
            cleaned = value.replace(",", "").strip()
            if cleaned.lower() in NOT_AVAILABLE:
                return None
            return cleaned
        return value

    @field_validator(
        "individualClaimsReceived",
        "communityClaimsReceived",
        "totalClaimsReceived",
        "individualTitlesDistributed",
        "communityTitlesDistributed",
        "totalTitlesDistributed",
        "areaHaIndividual",
        "areaHaCommunity",
        "areaHaTotal",
    )
    @classmethod
    def _finite(cls, value):
        # "NaN" and "Infinity" parse as floats
        if value is not None and not math.isfinite(value):
            return None
        return value


class ExtractionResult(BaseModel):
    """
    Validated model answer.
    """

    reportInfo: Optional[ReportInfo] = None
    statesData: List[StateRow] = Field(default_factory=list)


def parse_extraction_response(text: str) -> ExtractionResult:
    """
    Validate the model's JSON answer.

    Args:
        text: Raw response text, optionally wrapped in a ``` fence

    Returns:
        Validated extraction result

    Raises:
        ExtractionError: If the answer is not JSON or does not match the schema
    """
    cleaned = _FENCE.sub("", (text or "").strip())
    if not cleaned:
        raise ExtractionError("AI model returned an empty response")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"AI model returned invalid JSON: {e}")

    try:
        return ExtractionResult.model_validate(payload)
    except PydanticValidationError as e:
        raise ExtractionError(f"AI model response does not match the FRA schema: {e}")


def is_rate_limit_error(error: Exception) -> bool:
    """Whether an error from the AI service means quota or throttling."""
    if isinstance(error, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)):
        return True
    message = str(error).lower()
    return "quota" in message or "rate limit" in message or "rate-limit" in message


def extract_pdf_data(data: bytes, cfg: ExtractionConfig) -> ExtractionResult:
    """
    Send a PDF to the extraction model and validate the answer.

    The call is made once. Failures are raised, not retried.

    Args:
        data: PDF content
        cfg: Extraction configuration

    Returns:
        Validated extraction result

    Raises:
        RateLimitError: If the service is out of quota or throttling
        ExtractionError: For any other model failure
    """
    api_key = cfg.api_key
    if not api_key:
        raise ExtractionError(f"AI model API key not set. Export {cfg.api_key_env}.")

    logger.info(f"Processing PDF with {cfg.model} ({len(data)} bytes)")

    try:
        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(
            model_name=cfg.model,
            generation_config={
                "temperature": cfg.temperature,
                "response_mime_type": "application/json",
            },
        )
        response = model.generate_content([
            EXTRACTION_PROMPT,
            {"mime_type": "application/pdf", "data": data},
        ])
        text = response.text
    except Exception as e:
        if is_rate_limit_error(e):
            logger.warning(f"AI service throttled the request: {e}")
            raise RateLimitError(f"AI service rate limit or quota exceeded: {e}")
        logger.error(f"AI model error: {e}")
        raise ExtractionError(f"AI model error: {e}")

    result = parse_extraction_response(text)
    logger.info(f"Extracted data for {len(result.statesData)} states")
    return result
