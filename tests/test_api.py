"""
Tests for the API handlers and the HTTP server.
"""

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from framonitor.api import create_patta_holder, extract_pdf, filters_from_params, get_fra_data, list_patta_holders
from framonitor.db.mongo import save_fra_records
from framonitor.extraction import parse_extraction_response
from framonitor.ingest import IngestResult
from framonitor.model import ExtractionError, FilterState, RateLimitError, StoreError
from framonitor.server import create_app


@pytest.fixture
def stored(fake_client, sample_config, sample_records, record_factory):
    """Store the Odisha/Chhattisgarh records plus one older Odisha record."""
    records = sample_records + [record_factory(state="Odisha", year=2024, month="May", claims=5)]
    save_fra_records(records, sample_config.mongodb)
    return records


@pytest.fixture
def holder_body():
    """A valid patta holder submission."""
    return {
        "claimNumber": "FRA/CG/2025/042",
        "applicantName": "Gram Sabha Darbha",
        "applicantAddress": "Darbha",
        "village": "Darbha",
        "district": "Bastar",
        "state": "Chhattisgarh",
        "claimType": "Community",
        "landArea": 120,
        "landDescription": "Community forest resource area",
        "coordinates": {"lat": 18.9, "lng": 81.9},
    }


def test_filters_from_params():
    """Test building filters from query parameters."""
    assert filters_from_params({}) == FilterState()
    assert filters_from_params({"state": "odisha", "year": "", "month": None}) == FilterState(state="odisha")


def test_get_fra_data(stored, sample_config):
    """Test serving all records."""
    status, body = get_fra_data({}, sample_config)

    assert status == 200
    assert body["success"] is True
    assert body["count"] == 3
    assert all("id" in record for record in body["data"])


def test_get_fra_data_filtered(stored, sample_config):
    """Test serving records for one state and year."""
    status, body = get_fra_data({"state": "odisha", "year": "2025"}, sample_config)

    assert status == 200
    assert body["count"] == 1
    assert body["data"][0]["totalClaimsReceived"] == 701000


def test_get_fra_data_statistics(stored, sample_config):
    """Test serving statistics for the filtered records."""
    status, body = get_fra_data({"action": "statistics", "year": "2025"}, sample_config)

    assert status == 200
    assert body["totalClaimsReceived"] == 1591000
    assert body["stateCount"] == 2
    assert body["disposalRate"] == pytest.approx(72.72, abs=0.01)


def test_get_fra_data_unknown_filter(stored, sample_config):
    """Test that an unknown state gives an empty result, not an error."""
    status, body = get_fra_data({"state": "atlantis"}, sample_config)

    assert status == 200
    assert body["count"] == 0


@patch("framonitor.api.get_fra_records", side_effect=StoreError("down"))
def test_get_fra_data_store_error(mock_get, sample_config):
    """Test the response when the store fails."""
    assert get_fra_data({}, sample_config) == (500, {"error": "Failed to fetch FRA data"})


def test_create_and_list_patta_holders(fake_client, sample_config, holder_body):
    """Test creating a holder and listing it."""
    status, body = create_patta_holder(holder_body, sample_config)

    assert status == 200
    assert body["success"] is True
    assert body["message"] == "Patta holder added successfully"
    assert body["data"]["claimType"] == "Community"
    holder_id = body["data"]["id"]

    status, body = list_patta_holders(sample_config)

    assert status == 200
    assert [h["id"] for h in body["data"]] == [holder_id]


def test_create_patta_holder_invalid(fake_client, sample_config, holder_body):
    """Test that an invalid submission is rejected and not stored."""
    holder_body["landArea"] = 0

    status, body = create_patta_holder(holder_body, sample_config)

    assert status == 400
    assert body == {"success": False, "error": "Land area must be greater than 0"}
    assert list_patta_holders(sample_config)[1]["data"] == []


@patch("framonitor.api.save_patta_holder", side_effect=StoreError("down"))
def test_create_patta_holder_store_error(mock_save, sample_config, holder_body):
    """Test the response when saving fails."""
    status, body = create_patta_holder(holder_body, sample_config)

    assert status == 500
    assert body["error"] == "Failed to save patta holder"


@patch("framonitor.api.get_patta_holders", side_effect=StoreError("down"))
def test_list_patta_holders_store_error(mock_get, sample_config):
    """Test the response when listing fails."""
    assert list_patta_holders(sample_config) == (500, {"success": False, "error": "Failed to fetch patta holders"})


def test_extract_pdf_no_file(sample_config):
    """Test uploading without a file."""
    assert extract_pdf(None, None, None, sample_config) == (400, {"error": "No file provided"})


def test_extract_pdf_wrong_type(sample_config):
    """Test uploading a non-PDF file."""
    status, body = extract_pdf(b"hello", "notes.txt", "text/plain", sample_config)

    assert status == 400
    assert body == {"error": "Only PDF files are supported"}


@pytest.mark.parametrize("error, status, message", [
    (RateLimitError("quota"), 429, "Service temporarily unavailable. Please try again later."),
    (ExtractionError("bad"), 500, "AI model error. Please try again."),
    (StoreError("down"), 500, "Failed to process PDF. Please ensure the file contains FRA data tables."),
    (OverflowError("cannot convert float infinity to integer"), 500,
     "Failed to process PDF. Please ensure the file contains FRA data tables."),
])
def test_extract_pdf_errors(sample_config, pdf_bytes, error, status, message):
    """Test the responses for ingestion failures."""
    with patch("framonitor.api.ingest_pdf", side_effect=error):
        assert extract_pdf(pdf_bytes, "r.pdf", "application/pdf", sample_config) == (status, {"error": message})


@patch("framonitor.api.ingest_pdf")
def test_extract_pdf_success(mock_ingest, sample_config, pdf_bytes):
    """Test a successful upload."""
    mock_ingest.return_value = IngestResult("r.pdf", [], [{"state": "Goa", "recordId": "x"}], [])

    status, body = extract_pdf(pdf_bytes, "r.pdf", "application/pdf", sample_config)

    assert status == 200
    assert body["recordsCount"] == 1
    assert body["states"] == ["Goa"]


@pytest.fixture
def client(sample_config):
    """HTTP test client."""
    return TestClient(create_app(sample_config))


def test_health(client):
    """Test the health route."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_fra_data_route(client, stored):
    """Test the FRA data route with filters."""
    response = client.get("/fra-data", params={"state": "chhattisgarh"})

    assert response.status_code == 200
    assert response.json()["count"] == 1

    response = client.get("/fra-data", params={"action": "statistics"})
    assert response.json()["stateCount"] == 2


def test_patta_holders_routes(client, fake_client, holder_body):
    """Test creating and listing holders over HTTP."""
    response = client.post("/patta-holders", json=holder_body)
    assert response.status_code == 200

    response = client.get("/patta-holders")
    assert response.status_code == 200
    assert len(response.json()["data"]) == 1


@pytest.mark.parametrize("area", ["nan", "inf", "-Infinity"])
def test_patta_holders_route_non_finite_area(client, fake_client, holder_body, area):
    """Test that a non-finite land area is rejected and the registry stays readable."""
    holder_body["landArea"] = area

    response = client.post("/patta-holders", json=holder_body)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Land area must be a number"}

    response = client.get("/patta-holders")
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_patta_holders_invalid_json(client):
    """Test posting a body that is not JSON."""
    response = client.post("/patta-holders", content=b"{not json",
                           headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid JSON body"}


def test_extract_pdf_route_no_file(client):
    """Test the upload route without a file."""
    response = client.post("/extract-pdf-data")

    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


@patch("framonitor.api.ingest_pdf")
def test_extract_pdf_route(mock_ingest, client, pdf_bytes):
    """Test the upload route with a PDF."""
    mock_ingest.return_value = IngestResult("r.pdf", [], [{"state": "Goa", "recordId": "x"}], [])

    response = client.post("/extract-pdf-data", files={"file": ("r.pdf", pdf_bytes, "application/pdf")})

    assert response.status_code == 200
    assert response.json()["success"] is True
    args = mock_ingest.call_args.args
    assert args[0] == pdf_bytes
    assert args[1] == "r.pdf"
    assert args[3] == "application/pdf"


@patch("framonitor.ingest.extract_report_date", return_value=None)
@patch("framonitor.ingest.extract_pdf_data")
def test_extract_pdf_route_non_finite_counts(mock_extract, mock_header, client, fake_client, pdf_bytes):
    """Test that Infinity and NaN cells are stored as 0."""
    mock_extract.return_value = parse_extraction_response(json.dumps({
        "reportInfo": {"date": "30.06.2025"},
        "statesData": [{"state": "Odisha", "totalClaimsReceived": "Infinity", "areaHaIndividual": "NaN",
                        "communityClaimsReceived": 12}],
    }))

    response = client.post("/extract-pdf-data", files={"file": ("r.pdf", pdf_bytes, "application/pdf")})

    assert response.status_code == 200
    assert response.json()["recordsCount"] == 1
    stored = fake_client["test_db"]["fra_records"].docs[0]
    assert stored["totalClaimsReceived"] == 0
    assert stored["areaHaIFRTitlesDistributed"] == 0.0
    assert stored["communityClaimsReceived"] == 12


@patch("framonitor.api.ingest_pdf", side_effect=OverflowError("cannot convert float infinity to integer"))
def test_extract_pdf_route_unexpected_error(mock_ingest, client, pdf_bytes):
    """Test that an unexpected failure still answers with an error body."""
    response = client.post("/extract-pdf-data", files={"file": ("r.pdf", pdf_bytes, "application/pdf")})

    assert response.status_code == 500
    assert "error" in response.json()
