"""
Pytest configuration and fixtures.
"""

import copy
import os
import tempfile
from typing import Dict, List
from unittest.mock import patch

import pytest
from bson import ObjectId

from framonitor.config import Config, MongoDBConfig
from framonitor.model import FRARecord


class FakeInsertResult:
    """Stand-in for pymongo's InsertOneResult."""

    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    """Minimal cursor supporting sort() and iteration."""

    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs = sorted(self.docs, key=lambda d: d.get(key, ""), reverse=direction == -1)
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """In-memory collection with the calls framonitor.db.mongo makes."""

    def __init__(self, name):
        self.name = name
        self.docs = []
        self.indexes = []

    def insert_one(self, doc):
        stored = copy.deepcopy(doc)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return FakeInsertResult(stored["_id"])

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs])

    def find_one(self, query):
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return copy.deepcopy(doc)
        return None

    def create_index(self, keys, **kwargs):
        self.indexes.append(keys)


class FakeDatabase:
    """In-memory database handing out FakeCollections by name."""

    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}
        self.validators = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    def list_collection_names(self):
        return list(self.collections)

    def create_collection(self, name, validator=None, **kwargs):
        self.validators[name] = validator
        return self[name]


class FakeClient:
    """In-memory MongoClient."""

    def __init__(self):
        self.databases: Dict[str, FakeDatabase] = {}

    def __getitem__(self, name):
        if name not in self.databases:
            self.databases[name] = FakeDatabase()
        return self.databases[name]


@pytest.fixture
def fake_client():
    """Patch pymongo.MongoClient with an in-memory client."""
    client = FakeClient()
    with patch("framonitor.db.mongo.pymongo.MongoClient", return_value=client):
        yield client


@pytest.fixture
def mongo_config() -> MongoDBConfig:
    """Return a MongoDB configuration for tests."""
    return MongoDBConfig(uri="mongodb://localhost:27017", database="test_db")


@pytest.fixture
def sample_config(monkeypatch):
    """Return a sample configuration with an API key set."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return Config(mongodb=MongoDBConfig(database="test_db"))


def make_record(state="Odisha", year=2025, month="June", claims=0, titles=0, disposed=0, **extra) -> FRARecord:
    """Build a record with every field present."""
    record = {
        "date": f"01.06.{year}",
        "year": year,
        "month": month,
        "state": state,
        "individualClaimsReceived": 0,
        "communityClaimsReceived": 0,
        "totalClaimsReceived": claims,
        "individualTitlesDistributed": 0,
        "communityTitlesDistributed": 0,
        "totalTitlesDistributed": titles,
        "claimsRejected": 0,
        "totalClaimsDisposedOff": disposed,
        "percentageClaimsDisposedOff": 0,
        "areaHaIFRTitlesDistributed": 0.0,
        "areaHaCFRTitlesDistributed": 0.0,
        "uploadDate": "2025-06-01T10:00:00Z",
        "fileName": "report.pdf",
        "fileSize": 1024,
    }
    record.update(extra)
    return record


@pytest.fixture
def sample_record() -> FRARecord:
    """Return a sample record."""
    return {
        "date": "01.06.2025",
        "year": 2025,
        "month": "June",
        "state": "Odisha",
        "individualClaimsReceived": 38000,
        "communityClaimsReceived": 663000,
        "totalClaimsReceived": 701000,
        "individualTitlesDistributed": 25000,
        "communityTitlesDistributed": 437000,
        "totalTitlesDistributed": 462000,
        "claimsRejected": 89000,
        "totalClaimsDisposedOff": 551000,
        "percentageClaimsDisposedOff": 78.6,
        "areaHaIFRTitlesDistributed": 2800000,
        "areaHaCFRTitlesDistributed": 743000,
        "uploadDate": "2025-06-01T10:30:00Z",
        "fileName": "odisha_fra_june_2025.pdf",
        "fileSize": 1876543,
    }


@pytest.fixture
def sample_records(sample_record) -> List[FRARecord]:
    """Return Odisha and Chhattisgarh records."""
    chhattisgarh = dict(sample_record)
    chhattisgarh.update({
        "state": "Chhattisgarh",
        "individualClaimsReceived": 45000,
        "communityClaimsReceived": 845000,
        "totalClaimsReceived": 890000,
        "individualTitlesDistributed": 28000,
        "communityTitlesDistributed": 453000,
        "totalTitlesDistributed": 481000,
        "claimsRejected": 125000,
        "totalClaimsDisposedOff": 606000,
        "percentageClaimsDisposedOff": 68.1,
        "areaHaIFRTitlesDistributed": 3200000,
        "areaHaCFRTitlesDistributed": 9103000,
        "uploadDate": "2025-06-01T10:00:00Z",
        "fileName": "chhattisgarh_fra_june_2025.pdf",
    })
    return [dict(sample_record), chhattisgarh]


def state_row(state, claims=100, titles=50, **overrides) -> Dict:
    """Build one extraction row."""
    row = {
        "state": state,
        "individualClaimsReceived": claims // 2,
        "communityClaimsReceived": claims - claims // 2,
        "totalClaimsReceived": claims,
        "individualTitlesDistributed": titles // 2,
        "communityTitlesDistributed": titles - titles // 2,
        "totalTitlesDistributed": titles,
        "areaHaIndividual": 10.5,
        "areaHaCommunity": 20.25,
        "areaHaTotal": 30.75,
    }
    row.update(overrides)
    return row


@pytest.fixture
def extraction_payload() -> Dict:
    """Return a model answer with five states and a TOTAL row."""
    return {
        "reportInfo": {"date": "31.05.2025", "year": 2025, "month": "May"},
        "statesData": [
            state_row("Andhra Pradesh", 1000, 500),
            state_row("Assam", 2000, 800, individualClaimsReceived=None),
            state_row("Chhattisgarh", 3000, 1500),
            state_row("Madhya Pradesh", 4000, 2500),
            state_row("Odisha", 5000, 3000),
            state_row("TOTAL", 15000, 8300),
        ],
    }


PDF_BYTES = (
    b"%PDF-1.4\n%\xc3\xa4\xc3\xbc\xc3\xb6\n1 0 obj\n<</Type/Catalog/Pages 2 0 R>>\nendobj\n2 0 obj\n"
    b"<</Type/Pages/Kids[3 0 R]/Count 1>>\nendobj\n3 0 obj\n<</Type/Page/MediaBox[0 0 595 842]/Parent 2 0 R"
    b"/Resources<<>>/Contents 4 0 R>>\nendobj\n4 0 obj\n<</Length 21>>stream\nBT\n/F1 12 Tf\n(Test) Tj\nET\n"
    b"endstream\nendobj\nxref\n0 5\n0000000000 65535 f \n0000000018 00000 n \n0000000066 00000 n \n"
    b"0000000122 00000 n \n0000000210 00000 n \ntrailer\n<</Size 5/Root 1 0 R>>\nstartxref\n280\n%%EOF"
)


@pytest.fixture
def pdf_bytes() -> bytes:
    """Return the bytes of a minimal PDF."""
    return PDF_BYTES


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def temp_pdf(pdf_bytes):
    """Create a temporary PDF file."""
    with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as tmp:
        tmp.write(pdf_bytes)
        tmp_path = tmp.name

    yield tmp_path

    if os.path.exists(tmp_path):
        os.unlink(tmp_path)


@pytest.fixture
def record_factory():
    """Return the record builder."""
    return make_record


@pytest.fixture
def row_factory():
    """Return the extraction row builder."""
    return state_row
