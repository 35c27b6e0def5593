"""
MongoDB integration for FRA Monitor.
"""

import datetime
from typing import Any, Dict, List, Mapping

import pymongo
from bson import ObjectId
from pymongo.errors import PyMongoError

from framonitor.config import MongoDBConfig
from framonitor.log import get_logger
from framonitor.model import FRARecord, PattaHolder, StoreError

logger = get_logger(__name__)


def get_database(cfg: MongoDBConfig):
    """
    Connect to the configured database.

    Args:
        cfg: MongoDB configuration

    Returns:
        pymongo Database handle
    """
    client = pymongo.MongoClient(cfg.uri, serverSelectionTimeoutMS=cfg.timeout_ms)
    return client[cfg.database]


def to_mongodb_doc(entity: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert an entity to a MongoDB document.

    The store assigns _id, so any id already on the entity is dropped.
    """
    return {k: v for k, v in entity.items() if k not in ("id", "_id")}


def from_mongodb_doc(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a MongoDB document back to an entity with a string id.
    """
    entity = {k: v for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        entity["id"] = str(doc["_id"])
    return entity


def save_fra_record(record: FRARecord, cfg: MongoDBConfig) -> str:
    """
    Insert one FRA record.

    Args:
        record: Record to insert
        cfg: MongoDB configuration

    Returns:
        Store-assigned record id
    """
    try:
        collection = get_database(cfg)[cfg.records_collection]
        result = collection.insert_one(to_mongodb_doc(record))
        return str(result.inserted_id)
    except PyMongoError as e:
        logger.error(f"Error saving FRA record for {record.get('state')}: {e}")
        raise StoreError(f"Error saving FRA record: {e}")


def save_fra_records(records: List[FRARecord], cfg: MongoDBConfig) -> Dict[str, Any]:
    """
    Insert records one at a time so a failure does not abort its siblings.

    Failed records are written to the dead-letter collection.

    Args:
        records: Records to insert
        cfg: MongoDB configuration

    Returns:
        {"saved": [{state, recordId}], "failed": [{state, error}]}
    """
    saved = []
    failed = []

    for record in records:
        try:
            record_id = save_fra_record(record, cfg)
            saved.append({"state": record.get("state"), "recordId": record_id})
            logger.info(f"Saved {record.get('state')} with ID: {record_id}")
        except StoreError as e:
            failed.append({"state": record.get("state"), "error": str(e)})
            write_dead_letter(record, str(e), cfg)

    return {"saved": saved, "failed": failed}


def get_fra_records(cfg: MongoDBConfig) -> List[FRARecord]:
    """
    Fetch every FRA record, newest upload first.

    Args:
        cfg: MongoDB configuration

    Returns:
        List of records with string ids
    """
    try:
        collection = get_database(cfg)[cfg.records_collection]
        cursor = collection.find({}).sort("uploadDate", pymongo.DESCENDING)
        return [from_mongodb_doc(doc) for doc in cursor]
    except PyMongoError as e:
        logger.error(f"Error fetching FRA records: {e}")
        raise StoreError(f"Error fetching FRA records: {e}")


def get_fra_record(record_id: str, cfg: MongoDBConfig) -> FRARecord:
    """
    Fetch one FRA record by id.

    Raises:
        StoreError: If the id is malformed, unknown, or the store fails
    """
    if not ObjectId.is_valid(record_id):
        raise StoreError(f"Invalid record id: {record_id}")
    try:
        doc = get_database(cfg)[cfg.records_collection].find_one({"_id": ObjectId(record_id)})
    except PyMongoError as e:
        raise StoreError(f"Error fetching FRA record {record_id}: {e}")
    if doc is None:
        raise StoreError(f"FRA record not found: {record_id}")
    return from_mongodb_doc(doc)


def save_patta_holder(holder: PattaHolder, cfg: MongoDBConfig) -> str:
    """
    Insert one patta holder.

    Args:
        holder: Validated patta holder
        cfg: MongoDB configuration

    Returns:
        Store-assigned holder id
    """
    try:
        collection = get_database(cfg)[cfg.holders_collection]
        result = collection.insert_one(to_mongodb_doc(holder))
        return str(result.inserted_id)
    except PyMongoError as e:
        logger.error(f"Error saving patta holder {holder.get('claimNumber')}: {e}")
        raise StoreError(f"Error saving patta holder: {e}")


def get_patta_holders(cfg: MongoDBConfig) -> List[PattaHolder]:
    """
    Fetch every patta holder, most recently created first.
    """
    try:
        collection = get_database(cfg)[cfg.holders_collection]
        cursor = collection.find({}).sort("createdAt", pymongo.DESCENDING)
        return [from_mongodb_doc(doc) for doc in cursor]
    except PyMongoError as e:
        logger.error(f"Error fetching patta holders: {e}")
        raise StoreError(f"Error fetching patta holders: {e}")


def write_dead_letter(record: Mapping[str, Any], error: str, cfg: MongoDBConfig) -> None:
    """
    Write a record that could not be saved to the dead-letter collection.

    Args:
        record: Record that failed to be inserted
        error: Error message
        cfg: MongoDB configuration
    """
    logger.info(f"Writing record to dead-letter collection: {error}")

    try:
        collection = get_database(cfg)[cfg.errors_collection]
        collection.insert_one({
            "record": to_mongodb_doc(record),
            "error": error,
            "timestamp": datetime.datetime.now(datetime.timezone.utc),
        })
    except PyMongoError as e:
        logger.error(f"Error writing to dead-letter collection: {e}")


def setup_mongodb(cfg: MongoDBConfig) -> None:
    """
    Set up MongoDB collections and indexes.

    Args:
        cfg: MongoDB configuration
    """
    logger.info("Setting up MongoDB collections and indexes")

    count = {"bsonType": ["int", "long", "double"], "minimum": 0}

    try:
        db = get_database(cfg)
        existing = db.list_collection_names()

        if cfg.records_collection not in existing:
            db.create_collection(
                cfg.records_collection,
                validator={
                    "$jsonSchema": {
                        "bsonType": "object",
                        "required": ["date", "year", "month", "state", "totalClaimsReceived",
                                     "totalTitlesDistributed", "uploadDate"],
                        "properties": {
                            "date": {"bsonType": "string", "pattern": "^[0-9]{2}\\.[0-9]{2}\\.[0-9]{4}$"},
                            "year": {"bsonType": ["int", "long"]},
                            "month": {"bsonType": "string", "minLength": 1},
                            "state": {"bsonType": "string", "minLength": 1},
                            "individualClaimsReceived": count,
                            "communityClaimsReceived": count,
                            "totalClaimsReceived": count,
                            "individualTitlesDistributed": count,
                            "communityTitlesDistributed": count,
                            "totalTitlesDistributed": count,
                            "claimsRejected": count,
                            "totalClaimsDisposedOff": count,
                            "areaHaIFRTitlesDistributed": count,
                            "areaHaCFRTitlesDistributed": count,
                            "uploadDate": {"bsonType": "string"},
                            "fileName": {"bsonType": "string"},
                        }
                    }
                },
                validationLevel="moderate"
            )

        if cfg.holders_collection not in existing:
            db.create_collection(
                cfg.holders_collection,
                validator={
                    "$jsonSchema": {
                        "bsonType": "object",
                        "required": ["claimNumber", "applicantName", "state", "claimType",
                                     "landArea", "coordinates"],
                        "properties": {
                            "claimType": {"enum": ["Individual", "Community"]},
                            "landArea": {"bsonType": ["int", "long", "double"], "exclusiveMinimum": 0},
                            "coordinates": {
                                "bsonType": "object",
                                "required": ["lat", "lng"],
                                "properties": {
                                    "lat": {"bsonType": ["int", "double"], "minimum": -90, "maximum": 90},
                                    "lng": {"bsonType": ["int", "double"], "minimum": -180, "maximum": 180},
                                }
                            }
                        }
                    }
                },
                validationLevel="moderate"
            )

        if cfg.errors_collection not in existing:
            db.create_collection(cfg.errors_collection)

        records = db[cfg.records_collection]
        records.create_index([("uploadDate", pymongo.DESCENDING)])
        records.create_index([("state", pymongo.ASCENDING),
                              ("year", pymongo.ASCENDING),
                              ("month", pymongo.ASCENDING)])

        holders = db[cfg.holders_collection]
        holders.create_index([("claimNumber", pymongo.ASCENDING)])
        holders.create_index([("createdAt", pymongo.DESCENDING)])

        db[cfg.errors_collection].create_index([("timestamp", pymongo.ASCENDING)])

        logger.info("MongoDB setup complete")
    except PyMongoError as e:
        logger.error(f"Error setting up MongoDB: {e}")
        raise StoreError(f"Error setting up MongoDB: {e}")
