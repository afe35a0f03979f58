import os
from typing import List, Optional, Tuple

import motor.motor_asyncio
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from ats_scanner.models.reference import ATSSystemProfile, IndustryProfile
from ats_scanner.models.schemas import AnalysisRecord
from ats_scanner.utils.exceptions import ConfigurationError, ExternalServiceError
from ats_scanner.utils.logging_config import get_logger

logger = get_logger(__name__)

# Load environment variables from .env
load_dotenv()

MONGO_DETAILS = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "ats_scanner")

logger.info(f"Initializing MongoDB connection to database: {DB_NAME}")

# The client connects lazily, on first operation
client = motor.motor_asyncio.AsyncIOMotorClient(MONGO_DETAILS)
db = client[DB_NAME]

# Collections
analyses_coll = db["analyses"]
industry_profiles_coll = db["industry_profiles"]
ats_profiles_coll = db["ats_profiles"]


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    indexes = (
        (analyses_coll, [("analysis_id", ASCENDING)], True),
        (analyses_coll, [("created_at", DESCENDING)], False),
        (analyses_coll, [("target_industry", ASCENDING)], False),
        (industry_profiles_coll, [("industry_id", ASCENDING)], True),
        (ats_profiles_coll, [("system_id", ASCENDING)], True),
    )
    for coll, keys, unique in indexes:
        try:
            await coll.create_index(keys, unique=unique)
            logger.debug(f"Created {'unique ' if unique else ''}index on {coll.name}.{keys[0][0]}")
        except PyMongoError as e:
            if "already exists" in str(e).lower():
                logger.debug(f"Index on {coll.name}.{keys[0][0]} already exists")
            else:
                logger.warning(f"Could not create index on {coll.name}.{keys[0][0]}: {e}")

    logger.info("Database index initialization completed")


async def save_analysis_record(record: AnalysisRecord) -> str:
    """Insert a new analysis record; records are never updated"""
    try:
        await analyses_coll.insert_one(record.model_dump(mode="json"))
    except PyMongoError as e:
        raise ExternalServiceError(
            f"Could not store analysis {record.analysis_id}: {e}", service_name="mongodb", cause=e
        ).log(logger, "save_analysis_record") from e
    logger.info(f"Stored analysis record {record.analysis_id}")
    return record.analysis_id


async def get_analysis_record(analysis_id: str) -> Optional[dict]:
    try:
        doc = await analyses_coll.find_one({"analysis_id": analysis_id})
    except PyMongoError as e:
        raise ExternalServiceError(
            f"Could not read analysis {analysis_id}: {e}", service_name="mongodb", cause=e
        ).log(logger, "get_analysis_record") from e
    return to_dict(doc)


async def load_reference_overrides() -> Tuple[List[IndustryProfile], List[ATSSystemProfile]]:
    """Industry and ATS profiles stored as data, to be merged over the built-in ones"""
    try:
        industry_docs = await industry_profiles_coll.find({}).to_list(length=None)
        ats_docs = await ats_profiles_coll.find({}).to_list(length=None)
    except PyMongoError as e:
        raise ExternalServiceError(
            f"Could not load reference overrides: {e}", service_name="mongodb", cause=e
        ).log(logger, "load_reference_overrides") from e

    try:
        industries = [IndustryProfile(**_strip_id(doc)) for doc in industry_docs]
        ats_profiles = [ATSSystemProfile(**_strip_id(doc)) for doc in ats_docs]
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Stored reference profile is invalid: {e}", config_key="reference_overrides", cause=e
        ).log(logger, "load_reference_overrides") from e

    logger.info(f"Loaded {len(industries)} industry and {len(ats_profiles)} ATS profile overrides")
    return industries, ats_profiles


def _strip_id(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if k != "_id"}


def to_dict(doc):
    if not doc:
        return None
    doc["_id"] = str(doc["_id"])
    return doc
