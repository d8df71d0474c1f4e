from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

class MongoDB:
    client: AsyncIOMotorClient = None

mongodb = MongoDB()

async def connect_to_mongo():
    """Connect to MongoDB and test the connection"""
    try:
        mongodb.client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
        # Test connection
        await mongodb.client.admin.command('ping')
        logger.info(f"✓ Connected to MongoDB at {settings.mongodb_url}")
    except Exception as e:
        logger.error(f"✗ Failed to connect to MongoDB: {e}")
        raise

async def close_mongo_connection():
    """Close MongoDB connection"""
    if mongodb.client:
        mongodb.client.close()
        mongodb.client = None
        logger.info("✓ Closed MongoDB connection")

async def ping_mongo() -> bool:
    """Check that the MongoDB server answers"""
    if mongodb.client is None:
        return False
    try:
        await mongodb.client.admin.command('ping')
        return True
    except Exception as e:
        logger.error(f"❌ MongoDB ping failed: {e}")
        return False

def get_database():
    """Get the database instance"""
    return mongodb.client[settings.database_name]

def to_object_id(value: str) -> Optional[ObjectId]:
    """
    Convert a string id to an ObjectId

    Ids are always 24-char hex strings; anything else cannot match a
    document, so callers treat None as "not found".
    """
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
