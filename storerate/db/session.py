import logging

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from storerate.core.config import settings

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(settings.MONGO_URL, maxPoolSize=10, minPoolSize=0)
db = client[settings.DB_NAME]

def get_db():
    return db

async def ensure_indexes(database):
    """Create the unique indexes the collections rely on"""
    await database.users.create_index("id", unique=True)
    await database.users.create_index("email", unique=True)
    await database.stores.create_index("id", unique=True)
    await database.stores.create_index("email", unique=True)
    await database.stores.create_index("name")
    await database.ratings.create_index("id", unique=True)
    # One rating per user per store
    await database.ratings.create_index(
        [("store_id", ASCENDING), ("user_id", ASCENDING)], unique=True
    )
    await database.activity_logs.create_index("created_at")
    logger.info("MongoDB indexes ensured")

def close_mongo_connection():
    client.close()
