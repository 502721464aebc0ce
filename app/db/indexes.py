"""
app/db/indexes.py

Purpose: Database index management

- Creates unique and lookup indexes
- TTL index so abandoned uploads are cleaned up
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import (
    get_api_keys_collection,
    get_uploads_collection,
    get_sms_logs_collection
)
from app.core.logging import get_logger

logger = get_logger(__name__)

UPLOAD_TTL_SECONDS = 86400  # 1 day


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        api_keys = get_api_keys_collection()
        uploads = get_uploads_collection()
        sms_logs = get_sms_logs_collection()
        
        logger.info("Creating database indexes...")
        
        # ==============================================
        # API KEYS COLLECTION INDEXES
        # ==============================================
        
        # Most recent active key per account
        await api_keys.create_index(
            [("account_id", ASCENDING), ("is_active", ASCENDING), ("created_at", DESCENDING)],
            name="account_active_key_idx"
        )
        logger.debug("Created index on api_keys.account_id + is_active + created_at")
        
        # ==============================================
        # UPLOADS COLLECTION INDEXES
        # ==============================================
        
        await uploads.create_index("upload_id", unique=True, name="upload_id_unique")
        logger.debug("Created unique index on uploads.upload_id")
        
        await uploads.create_index("account_id", name="upload_account_idx")
        logger.debug("Created index on uploads.account_id")
        
        await uploads.create_index(
            "updated_at",
            expireAfterSeconds=UPLOAD_TTL_SECONDS,
            name="upload_ttl_idx"
        )
        logger.debug("Created TTL index on uploads.updated_at")
        
        # ==============================================
        # SMS LOGS COLLECTION INDEXES
        # ==============================================
        
        await sms_logs.create_index(
            [("account_id", ASCENDING), ("created_at", DESCENDING)],
            name="account_logs_idx"
        )
        logger.debug("Created index on sms_logs.account_id + created_at")
        
        logger.info("✅ All database indexes created successfully")
        
    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this module directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection
    
    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()
    
    asyncio.run(main())
