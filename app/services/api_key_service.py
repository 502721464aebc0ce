"""
app/services/api_key_service.py

Purpose: Per-account gateway API key storage

- get: most recent active key for an account
- upsert: replace the active key, or create one
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import DESCENDING

from app.db.mongo import get_api_keys_collection
from app.core.logging import get_logger, LogContext

logger = get_logger(__name__)


async def get_api_key_record(account_id: str) -> Optional[Dict[str, Any]]:
    """
    Retrieves the most recent active API key document for an account.
    
    Args:
        account_id: Account identifier
    
    Returns:
        Key document or None if the account has no active key
    """
    api_keys = get_api_keys_collection()
    return await api_keys.find_one(
        {"account_id": account_id, "is_active": True},
        sort=[("created_at", DESCENDING)]
    )


async def get_api_key(account_id: str) -> Optional[str]:
    """
    Returns the account's active API key, or None.
    """
    record = await get_api_key_record(account_id)
    if not record or not record.get("api_key"):
        return None
    return record["api_key"]


async def upsert_api_key(account_id: str, api_key: str) -> str:
    """
    Stores the account's API key.
    
    Updates the current active key document when one exists, otherwise
    inserts a new one.
    
    Args:
        account_id: Account identifier
        api_key: Gateway API key (trimmed before storing)
    
    Returns:
        Id of the stored key document
    """
    with LogContext(account_id=account_id):
        api_keys = get_api_keys_collection()
        now = datetime.utcnow()
        
        existing = await get_api_key_record(account_id)
        if existing:
            await api_keys.update_one(
                {"_id": existing["_id"]},
                {"$set": {"api_key": api_key.strip(), "updated_at": now}}
            )
            logger.info("API key updated")
            return str(existing["_id"])
        
        result = await api_keys.insert_one({
            "account_id": account_id,
            "api_key": api_key.strip(),
            "is_active": True,
            "created_at": now,
            "updated_at": now
        })
        logger.info("API key created")
        return str(result.inserted_id)
