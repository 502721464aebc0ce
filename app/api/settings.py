"""
app/api/settings.py

Purpose: Account settings endpoints

- GET /settings/api-key: whether a key is stored (masked)
- PUT /settings/api-key: store or replace the gateway API key
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_account_id
from app.core.logging import get_logger
from app.schemas.sms import ApiKeyStatus, ApiKeyUpdate
from app.services.api_key_service import get_api_key_record, upsert_api_key
from utils.sms_utils import mask_api_key

logger = get_logger(__name__)
router = APIRouter(prefix="/settings")


@router.get("/api-key", response_model=ApiKeyStatus)
async def get_api_key_status(account_id: str = Depends(get_account_id)):
    record = await get_api_key_record(account_id)
    if not record or not record.get("api_key"):
        return ApiKeyStatus(has_key=False)
    
    return ApiKeyStatus(
        has_key=True,
        masked_key=mask_api_key(record["api_key"]),
        key_id=str(record["_id"])
    )


@router.put("/api-key", response_model=ApiKeyStatus)
async def save_api_key(
    update: ApiKeyUpdate,
    account_id: str = Depends(get_account_id)
):
    key_id = await upsert_api_key(account_id, update.api_key)
    return ApiKeyStatus(
        has_key=True,
        masked_key=mask_api_key(update.api_key.strip()),
        key_id=key_id
    )
