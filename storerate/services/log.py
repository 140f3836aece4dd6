"""Audit trail for account, store and rating changes.

Entries land in the ``activity_logs`` collection and are read back by the
admin dashboard through ``GET /api/users/activity-logs``.
"""
from fastapi import Request
from typing import Optional
import logging

from storerate.models.log import ActivityLog

logger = logging.getLogger(__name__)

def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.client.host if request.client else "unknown"

async def log_activity(
    db,
    user_id: str,
    user_name: str,
    action: str,
    details: str,
    target_id: Optional[str] = None,
    target_type: Optional[str] = None,
    request: Optional[Request] = None
):
    """Record who registered, created a user or store, changed a password or rated a store.

    An audit write that fails is logged and dropped; the account or rating
    change it describes has already been committed.
    """
    entry = ActivityLog(
        user_id=user_id,
        user_name=user_name,
        action=action,
        details=details,
        target_id=target_id,
        target_type=target_type,
        ip_address=client_ip(request) if request else None,
        user_agent=request.headers.get("user-agent", "unknown") if request else None,
    )
    try:
        await db.activity_logs.insert_one(entry.model_dump())
    except Exception as e:
        logger.error(f"Failed to record {action} for user {user_id}: {str(e)}")
