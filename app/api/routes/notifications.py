"""
API routes for the notification dropdown.

All endpoints require authentication; RLS limits rows to the caller.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_user_db
from app.api.middleware.auth import AuthenticatedUser, get_current_user
from app.db.models import Notification
from app.db.repository import NotificationRepository

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
async def list_notifications(
    limit: int = 20,
    unread_only: bool = False,
    auth: AuthenticatedUser = Depends(get_current_user),
    db: Client = Depends(get_user_db),
) -> list[dict[str, Any]]:
    return NotificationRepository(db).list_for_user(auth.user_id, limit=limit, unread_only=unread_only)


@router.post("/{notification_id}/read", response_model=Notification)
async def mark_notification_read(
    notification_id: str,
    db: Client = Depends(get_user_db),
) -> dict[str, Any]:
    result = NotificationRepository(db).mark_read(notification_id)
    if not result:
        raise HTTPException(status_code=404, detail="Notification not found")
    return result
