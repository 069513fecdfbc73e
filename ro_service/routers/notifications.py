"""
Notification log and reminder trigger routes.
"""
import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from ro_service.auth import get_current_active_user, require_admin
from ro_service.database import get_db
from ro_service.models.notification import NotificationLog
from ro_service.models.user import User
from ro_service.notifications.dispatcher import DueServiceNotifier
from ro_service.schemas.notification import Notification as NotificationSchema, TriggerResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notifier(request: Request) -> DueServiceNotifier:
    """The notifier built at startup."""
    return request.app.state.notifier


@router.get("/", response_model=List[NotificationSchema])
async def get_notifications(
    skip: int = 0,
    limit: int = 20,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the notification log, newest first.
    """
    result = await db.execute(
        select(NotificationLog)
        .order_by(NotificationLog.sent_at.desc(), NotificationLog.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()


@router.post("/trigger", response_model=TriggerResponse, response_model_exclude_none=True)
async def trigger_notifications(
    notifier: DueServiceNotifier = Depends(get_notifier),
    current_user: User = Depends(require_admin)
):
    """
    Run the due-service reminder check now.
    """
    logger.info("🔔 Manual notification trigger by user %s", current_user.id)
    summary = await notifier.run()
    return summary.as_dict()
