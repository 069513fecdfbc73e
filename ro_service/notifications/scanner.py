"""
Record store queries used by the reminder run.
"""
from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ro_service.models.notification import NotificationLog
from ro_service.models.service_record import ServiceRecord

DEFAULT_LOOKAHEAD_DAYS = 3


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def local_now(timezone: Optional[str] = None) -> datetime:
    """Naive wall-clock time, in ``timezone`` when given."""
    if not timezone:
        return datetime.now()
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


async def find_due_records(
    session: AsyncSession,
    today: datetime,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> List[ServiceRecord]:
    """
    Service records due between today and ``lookahead_days`` from today.

    Both ends are whole days, so a record due at any time on the last day
    of the window is included. Customers are loaded with the records.
    """
    window_start = start_of_day(today)
    window_end = window_start + timedelta(days=lookahead_days + 1)

    result = await session.execute(
        select(ServiceRecord)
        .options(selectinload(ServiceRecord.customer))
        .where(
            ServiceRecord.next_service_date >= window_start,
            ServiceRecord.next_service_date < window_end,
        )
        .order_by(ServiceRecord.next_service_date, ServiceRecord.id)
    )
    return list(result.scalars().all())


async def already_notified_today(session: AsyncSession, record_id: int, now: datetime) -> bool:
    """True when a reminder was already logged for the record on ``now``'s day."""
    day_start = start_of_day(now)
    result = await session.execute(
        select(NotificationLog.id)
        .where(
            NotificationLog.service_record_id == record_id,
            NotificationLog.sent_at >= day_start,
            NotificationLog.sent_at < day_start + timedelta(days=1),
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None
