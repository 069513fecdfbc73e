"""
Due-service reminder run.

One run scans the due window, skips records already reminded today, sends
SMS and email to the admin and the customer, writes one notification log
entry per record and, on the due date itself, marks the record notified.
Records, recipients and channels are handled strictly one at a time.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Awaitable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import async_sessionmaker

from ro_service.models.notification import NotificationChannel, NotificationLog, NotificationStatus
from ro_service.models.service_record import ServiceRecord
from ro_service.notifications.channels import ChannelResult, EmailSender, SMSSender
from ro_service.notifications.recipients import AdminContact, Recipient, resolve_recipients
from ro_service.notifications.scanner import (
    DEFAULT_LOOKAHEAD_DAYS,
    already_notified_today,
    find_due_records,
    local_now,
    start_of_day,
)
from ro_service.notifications.urgency import classify, days_until, render_message, render_subject

logger = logging.getLogger(__name__)

SENT = NotificationStatus.SENT.value
FAILED = NotificationStatus.FAILED.value


@dataclass
class RecipientOutcome:
    """Per-channel result for one recipient. ``None`` means not attempted."""
    recipient: str
    phone: Optional[str] = None
    email: Optional[str] = None
    sms_status: Optional[str] = None
    email_status: Optional[str] = None
    sms_error: Optional[str] = None
    email_error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return SENT in (self.sms_status, self.email_status)

    def summary(self) -> str:
        channels = []
        if self.sms_status:
            channels.append(f"SMS {self.sms_status}")
        if self.email_status:
            channels.append(f"Email {self.email_status}")
        contact = f"{self.phone or 'no phone'} / {self.email or 'no email'}"
        return f"{self.recipient} ({contact}): {', '.join(channels) or 'no channel'}"

    def error_summary(self) -> Optional[str]:
        errors = []
        if self.sms_status == FAILED:
            errors.append(f"SMS: {self.sms_error}")
        if self.email_status == FAILED:
            errors.append(f"Email: {self.email_error}")
        return f"{self.recipient}: {', '.join(errors)}" if errors else None


@dataclass
class RunSummary:
    success: bool
    count: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None

    def as_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


async def _attempt(send: Awaitable[ChannelResult]) -> Tuple[str, Optional[str]]:
    try:
        result = await send
    except Exception as e:
        logger.exception("Channel send raised")
        return FAILED, str(e) or type(e).__name__
    return (SENT, None) if result.success else (FAILED, result.error)


def _channel_for(outcomes: List[RecipientOutcome]) -> NotificationChannel:
    used_sms = any(o.sms_status for o in outcomes)
    used_email = any(o.email_status for o in outcomes)
    if used_sms and not used_email:
        return NotificationChannel.SMS
    if used_email and not used_sms:
        return NotificationChannel.EMAIL
    return NotificationChannel.BOTH


class DueServiceNotifier:
    """
    Sends reminders for service records coming due.

    Args:
        session_factory: Async session factory for the record store.
        sms: SMS channel sender.
        email: Email channel sender.
        admin: Admin contact copied on every reminder.
        lookahead_days: Size of the due window after today.
        timezone: IANA zone used for "now" when a run is not given one.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        sms: SMSSender,
        email: EmailSender,
        admin: Optional[AdminContact] = None,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        timezone: Optional[str] = None,
    ):
        self.session_factory = session_factory
        self.sms = sms
        self.email = email
        self.admin = admin or AdminContact()
        self.lookahead_days = lookahead_days
        self.timezone = timezone

    def now(self) -> datetime:
        return local_now(self.timezone)

    async def run(self, now: Optional[datetime] = None) -> RunSummary:
        """Run one reminder pass and summarise it."""
        now = now or self.now()
        today = start_of_day(now)

        try:
            async with self.session_factory() as session:
                records = await find_due_records(session, today, self.lookahead_days)
        except Exception as e:
            logger.exception("Reminder scan failed")
            return RunSummary(success=False, error=str(e))

        logger.info(
            "🔍 Found %d services due between %s and %s",
            len(records), today.date(), (today + timedelta(days=self.lookahead_days)).date(),
        )

        count = 0
        for record in records:
            try:
                if await self._process(record, today, now):
                    count += 1
            except Exception:
                logger.exception("Failed to process reminder for service record %s", record.id)

        return RunSummary(success=True, count=count, message=f"Processed {count} notifications")

    async def _process(self, record: ServiceRecord, today: datetime, now: datetime) -> bool:
        customer = record.customer
        if customer is None:
            logger.warning("Customer not found for service record %s", record.id)
            return False

        async with self.session_factory() as session:
            if await already_notified_today(session, record.id, now):
                logger.info("Notification already sent today for customer %s", customer.name)
                return False

        days = days_until(record.next_service_date, today)
        urgency = classify(days)
        message = render_message(customer, record, urgency)
        subject = render_subject(customer, urgency)

        outcomes = []
        for recipient in resolve_recipients(customer, self.admin):
            outcomes.append(await self._notify(recipient, subject, message))

        status = NotificationStatus.SENT if any(o.delivered for o in outcomes) else NotificationStatus.FAILED
        errors = [summary for summary in (o.error_summary() for o in outcomes) if summary]

        async with self.session_factory() as session:
            session.add(
                NotificationLog(
                    service_record_id=record.id,
                    customer_id=customer.id,
                    channel=_channel_for(outcomes),
                    to="; ".join(o.summary() for o in outcomes),
                    message=message,
                    status=status,
                    error="; ".join(errors) or None,
                    outcomes=[asdict(o) for o in outcomes],
                    sent_at=now,
                )
            )
            await session.commit()

            # Only the due date itself completes the reminder cycle
            if days == 0 and not record.notified:
                try:
                    await session.execute(
                        update(ServiceRecord)
                        .where(ServiceRecord.id == record.id, ServiceRecord.notified.is_(False))
                        .values(notified=True, notified_at=now)
                    )
                    await session.commit()
                except Exception:
                    await session.rollback()
                    logger.exception("Failed to mark service record %s as notified", record.id)

        logger.info(
            "Notification for customer %s - %d days until service - Status: %s",
            customer.name, days, status.value,
        )
        return True

    async def _notify(self, recipient: Recipient, subject: str, message: str) -> RecipientOutcome:
        outcome = RecipientOutcome(recipient.name, recipient.phone, recipient.email)

        if recipient.phone:
            outcome.sms_status, outcome.sms_error = await _attempt(
                self.sms.send(recipient.phone, message)
            )

        if recipient.email:
            outcome.email_status, outcome.email_error = await _attempt(
                self.email.send(recipient.email, subject, message)
            )

        logger.info(
            "📧 Notification to %s - SMS: %s, Email: %s",
            recipient.name, outcome.sms_status or "-", outcome.email_status or "-",
        )
        return outcome


def build_notifier(settings, session_factory: async_sessionmaker) -> DueServiceNotifier:
    """Wire a notifier from application settings."""
    return DueServiceNotifier(
        session_factory=session_factory,
        sms=SMSSender.from_settings(settings),
        email=EmailSender.from_settings(settings),
        admin=AdminContact.from_settings(settings),
        lookahead_days=settings.reminder_lookahead_days,
        timezone=settings.scheduler_timezone,
    )
