import unittest
from datetime import datetime, timedelta
from unittest import mock

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ro_service.database import Base
from ro_service.models import NotificationChannel, NotificationLog, NotificationStatus, ServiceRecord
from ro_service.notifications.channels import ChannelFailure, FailureKind, SMSSender
from ro_service.notifications.dispatcher import DueServiceNotifier
from ro_service.notifications.recipients import AdminContact
from ro_service.notifications.scanner import already_notified_today, find_due_records

from tests.support import (
    DatabaseTestCase, FakeEmail, FakeSMS, create_customer, create_record, create_user,
)

NOW = datetime(2026, 10, 17, 8, 0)
TODAY = datetime(2026, 10, 17)


class DispatcherTestCase(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.technician = await create_user(self.session_factory)
        self.customer = await create_customer(self.session_factory, self.technician.id)
        self.sms = FakeSMS()
        self.email = FakeEmail()

    def notifier(self, admin=None, sms=None, email=None):
        return DueServiceNotifier(
            self.session_factory, sms or self.sms, email or self.email, admin=admin
        )

    async def logs(self, record_id=None):
        async with self.session_factory() as session:
            query = select(NotificationLog).order_by(NotificationLog.id)
            if record_id is not None:
                query = query.where(NotificationLog.service_record_id == record_id)
            return list((await session.execute(query)).scalars().all())

    async def reload(self, record):
        async with self.session_factory() as session:
            return await session.get(ServiceRecord, record.id)


class TestScanner(DispatcherTestCase):

    async def test_window_bounds(self):
        """Records due 0-3 days out are scanned, -1 and 4 are not"""
        yesterday = await create_record(self.session_factory, self.customer.id, TODAY - timedelta(days=1))
        due_today = await create_record(self.session_factory, self.customer.id, TODAY)
        last_day = await create_record(
            self.session_factory, self.customer.id, TODAY + timedelta(days=3, hours=23)
        )
        too_far = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=4))

        async with self.session_factory() as session:
            records = await find_due_records(session, NOW)

        ids = [r.id for r in records]
        self.assertEqual(ids, [due_today.id, last_day.id])
        self.assertNotIn(yesterday.id, ids)
        self.assertNotIn(too_far.id, ids)
        self.assertEqual(records[0].customer.name, "Ravi Kumar")

    async def test_dedup_guard_is_per_day(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY)
        async with self.session_factory() as session:
            session.add(NotificationLog(
                service_record_id=record.id, customer_id=self.customer.id,
                channel=NotificationChannel.SMS, to="x", message="m",
                status=NotificationStatus.SENT, sent_at=TODAY + timedelta(hours=23, minutes=59),
            ))
            await session.commit()

            self.assertTrue(await already_notified_today(session, record.id, NOW))
            self.assertFalse(await already_notified_today(session, record.id, NOW + timedelta(days=1)))
            self.assertFalse(await already_notified_today(session, record.id, NOW - timedelta(days=1)))


class TestDueServiceNotifier(DispatcherTestCase):

    async def test_scenario_a_due_today(self):
        """Customer without email gets an SMS and the record is marked notified"""
        record = await create_record(self.session_factory, self.customer.id, TODAY)

        summary = await self.notifier().run(NOW)

        self.assertTrue(summary.success)
        self.assertEqual(summary.count, 1)
        self.assertEqual(summary.message, "Processed 1 notifications")

        logs = await self.logs(record.id)
        self.assertEqual(len(logs), 1)
        log = logs[0]
        self.assertTrue(log.message.startswith("DUE TODAY"))
        self.assertEqual(log.status, NotificationStatus.SENT)
        self.assertEqual(log.channel, NotificationChannel.SMS)
        self.assertEqual(log.sent_at, NOW)
        self.assertEqual(log.outcomes, [{
            "recipient": "Ravi Kumar", "phone": "+919876543210", "email": None,
            "sms_status": "sent", "email_status": None, "sms_error": None, "email_error": None,
        }])
        self.assertIsNone(log.error)
        self.assertEqual(self.email.calls, [])

        reloaded = await self.reload(record)
        self.assertTrue(reloaded.notified)
        self.assertEqual(reloaded.notified_at, NOW)

    async def test_scenario_b_second_run_same_day(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY)
        notifier = self.notifier()
        await notifier.run(NOW)

        summary = await notifier.run(NOW + timedelta(hours=6))

        self.assertTrue(summary.success)
        self.assertEqual(summary.count, 0)
        self.assertEqual(len(await self.logs(record.id)), 1)
        self.assertEqual(len(self.sms.calls), 1)
        reloaded = await self.reload(record)
        self.assertTrue(reloaded.notified)
        self.assertEqual(reloaded.notified_at, NOW)

    async def test_scenario_c_outside_window(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=5))

        summary = await self.notifier().run(NOW)

        self.assertEqual(summary.count, 0)
        self.assertEqual(await self.logs(), [])
        self.assertEqual(self.sms.calls, [])
        self.assertFalse((await self.reload(record)).notified)

    async def test_scenario_d_sms_unconfigured_email_works(self):
        customer = await create_customer(
            self.session_factory, self.technician.id, name="Anita Sharma",
            phone="+919812345678", email="anita@example.com",
        )
        record = await create_record(self.session_factory, customer.id, TODAY + timedelta(days=2))

        await self.notifier(sms=SMSSender(api_key=None)).run(NOW)

        log = (await self.logs(record.id))[0]
        self.assertEqual(log.status, NotificationStatus.SENT)
        self.assertEqual(log.channel, NotificationChannel.BOTH)
        outcome = log.outcomes[0]
        self.assertEqual(outcome["sms_status"], "failed")
        self.assertIn("not configured", outcome["sms_error"])
        self.assertEqual(outcome["email_status"], "sent")
        self.assertEqual(log.error, "Anita Sharma: SMS: SMS gateway API key not configured")
        self.assertEqual(self.email.calls[0][1], "RO Service due in 2 days - Anita Sharma")

    async def test_upcoming_does_not_mark_notified(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=1))

        await self.notifier().run(NOW)

        self.assertFalse((await self.reload(record)).notified)
        log = (await self.logs(record.id))[0]
        self.assertIn("TOMORROW", log.message)

    async def test_daily_reminders_until_due(self):
        """One reminder per day; the flag flips on the due date only"""
        record = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=1))
        notifier = self.notifier()

        await notifier.run(NOW)
        await notifier.run(NOW + timedelta(hours=2))
        self.assertFalse((await self.reload(record)).notified)

        tomorrow = NOW + timedelta(days=1)
        await notifier.run(tomorrow)
        await notifier.run(tomorrow + timedelta(hours=2))

        logs = await self.logs(record.id)
        self.assertEqual(len(logs), 2)
        self.assertTrue(logs[1].message.startswith("DUE TODAY"))
        reloaded = await self.reload(record)
        self.assertTrue(reloaded.notified)
        self.assertEqual(reloaded.notified_at, tomorrow)

    async def test_notified_flag_never_reverts(self):
        earlier = NOW - timedelta(days=30)
        record = await create_record(
            self.session_factory, self.customer.id, TODAY, notified=True, notified_at=earlier
        )

        summary = await self.notifier().run(NOW)

        self.assertEqual(summary.count, 1)
        reloaded = await self.reload(record)
        self.assertTrue(reloaded.notified)
        self.assertEqual(reloaded.notified_at, earlier)

    async def test_admin_is_notified_first(self):
        admin = AdminContact(phone="+919000000000", email="admin@ro-service.com")
        record = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=3))

        await self.notifier(admin=admin).run(NOW)

        self.assertEqual([call[0] for call in self.sms.calls], ["+919000000000", "+919876543210"])
        self.assertEqual([call[0] for call in self.email.calls], ["admin@ro-service.com"])
        log = (await self.logs(record.id))[0]
        self.assertEqual([o["recipient"] for o in log.outcomes], ["Admin", "Ravi Kumar"])
        self.assertEqual(
            log.to,
            "Admin (+919000000000 / admin@ro-service.com): SMS sent, Email sent; "
            "Ravi Kumar (+919876543210 / no email): SMS sent",
        )

    async def test_total_failure_is_still_logged(self):
        sms = FakeSMS(result=ChannelFailure(FailureKind.REJECTED, "DND number"))
        record = await create_record(self.session_factory, self.customer.id, TODAY)

        summary = await self.notifier(sms=sms).run(NOW)

        self.assertEqual(summary.count, 1)
        log = (await self.logs(record.id))[0]
        self.assertEqual(log.status, NotificationStatus.FAILED)
        self.assertEqual(log.error, "Ravi Kumar: SMS: DND number")
        self.assertTrue((await self.reload(record)).notified)

    async def test_raising_channel_does_not_stop_run(self):
        sms = FakeSMS(error=RuntimeError("socket closed"))
        first = await create_record(self.session_factory, self.customer.id, TODAY)
        second = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=1))

        summary = await self.notifier(sms=sms).run(NOW)

        self.assertEqual(summary.count, 2)
        for record in (first, second):
            log = (await self.logs(record.id))[0]
            self.assertEqual(log.status, NotificationStatus.FAILED)
            self.assertIn("socket closed", log.error)

    async def test_wider_lookahead_reminds_far_records(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=5))
        notifier = DueServiceNotifier(self.session_factory, self.sms, self.email, lookahead_days=5)

        summary = await notifier.run(NOW)

        self.assertEqual(summary.count, 1)
        log = (await self.logs(record.id))[0]
        self.assertTrue(log.message.startswith("due in 5 days"))
        self.assertIn("Days Remaining: 5 days", log.message)

    async def test_log_write_failure_moves_to_next_record(self):
        first = await create_record(self.session_factory, self.customer.id, TODAY)
        second = await create_record(self.session_factory, self.customer.id, TODAY + timedelta(days=1))
        created = []

        def broken_first_log(**fields):
            created.append(fields["service_record_id"])
            if len(created) == 1:
                fields["message"] = None
            return NotificationLog(**fields)

        with mock.patch(
            "ro_service.notifications.dispatcher.NotificationLog", side_effect=broken_first_log
        ):
            with self.assertLogs("ro_service.notifications.dispatcher", level="ERROR") as captured:
                summary = await self.notifier().run(NOW)

        self.assertTrue(summary.success)
        self.assertEqual(summary.count, 1)
        self.assertEqual([log.service_record_id for log in await self.logs()], [second.id])
        self.assertIn(f"service record {first.id}", captured.output[0])
        self.assertFalse((await self.reload(first)).notified)

    async def test_flag_write_failure_still_counts_logged_record(self):
        record = await create_record(self.session_factory, self.customer.id, TODAY)

        with mock.patch(
            "ro_service.notifications.dispatcher.update",
            side_effect=SQLAlchemyError("flag write failed"),
        ):
            with self.assertLogs("ro_service.notifications.dispatcher", level="ERROR"):
                summary = await self.notifier().run(NOW)

        self.assertEqual(summary.count, 1)
        self.assertEqual(len(await self.logs(record.id)), 1)
        self.assertFalse((await self.reload(record)).notified)

    async def test_scan_failure_reports_error(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        summary = await self.notifier().run(NOW)

        self.assertFalse(summary.success)
        self.assertIn("service_records", summary.error)
        self.assertEqual(summary.as_dict(), {"success": False, "error": summary.error})


if __name__ == '__main__':
    unittest.main()
