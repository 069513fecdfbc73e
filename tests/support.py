"""
Shared fixtures: a throwaway SQLite store, seeded rows and fake channels.
"""
import os
import tempfile
import unittest
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ro_service.database import Base
from ro_service.models import Customer, ServiceRecord, User, UserRole
from ro_service.notifications.channels import ChannelSuccess


def make_engine(path):
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


async def create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def add(session_factory, obj):
    async with session_factory() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
    return obj


async def create_user(session_factory, name="Suresh Kumar", email="suresh@ro-service.com",
                      role=UserRole.TECHNICIAN, **fields):
    return await add(session_factory, User(name=name, email=email, role=role, **fields))


async def create_customer(session_factory, technician_id, name="Ravi Kumar",
                          phone="+919876543210", **fields):
    fields.setdefault("model", "PureRO X20")
    fields.setdefault("installed_on", date(2024, 11, 1))
    return await add(
        session_factory,
        Customer(name=name, phone=phone, technician_id=technician_id, **fields),
    )


async def create_record(session_factory, customer_id, next_service_date, **fields):
    fields.setdefault("service_date", next_service_date - timedelta(days=90))
    return await add(
        session_factory,
        ServiceRecord(customer_id=customer_id, next_service_date=next_service_date, **fields),
    )


class FakeSMS:
    """Records calls and returns a canned result."""

    def __init__(self, result=None, error=None):
        self.result = result or ChannelSuccess("FakeSMS", "sms-1")
        self.error = error
        self.calls = []

    async def send(self, phone, message):
        self.calls.append((phone, message))
        if self.error:
            raise self.error
        return self.result


class FakeEmail:
    """Records calls and returns a canned result."""

    def __init__(self, result=None):
        self.result = result or ChannelSuccess("FakeEmail", "<mail-1@example.com>")
        self.calls = []

    async def send(self, to, subject, message):
        self.calls.append((to, subject, message))
        return self.result


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh SQLite database file per test."""

    async def asyncSetUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        self.engine = make_engine(self.db_path)
        await create_tables(self.engine)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def asyncTearDown(self):
        await self.engine.dispose()
        os.remove(self.db_path)
