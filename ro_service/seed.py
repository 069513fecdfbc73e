#!/usr/bin/env python3
"""
Seed the database with demo users, customers and service records.

Run with ``python -m ro_service.seed``. Existing data is cleared first.
Prints bearer tokens for the seeded users.
"""
import asyncio
from datetime import date, datetime, timedelta

from sqlalchemy import delete

from ro_service.auth import create_access_token
from ro_service.database import AsyncSessionLocal, init_db
from ro_service.models import Customer, NotificationLog, ServiceRecord, User, UserRole


async def seed():
    await init_db()

    async with AsyncSessionLocal() as db:
        for model in (NotificationLog, ServiceRecord, Customer, User):
            await db.execute(delete(model))

        admin = User(name="Admin User", email="admin@ro-service.com",
                     phone="+919876543210", role=UserRole.ADMIN)
        technician = User(name="Suresh Kumar", email="suresh@ro-service.com",
                          phone="+919876543211", role=UserRole.TECHNICIAN)
        db.add_all([admin, technician])
        await db.flush()

        ravi = Customer(
            name="Ravi Kumar", phone="+919876543210", email="ravi@example.com",
            address="12 MG Road, Bangalore, Karnataka 560001", model="PureRO X20",
            installed_on=date(2024, 11, 1), notes="Keep membrane in stock",
            technician_id=technician.id,
        )
        anita = Customer(
            name="Anita Sharma", phone="+919812345678", email="anita@example.com",
            address="45 Park Street, Kolkata, West Bengal 700016", model="AquaSafe Z5",
            installed_on=date(2023, 5, 10), technician_id=technician.id,
        )
        db.add_all([ravi, anita])
        await db.flush()

        today = datetime.now().replace(hour=10, minute=0, second=0, microsecond=0)
        db.add_all([
            ServiceRecord(
                customer_id=ravi.id, service_date=today - timedelta(days=90),
                technician="Suresh Kumar", parts_replaced=["Sediment filter"],
                priority_parts=[{"part": "RO membrane", "care": "Check TDS, replace if above 80"}],
                next_service_date=today,
            ),
            ServiceRecord(
                customer_id=anita.id, service_date=today - timedelta(days=85),
                technician="Suresh Kumar", parts_replaced=["Carbon filter"],
                next_service_date=today + timedelta(days=5),
            ),
        ])
        await db.commit()

        print("✓ Admin user created: admin@ro-service.com")
        print(f"  token: {create_access_token(admin.id)}")
        print("✓ Technician created: suresh@ro-service.com")
        print(f"  token: {create_access_token(technician.id)}")
        print("✓ 2 customers and 2 service records created")


if __name__ == "__main__":
    asyncio.run(seed())
