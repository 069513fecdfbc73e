"""
Service record routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload
from typing import List

from ro_service.auth import check_customer_access, get_current_active_user
from ro_service.database import get_db
from ro_service.models.customer import Customer
from ro_service.models.notification import NotificationLog
from ro_service.models.service_record import ServiceRecord
from ro_service.models.user import User
from ro_service.config import get_settings
from ro_service.notifications.scanner import local_now, start_of_day
from ro_service.schemas.service_record import (
    ServiceRecord as ServiceRecordSchema, ServiceRecordUpdate, UpcomingServiceRecord,
)

router = APIRouter(prefix="/records", tags=["records"])


async def get_accessible_record(
    db: AsyncSession, record_id: int, user: User, action: str
) -> ServiceRecord:
    result = await db.execute(
        select(ServiceRecord)
        .options(selectinload(ServiceRecord.customer))
        .where(ServiceRecord.id == record_id)
    )
    record = result.scalar_one_or_none()

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service record not found"
        )

    check_customer_access(record.customer, user, action)
    return record


@router.get("/upcoming", response_model=List[UpcomingServiceRecord])
async def get_upcoming_records(
    skip: int = 0,
    limit: int = 10,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get service records due from today onwards, soonest first.
    """
    query = (
        select(ServiceRecord)
        .options(selectinload(ServiceRecord.customer))
        .where(ServiceRecord.next_service_date >= start_of_day(local_now(get_settings().scheduler_timezone)))
    )

    if not current_user.is_admin:
        query = query.join(Customer).where(Customer.technician_id == current_user.id)

    result = await db.execute(
        query.order_by(ServiceRecord.next_service_date, ServiceRecord.id).offset(skip).limit(limit)
    )
    return result.scalars().all()


@router.get("/{record_id}", response_model=ServiceRecordSchema)
async def get_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific service record by ID.
    """
    return await get_accessible_record(db, record_id, current_user, "view this record")


@router.put("/{record_id}", response_model=ServiceRecordSchema)
async def update_record(
    record_id: int,
    record_update: ServiceRecordUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a service record.
    """
    db_record = await get_accessible_record(db, record_id, current_user, "update this record")

    # Update only provided fields
    update_data = record_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("service_date", "next_service_date"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} cannot be empty"
            )
        setattr(db_record, field, value)

    await db.commit()
    await db.refresh(db_record)

    return db_record


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a service record.
    """
    db_record = await get_accessible_record(db, record_id, current_user, "delete this record")

    await db.execute(delete(NotificationLog).where(NotificationLog.service_record_id == record_id))
    await db.delete(db_record)
    await db.commit()

    return None
