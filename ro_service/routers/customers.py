"""
Customer routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select, or_
from typing import List

from ro_service.auth import check_customer_access, get_current_active_user
from ro_service.database import get_db
from ro_service.models.customer import Customer
from ro_service.models.notification import NotificationLog
from ro_service.models.service_record import ServiceRecord
from ro_service.models.user import User
from ro_service.schemas.customer import Customer as CustomerSchema, CustomerCreate, CustomerUpdate
from ro_service.schemas.service_record import (
    ServiceRecord as ServiceRecordSchema, ServiceRecordCreate,
)

router = APIRouter(prefix="/customers", tags=["customers"])


async def get_accessible_customer(
    db: AsyncSession, customer_id: int, user: User, action: str
) -> Customer:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )

    check_customer_access(customer, user, action)
    return customer


@router.get("/", response_model=List[CustomerSchema])
async def get_customers(
    skip: int = 0,
    limit: int = 10,
    search: str = "",
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get customers with pagination and search.
    Technicians only see their own customers.
    """
    query = select(Customer)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            Customer.name.ilike(pattern),
            Customer.phone.ilike(pattern),
            Customer.model.ilike(pattern),
        ))

    if not current_user.is_admin:
        query = query.where(Customer.technician_id == current_user.id)

    result = await db.execute(
        query.order_by(Customer.created_at.desc(), Customer.id.desc()).offset(skip).limit(limit)
    )
    return result.scalars().all()


@router.get("/{customer_id}", response_model=CustomerSchema)
async def get_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific customer by ID.
    """
    return await get_accessible_customer(db, customer_id, current_user, "view this customer")


@router.post("/", response_model=CustomerSchema, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new customer owned by the calling technician.
    """
    db_customer = Customer(**customer.model_dump(exclude_none=True), technician_id=current_user.id)
    db.add(db_customer)
    await db.commit()
    await db.refresh(db_customer)

    return db_customer


@router.put("/{customer_id}", response_model=CustomerSchema)
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a customer.
    """
    db_customer = await get_accessible_customer(
        db, customer_id, current_user, "update this customer"
    )

    # Update only provided fields
    update_data = customer_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_customer, field, value)

    await db.commit()
    await db.refresh(db_customer)

    return db_customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a customer and all of its service records.
    """
    db_customer = await get_accessible_customer(
        db, customer_id, current_user, "delete this customer"
    )

    record_ids = select(ServiceRecord.id).where(ServiceRecord.customer_id == customer_id)
    await db.execute(delete(NotificationLog).where(NotificationLog.service_record_id.in_(record_ids)))
    await db.execute(delete(ServiceRecord).where(ServiceRecord.customer_id == customer_id))

    await db.delete(db_customer)
    await db.commit()

    return None


@router.get("/{customer_id}/records", response_model=List[ServiceRecordSchema])
async def get_customer_records(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get service records for a customer, latest visit first.
    """
    await get_accessible_customer(
        db, customer_id, current_user, "view records for this customer"
    )

    result = await db.execute(
        select(ServiceRecord)
        .where(ServiceRecord.customer_id == customer_id)
        .order_by(ServiceRecord.service_date.desc())
    )
    return result.scalars().all()


@router.post(
    "/{customer_id}/records",
    response_model=ServiceRecordSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer_record(
    customer_id: int,
    record: ServiceRecordCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a service record for a customer.
    """
    await get_accessible_customer(
        db, customer_id, current_user, "add records for this customer"
    )

    db_record = ServiceRecord(**record.model_dump(exclude_none=True), customer_id=customer_id)
    db.add(db_record)
    await db.commit()
    await db.refresh(db_record)

    return db_record
