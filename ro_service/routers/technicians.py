"""
Technician management routes (admin only).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from typing import List

from ro_service.auth import require_admin
from ro_service.database import get_db
from ro_service.models.customer import Customer
from ro_service.models.user import User, UserRole
from ro_service.schemas.user import User as UserSchema, UserUpdate

router = APIRouter(prefix="/technicians", tags=["technicians"])


async def get_technician(db: AsyncSession, user_id: int, action: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Technician not found"
        )

    if user.role == UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Cannot {action} admin account"
        )

    return user


@router.get("/", response_model=List[UserSchema])
async def get_technicians(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Get all technicians.
    """
    result = await db.execute(
        select(User).where(User.role == UserRole.TECHNICIAN).order_by(User.name)
    )
    return result.scalars().all()


@router.put("/{user_id}", response_model=UserSchema)
async def update_technician(
    user_id: int,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Update a technician.
    """
    db_user = await get_technician(db, user_id, "modify")

    update_data = user_update.model_dump(exclude_unset=True)

    if update_data.get("email") and update_data["email"] != db_user.email:
        result = await db.execute(select(User).where(User.email == update_data["email"]))
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

    for field, value in update_data.items():
        setattr(db_user, field, value)

    await db.commit()
    await db.refresh(db_user)

    return db_user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_technician(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Delete a technician. Technicians who still own customers are kept.
    """
    db_user = await get_technician(db, user_id, "delete")

    owned = await db.scalar(
        select(func.count(Customer.id)).where(Customer.technician_id == user_id)
    )
    if owned:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Technician still owns {owned} customers"
        )

    await db.delete(db_user)
    await db.commit()

    return None
