"""
Pydantic schemas for User (technicians and admins).
"""
from pydantic import BaseModel, EmailStr, ConfigDict
from datetime import datetime
from typing import Optional
from ro_service.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema with common fields."""
    name: str
    email: EmailStr
    phone: Optional[str] = None
    role: UserRole = UserRole.TECHNICIAN


class UserUpdate(BaseModel):
    """Schema for an admin updating a technician."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class User(UserBase):
    """Schema for user responses."""
    id: int
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
