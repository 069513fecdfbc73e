"""
Pydantic schemas for Customer.
"""
from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import List, Optional


class CustomerBase(BaseModel):
    """Base customer schema with common fields."""
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    model: str = Field(min_length=1)
    installed_on: Optional[date] = None
    notes: Optional[str] = None
    images: List[str] = []

    @field_validator("name", "phone", "model", mode="before")
    @classmethod
    def strip_required(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""
    pass


class CustomerUpdate(BaseModel):
    """Schema for updating a customer."""
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    model: Optional[str] = None
    installed_on: Optional[date] = None
    notes: Optional[str] = None
    images: Optional[List[str]] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Customer(CustomerBase):
    """Schema for customer responses."""
    id: int
    technician_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
