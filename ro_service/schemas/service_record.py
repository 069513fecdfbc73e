"""
Pydantic schemas for ServiceRecord.
"""
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo
from ro_service.config import get_settings


def to_local_naive(value):
    """Store schedule timestamps as wall-clock time in the business timezone."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        zone = ZoneInfo(get_settings().scheduler_timezone)
        return value.astimezone(zone).replace(tzinfo=None)
    return value


class PriorityPart(BaseModel):
    """A part needing attention and how to care for it."""
    part: str
    care: str = ""


class ServiceRecordBase(BaseModel):
    """Base service record schema with common fields."""
    service_date: Optional[datetime] = None
    technician: Optional[str] = None
    parts_replaced: List[str] = []
    priority_parts: List[PriorityPart] = []
    next_service_date: datetime
    notes: Optional[str] = None
    images: List[str] = []

    local_dates = field_validator("service_date", "next_service_date")(to_local_naive)


class ServiceRecordCreate(ServiceRecordBase):
    """Schema for creating a service record."""
    pass


class ServiceRecordUpdate(BaseModel):
    """Schema for updating a service record. The notified flag is not editable."""
    service_date: Optional[datetime] = None
    technician: Optional[str] = None
    parts_replaced: Optional[List[str]] = None
    priority_parts: Optional[List[PriorityPart]] = None
    next_service_date: Optional[datetime] = None
    notes: Optional[str] = None
    images: Optional[List[str]] = None

    local_dates = field_validator("service_date", "next_service_date")(to_local_naive)


class ServiceRecord(ServiceRecordBase):
    """Schema for service record responses."""
    id: int
    customer_id: int
    service_date: datetime
    notified: bool
    notified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CustomerSummary(BaseModel):
    """Customer fields shown next to an upcoming record."""
    id: int
    name: str
    phone: str
    model: str
    address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UpcomingServiceRecord(ServiceRecord):
    """Service record with its customer, for the upcoming list."""
    customer: CustomerSummary
