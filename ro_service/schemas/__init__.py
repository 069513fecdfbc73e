"""
Pydantic schemas for request/response validation.
"""
from ro_service.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate, Customer
from ro_service.schemas.service_record import (
    PriorityPart, ServiceRecordBase, ServiceRecordCreate, ServiceRecordUpdate, ServiceRecord,
    UpcomingServiceRecord,
)
from ro_service.schemas.notification import Notification, TriggerResponse
from ro_service.schemas.user import UserBase, UserUpdate, User

__all__ = [
    "CustomerBase", "CustomerCreate", "CustomerUpdate", "Customer",
    "PriorityPart", "ServiceRecordBase", "ServiceRecordCreate", "ServiceRecordUpdate",
    "ServiceRecord", "UpcomingServiceRecord",
    "Notification", "TriggerResponse",
    "UserBase", "UserUpdate", "User",
]
