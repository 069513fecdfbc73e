"""
SQLAlchemy database models.
"""
from ro_service.models.user import User, UserRole
from ro_service.models.customer import Customer
from ro_service.models.service_record import ServiceRecord
from ro_service.models.notification import (
    NotificationLog, NotificationChannel, NotificationStatus,
)

__all__ = [
    "User", "UserRole", "Customer", "ServiceRecord",
    "NotificationLog", "NotificationChannel", "NotificationStatus",
]
