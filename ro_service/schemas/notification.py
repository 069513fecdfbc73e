"""
Pydantic schemas for the notification log and reminder runs.
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional
from ro_service.models.notification import NotificationChannel, NotificationStatus


class RecipientOutcome(BaseModel):
    """Per-recipient channel outcome."""
    recipient: str
    phone: Optional[str] = None
    email: Optional[str] = None
    sms_status: Optional[str] = None
    email_status: Optional[str] = None
    sms_error: Optional[str] = None
    email_error: Optional[str] = None


class Notification(BaseModel):
    """Schema for notification log responses."""
    id: int
    service_record_id: int
    customer_id: int
    channel: NotificationChannel
    to: str
    message: str
    status: NotificationStatus
    error: Optional[str] = None
    outcomes: List[RecipientOutcome] = []
    sent_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TriggerResponse(BaseModel):
    """Result of a manually triggered reminder run."""
    success: bool
    count: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
