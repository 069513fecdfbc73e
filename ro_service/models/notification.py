"""
Notification log model for database.
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ro_service.database import Base
import enum


class NotificationChannel(str, enum.Enum):
    """Notification channel enumeration."""
    SMS = "sms"
    EMAIL = "email"
    BOTH = "both"


class NotificationStatus(str, enum.Enum):
    """Notification status enumeration."""
    SENT = "sent"
    FAILED = "failed"
    PENDING = "pending"


class NotificationLog(Base):
    """One reminder dispatch for one service record on one day."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    service_record_id = Column(
        Integer, ForeignKey("service_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    channel = Column(SQLEnum(NotificationChannel), nullable=False)
    to = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(SQLEnum(NotificationStatus), default=NotificationStatus.PENDING, nullable=False)
    error = Column(Text, nullable=True)
    outcomes = Column(JSON, default=list, nullable=False)
    sent_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

    # Relationships
    service_record = relationship("ServiceRecord", back_populates="notifications")
    customer = relationship("Customer")
