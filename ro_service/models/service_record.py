"""
Service record model for database.

A service record is one maintenance visit plus the next scheduled visit.
The reminder scheduler watches ``next_service_date`` and owns the
``notified``/``notified_at`` pair. Scheduling timestamps are naive
local wall-clock times.
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ro_service.database import Base


class ServiceRecord(Base):
    """Service record database model."""

    __tablename__ = "service_records"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_date = Column(DateTime, server_default=func.now(), nullable=False)
    technician = Column(String, nullable=True)
    parts_replaced = Column(JSON, default=list, nullable=False)
    priority_parts = Column(JSON, default=list, nullable=False)
    next_service_date = Column(DateTime, nullable=False, index=True)
    notes = Column(String, nullable=True)
    images = Column(JSON, default=list, nullable=False)
    notified = Column(Boolean, default=False, nullable=False, index=True)
    notified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    customer = relationship("Customer", back_populates="service_records")
    notifications = relationship(
        "NotificationLog", back_populates="service_record", cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_service_records_next_service_date_notified", "next_service_date", "notified"),
    )
