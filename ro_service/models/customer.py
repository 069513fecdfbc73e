"""
Customer model for database.
"""
from datetime import date

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ro_service.database import Base


class Customer(Base):
    """Customer database model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    model = Column(String, nullable=False)
    installed_on = Column(Date, default=date.today)
    notes = Column(String, nullable=True)
    images = Column(JSON, default=list, nullable=False)
    technician_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    technician = relationship("User", back_populates="customers")
    service_records = relationship(
        "ServiceRecord", back_populates="customer", cascade="all, delete-orphan", passive_deletes=True
    )
