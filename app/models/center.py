from sqlalchemy import Column, String, DateTime, Integer, Numeric, Text, Time, Boolean, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class Center(Base):
    __tablename__ = "centers"
    __table_args__ = (
        Index("ix_centers_city_state", "city", "state"),
        Index("ix_centers_coordinates", "latitude", "longitude"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=True)
    address = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False)
    latitude = Column(Numeric(10, 8), nullable=True)
    longitude = Column(Numeric(11, 8), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    working_hours_start = Column(Time, nullable=True)
    working_hours_end = Column(Time, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    time_slots = relationship("TimeSlot", back_populates="center", cascade="all, delete-orphan")
    loads = relationship("CenterLoad", back_populates="center", cascade="all, delete-orphan")
