from sqlalchemy import (
    Column, String, DateTime, Date, Time, Integer, Boolean, ForeignKey,
    UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class TimeSlot(Base):
    __tablename__ = "time_slots"
    __table_args__ = (
        UniqueConstraint("center_id", "date", "start_time", name="uq_time_slots_center_date_start"),
        CheckConstraint(
            "available_slots >= 0 AND available_slots <= total_capacity",
            name="ck_time_slots_available_within_capacity",
        ),
        Index("ix_time_slots_center_date", "center_id", "date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    center_id = Column(String(36), ForeignKey("centers.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    total_capacity = Column(Integer, nullable=False)
    # Shared counter, only ever changed through conditional UPDATEs in booking_engine
    available_slots = Column(Integer, nullable=False)
    risk_level = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    center = relationship("Center", back_populates="time_slots")
