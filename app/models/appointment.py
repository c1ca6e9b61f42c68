from sqlalchemy import Column, String, DateTime, Date, Time, Integer, Boolean, Text, Enum, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base
import uuid


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"
    IN_REVIEW = "in-review"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_id = Column(String(20), unique=True, nullable=False, index=True)
    aadhaar_record_id = Column(String(36), ForeignKey("aadhaar_records.id", ondelete="CASCADE"), nullable=False, index=True)
    center_id = Column(String(36), ForeignKey("centers.id"), nullable=False, index=True)
    update_type_id = Column(String(36), ForeignKey("update_types.id"), nullable=False)
    # NULL for walk-in / client generated slots, no capacity is held then
    time_slot_id = Column(String(36), ForeignKey("time_slots.id"), nullable=True)
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=True)
    status = Column(
        Enum(
            AppointmentStatus,
            values_callable=lambda statuses: [s.value for s in statuses],
            native_enum=False,
            length=30,
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        index=True,
    )
    is_online = Column(Boolean, nullable=False, default=False)
    is_biometric_auto_assigned = Column(Boolean, nullable=False, default=False)
    auto_booked = Column(Boolean, nullable=False, default=False)
    queue_position = Column(Integer, nullable=True)
    counter_number = Column(Integer, nullable=True)
    estimated_wait_minutes = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    aadhaar_record = relationship("AadhaarRecord", back_populates="appointments")
    center = relationship("Center")
    update_type = relationship("UpdateType")
    time_slot = relationship("TimeSlot")
    documents = relationship("Document", back_populates="appointment", cascade="all, delete-orphan")
