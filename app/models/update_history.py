from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base
import uuid


class UpdateHistoryStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UpdateHistory(Base):
    __tablename__ = "update_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    appointment_id = Column(String(36), ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True, index=True)
    aadhaar_record_id = Column(String(36), ForeignKey("aadhaar_records.id", ondelete="CASCADE"), nullable=False, index=True)
    update_type_id = Column(String(36), ForeignKey("update_types.id"), nullable=False)
    field_name = Column(String(255), nullable=False)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)
    status = Column(String(30), nullable=False, default=UpdateHistoryStatus.PENDING.value, index=True)
    urn = Column(String(50), unique=True, nullable=True, index=True)
    rejection_reason = Column(Text, nullable=True)
    approved_by = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
    approved_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    aadhaar_record = relationship("AadhaarRecord", back_populates="update_history")
    update_type = relationship("UpdateType")
