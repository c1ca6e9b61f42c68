from sqlalchemy import Column, String, DateTime, Numeric, Boolean, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from app.database import Base
import uuid


class FraudLog(Base):
    __tablename__ = "fraud_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    aadhaar_record_id = Column(String(36), ForeignKey("aadhaar_records.id", ondelete="SET NULL"), nullable=True, index=True)
    appointment_id = Column(String(36), ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True)
    event_type = Column(String(100), nullable=False)
    risk_level = Column(String(20), nullable=False, default="medium", index=True)
    confidence_score = Column(Numeric(3, 2), nullable=True)
    details = Column(JSON, nullable=True)
    action_taken = Column(String(100), nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    detected_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
