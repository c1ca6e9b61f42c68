from sqlalchemy import Column, String, DateTime, Integer, Text, Boolean
from sqlalchemy.sql import func
from app.database import Base
import uuid


class UpdateType(Base):
    __tablename__ = "update_types"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    risk_level = Column(String(20), nullable=False, index=True)  # low, medium, high
    requires_verification = Column(Boolean, nullable=False, default=False)
    requires_biometric = Column(Boolean, nullable=False, default=False, index=True)
    can_do_online = Column(Boolean, nullable=False, default=False, index=True)
    estimated_time_minutes = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
