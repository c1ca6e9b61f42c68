from sqlalchemy import Column, String, DateTime, Integer, Boolean, Index
from sqlalchemy.sql import func
import enum
from app.database import Base
import uuid


class OtpType(str, enum.Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    EMAIL_VERIFICATION = "email_verification"
    MOBILE_VERIFICATION = "mobile_verification"
    PASSWORD_RESET = "password_reset"


class OtpVerification(Base):
    __tablename__ = "otp_verification"
    __table_args__ = (
        Index("ix_otp_verification_number_type", "aadhaar_number", "type"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # No FK: OTPs are issued before the record exists during signup
    aadhaar_number = Column(String(12), nullable=False, index=True)
    otp = Column(String(6), nullable=False)
    type = Column(String(50), nullable=False, default=OtpType.LOGIN.value)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    used = Column(Boolean, nullable=False, default=False)
    attempts = Column(Integer, nullable=False, default=0)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
