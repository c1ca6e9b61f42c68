from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Text, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class AadhaarRecord(Base):
    __tablename__ = "aadhaar_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True, index=True)
    aadhaar_number = Column(String(12), unique=True, nullable=False, index=True)

    # Demographics
    full_name = Column(String(255), nullable=False, default="")
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    address = Column(Text, nullable=False, default="")
    state = Column(String(100), nullable=False, default="", index=True)
    district = Column(String(100), nullable=True, index=True)
    city = Column(String(100), nullable=True)
    pincode = Column(String(10), nullable=False, default="")
    locality = Column(String(255), nullable=True)
    landmark = Column(String(255), nullable=True)
    house_number = Column(String(100), nullable=True)
    street = Column(String(255), nullable=True)
    care_of = Column(String(255), nullable=True)
    guardian_name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    photo_url = Column(String(512), nullable=True)

    # Biometrics
    fingerprint_status = Column(String(20), default="registered")
    iris_status = Column(String(20), default="registered")
    face_scan_status = Column(String(20), default="registered")
    last_biometric_update = Column(Date, nullable=True)
    biometric_expiry_date = Column(Date, nullable=True)

    # Enrollment
    enrollment_number = Column(String(28), nullable=True)
    enrollment_date = Column(Date, nullable=True)
    registration_center = Column(String(255), nullable=True)

    card_type = Column(String(20), default="standard")
    status = Column(String(20), default="active", index=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_date = Column(DateTime(timezone=True), nullable=True)
    is_eid_linked = Column(Boolean, nullable=False, default=False)
    eid_number = Column(String(20), nullable=True)
    mobile_verified = Column(Boolean, nullable=False, default=False)
    email_verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="aadhaar_record")
    appointments = relationship("Appointment", back_populates="aadhaar_record", cascade="all, delete-orphan")
    update_history = relationship("UpdateHistory", back_populates="aadhaar_record", cascade="all, delete-orphan")
