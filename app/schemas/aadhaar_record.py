from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date


class AadhaarRecordResponse(BaseModel):
    id: str
    user_id: Optional[str]
    aadhaar_number: str
    full_name: str
    date_of_birth: Optional[date]
    gender: Optional[str]
    address: str
    state: str
    district: Optional[str]
    city: Optional[str]
    pincode: str
    locality: Optional[str]
    landmark: Optional[str]
    house_number: Optional[str]
    street: Optional[str]
    care_of: Optional[str]
    guardian_name: Optional[str]
    phone: Optional[str]
    photo_url: Optional[str]
    fingerprint_status: Optional[str]
    iris_status: Optional[str]
    face_scan_status: Optional[str]
    last_biometric_update: Optional[date]
    biometric_expiry_date: Optional[date]
    enrollment_number: Optional[str]
    enrollment_date: Optional[date]
    registration_center: Optional[str]
    card_type: Optional[str]
    status: Optional[str]
    is_verified: bool
    verification_date: Optional[datetime]
    is_eid_linked: bool
    eid_number: Optional[str]
    mobile_verified: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AadhaarRecordUpdate(BaseModel):
    """Partial update, only fields present in the request are written"""
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    locality: Optional[str] = None
    landmark: Optional[str] = None
    house_number: Optional[str] = None
    street: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    status: Optional[str] = None
    is_verified: Optional[bool] = None
    mobile_verified: Optional[bool] = None
    email_verified: Optional[bool] = None


class UpdateHistoryCreate(BaseModel):
    appointment_id: Optional[str] = None
    update_type_id: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    urn: Optional[str] = None


class UpdateHistoryReview(BaseModel):
    status: str = Field(..., pattern=r"^(approved|rejected)$")
    rejection_reason: Optional[str] = None


class UpdateHistoryResponse(BaseModel):
    id: str
    appointment_id: Optional[str]
    aadhaar_record_id: str
    update_type_id: str
    update_type_name: Optional[str] = None
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    status: str
    urn: Optional[str]
    rejection_reason: Optional[str]
    approved_by: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PhoneLookupResponse(BaseModel):
    exists: bool
    phone: Optional[str]
    email: Optional[str]
