from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, date

from app.models.otp_verification import OtpType
from app.schemas.aadhaar_record import AadhaarRecordResponse

AADHAAR_PATTERN = r"^\d{12}$"


class PersonalInfo(BaseModel):
    full_name: Optional[str] = Field(None, alias="fullName")
    date_of_birth: Optional[date] = Field(None, alias="dateOfBirth")
    gender: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None

    class Config:
        populate_by_name = True


class SignupRequest(BaseModel):
    aadhaar_number: str = Field(..., alias="aadhaarNumber", pattern=AADHAAR_PATTERN)
    password: str = Field(..., min_length=6)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    personal_info: Optional[PersonalInfo] = Field(None, alias="personalInfo")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    aadhaar_number: str = Field(..., alias="aadhaarNumber", min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    id: str
    email: str
    phone: str
    role: Optional[str] = None
    is_active: Optional[bool] = None
    last_login: Optional[datetime] = None
    aadhaar_record_id: Optional[str] = None

    class Config:
        from_attributes = True


class SignupUser(BaseModel):
    id: str
    email: str
    phone: str


class SignupRecord(BaseModel):
    id: str
    aadhaar_number: str
    email_verified: bool
    mobile_verified: bool


class SignupResponse(BaseModel):
    message: str
    user: SignupUser
    aadhaar_record: SignupRecord = Field(..., alias="aadhaarRecord")

    class Config:
        populate_by_name = True


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class SendOtpRequest(BaseModel):
    aadhaar_number: str = Field(..., alias="aadhaarNumber", pattern=AADHAAR_PATTERN)
    method: str = Field("email", pattern=r"^(email|sms)$")
    type: OtpType = OtpType.LOGIN

    class Config:
        populate_by_name = True


class SendOtpResponse(BaseModel):
    message: str
    channel: str
    expires_at: datetime
    otp: Optional[str] = None  # only when OTP_EXPOSE_IN_RESPONSE is enabled


class VerifyOtpRequest(BaseModel):
    aadhaar_number: str = Field(..., alias="aadhaarNumber", pattern=AADHAAR_PATTERN)
    otp: str = Field(..., pattern=r"^\d{6}$")
    type: OtpType = OtpType.LOGIN

    class Config:
        populate_by_name = True


class VerifyOtpResponse(BaseModel):
    valid: bool
    message: str
    type: str


class ResetPasswordRequest(BaseModel):
    aadhaar_number: str = Field(..., alias="aadhaarNumber", pattern=AADHAAR_PATTERN)
    otp: str = Field(..., pattern=r"^\d{6}$")
    new_password: str = Field(..., alias="newPassword", min_length=6)

    class Config:
        populate_by_name = True


class EmailOtpRequest(BaseModel):
    email: EmailStr


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
    aadhaar_record: AadhaarRecordResponse = Field(..., alias="aadhaarRecord")

    class Config:
        populate_by_name = True


class EmailOtpResponse(SendOtpResponse):
    email: str
