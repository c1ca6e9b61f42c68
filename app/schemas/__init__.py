# Pydantic schemas
from app.schemas.auth import (
    SignupRequest, SignupResponse, LoginRequest, LoginResponse, UserResponse,
    TokenResponse, RefreshTokenRequest, SendOtpRequest, SendOtpResponse,
    VerifyOtpRequest, VerifyOtpResponse, ResetPasswordRequest, EmailOtpRequest,
)
from app.schemas.aadhaar_record import (
    AadhaarRecordResponse, AadhaarRecordUpdate,
    UpdateHistoryCreate, UpdateHistoryReview, UpdateHistoryResponse,
    PhoneLookupResponse,
)
from app.schemas.appointment import (
    AppointmentCreate, AppointmentStatusUpdate, AppointmentResponse, AppointmentDetailResponse,
)
from app.schemas.center import CenterCreate, CenterUpdate, CenterResponse, NearbyCenterResponse
from app.schemas.time_slot import TimeSlotCreate, TimeSlotUpdate, TimeSlotResponse
from app.schemas.update_type import UpdateTypeCreate, UpdateTypeUpdate, UpdateTypeResponse
from app.schemas.document import DocumentCreate, DocumentStatusUpdate, DocumentResponse
from app.schemas.fraud_log import FraudLogCreate, FraudLogResolve, FraudLogResponse, UnresolvedCountResponse
from app.schemas.analytics import (
    CenterLoadUpsert, CenterLoadResponse, DemandForecastUpsert, DemandForecastResponse,
    DashboardResponse, FraudComparisonResponse,
)

__all__ = [
    "SignupRequest", "SignupResponse", "LoginRequest", "LoginResponse", "UserResponse",
    "TokenResponse", "RefreshTokenRequest", "SendOtpRequest", "SendOtpResponse",
    "VerifyOtpRequest", "VerifyOtpResponse", "ResetPasswordRequest", "EmailOtpRequest",
    "AadhaarRecordResponse", "AadhaarRecordUpdate",
    "UpdateHistoryCreate", "UpdateHistoryReview", "UpdateHistoryResponse",
    "PhoneLookupResponse",
    "AppointmentCreate", "AppointmentStatusUpdate", "AppointmentResponse", "AppointmentDetailResponse",
    "CenterCreate", "CenterUpdate", "CenterResponse", "NearbyCenterResponse",
    "TimeSlotCreate", "TimeSlotUpdate", "TimeSlotResponse",
    "UpdateTypeCreate", "UpdateTypeUpdate", "UpdateTypeResponse",
    "DocumentCreate", "DocumentStatusUpdate", "DocumentResponse",
    "FraudLogCreate", "FraudLogResolve", "FraudLogResponse", "UnresolvedCountResponse",
    "CenterLoadUpsert", "CenterLoadResponse", "DemandForecastUpsert", "DemandForecastResponse",
    "DashboardResponse", "FraudComparisonResponse",
]
