from app.models.user import User, UserRole
from app.models.aadhaar_record import AadhaarRecord
from app.models.otp_verification import OtpVerification, OtpType
from app.models.center import Center
from app.models.update_type import UpdateType
from app.models.time_slot import TimeSlot
from app.models.appointment import Appointment, AppointmentStatus
from app.models.document import Document, DocumentStatus
from app.models.update_history import UpdateHistory, UpdateHistoryStatus
from app.models.fraud_log import FraudLog
from app.models.center_load import CenterLoad, DemandForecast
from app.models.session_log import SessionLog

__all__ = [
    "User",
    "UserRole",
    "AadhaarRecord",
    "OtpVerification",
    "OtpType",
    "Center",
    "UpdateType",
    "TimeSlot",
    "Appointment",
    "AppointmentStatus",
    "Document",
    "DocumentStatus",
    "UpdateHistory",
    "UpdateHistoryStatus",
    "FraudLog",
    "CenterLoad",
    "DemandForecast",
    "SessionLog",
]
