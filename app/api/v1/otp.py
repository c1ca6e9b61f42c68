from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.models.aadhaar_record import AadhaarRecord
from app.models.otp_verification import OtpType
from app.schemas.auth import EmailOtpRequest, EmailOtpResponse
from app.core.exceptions import NotFoundError
from app.core.otp_engine import OtpEngine, deliver_otp

router = APIRouter()
settings = get_settings()


async def _email_otp(db: AsyncSession, email: str, otp_type: OtpType, background_tasks: BackgroundTasks, message: str):
    """OTPs requested by email are stored against the owner's aadhaar number"""
    result = await db.execute(
        select(AadhaarRecord.aadhaar_number)
        .join(User, AadhaarRecord.user_id == User.id)
        .where(User.email == email)
    )
    aadhaar_number = result.scalar_one_or_none()
    if aadhaar_number is None:
        raise NotFoundError("Email not registered")

    dispatch = await OtpEngine(db).send(aadhaar_number, method="email", otp_type=otp_type.value)
    background_tasks.add_task(deliver_otp, dispatch)

    return EmailOtpResponse(
        message=message,
        email=email,
        channel=dispatch.channel,
        expires_at=dispatch.expires_at,
        otp=dispatch.otp if settings.OTP_EXPOSE_IN_RESPONSE else None
    )


@router.post("/send-email", response_model=EmailOtpResponse)
async def send_email_otp(
    otp_request: EmailOtpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """Email verification OTP for a registered address"""
    return await _email_otp(
        db, otp_request.email, OtpType.EMAIL_VERIFICATION, background_tasks,
        "OTP sent to email successfully"
    )


@router.post("/send-password-reset", response_model=EmailOtpResponse)
async def send_password_reset_otp(
    otp_request: EmailOtpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    return await _email_otp(
        db, otp_request.email, OtpType.PASSWORD_RESET, background_tasks,
        "Password reset OTP sent to email successfully"
    )
