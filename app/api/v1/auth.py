from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from app.config import get_settings
from app.database import get_db
from app.models.user import User, UserRole
from app.models.aadhaar_record import AadhaarRecord
from app.models.otp_verification import OtpType
from app.schemas.auth import (
    SignupRequest,
    SignupResponse,
    SignupUser,
    SignupRecord,
    LoginRequest,
    LoginResponse,
    UserResponse,
    TokenResponse,
    RefreshTokenRequest,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
    ResetPasswordRequest,
    ChangePasswordRequest,
)
from app.schemas.aadhaar_record import AadhaarRecordResponse
from app.middleware.auth import get_current_active_user
from app.middleware.session_logger import log_session_action, SessionActionLogger
from app.core.exceptions import AlreadyRegistered, InvalidCredentials, NotFoundError, AdminRequired
from app.core.otp_engine import OtpEngine, deliver_otp
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    decode_token
)
import logging

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


async def _record_for_user(db: AsyncSession, user_id: str):
    result = await db.execute(select(AadhaarRecord).where(AadhaarRecord.user_id == user_id))
    return result.scalar_one_or_none()


def _user_response(user: User, record) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        phone=user.phone,
        role=user.role.value if hasattr(user.role, 'value') else str(user.role),
        is_active=user.is_active,
        last_login=user.last_login,
        aadhaar_record_id=record.id if record else None
    )


@router.post("/signup", response_model=SignupResponse, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a citizen.

    Uniqueness of aadhaar number, email and phone is checked before anything is
    written; the user and the Aadhaar record are then committed together.
    """
    result = await db.execute(
        select(AadhaarRecord.id).where(AadhaarRecord.aadhaar_number == signup_data.aadhaar_number)
    )
    if result.scalar_one_or_none():
        raise AlreadyRegistered("Aadhaar number already registered")

    result = await db.execute(select(User.id).where(User.email == signup_data.email))
    if result.scalar_one_or_none():
        raise AlreadyRegistered("Email already registered")

    result = await db.execute(select(User.id).where(User.phone == signup_data.phone))
    if result.scalar_one_or_none():
        raise AlreadyRegistered("Phone number already registered")

    new_user = User(
        email=signup_data.email,
        phone=signup_data.phone,
        password_hash=get_password_hash(signup_data.password),
        role=UserRole.CITIZEN,
        is_active=True
    )
    db.add(new_user)
    await db.flush()

    info = signup_data.personal_info
    record = AadhaarRecord(
        user_id=new_user.id,
        aadhaar_number=signup_data.aadhaar_number,
        full_name=(info.full_name if info else None) or "",
        date_of_birth=info.date_of_birth if info else None,
        gender=info.gender if info else None,
        address=(info.address if info else None) or "",
        state=(info.state if info else None) or "",
        district=info.district if info else None,
        city=info.city if info else None,
        pincode=(info.pincode if info else None) or "",
        phone=signup_data.phone,
        email_verified=False,
        mobile_verified=False
    )
    db.add(record)

    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same identifiers
        await db.rollback()
        raise AlreadyRegistered("Aadhaar number, email or phone already registered")

    logger.info(f"New signup for aadhaar record {record.id}")
    await log_session_action(db, new_user.id, "signup", request=request, resource_type="aadhaar_record", resource_id=record.id, status_code=201)

    return SignupResponse(
        message="User registered successfully",
        user=SignupUser(id=new_user.id, email=new_user.email, phone=new_user.phone),
        aadhaar_record=SignupRecord(
            id=record.id,
            aadhaar_number=record.aadhaar_number,
            email_verified=record.email_verified,
            mobile_verified=record.mobile_verified
        )
    )


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Login with aadhaar number and password"""
    result = await db.execute(
        select(AadhaarRecord).where(AadhaarRecord.aadhaar_number == credentials.aadhaar_number)
    )
    record = result.scalar_one_or_none()
    if not record or not record.user_id:
        raise InvalidCredentials()

    result = await db.execute(select(User).where(User.id == record.user_id))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        if user:
            await log_session_action(db, user.id, "login", request=request, status="failure", status_code=401, error_message="Invalid credentials")
        raise InvalidCredentials()

    if not user.is_active:
        raise InvalidCredentials("Account is inactive")

    user.last_login = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(record)

    await log_session_action(db, user.id, "login", request=request)

    return LoginResponse(
        access_token=create_access_token(data={"sub": user.id}),
        refresh_token=create_refresh_token(data={"sub": user.id}),
        user=_user_response(user, record),
        aadhaar_record=AadhaarRecordResponse.model_validate(record)
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_token_data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Refresh access token using refresh token"""
    payload = decode_token(refresh_token_data.refresh_token)

    if not payload or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    user_id = payload.get("sub")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return TokenResponse(
        access_token=create_access_token(data={"sub": user.id}),
        refresh_token=create_refresh_token(data={"sub": user.id})
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Get current user information"""
    record = await _record_for_user(db, current_user.id)
    return _user_response(current_user, record)


@router.get("/user/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Citizens may only read themselves, admins anyone"""
    if current_user.id != user_id and current_user.role != UserRole.ADMIN:
        raise AdminRequired()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")

    record = await _record_for_user(db, user.id)
    return _user_response(user, record)


@router.post("/send-otp", response_model=SendOtpResponse)
async def send_otp(
    otp_request: SendOtpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db)
):
    """Issue an OTP; delivery runs after the response is sent"""
    engine = OtpEngine(db)
    dispatch = await engine.send(
        otp_request.aadhaar_number,
        method=otp_request.method,
        otp_type=otp_request.type.value
    )
    background_tasks.add_task(deliver_otp, dispatch)

    return SendOtpResponse(
        message="OTP sent successfully",
        channel=dispatch.channel,
        expires_at=dispatch.expires_at,
        otp=dispatch.otp if settings.OTP_EXPOSE_IN_RESPONSE else None
    )


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    verify_request: VerifyOtpRequest,
    db: AsyncSession = Depends(get_db)
):
    engine = OtpEngine(db)
    record = await engine.verify(
        verify_request.aadhaar_number,
        verify_request.otp,
        otp_type=verify_request.type.value
    )
    return VerifyOtpResponse(valid=True, message="OTP verified successfully", type=record.type)


@router.post("/reset-password")
async def reset_password(
    reset_request: ResetPasswordRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Set a new password after verifying a password_reset OTP"""
    result = await db.execute(
        select(User)
        .join(AadhaarRecord, AadhaarRecord.user_id == User.id)
        .where(AadhaarRecord.aadhaar_number == reset_request.aadhaar_number)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")

    async with SessionActionLogger(db, user.id, "password_reset", request=request, resource_type="user") as action:
        action.set_resource(user.id)
        engine = OtpEngine(db)
        await engine.verify(
            reset_request.aadhaar_number,
            reset_request.otp,
            otp_type=OtpType.PASSWORD_RESET.value
        )
        user.password_hash = get_password_hash(reset_request.new_password)
        await db.commit()

    logger.info(f"Password reset for user {user.id}")
    return {"message": "Password reset successfully"}


@router.post("/change-password")
async def change_password(
    password_data: ChangePasswordRequest,
    request: Request,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    if not verify_password(password_data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    current_user.password_hash = get_password_hash(password_data.new_password)
    await db.commit()
    await log_session_action(db, current_user.id, "password_change", request=request, resource_type="user", resource_id=current_user.id)

    return {"message": "Password changed successfully"}
