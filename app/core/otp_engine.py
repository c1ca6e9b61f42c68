"""
OTP issue/verify state machine

Per (aadhaar_number, type): none -> issued -> verified | expired | exhausted.
Issuing replaces any earlier OTP for the same pair; verification consumes the
OTP with a conditional update so it can succeed at most once.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core import notifications
from app.core.exceptions import OtpNotFound, OtpExpired, OtpInvalid, OtpExhausted
from app.models.aadhaar_record import AadhaarRecord
from app.models.otp_verification import OtpVerification, OtpType
from app.models.user import User
import logging

settings = get_settings()
logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Make a datetime timezone-aware, treating naive values as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class OtpDispatch:
    """Where and how an issued OTP should be delivered"""
    otp: str
    otp_type: str
    channel: str  # email, sms or none
    recipient: Optional[str]
    expires_at: datetime


async def deliver_otp(dispatch: OtpDispatch) -> None:
    """Background task: push the code to its channel, log failures only"""
    if dispatch.channel == "email":
        result = await notifications.send_otp_email(dispatch.recipient, dispatch.otp, dispatch.otp_type)
    elif dispatch.channel == "sms":
        result = await notifications.send_otp_sms(dispatch.recipient, dispatch.otp)
    else:
        return

    if not result.get("success"):
        logger.error(f"OTP delivery via {dispatch.channel} failed: {result.get('error')}")


class OtpEngine:
    """Issues and verifies one-time passwords"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def generate_otp() -> str:
        """6-digit numeric code, never starting with 0"""
        return str(100000 + secrets.randbelow(900000))

    async def issue(self, aadhaar_number: str, otp_type: str = OtpType.LOGIN.value) -> OtpVerification:
        """Replace any OTP for (number, type) with a fresh one"""
        await self.db.execute(
            delete(OtpVerification).where(
                OtpVerification.aadhaar_number == aadhaar_number,
                OtpVerification.type == otp_type,
            )
        )

        record = OtpVerification(
            aadhaar_number=aadhaar_number,
            otp=self.generate_otp(),
            type=otp_type,
            expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
            used=False,
            attempts=0,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def resolve_recipient(self, aadhaar_number: str) -> Tuple[Optional[str], Optional[str]]:
        """Return (email, phone) for the citizen owning the number"""
        result = await self.db.execute(
            select(AadhaarRecord.phone, User.email, User.phone)
            .outerjoin(User, AadhaarRecord.user_id == User.id)
            .where(AadhaarRecord.aadhaar_number == aadhaar_number)
        )
        row = result.first()
        if row is None:
            return None, None
        record_phone, email, user_phone = row
        return email, user_phone or record_phone

    async def send(
        self,
        aadhaar_number: str,
        method: str = "email",
        otp_type: str = OtpType.LOGIN.value,
    ) -> OtpDispatch:
        """
        Issue an OTP and commit it, then work out the delivery channel.
        Delivery itself is left to the caller so it can run after the response.
        """
        record = await self.issue(aadhaar_number, otp_type)
        await self.db.commit()

        email, phone = await self.resolve_recipient(aadhaar_number)

        if email is None and phone is None:
            # Signup flow: no citizen yet to deliver to
            channel, recipient = "none", None
        elif method == "email" or otp_type == OtpType.EMAIL_VERIFICATION.value:
            channel, recipient = "email", email
        else:
            channel, recipient = "sms", phone

        if settings.ENVIRONMENT != "production":
            logger.info(f"OTP for {aadhaar_number} ({otp_type}) via {channel}: {record.otp}")
        else:
            logger.info(f"OTP issued for {aadhaar_number} ({otp_type}) via {channel}")

        return OtpDispatch(
            otp=record.otp,
            otp_type=otp_type,
            channel=channel,
            recipient=recipient,
            expires_at=record.expires_at,
        )

    async def _latest_unused(self, aadhaar_number: str, otp_type: Optional[str]) -> Optional[OtpVerification]:
        query = select(OtpVerification).where(
            OtpVerification.aadhaar_number == aadhaar_number,
            OtpVerification.used.is_(False),
        )
        if otp_type is not None:
            query = query.where(OtpVerification.type == otp_type)
        result = await self.db.execute(
            query.order_by(OtpVerification.expires_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def verify(
        self,
        aadhaar_number: str,
        otp: str,
        otp_type: str = OtpType.LOGIN.value,
    ) -> OtpVerification:
        """
        Consume a matching OTP or raise.

        Raises OtpNotFound, OtpExhausted, OtpExpired or OtpInvalid. A wrong code
        bumps the attempt counter, which is committed before raising.
        """
        record = await self._latest_unused(aadhaar_number, otp_type)
        if record is None and settings.OTP_TYPE_FALLBACK:
            record = await self._latest_unused(aadhaar_number, None)
            if record is not None:
                logger.warning(
                    f"OTP for {aadhaar_number}: no unused '{otp_type}' OTP, "
                    f"falling back to '{record.type}'"
                )

        if record is None:
            raise OtpNotFound()

        if settings.OTP_MAX_ATTEMPTS > 0 and record.attempts >= settings.OTP_MAX_ATTEMPTS:
            raise OtpExhausted()

        now = datetime.now(timezone.utc)
        if as_utc(record.expires_at) < now:
            raise OtpExpired()

        if not secrets.compare_digest(record.otp, otp or ""):
            await self.db.execute(
                update(OtpVerification)
                .where(OtpVerification.id == record.id)
                .values(attempts=OtpVerification.attempts + 1)
            )
            await self.db.commit()
            raise OtpInvalid()

        result = await self.db.execute(
            update(OtpVerification)
            .where(OtpVerification.id == record.id, OtpVerification.used.is_(False))
            .values(used=True, verified_at=now)
        )
        if result.rowcount == 0:
            # Consumed by a concurrent request
            raise OtpNotFound()

        await self._apply_side_effects(record.type, aadhaar_number, now)
        await self.db.commit()
        logger.info(f"OTP verified for {aadhaar_number} ({record.type})")
        return record

    async def _apply_side_effects(self, otp_type: str, aadhaar_number: str, now: datetime) -> None:
        if otp_type == OtpType.EMAIL_VERIFICATION.value:
            await self.db.execute(
                update(AadhaarRecord)
                .where(AadhaarRecord.aadhaar_number == aadhaar_number)
                .values(email_verified=True, verification_date=now)
            )
        elif otp_type == OtpType.MOBILE_VERIFICATION.value:
            await self.db.execute(
                update(AadhaarRecord)
                .where(AadhaarRecord.aadhaar_number == aadhaar_number)
                .values(mobile_verified=True)
            )
