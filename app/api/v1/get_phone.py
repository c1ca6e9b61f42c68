from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.models.user import User
from app.models.aadhaar_record import AadhaarRecord
from app.schemas.aadhaar_record import PhoneLookupResponse
from app.schemas.auth import AADHAAR_PATTERN
from app.core.exceptions import NotFoundError
from app.core.security import mask_phone, mask_email

router = APIRouter()


@router.get("/get-phone", response_model=PhoneLookupResponse)
async def get_phone(
    aadhaar_number: str = Query(..., alias="aadhaarNumber", pattern=AADHAAR_PATTERN),
    db: AsyncSession = Depends(get_db)
):
    """
    Tell the login screen where an OTP would be sent.
    Contact details are masked since the caller is not authenticated yet.
    """
    result = await db.execute(
        select(AadhaarRecord.phone, User.email, User.phone)
        .outerjoin(User, AadhaarRecord.user_id == User.id)
        .where(AadhaarRecord.aadhaar_number == aadhaar_number)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Aadhaar number not found")

    record_phone, email, user_phone = row
    phone = record_phone or user_phone
    return PhoneLookupResponse(
        exists=True,
        phone=mask_phone(phone) if phone else None,
        email=mask_email(email) if email else None
    )
