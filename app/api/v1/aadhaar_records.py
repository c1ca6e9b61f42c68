from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List
from datetime import datetime, timezone
import secrets
from app.database import get_db
from app.models.user import User, UserRole
from app.models.aadhaar_record import AadhaarRecord
from app.models.update_history import UpdateHistory, UpdateHistoryStatus
from app.models.update_type import UpdateType
from app.schemas.aadhaar_record import (
    AadhaarRecordResponse,
    AadhaarRecordUpdate,
    UpdateHistoryCreate,
    UpdateHistoryReview,
    UpdateHistoryResponse,
)
from app.middleware.auth import get_current_active_user, get_current_admin_user, ensure_record_access
from app.core.exceptions import AdminRequired, NotFoundError, ValidationError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

# Verification flags and status are set by admins or by the OTP flow only
ADMIN_ONLY_FIELDS = {"status", "is_verified", "mobile_verified", "email_verified"}

# Fields an approved update-history entry may write back to the record
APPLICABLE_FIELDS = set(AadhaarRecordUpdate.model_fields) - ADMIN_ONLY_FIELDS - {"date_of_birth"}

REQUIRED_FIELDS = {column.name for column in AadhaarRecord.__table__.columns if not column.nullable}


def _check_not_cleared(field: str, value) -> None:
    if value is None and field in REQUIRED_FIELDS:
        raise ValidationError(f"{field} cannot be empty")


def generate_urn() -> str:
    """Update Reference Number: URN + date + 6 random digits"""
    return f"URN{datetime.now(timezone.utc):%Y%m%d}{secrets.randbelow(10**6):06d}"


async def _get_record(db: AsyncSession, record_id: str) -> AadhaarRecord:
    result = await db.execute(select(AadhaarRecord).where(AadhaarRecord.id == record_id))
    record = result.scalar_one_or_none()
    if not record:
        raise NotFoundError("Aadhaar record not found")
    return record


def _history_response(entry: UpdateHistory, update_type_name=None) -> UpdateHistoryResponse:
    response = UpdateHistoryResponse.model_validate(entry)
    response.update_type_name = update_type_name
    return response


@router.get("/number/{aadhaar_number}", response_model=AadhaarRecordResponse)
async def get_record_by_number(
    aadhaar_number: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(AadhaarRecord).where(AadhaarRecord.aadhaar_number == aadhaar_number))
    record = result.scalar_one_or_none()
    if not record:
        raise NotFoundError("Aadhaar record not found")
    ensure_record_access(current_user, record)
    return record


@router.get("/{record_id}", response_model=AadhaarRecordResponse)
async def get_record(
    record_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    record = await _get_record(db, record_id)
    ensure_record_access(current_user, record)
    return record


@router.put("/{record_id}", response_model=AadhaarRecordResponse)
async def update_record(
    record_id: str,
    record_data: AadhaarRecordUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Partial update; setting is_verified stamps verification_date"""
    record = await _get_record(db, record_id)
    ensure_record_access(current_user, record)

    changes = record_data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    if current_user.role != UserRole.ADMIN:
        restricted = sorted(ADMIN_ONLY_FIELDS.intersection(changes))
        if restricted:
            raise AdminRequired(f"Only admins can change {', '.join(restricted)}")

    for field, value in changes.items():
        _check_not_cleared(field, value)
        setattr(record, field, value)
    if changes.get("is_verified"):
        record.verification_date = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(record)
    return record


@router.get("/{record_id}/history", response_model=List[UpdateHistoryResponse])
async def get_history(
    record_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Field change requests of a record, newest first"""
    record = await _get_record(db, record_id)
    ensure_record_access(current_user, record)

    result = await db.execute(
        select(UpdateHistory, UpdateType.name)
        .outerjoin(UpdateType, UpdateHistory.update_type_id == UpdateType.id)
        .where(UpdateHistory.aadhaar_record_id == record_id)
        .order_by(UpdateHistory.created_at.desc())
    )
    return [_history_response(entry, name) for entry, name in result.all()]


@router.post("/{record_id}/history", response_model=UpdateHistoryResponse, status_code=status.HTTP_201_CREATED)
async def create_history(
    record_id: str,
    history_data: UpdateHistoryCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    record = await _get_record(db, record_id)
    ensure_record_access(current_user, record)

    result = await db.execute(select(UpdateType.name).where(UpdateType.id == history_data.update_type_id))
    update_type_name = result.scalar_one_or_none()
    if update_type_name is None:
        raise NotFoundError("Update type not found")

    if history_data.field_name in APPLICABLE_FIELDS:
        _check_not_cleared(history_data.field_name, history_data.new_value)

    entry = UpdateHistory(
        aadhaar_record_id=record_id,
        status=UpdateHistoryStatus.PENDING.value,
        **history_data.model_dump()
    )
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("URN already in use")

    await db.refresh(entry)
    return _history_response(entry, update_type_name)


@router.put("/{record_id}/history/{history_id}", response_model=UpdateHistoryResponse)
async def review_history(
    record_id: str,
    history_id: str,
    review: UpdateHistoryReview,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending change. Approval writes the new value onto the
    record when the field is one a citizen may change, and stamps a URN.
    """
    record = await _get_record(db, record_id)
    result = await db.execute(
        select(UpdateHistory).where(
            UpdateHistory.id == history_id,
            UpdateHistory.aadhaar_record_id == record_id,
        )
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise NotFoundError("Update history not found")
    if entry.status != UpdateHistoryStatus.PENDING.value:
        raise ValidationError("Update request already reviewed")

    if review.status == UpdateHistoryStatus.APPROVED.value and entry.field_name in APPLICABLE_FIELDS:
        _check_not_cleared(entry.field_name, entry.new_value)

    now = datetime.now(timezone.utc)
    entry.status = review.status
    entry.approved_by = current_admin.id
    entry.approved_at = now

    if review.status == UpdateHistoryStatus.APPROVED.value:
        if entry.field_name in APPLICABLE_FIELDS:
            setattr(record, entry.field_name, entry.new_value)
        else:
            logger.warning(f"Approved change to '{entry.field_name}' is not applied to the record")
        if not entry.urn:
            entry.urn = generate_urn()
    else:
        entry.rejection_reason = review.rejection_reason

    await db.commit()
    await db.refresh(entry)

    result = await db.execute(select(UpdateType.name).where(UpdateType.id == entry.update_type_id))
    logger.info(f"Update history {entry.id} {entry.status} by {current_admin.id}")
    return _history_response(entry, result.scalar_one_or_none())
