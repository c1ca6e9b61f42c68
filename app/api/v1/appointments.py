from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
from app.database import get_db
from app.models.user import User
from app.models.aadhaar_record import AadhaarRecord
from app.models.appointment import Appointment
from app.models.center import Center
from app.models.update_type import UpdateType
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentStatusUpdate,
    AppointmentResponse,
    AppointmentDetailResponse,
)
from app.middleware.auth import get_current_active_user, get_current_admin_user, ensure_record_access
from app.middleware.session_logger import SessionActionLogger
from app.core.booking_engine import BookingEngine
from app.core.exceptions import NotFoundError
from app.core import notifications
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def _detail_query():
    return (
        select(Appointment, Center.name, Center.address, UpdateType.name, AadhaarRecord.full_name, AadhaarRecord.aadhaar_number)
        .outerjoin(Center, Appointment.center_id == Center.id)
        .outerjoin(UpdateType, Appointment.update_type_id == UpdateType.id)
        .outerjoin(AadhaarRecord, Appointment.aadhaar_record_id == AadhaarRecord.id)
    )


def _detail_response(row) -> AppointmentDetailResponse:
    appointment, center_name, center_address, update_type_name, full_name, aadhaar_number = row
    response = AppointmentDetailResponse.model_validate(appointment)
    response.center_name = center_name
    response.center_address = center_address
    response.update_type_name = update_type_name
    response.full_name = full_name
    response.aadhaar_number = aadhaar_number
    return response


async def _get_record(db: AsyncSession, record_id: str) -> AadhaarRecord:
    result = await db.execute(select(AadhaarRecord).where(AadhaarRecord.id == record_id))
    record = result.scalar_one_or_none()
    if not record:
        raise NotFoundError("Aadhaar record not found")
    return record


async def _contact_for_record(db: AsyncSession, record_id: str):
    """(email, phone) used for booking notifications"""
    result = await db.execute(
        select(User.email, User.phone, AadhaarRecord.phone)
        .select_from(AadhaarRecord)
        .outerjoin(User, AadhaarRecord.user_id == User.id)
        .where(AadhaarRecord.id == record_id)
    )
    row = result.first()
    if row is None:
        return None, None
    email, user_phone, record_phone = row
    return email, user_phone or record_phone


@router.get("/aadhaar/{aadhaar_record_id}", response_model=List[AppointmentDetailResponse])
async def appointments_for_record(
    aadhaar_record_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """All appointments of a citizen, latest date first"""
    record = await _get_record(db, aadhaar_record_id)
    ensure_record_access(current_user, record)

    result = await db.execute(
        _detail_query()
        .where(Appointment.aadhaar_record_id == aadhaar_record_id)
        .order_by(Appointment.scheduled_date.desc())
    )
    return [_detail_response(row) for row in result.all()]


@router.get("/booking/{booking_id}", response_model=AppointmentDetailResponse)
async def appointment_by_booking_id(
    booking_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Public tracking lookup by booking id"""
    result = await db.execute(_detail_query().where(Appointment.booking_id == booking_id))
    row = result.first()
    if row is None:
        raise NotFoundError("Appointment not found")
    return _detail_response(row)


@router.get("/{appointment_id}", response_model=AppointmentDetailResponse)
async def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(_detail_query().where(Appointment.id == appointment_id))
    row = result.first()
    if row is None:
        raise NotFoundError("Appointment not found")

    record = await _get_record(db, row[0].aadhaar_record_id)
    ensure_record_access(current_user, record)
    return _detail_response(row)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    appointment_data: AppointmentCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Book an appointment against a time slot.

    Capacity is taken atomically; a full slot answers 400 "Time slot not available"
    and nothing is written. Confirmation SMS/email go out after the response.
    """
    record = await _get_record(db, appointment_data.aadhaar_record_id)
    ensure_record_access(current_user, record)

    async with SessionActionLogger(db, current_user.id, "book_appointment", request=request, resource_type="appointment") as action:
        appointment = await BookingEngine(db).book(appointment_data)
        action.set_resource(appointment.id)

    result = await db.execute(_detail_query().where(Appointment.id == appointment.id))
    detail = _detail_response(result.one())
    email, phone = await _contact_for_record(db, appointment.aadhaar_record_id)
    background_tasks.add_task(
        notifications.send_appointment_confirmation,
        email,
        phone,
        appointment.booking_id,
        appointment.scheduled_date.isoformat(),
        appointment.scheduled_time.strftime("%H:%M") if appointment.scheduled_time else "",
        detail.center_name or "",
        detail.update_type_name or "",
    )

    return appointment


@router.put("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    status_data: AppointmentStatusUpdate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Admin status change, slot capacity follows the cancelled state"""
    return await BookingEngine(db).update_status(appointment_id, status_data.status)


@router.put("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Appointment.aadhaar_record_id).where(Appointment.id == appointment_id))
    record_id = result.scalar_one_or_none()
    if record_id is None:
        raise NotFoundError("Appointment not found")
    ensure_record_access(current_user, await _get_record(db, record_id))

    async with SessionActionLogger(db, current_user.id, "cancel_appointment", request=request, resource_type="appointment") as action:
        action.set_resource(appointment_id)
        appointment = await BookingEngine(db).cancel(appointment_id)

    _, phone = await _contact_for_record(db, appointment.aadhaar_record_id)
    background_tasks.add_task(notifications.send_cancellation_notice, phone, appointment.booking_id)

    return appointment
