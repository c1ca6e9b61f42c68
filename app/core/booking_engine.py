"""
Slot booking and capacity accounting

Capacity lives in time_slots.available_slots and is only changed through
conditional UPDATEs whose affected-row count decides success, inside the same
transaction as the appointment write. 0 <= available_slots <= total_capacity
holds under concurrent bookings and cancellations.
"""
import secrets
import time
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import (
    BookingIdUnavailable,
    NotFoundError,
    SlotUnavailable,
    InvalidTransition,
    ValidationError,
)
from app.models.aadhaar_record import AadhaarRecord
from app.models.appointment import Appointment, AppointmentStatus
from app.models.center import Center
from app.models.time_slot import TimeSlot
from app.models.update_type import UpdateType
from app.schemas.appointment import AppointmentCreate
from app.websocket.manager import manager
from app.websocket.events import (
    create_slot_availability_event,
    create_appointment_status_event,
)
import logging

settings = get_settings()
logger = logging.getLogger(__name__)

GENERATED_SLOT_PREFIX = "generated-"


class BookingEngine:
    """Books, cancels and re-statuses appointments against slot capacity"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def generate_booking_id() -> str:
        """Prefix + last 8 digits of epoch millis + 3 random digits"""
        timestamp = str(int(time.time() * 1000))[-8:]
        random_part = f"{secrets.randbelow(1000):03d}"
        return f"{settings.BOOKING_ID_PREFIX}{timestamp}{random_part}"

    async def book(self, data: AppointmentCreate) -> Appointment:
        """
        Book an appointment

        Steps:
        1. Check the record, center and update type exist
        2. Reserve one unit of slot capacity (conditional decrement)
        3. Insert the appointment with a unique booking id
        4. Commit both writes together, then broadcast
        """
        slot_id = data.time_slot_id
        if slot_id and slot_id.startswith(GENERATED_SLOT_PREFIX):
            # Client-side placeholder slot, nothing to reserve
            slot_id = None

        await self._require(AadhaarRecord, data.aadhaar_record_id, "Aadhaar record not found")
        await self._require(Center, data.center_id, "Center not found")
        await self._require(UpdateType, data.update_type_id, "Update type not found")

        scheduled_time = data.scheduled_time
        if slot_id:
            if not await self._reserve_slot(slot_id, center_id=data.center_id):
                logger.info(f"Booking rejected, slot {slot_id} not available")
                raise SlotUnavailable()
            slot_result = await self.db.execute(select(TimeSlot.start_time).where(TimeSlot.id == slot_id))
            scheduled_time = slot_result.scalar_one()

        appointment = await self._insert_appointment(data, slot_id, scheduled_time)
        await self.db.commit()
        await self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.booking_id} booked for record {appointment.aadhaar_record_id}")
        await self._broadcast(appointment, previous_status=None)
        return appointment

    async def cancel(self, appointment_id: str) -> Appointment:
        """Cancel a scheduled appointment and give its slot capacity back"""
        appointment = await self._get_appointment(appointment_id)

        result = await self.db.execute(
            update(Appointment)
            .where(
                Appointment.id == appointment_id,
                Appointment.status == AppointmentStatus.SCHEDULED,
            )
            .values(status=AppointmentStatus.CANCELLED)
        )
        if result.rowcount == 0:
            raise InvalidTransition("Cannot cancel this appointment")

        if appointment.time_slot_id:
            await self._release_slot(appointment.time_slot_id)

        await self.db.commit()
        await self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.booking_id} cancelled")
        await self._broadcast(appointment, previous_status=AppointmentStatus.SCHEDULED.value)
        return appointment

    async def update_status(self, appointment_id: str, status: str) -> Appointment:
        """
        Admin status change to any value of AppointmentStatus.
        Entering 'cancelled' releases the slot, leaving it re-reserves the slot.
        """
        try:
            new_status = AppointmentStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

        appointment = await self._get_appointment(appointment_id)
        previous_status = AppointmentStatus(appointment.status)

        result = await self.db.execute(
            update(Appointment)
            .where(
                Appointment.id == appointment_id,
                Appointment.status == previous_status,
            )
            .values(
                status=new_status,
                completed_at=datetime.now(timezone.utc) if new_status == AppointmentStatus.COMPLETED else None,
            )
        )
        if result.rowcount == 0:
            raise InvalidTransition("Appointment was modified concurrently")

        if appointment.time_slot_id and previous_status != new_status:
            if new_status == AppointmentStatus.CANCELLED:
                await self._release_slot(appointment.time_slot_id)
            elif previous_status == AppointmentStatus.CANCELLED:
                if not await self._reserve_slot(appointment.time_slot_id):
                    raise SlotUnavailable()

        await self.db.commit()
        await self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.booking_id}: {previous_status.value} -> {new_status.value}")
        await self._broadcast(appointment, previous_status=previous_status.value)
        return appointment

    async def _require(self, model, object_id: str, message: str) -> None:
        result = await self.db.execute(select(model.id).where(model.id == object_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(message)

    async def _get_appointment(self, appointment_id: str) -> Appointment:
        result = await self.db.execute(select(Appointment).where(Appointment.id == appointment_id))
        appointment = result.scalar_one_or_none()
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    async def _reserve_slot(self, slot_id: str, center_id: Optional[str] = None) -> bool:
        """Atomically take one unit of capacity; False when none is left"""
        query = update(TimeSlot).where(
            TimeSlot.id == slot_id,
            TimeSlot.is_active.is_(True),
            TimeSlot.available_slots > 0,
        )
        if center_id is not None:
            query = query.where(TimeSlot.center_id == center_id)
        result = await self.db.execute(
            query.values(available_slots=TimeSlot.available_slots - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _release_slot(self, slot_id: str) -> bool:
        """Give one unit of capacity back, never above total_capacity"""
        result = await self.db.execute(
            update(TimeSlot)
            .where(
                TimeSlot.id == slot_id,
                TimeSlot.available_slots < TimeSlot.total_capacity,
            )
            .values(available_slots=TimeSlot.available_slots + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(f"Slot {slot_id} already at full capacity, nothing released")
            return False
        return True

    async def _insert_appointment(self, data: AppointmentCreate, slot_id: Optional[str], scheduled_time) -> Appointment:
        """Insert inside a savepoint, retrying with a fresh booking id on collision"""
        last_error = None
        for attempt in range(settings.BOOKING_ID_MAX_RETRIES + 1):
            appointment = Appointment(
                booking_id=self.generate_booking_id(),
                aadhaar_record_id=data.aadhaar_record_id,
                center_id=data.center_id,
                update_type_id=data.update_type_id,
                time_slot_id=slot_id,
                scheduled_date=data.scheduled_date,
                scheduled_time=scheduled_time,
                status=AppointmentStatus.SCHEDULED,
                is_online=data.is_online or False,
                notes=data.notes,
            )
            try:
                async with self.db.begin_nested():
                    self.db.add(appointment)
                    await self.db.flush()
                return appointment
            except IntegrityError as e:
                last_error = e
                logger.warning(f"Booking id collision on {appointment.booking_id} (attempt {attempt + 1})")

        logger.error(f"Gave up on booking id after {settings.BOOKING_ID_MAX_RETRIES + 1} attempts: {last_error}")
        raise BookingIdUnavailable()

    async def _broadcast(self, appointment: Appointment, previous_status: Optional[str]) -> None:
        try:
            status_value = AppointmentStatus(appointment.status).value
            event = create_appointment_status_event(
                appointment_id=appointment.id,
                booking_id=appointment.booking_id,
                aadhaar_record_id=appointment.aadhaar_record_id,
                status=status_value,
                previous_status=previous_status,
            )
            await manager.publish(event, aadhaar_record_id=appointment.aadhaar_record_id)

            if appointment.time_slot_id:
                slot_result = await self.db.execute(select(TimeSlot).where(TimeSlot.id == appointment.time_slot_id))
                slot = slot_result.scalar_one_or_none()
                if slot is not None:
                    await self.db.refresh(slot)
                    await manager.publish(
                        create_slot_availability_event(
                            time_slot_id=slot.id,
                            center_id=slot.center_id,
                            slot_date=slot.date.isoformat(),
                            available_slots=slot.available_slots,
                            total_capacity=slot.total_capacity,
                        )
                    )
        except Exception as e:
            logger.error(f"Error broadcasting WebSocket event: {e}")
