from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from datetime import date
from app.database import get_db
from app.models.user import User
from app.models.center import Center
from app.models.time_slot import TimeSlot
from app.schemas.time_slot import TimeSlotCreate, TimeSlotUpdate, TimeSlotResponse
from app.middleware.auth import get_current_admin_user
from app.core.exceptions import NotFoundError, ValidationError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_slot(db: AsyncSession, slot_id: str) -> TimeSlot:
    result = await db.execute(select(TimeSlot).where(TimeSlot.id == slot_id))
    slot = result.scalar_one_or_none()
    if not slot:
        raise NotFoundError("Time slot not found")
    return slot


@router.get("/center/{center_id}", response_model=List[TimeSlotResponse])
async def slots_for_center(
    center_id: str,
    slot_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    """Active slots of a center on one date, or all upcoming ones"""
    query = select(TimeSlot).where(
        TimeSlot.center_id == center_id,
        TimeSlot.is_active.is_(True),
    )
    if slot_date:
        query = query.where(TimeSlot.date == slot_date)
    else:
        query = query.where(TimeSlot.date >= date.today())

    result = await db.execute(query.order_by(TimeSlot.date, TimeSlot.start_time))
    return result.scalars().all()


@router.get("/available", response_model=List[TimeSlotResponse])
async def available_slots(
    center_id: str,
    slot_date: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db)
):
    """Bookable slots: active with capacity left"""
    result = await db.execute(
        select(TimeSlot)
        .where(
            TimeSlot.center_id == center_id,
            TimeSlot.date == slot_date,
            TimeSlot.available_slots > 0,
            TimeSlot.is_active.is_(True),
        )
        .order_by(TimeSlot.start_time)
    )
    return result.scalars().all()


@router.get("/{slot_id}", response_model=TimeSlotResponse)
async def get_slot(
    slot_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await _get_slot(db, slot_id)


@router.post("", response_model=TimeSlotResponse, status_code=status.HTTP_201_CREATED)
async def create_slot(
    slot_data: TimeSlotCreate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """New slots start with all capacity available"""
    result = await db.execute(select(Center.id).where(Center.id == slot_data.center_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Center not found")

    slot = TimeSlot(
        **slot_data.model_dump(),
        available_slots=slot_data.total_capacity,
        is_active=True
    )
    db.add(slot)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("A slot already starts at this time for the center")

    await db.refresh(slot)
    return slot


@router.put("/{slot_id}", response_model=TimeSlotResponse)
async def update_slot(
    slot_id: str,
    slot_data: TimeSlotUpdate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Edit a slot. A capacity change shifts available_slots by the same amount,
    and is refused when it would drop below the places already booked.
    """
    slot = await _get_slot(db, slot_id)
    changes = slot_data.model_dump(exclude_unset=True)
    new_total = changes.pop("total_capacity", None)

    if new_total is not None:
        result = await db.execute(
            update(TimeSlot)
            .where(
                TimeSlot.id == slot_id,
                TimeSlot.total_capacity - TimeSlot.available_slots <= new_total,
            )
            .values(
                available_slots=TimeSlot.available_slots + (new_total - TimeSlot.total_capacity),
                total_capacity=new_total,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ValidationError("Capacity cannot be lower than booked appointments")

    for field, value in changes.items():
        setattr(slot, field, value)

    start = changes.get("start_time", slot.start_time)
    end = changes.get("end_time", slot.end_time)
    if end <= start:
        raise ValidationError("end_time must be after start_time")

    await db.commit()
    await db.refresh(slot)
    return slot


@router.delete("/{slot_id}")
async def delete_slot(
    slot_id: str,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    slot = await _get_slot(db, slot_id)
    await db.delete(slot)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Time slot has appointments and cannot be deleted")

    return {"message": "Time slot deleted successfully"}
