from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date, time

from app.models.appointment import AppointmentStatus


class AppointmentCreate(BaseModel):
    aadhaar_record_id: str = Field(..., min_length=1)
    center_id: str = Field(..., min_length=1)
    update_type_id: str = Field(..., min_length=1)
    scheduled_date: date
    time_slot_id: Optional[str] = None
    scheduled_time: Optional[time] = None
    is_online: Optional[bool] = False
    notes: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1)


class AppointmentResponse(BaseModel):
    id: str
    booking_id: str
    aadhaar_record_id: str
    center_id: str
    update_type_id: str
    time_slot_id: Optional[str]
    scheduled_date: date
    scheduled_time: Optional[time]
    status: AppointmentStatus
    is_online: bool
    is_biometric_auto_assigned: Optional[bool] = None
    auto_booked: Optional[bool] = None
    queue_position: Optional[int] = None
    counter_number: Optional[int] = None
    estimated_wait_minutes: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentDetailResponse(AppointmentResponse):
    """Appointment joined with the names shown on booking confirmations"""
    center_name: Optional[str] = None
    center_address: Optional[str] = None
    update_type_name: Optional[str] = None
    full_name: Optional[str] = None
    aadhaar_number: Optional[str] = None
