from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime, date, time


class TimeSlotCreate(BaseModel):
    center_id: str = Field(..., min_length=1)
    date: date
    start_time: time
    end_time: time
    total_capacity: int = Field(..., gt=0)
    risk_level: Optional[str] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class TimeSlotUpdate(BaseModel):
    """Capacity edits keep the number of already booked places"""
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    total_capacity: Optional[int] = Field(None, gt=0)
    risk_level: Optional[str] = None
    is_active: Optional[bool] = None


class TimeSlotResponse(BaseModel):
    id: str
    center_id: str
    date: date
    start_time: time
    end_time: time
    total_capacity: int
    available_slots: int
    risk_level: Optional[str]
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
