from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime, time


class CenterBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: Optional[str] = None
    address: str = Field(..., min_length=1)
    capacity: int = Field(..., gt=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None


class CenterCreate(CenterBase):
    pass


class CenterUpdate(BaseModel):
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    address: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None
    is_active: Optional[bool] = None


class CenterResponse(BaseModel):
    id: str
    name: str
    city: str
    state: str
    pincode: Optional[str]
    address: str
    capacity: int
    latitude: Optional[float]
    longitude: Optional[float]
    phone: Optional[str]
    email: Optional[str]
    working_hours_start: Optional[time]
    working_hours_end: Optional[time]
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NearbyCenterResponse(CenterResponse):
    distance_km: Optional[float] = None
