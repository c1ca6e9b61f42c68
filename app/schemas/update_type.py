from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

RISK_LEVEL_PATTERN = r"^(low|medium|high)$"


class UpdateTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    risk_level: str = Field(..., pattern=RISK_LEVEL_PATTERN)
    requires_verification: bool = False
    requires_biometric: bool = False
    can_do_online: bool = False
    estimated_time_minutes: Optional[int] = Field(None, gt=0)


class UpdateTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    risk_level: Optional[str] = Field(None, pattern=RISK_LEVEL_PATTERN)
    requires_verification: Optional[bool] = None
    requires_biometric: Optional[bool] = None
    can_do_online: Optional[bool] = None
    estimated_time_minutes: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class UpdateTypeResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    risk_level: str
    requires_verification: bool
    requires_biometric: bool
    can_do_online: bool
    estimated_time_minutes: Optional[int]
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
