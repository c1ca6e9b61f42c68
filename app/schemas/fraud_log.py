from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class FraudLogCreate(BaseModel):
    aadhaar_record_id: Optional[str] = None
    appointment_id: Optional[str] = None
    event_type: str = Field(..., min_length=1, max_length=100)
    risk_level: str = Field("medium", pattern=r"^(low|medium|high|critical)$")
    confidence_score: Optional[float] = Field(None, ge=0, le=1)
    details: Optional[Dict[str, Any]] = None
    action_taken: Optional[str] = None
    notes: Optional[str] = None


class FraudLogResolve(BaseModel):
    action_taken: Optional[str] = None
    notes: Optional[str] = None


class FraudLogResponse(BaseModel):
    id: str
    aadhaar_record_id: Optional[str]
    appointment_id: Optional[str]
    event_type: str
    risk_level: str
    confidence_score: Optional[float]
    details: Optional[Dict[str, Any]]
    action_taken: Optional[str]
    resolved: bool
    notes: Optional[str]
    detected_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnresolvedCountResponse(BaseModel):
    count: int
