from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date


class CenterLoadUpsert(BaseModel):
    center_id: str = Field(..., min_length=1)
    date: date
    current_load: int = Field(..., ge=0)
    predicted_load: Optional[int] = Field(None, ge=0)
    capacity: int = Field(..., gt=0)


class CenterLoadResponse(BaseModel):
    id: str
    center_id: str
    center_name: Optional[str] = None
    center_city: Optional[str] = None
    date: date
    current_load: int
    predicted_load: Optional[int]
    capacity: int
    occupancy_percentage: Optional[float]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DemandForecastUpsert(BaseModel):
    center_id: Optional[str] = None
    forecast_date: date
    predicted_demand: int = Field(..., ge=0)
    actual_demand: Optional[int] = Field(None, ge=0)


class DemandForecastResponse(BaseModel):
    id: str
    center_id: Optional[str]
    forecast_date: date
    predicted_demand: int
    actual_demand: Optional[int]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentDayStats(BaseModel):
    total_appointments: int
    scheduled: int
    completed: int
    cancelled: int
    no_show: int


class FraudStats(BaseModel):
    total_events: int
    resolved: int
    unresolved: int
    high_risk: int


class DashboardResponse(BaseModel):
    date: date
    today_stats: AppointmentDayStats
    center_loads: List[CenterLoadResponse]
    fraud_stats: FraudStats


class FraudComparisonResponse(BaseModel):
    """Fraud events before and after the comparison cutoff"""
    cutoff: datetime
    before: FraudStats
    after: FraudStats
