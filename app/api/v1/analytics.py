from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case
from typing import List, Optional
from datetime import date, datetime, time, timedelta, timezone
from app.database import get_db
from app.models.user import User
from app.models.appointment import Appointment, AppointmentStatus
from app.models.center import Center
from app.models.center_load import CenterLoad, DemandForecast
from app.models.fraud_log import FraudLog
from app.schemas.analytics import (
    CenterLoadUpsert,
    CenterLoadResponse,
    DemandForecastUpsert,
    DemandForecastResponse,
    AppointmentDayStats,
    FraudStats,
    DashboardResponse,
    FraudComparisonResponse,
)
from app.middleware.auth import get_current_admin_user
from app.core.exceptions import NotFoundError

router = APIRouter()

FRAUD_COMPARISON_DAYS = 90


def occupancy_percentage(current_load: int, capacity: int) -> float:
    return round(current_load / capacity * 100, 2)


def _load_query():
    return (
        select(CenterLoad, Center.name, Center.city)
        .outerjoin(Center, CenterLoad.center_id == Center.id)
    )


def _load_response(row) -> CenterLoadResponse:
    load, center_name, center_city = row
    response = CenterLoadResponse.model_validate(load)
    response.center_name = center_name
    response.center_city = center_city
    return response


async def _loads_for_date(db: AsyncSession, target_date: date) -> List[CenterLoadResponse]:
    result = await db.execute(
        _load_query()
        .where(CenterLoad.date == target_date)
        .order_by(CenterLoad.occupancy_percentage.desc())
    )
    return [_load_response(row) for row in result.all()]


async def _fraud_stats(db: AsyncSession, *conditions) -> FraudStats:
    result = await db.execute(
        select(
            func.count(FraudLog.id),
            func.sum(case((FraudLog.resolved.is_(True), 1), else_=0)),
            func.sum(case((FraudLog.risk_level == "high", 1), else_=0)),
        ).where(*conditions)
    )
    total, resolved, high_risk = result.one()
    total, resolved = total or 0, resolved or 0
    return FraudStats(
        total_events=total,
        resolved=resolved,
        unresolved=total - resolved,
        high_risk=high_risk or 0
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Today's appointments by status, center loads and fraud events"""
    today = date.today()

    result = await db.execute(
        select(Appointment.status, func.count(Appointment.id))
        .where(Appointment.scheduled_date == today)
        .group_by(Appointment.status)
    )
    by_status = {AppointmentStatus(status).value: count for status, count in result.all()}

    day_start = datetime.combine(today, time.min, tzinfo=timezone.utc)
    fraud_stats = await _fraud_stats(
        db,
        FraudLog.detected_at >= day_start,
        FraudLog.detected_at < day_start + timedelta(days=1),
    )

    return DashboardResponse(
        date=today,
        today_stats=AppointmentDayStats(
            total_appointments=sum(by_status.values()),
            scheduled=by_status.get(AppointmentStatus.SCHEDULED.value, 0),
            completed=by_status.get(AppointmentStatus.COMPLETED.value, 0),
            cancelled=by_status.get(AppointmentStatus.CANCELLED.value, 0),
            no_show=by_status.get(AppointmentStatus.NO_SHOW.value, 0),
        ),
        center_loads=await _loads_for_date(db, today),
        fraud_stats=fraud_stats
    )


@router.get("/center-load/{center_id}", response_model=List[CenterLoadResponse])
async def center_load_history(
    center_id: str,
    days: int = Query(30, gt=0),
    db: AsyncSession = Depends(get_db)
):
    """Load of one center over the last `days` days, newest first"""
    start_date = date.today() - timedelta(days=days)
    result = await db.execute(
        _load_query()
        .where(CenterLoad.center_id == center_id, CenterLoad.date >= start_date)
        .order_by(CenterLoad.date.desc())
    )
    return [_load_response(row) for row in result.all()]


@router.get("/center-load", response_model=List[CenterLoadResponse])
async def center_loads(
    load_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    """All center loads for a date (default today), busiest first"""
    return await _loads_for_date(db, load_date or date.today())


@router.post("/center-load", response_model=CenterLoadResponse)
async def upsert_center_load(
    load_data: CenterLoadUpsert,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Insert or overwrite the load of a center for a date"""
    result = await db.execute(select(Center.id).where(Center.id == load_data.center_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Center not found")

    result = await db.execute(
        select(CenterLoad).where(
            CenterLoad.center_id == load_data.center_id,
            CenterLoad.date == load_data.date,
        )
    )
    load = result.scalar_one_or_none()
    if load is None:
        load = CenterLoad(center_id=load_data.center_id, date=load_data.date)
        db.add(load)

    load.current_load = load_data.current_load
    load.predicted_load = load_data.predicted_load
    load.capacity = load_data.capacity
    load.occupancy_percentage = occupancy_percentage(load_data.current_load, load_data.capacity)

    await db.commit()
    await db.refresh(load)
    result = await db.execute(_load_query().where(CenterLoad.id == load.id))
    return _load_response(result.one())


@router.get("/demand-forecast", response_model=List[DemandForecastResponse])
async def demand_forecast(
    days: int = Query(7, gt=0),
    center_id: Optional[str] = None,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    start_date = date.today() - timedelta(days=days)
    query = select(DemandForecast).where(DemandForecast.forecast_date >= start_date)
    if center_id:
        query = query.where(DemandForecast.center_id == center_id)

    result = await db.execute(query.order_by(DemandForecast.forecast_date))
    return result.scalars().all()


@router.post("/demand-forecast", response_model=DemandForecastResponse)
async def upsert_demand_forecast(
    forecast_data: DemandForecastUpsert,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(DemandForecast).where(DemandForecast.forecast_date == forecast_data.forecast_date)
    if forecast_data.center_id:
        query = query.where(DemandForecast.center_id == forecast_data.center_id)
    else:
        query = query.where(DemandForecast.center_id.is_(None))

    result = await db.execute(query)
    forecast = result.scalar_one_or_none()
    if forecast is None:
        forecast = DemandForecast(center_id=forecast_data.center_id, forecast_date=forecast_data.forecast_date)
        db.add(forecast)

    forecast.predicted_demand = forecast_data.predicted_demand
    forecast.actual_demand = forecast_data.actual_demand

    await db.commit()
    await db.refresh(forecast)
    return forecast


@router.get("/fraud-comparison", response_model=FraudComparisonResponse)
async def fraud_comparison(
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Fraud events older than 90 days against the most recent 90 days"""
    cutoff = datetime.now(timezone.utc) - timedelta(days=FRAUD_COMPARISON_DAYS)
    return FraudComparisonResponse(
        cutoff=cutoff,
        before=await _fraud_stats(db, FraudLog.detected_at < cutoff),
        after=await _fraud_stats(db, FraudLog.detected_at >= cutoff)
    )
