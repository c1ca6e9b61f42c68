from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional
from datetime import datetime, timezone
from app.database import get_db
from app.models.user import User
from app.models.fraud_log import FraudLog
from app.schemas.fraud_log import FraudLogCreate, FraudLogResolve, FraudLogResponse, UnresolvedCountResponse
from app.middleware.auth import get_current_admin_user
from app.core.exceptions import NotFoundError, ValidationError
from app.websocket.manager import manager
from app.websocket.events import create_fraud_alert_event
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_fraud_log(db: AsyncSession, fraud_log_id: str) -> FraudLog:
    result = await db.execute(select(FraudLog).where(FraudLog.id == fraud_log_id))
    fraud_log = result.scalar_one_or_none()
    if not fraud_log:
        raise NotFoundError("Fraud log not found")
    return fraud_log


@router.get("", response_model=List[FraudLogResponse])
async def list_fraud_logs(
    aadhaar_record_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    resolved: Optional[bool] = None,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    query = select(FraudLog)
    if aadhaar_record_id:
        query = query.where(FraudLog.aadhaar_record_id == aadhaar_record_id)
    if start_date:
        query = query.where(FraudLog.detected_at >= start_date)
    if end_date:
        query = query.where(FraudLog.detected_at <= end_date)
    if resolved is not None:
        query = query.where(FraudLog.resolved.is_(resolved))

    result = await db.execute(query.order_by(FraudLog.detected_at.desc()))
    return result.scalars().all()


@router.get("/stats/unresolved-count", response_model=UnresolvedCountResponse)
async def unresolved_count(
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(func.count(FraudLog.id)).where(FraudLog.resolved.is_(False)))
    return UnresolvedCountResponse(count=result.scalar() or 0)


@router.get("/{fraud_log_id}", response_model=FraudLogResponse)
async def get_fraud_log(
    fraud_log_id: str,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    return await _get_fraud_log(db, fraud_log_id)


@router.post("", response_model=FraudLogResponse, status_code=status.HTTP_201_CREATED)
async def create_fraud_log(
    fraud_log_data: FraudLogCreate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    """Record a fraud event and alert connected admin dashboards"""
    fraud_log = FraudLog(**fraud_log_data.model_dump(), resolved=False)
    db.add(fraud_log)
    await db.commit()
    await db.refresh(fraud_log)

    logger.warning(f"Fraud event {fraud_log.event_type} ({fraud_log.risk_level}) logged as {fraud_log.id}")
    try:
        await manager.publish(
            create_fraud_alert_event(
                fraud_log_id=fraud_log.id,
                event_type=fraud_log.event_type,
                risk_level=fraud_log.risk_level,
                aadhaar_record_id=fraud_log.aadhaar_record_id
            )
        )
    except Exception as e:
        logger.error(f"Error broadcasting fraud alert: {e}")

    return fraud_log


@router.put("/{fraud_log_id}/resolve", response_model=FraudLogResponse)
async def resolve_fraud_log(
    fraud_log_id: str,
    resolve_data: Optional[FraudLogResolve] = None,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    fraud_log = await _get_fraud_log(db, fraud_log_id)
    if fraud_log.resolved:
        raise ValidationError("Fraud log already resolved")

    fraud_log.resolved = True
    fraud_log.resolved_at = datetime.now(timezone.utc)
    if resolve_data is not None:
        if resolve_data.action_taken is not None:
            fraud_log.action_taken = resolve_data.action_taken
        if resolve_data.notes is not None:
            fraud_log.notes = resolve_data.notes

    await db.commit()
    await db.refresh(fraud_log)
    return fraud_log
