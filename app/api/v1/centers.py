from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import math
from app.database import get_db
from app.models.user import User
from app.models.center import Center
from app.schemas.center import CenterCreate, CenterUpdate, CenterResponse, NearbyCenterResponse
from app.middleware.auth import get_current_admin_user
from app.core.exceptions import NotFoundError, ValidationError
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

KM_PER_DEGREE = 111


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates in kilometres"""
    lat1, lng1, lat2, lng2 = map(math.radians, (lat1, lng1, lat2, lng2))
    a = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    return 6371 * 2 * math.asin(math.sqrt(a))


async def _get_center(db: AsyncSession, center_id: str) -> Center:
    result = await db.execute(select(Center).where(Center.id == center_id))
    center = result.scalar_one_or_none()
    if not center:
        raise NotFoundError("Center not found")
    return center


@router.get("", response_model=List[CenterResponse])
async def list_centers(
    city: Optional[str] = None,
    state: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Active centers, optionally filtered by partial city/state match"""
    query = select(Center).where(Center.is_active.is_(True))
    if city:
        query = query.where(Center.city.ilike(f"%{city}%"))
    if state:
        query = query.where(Center.state.ilike(f"%{state}%"))

    result = await db.execute(query.order_by(Center.name))
    return result.scalars().all()


@router.get("/nearby", response_model=List[NearbyCenterResponse])
async def nearby_centers(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: int = Query(10, gt=0),
    db: AsyncSession = Depends(get_db)
):
    """
    Active centers inside a bounding box of `radius` km around (lat, lng),
    closest first.
    """
    lat_delta = radius / KM_PER_DEGREE
    lng_delta = radius / (KM_PER_DEGREE * max(math.cos(math.radians(lat)), 1e-6))

    result = await db.execute(
        select(Center).where(
            Center.is_active.is_(True),
            Center.latitude.between(lat - lat_delta, lat + lat_delta),
            Center.longitude.between(lng - lng_delta, lng + lng_delta),
        )
    )

    nearby = []
    for center in result.scalars().all():
        item = NearbyCenterResponse.model_validate(center)
        item.distance_km = round(haversine_km(lat, lng, float(center.latitude), float(center.longitude)), 2)
        nearby.append(item)

    return sorted(nearby, key=lambda c: c.distance_km)


@router.get("/{center_id}", response_model=CenterResponse)
async def get_center(
    center_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await _get_center(db, center_id)


@router.post("", response_model=CenterResponse, status_code=status.HTTP_201_CREATED)
async def create_center(
    center_data: CenterCreate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    center = Center(**center_data.model_dump(), is_active=True)
    db.add(center)
    await db.commit()
    await db.refresh(center)

    logger.info(f"Center {center.id} ({center.name}) created by {current_admin.id}")
    return center


@router.put("/{center_id}", response_model=CenterResponse)
async def update_center(
    center_id: str,
    center_data: CenterUpdate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    center = await _get_center(db, center_id)

    for field, value in center_data.model_dump(exclude_unset=True).items():
        setattr(center, field, value)

    await db.commit()
    await db.refresh(center)
    return center


@router.delete("/{center_id}")
async def delete_center(
    center_id: str,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    center = await _get_center(db, center_id)
    await db.delete(center)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Center has appointments and cannot be deleted")

    logger.info(f"Center {center_id} deleted by {current_admin.id}")
    return {"message": "Center deleted successfully"}
