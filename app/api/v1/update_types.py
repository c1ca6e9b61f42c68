from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List
from app.database import get_db
from app.models.user import User
from app.models.update_type import UpdateType
from app.schemas.update_type import UpdateTypeCreate, UpdateTypeUpdate, UpdateTypeResponse
from app.middleware.auth import get_current_admin_user
from app.core.exceptions import NotFoundError, ValidationError, AlreadyRegistered

router = APIRouter()


async def _get_update_type(db: AsyncSession, update_type_id: str) -> UpdateType:
    result = await db.execute(select(UpdateType).where(UpdateType.id == update_type_id))
    update_type = result.scalar_one_or_none()
    if not update_type:
        raise NotFoundError("Update type not found")
    return update_type


@router.get("", response_model=List[UpdateTypeResponse])
async def list_update_types(
    online_only: bool = False,
    db: AsyncSession = Depends(get_db)
):
    query = select(UpdateType).where(UpdateType.is_active.is_(True))
    if online_only:
        query = query.where(UpdateType.can_do_online.is_(True))

    result = await db.execute(query.order_by(UpdateType.name))
    return result.scalars().all()


@router.get("/biometric/required", response_model=List[UpdateTypeResponse])
async def biometric_update_types(
    db: AsyncSession = Depends(get_db)
):
    """Update types that need a center visit for biometrics"""
    result = await db.execute(
        select(UpdateType)
        .where(UpdateType.requires_biometric.is_(True), UpdateType.is_active.is_(True))
        .order_by(UpdateType.name)
    )
    return result.scalars().all()


@router.get("/{update_type_id}", response_model=UpdateTypeResponse)
async def get_update_type(
    update_type_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await _get_update_type(db, update_type_id)


@router.post("", response_model=UpdateTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_update_type(
    update_type_data: UpdateTypeCreate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    update_type = UpdateType(**update_type_data.model_dump(), is_active=True)
    db.add(update_type)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AlreadyRegistered("Update type with this name already exists")

    await db.refresh(update_type)
    return update_type


@router.put("/{update_type_id}", response_model=UpdateTypeResponse)
async def update_update_type(
    update_type_id: str,
    update_type_data: UpdateTypeUpdate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    update_type = await _get_update_type(db, update_type_id)

    for field, value in update_type_data.model_dump(exclude_unset=True).items():
        setattr(update_type, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise AlreadyRegistered("Update type with this name already exists")

    await db.refresh(update_type)
    return update_type


@router.delete("/{update_type_id}")
async def delete_update_type(
    update_type_id: str,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    update_type = await _get_update_type(db, update_type_id)
    await db.delete(update_type)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Update type is in use and cannot be deleted")

    return {"message": "Update type deleted successfully"}
