from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
from datetime import datetime, timezone
from app.database import get_db
from app.models.user import User
from app.models.aadhaar_record import AadhaarRecord
from app.models.appointment import Appointment
from app.models.document import Document, DocumentStatus
from app.schemas.document import DocumentCreate, DocumentStatusUpdate, DocumentResponse
from app.middleware.auth import get_current_active_user, get_current_admin_user, ensure_record_access
from app.core.exceptions import NotFoundError

router = APIRouter()


async def _check_appointment_access(db: AsyncSession, current_user: User, appointment_id: str) -> None:
    result = await db.execute(
        select(AadhaarRecord)
        .join(Appointment, Appointment.aadhaar_record_id == AadhaarRecord.id)
        .where(Appointment.id == appointment_id)
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError("Appointment not found")
    ensure_record_access(current_user, record)


async def _get_document(db: AsyncSession, document_id: str) -> Document:
    result = await db.execute(select(Document).where(Document.id == document_id))
    document = result.scalar_one_or_none()
    if not document:
        raise NotFoundError("Document not found")
    return document


@router.get("/appointment/{appointment_id}", response_model=List[DocumentResponse])
async def documents_for_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    await _check_appointment_access(db, current_user, appointment_id)

    result = await db.execute(
        select(Document)
        .where(Document.appointment_id == appointment_id)
        .order_by(Document.created_at.desc())
    )
    return result.scalars().all()


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    document = await _get_document(db, document_id)
    await _check_appointment_access(db, current_user, document.appointment_id)
    return document


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Register an uploaded file; the file itself lives at s3_url"""
    await _check_appointment_access(db, current_user, document_data.appointment_id)

    document = Document(**document_data.model_dump(), status=DocumentStatus.PENDING.value)
    db.add(document)
    await db.commit()
    await db.refresh(document)
    return document


@router.put("/{document_id}/status", response_model=DocumentResponse)
async def review_document(
    document_id: str,
    status_data: DocumentStatusUpdate,
    current_admin: User = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db)
):
    document = await _get_document(db, document_id)
    document.status = status_data.status.value
    document.review_notes = status_data.review_notes
    document.reviewed_by = current_admin.id
    document.reviewed_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(document)
    return document


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    document = await _get_document(db, document_id)
    await _check_appointment_access(db, current_user, document.appointment_id)

    await db.delete(document)
    await db.commit()
    return {"message": "Document deleted successfully"}
