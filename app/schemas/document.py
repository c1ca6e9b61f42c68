from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.document import DocumentStatus


class DocumentCreate(BaseModel):
    appointment_id: str = Field(..., min_length=1)
    document_type: str = Field(..., min_length=1, max_length=255)
    file_name: str = Field(..., min_length=1, max_length=255)
    file_size: Optional[int] = Field(None, ge=0)
    s3_url: Optional[str] = None
    uploaded_by_user: bool = True


class DocumentStatusUpdate(BaseModel):
    status: DocumentStatus
    review_notes: Optional[str] = None


class DocumentResponse(BaseModel):
    id: str
    appointment_id: str
    document_type: str
    file_name: str
    file_size: Optional[int]
    s3_url: Optional[str]
    status: str
    review_notes: Optional[str]
    uploaded_by_user: bool
    reviewed_by: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
