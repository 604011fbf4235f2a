"""Pydantic schemas for the Documents API

Request/response models for document listing, registration, metadata updates
and lifecycle transitions.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.document import DocumentType, FileStatus, SharingStatus
from ..permissions.levels import PermissionLevel


class DocumentCreate(BaseModel):
    """Schema for registering an uploaded file (POST /documents)"""
    name: str = Field(..., min_length=1, max_length=255, examples=["Engagement letter.docx"])
    type: DocumentType = Field(..., description="DOCX, PDF or XLSX")
    size_bytes: int = Field(0, ge=0)
    mime_type: Optional[str] = None
    storage_key: Optional[str] = Field(None, description="Location of the file bytes in file storage")
    description: Optional[str] = None
    group_id: Optional[UUID] = Field(None, description="Group the document is filed under")

    model_config = ConfigDict(extra='forbid')


class DocumentUpdate(BaseModel):
    """Schema for updating document metadata (PATCH /documents/{id})"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    group_id: Optional[UUID] = None

    model_config = ConfigDict(extra='forbid')


class DocumentStatusUpdate(BaseModel):
    """Schema for a status change (POST /documents/{id}/status)"""
    status: FileStatus


class DocumentResponse(BaseModel):
    """Response schema for a document"""
    id: UUID
    name: str
    type: DocumentType
    owner_id: UUID
    group_id: Optional[UUID] = None
    description: Optional[str] = None
    size_bytes: int
    mime_type: Optional[str] = None
    file_status: FileStatus
    sharing_status: SharingStatus
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """Paginated document list"""
    items: List[DocumentResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class EffectivePermissionResponse(BaseModel):
    """Caller's effective access level on one document"""
    document_id: UUID
    level: PermissionLevel
