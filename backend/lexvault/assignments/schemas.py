"""Pydantic schemas for the Assignments API"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.document import DocumentType, FileStatus
from ..models.document_assignment import AssignmentStatus


class AssignmentCreate(BaseModel):
    """Schema for POST /assignments"""
    document_id: UUID
    assigned_to: UUID = Field(..., description="User receiving the document")
    notes: Optional[str] = None
    due_date: Optional[datetime] = None

    model_config = ConfigDict(extra='forbid')


class AssignmentStatusUpdate(BaseModel):
    """Schema for PATCH /assignments/{id}/status"""
    status: AssignmentStatus


class AssignmentNotesUpdate(BaseModel):
    """Schema for PATCH /assignments/{id}/notes"""
    notes: Optional[str] = None


class AssignmentDocumentSummary(BaseModel):
    id: UUID
    name: str
    type: DocumentType
    file_status: FileStatus

    model_config = ConfigDict(from_attributes=True)


class AssignmentResponse(BaseModel):
    """Response schema for an assignment"""
    id: UUID
    document_id: UUID
    assigned_by: UUID
    assigned_to: UUID
    status: AssignmentStatus
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    document: Optional[AssignmentDocumentSummary] = None

    model_config = ConfigDict(from_attributes=True)


class AssignmentCreatedResponse(AssignmentResponse):
    """Response for a new assignment, reporting whether the assignee was notified"""
    notification_sent: bool


class AssignmentListResponse(BaseModel):
    items: List[AssignmentResponse]
    total: int
    page: int
    per_page: int
    total_pages: int
