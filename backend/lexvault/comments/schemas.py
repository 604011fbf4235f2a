"""Pydantic schemas for document comments"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for POST /documents/{id}/comments"""
    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: Optional[UUID] = Field(None, description="Comment being replied to")
    page_number: Optional[int] = Field(None, ge=1)


class CommentAuthor(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    id: UUID
    document_id: UUID
    parent_id: Optional[UUID] = None
    content: str
    page_number: Optional[int] = None
    created_at: datetime
    author: CommentAuthor

    model_config = ConfigDict(from_attributes=True)


class CommentListResponse(BaseModel):
    items: List[CommentResponse]
    total: int
