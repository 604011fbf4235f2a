"""Pydantic schemas for document permission grants."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .levels import PermissionLevel


class PermissionGrantUpdate(BaseModel):
    """Schema for PUT /documents/{id}/permissions/{user_id}

    Setting the level to "none" revokes access; the grant row is kept.
    """
    level: PermissionLevel = Field(..., examples=["write"])


class PermissionGrantResponse(BaseModel):
    id: UUID
    document_id: UUID
    user_id: UUID
    level: PermissionLevel
    granted_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionGrantListResponse(BaseModel):
    items: List[PermissionGrantResponse]
