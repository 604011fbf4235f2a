"""Pydantic schemas for the Groups API"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.group import GroupRole


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class GroupMemberAdd(BaseModel):
    user_id: UUID
    role: GroupRole = GroupRole.VIEWER


class GroupJoin(BaseModel):
    """Schema for POST /groups/join"""
    invite_code: str = Field(..., min_length=1, max_length=64)


class GroupMemberResponse(BaseModel):
    id: UUID
    group_id: UUID
    user_id: UUID
    role: GroupRole
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    owner_id: UUID
    invite_code: Optional[str] = None
    members: List[GroupMemberResponse] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupListResponse(BaseModel):
    items: List[GroupResponse]
    total: int
    page: int
    per_page: int
    total_pages: int
