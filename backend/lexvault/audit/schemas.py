"""Pydantic schemas for activity (audit log) endpoints.

Audit entries are read-only (no create/update/delete operations).
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ActivityEntryResponse(BaseModel):
    """Response schema for one audit log entry."""
    id: UUID = Field(..., description="Audit log entry unique identifier")
    actor_id: Optional[UUID] = Field(None, description="User who performed the action")
    action: str = Field(..., description="Action kind (DOCUMENT_ARCHIVED, PERMISSION_CHANGED, etc.)")
    entity_type: Optional[str] = Field(None, description="Type of entity affected (document, assignment, group)")
    entity_id: Optional[UUID] = Field(None, description="ID of affected entity")
    entity_name: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[dict] = Field(None, validation_alias="metadata_json", description="Additional context as JSON")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Client User-Agent header")
    created_at: datetime = Field(..., description="Event timestamp")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "actor_id": "123e4567-e89b-12d3-a456-426614174000",
                "action": "DOCUMENT_ARCHIVED",
                "entity_type": "document",
                "entity_id": "abc12345-6789-0abc-def0-123456789012",
                "entity_name": "Engagement letter.docx",
                "description": "Document archived: Engagement letter.docx",
                "metadata": {"from": "ACTIVE", "to": "ARCHIVED"},
                "ip_address": "192.168.1.100",
                "user_agent": "Mozilla/5.0...",
                "created_at": "2026-01-04T12:00:00Z"
            }
        },
    )


class ActivityListResponse(BaseModel):
    """Paginated activity feed."""
    entries: List[ActivityEntryResponse] = Field(..., description="Audit entries, newest first")
    total: int = Field(..., description="Total number of entries matching filters")
    page: int
    per_page: int


class ActionCount(BaseModel):
    action: str
    count: int


class ActivityStatsResponse(BaseModel):
    """Activity volume summary (system admins only)."""
    today: int
    last_7_days: int
    top_actions: List[ActionCount]
