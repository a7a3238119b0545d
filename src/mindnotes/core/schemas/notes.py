"""
Note management schemas.

These schemas define the API contracts for note CRUD operations. Bodies are
validated here and never merged into the persisted row as-is.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .sync import SyncItemResult

# Matches the ARRAY(String(100)) tag column on PostgreSQL
MAX_TAG_LENGTH = 100
Tag = Annotated[str, Field(max_length=MAX_TAG_LENGTH)]


def _check_title(v: str) -> str:
    if not v.strip():
        raise ValueError("Title cannot be empty")
    return v


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(default="", description="Note body (markdown)")
    x: float = Field(allow_inf_nan=False, description="Canvas x coordinate")
    y: float = Field(allow_inf_nan=False, description="Canvas y coordinate")
    color: Optional[str] = Field(
        default=None, min_length=1, max_length=32, description="Card color; user default when omitted"
    )
    tags: List[Tag] = Field(default_factory=list, description="Tags, order preserved")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Project ideas",
                "content": "- mind map export\n- dark mode",
                "x": 120,
                "y": 80,
                "color": "#3B82F6",
                "tags": ["ideas", "todo"],
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema. Omitted fields are left alone; null is rejected."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None)
    x: Optional[float] = Field(default=None, allow_inf_nan=False)
    y: Optional[float] = Field(default=None, allow_inf_nan=False)
    color: Optional[str] = Field(default=None, min_length=1, max_length=32)
    tags: Optional[List[Tag]] = Field(default=None, description="Replaces the whole tag list")

    @field_validator("title", "content", "x", "y", "color", "tags", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        # only runs for values actually sent; omitted fields keep the default
        if v is None:
            raise ValueError(f"{info.field_name} may not be null")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)

    model_config = ConfigDict(
        json_schema_extra={"example": {"x": 240, "y": 96, "tags": ["ideas"]}}
    )


class NoteResponse(BaseModel):
    """Note response schema."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str
    content: str
    x: float
    y: float
    color: str
    tags: List[str]
    owner_id: uuid.UUID

    drive_file_id: Optional[str] = Field(default=None, description="Mirrored Drive file, if any")
    github_path: Optional[str] = Field(default=None, description="Mirrored repository path, if any")

    created_at: datetime
    last_modified: datetime

    # auto-sync outcomes for this request; the note itself is saved regardless
    sync_results: Optional[List[SyncItemResult]] = Field(default=None)

    model_config = ConfigDict(from_attributes=True)


class NoteDeleteResponse(BaseModel):
    """Confirmation for a deleted note."""

    message: str
    note_id: uuid.UUID
    removed_connections: int = Field(description="Connections pruned along with the note")
    sync_results: Optional[List[SyncItemResult]] = Field(
        default=None, description="Outcome of removing the Drive copy"
    )
