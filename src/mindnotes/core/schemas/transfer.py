"""
Export/import schemas.

This is a file format as much as an API contract, so field names are
camelCase on the wire and the document carries a ``version``.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .notes import Tag

EXPORT_FORMAT_VERSION = "1.0"
SUPPORTED_IMPORT_VERSIONS = frozenset({"1.0"})


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportedNote(_CamelModel):
    id: str
    title: str
    content: str
    x: float
    y: float
    color: str
    tags: List[str]
    last_modified: datetime
    created_at: datetime


class ExportedConnection(_CamelModel):
    id: str
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    created_at: datetime


class ExportDocument(_CamelModel):
    """Full dump of a user's graph."""

    notes: List[ExportedNote]
    connections: List[ExportedConnection]
    export_date: datetime
    version: str = EXPORT_FORMAT_VERSION


class ImportedNote(_CamelModel):
    """One note of an import payload. ``id`` is the client-side id, only used for remapping."""

    id: Optional[str] = None
    title: str = Field(min_length=1, max_length=200)
    content: str = ""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    color: Optional[str] = Field(default=None, min_length=1, max_length=32)
    tags: List[Tag] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v


class ImportedConnection(_CamelModel):
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ImportRequest(_CamelModel):
    """Import payload; usually a previous export, optionally with ``clearExisting``."""

    notes: List[ImportedNote] = Field(default_factory=list)
    connections: List[ImportedConnection] = Field(default_factory=list)
    clear_existing: bool = False
    version: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v):
        if v is not None and v not in SUPPORTED_IMPORT_VERSIONS:
            raise ValueError(f"Unsupported export version: {v}")
        return v


class SkippedConnection(_CamelModel):
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    reason: str


class ImportResult(_CamelModel):
    imported_notes: int
    imported_connections: int
    skipped_connections: List[SkippedConnection] = Field(default_factory=list)
