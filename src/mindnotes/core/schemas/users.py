"""
User-facing schemas: sync preferences and provider connections.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PreferencesResponse(BaseModel):
    auto_sync: bool = Field(description="Mirror notes to Drive on every create/update")
    auto_commit: bool = Field(description="Commit notes to the default GitHub repository on every create/update")
    default_color: str = Field(description="Color for notes created without one")

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    """Partial preferences update; omitted fields keep their value."""

    auto_sync: Optional[bool] = None
    auto_commit: Optional[bool] = None
    default_color: Optional[str] = Field(default=None, min_length=1, max_length=32)

    @field_validator("auto_sync", "auto_commit", "default_color", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} may not be null")
        return v


class IntegrationStatus(BaseModel):
    drive_connected: bool
    drive_token_expires_at: Optional[datetime] = None
    github_connected: bool
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None


class GitHubConnectRequest(BaseModel):
    """Personal access token plus an optional default repository for auto-commit."""

    token: str = Field(min_length=1, description="GitHub personal access token")
    owner: Optional[str] = Field(default=None, min_length=1, max_length=100)
    repo: Optional[str] = Field(default=None, min_length=1, max_length=100)


class GitHubConnectResponse(BaseModel):
    message: str
    github_user: str


class GoogleAuthorizationResponse(BaseModel):
    authorization_url: str
