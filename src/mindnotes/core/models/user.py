"""
User model with embedded provider credentials and sync preferences.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .note import DEFAULT_NOTE_COLOR
from .types import UTCDateTime

if TYPE_CHECKING:
    from .note import Note


class User(BaseModel):
    """User account. Created out-of-band; there is no public registration."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Google Drive OAuth credential
    drive_access_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    drive_refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    drive_token_expires_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    # GitHub personal token, plus the repository auto-commit writes to
    github_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    github_owner: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    github_repo: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Preferences
    auto_sync: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    auto_commit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    default_color: Mapped[str] = mapped_column(String(32), default=DEFAULT_NOTE_COLOR, nullable=False)

    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_users_email", "email"),)

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"

    @property
    def drive_connected(self) -> bool:
        return bool(self.drive_access_token)

    @property
    def github_connected(self) -> bool:
        return bool(self.github_token)

    @property
    def has_default_repository(self) -> bool:
        return bool(self.github_owner and self.github_repo)
