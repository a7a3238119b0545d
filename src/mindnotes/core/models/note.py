# Note model - a positioned card on the user's canvas
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, utcnow
from .types import GUID, StringListType, UTCDateTime

if TYPE_CHECKING:
    from .user import User

DEFAULT_NOTE_COLOR = "#6B7280"


class Note(BaseModel):
    """Note with canvas position, color, tags and mirror back-references."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # canvas coordinates
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)

    color: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_NOTE_COLOR)
    tags: Mapped[List[str]] = mapped_column(StringListType, nullable=False, default=lambda: [])

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # weak references into the mirrors; the external object may be gone
    drive_file_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    github_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    last_modified: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, nullable=False)

    owner: Mapped["User"] = relationship("User", back_populates="notes")

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_owner_created", "owner_id", "created_at"),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    def touch(self) -> None:
        """Mark the note as modified now."""
        self.last_modified = utcnow()
