# Connection model - undirected edge between two notes
import uuid

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .types import GUID


class Connection(BaseModel):
    """Link between two notes of the same owner.

    Stored with a direction (``from``/``to``) but treated as undirected.
    No uniqueness on the pair: (a, b) and (b, a) are two rows.
    """

    __tablename__ = "connections"

    from_note_id: Mapped[uuid.UUID] = mapped_column(
        "from_note_id", GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    to_note_id: Mapped[uuid.UUID] = mapped_column(
        "to_note_id", GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        Index("idx_connections_owner_id", "owner_id"),
        Index("idx_connections_from", "from_note_id"),
        Index("idx_connections_to", "to_note_id"),
    )

    def __repr__(self) -> str:
        return f"<Connection({self.from_note_id} <-> {self.to_note_id})>"
