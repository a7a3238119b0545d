"""Repository layer for data access."""

from .connection_repository import ConnectionRepository
from .note_repository import NoteRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
    "ConnectionRepository",
]
