"""
Database models for MindNotes.

Models included:
    - User: account, provider credentials and sync preferences
    - Note: positioned note with tags and mirror back-references
    - Connection: link between two notes of the same owner
"""

from .base import BaseModel
from .connection import Connection
from .note import DEFAULT_NOTE_COLOR, Note
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Connection",
    "DEFAULT_NOTE_COLOR",
]
