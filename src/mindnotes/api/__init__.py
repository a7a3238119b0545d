"""API routers for MindNotes."""

from .connections import router as connections_router
from .health import router as health_router
from .integrations import router as integrations_router
from .notes import router as notes_router
from .sync import router as sync_router
from .transfer import router as transfer_router
from .users import router as users_router

__all__ = [
    "notes_router",
    "connections_router",
    "sync_router",
    "transfer_router",
    "users_router",
    "integrations_router",
    "health_router",
]
