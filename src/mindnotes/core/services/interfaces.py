"""
Service interfaces for MindNotes application.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..schemas.common import HealthCheckResponse
from ..schemas.connections import ConnectionCreate, ConnectionResponse
from ..schemas.notes import NoteCreate, NoteDeleteResponse, NoteResponse, NoteUpdate
from ..schemas.sync import SyncItemResult, SyncReport
from ..schemas.transfer import ExportDocument, ImportRequest, ImportResult
from ..schemas.users import IntegrationStatus, PreferencesResponse, PreferencesUpdate


class INoteService(ABC):
    """Note CRUD scoped to one owner."""

    @abstractmethod
    async def list_notes(self, user_id: UUID) -> List[NoteResponse]:
        """List every note of the user."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note by ID."""
        pass

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create note, then auto-sync it."""
        pass

    @abstractmethod
    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update note, then auto-sync it."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, user_id: UUID) -> NoteDeleteResponse:
        """Delete note together with its connections."""
        pass


class IConnectionService(ABC):
    """Links between notes of one owner."""

    @abstractmethod
    async def list_connections(self, user_id: UUID) -> List[ConnectionResponse]:
        pass

    @abstractmethod
    async def create_connection(self, user_id: UUID, request: ConnectionCreate) -> ConnectionResponse:
        pass

    @abstractmethod
    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> None:
        pass


class ISyncService(ABC):
    """Mirrors notes to external providers."""

    @abstractmethod
    async def sync_all(
        self, user_id: UUID, provider: str, owner: Optional[str] = None, repo: Optional[str] = None
    ) -> SyncReport:
        """Mirror every note; per-note failures are reported, not raised."""
        pass

    @abstractmethod
    async def sync_note(self, user_id: UUID, note) -> List[SyncItemResult]:
        """Auto-sync a single note according to the user's preferences."""
        pass


class ITransferService(ABC):
    """Versioned export and import of the note graph."""

    @abstractmethod
    async def export_graph(self, user_id: UUID) -> ExportDocument:
        pass

    @abstractmethod
    async def import_graph(self, user_id: UUID, request: ImportRequest) -> ImportResult:
        pass


class IPreferencesService(ABC):
    @abstractmethod
    async def get_preferences(self, user_id: UUID) -> PreferencesResponse:
        pass

    @abstractmethod
    async def update_preferences(self, user_id: UUID, request: PreferencesUpdate) -> PreferencesResponse:
        pass


class ICredentialService(ABC):
    """Per-provider credentials of a user."""

    @abstractmethod
    async def get_credential(self, user_id: UUID, provider: str):
        """Usable credential for the provider; refreshes Drive tokens when due."""
        pass

    @abstractmethod
    async def get_integration_status(self, user_id: UUID) -> IntegrationStatus:
        pass


class IHealthService(ABC):
    """Health checks."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> dict:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> dict:
        """Check Redis connection."""
        pass
