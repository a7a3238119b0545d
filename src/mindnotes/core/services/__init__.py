"""
Service layer interfaces and implementations.
"""

from .interfaces import (
    IConnectionService,
    ICredentialService,
    IHealthService,
    INoteService,
    IPreferencesService,
    ISyncService,
    ITransferService,
)

from .connection_service import ConnectionService
from .credential_service import CredentialService
from .health_service import HealthService
from .note_service import NoteService
from .preferences_service import PreferencesService
from .sync_service import SyncService
from .transfer_service import TransferService

__all__ = [
    # Interfaces
    "INoteService",
    "IConnectionService",
    "ISyncService",
    "ICredentialService",
    "ITransferService",
    "IPreferencesService",
    "IHealthService",

    # Implementations
    "NoteService",
    "ConnectionService",
    "SyncService",
    "CredentialService",
    "TransferService",
    "PreferencesService",
    "HealthService",
]
