"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .common import ErrorResponse, HealthCheckResponse, MessageResponse
from .connections import ConnectionCreate, ConnectionResponse
from .notes import NoteCreate, NoteDeleteResponse, NoteResponse, NoteUpdate
from .sync import GitHubSyncRequest, SyncItemResult, SyncReport
from .transfer import ExportDocument, ImportRequest, ImportResult
from .users import (
    GitHubConnectRequest,
    GitHubConnectResponse,
    GoogleAuthorizationResponse,
    IntegrationStatus,
    PreferencesResponse,
    PreferencesUpdate,
)

__all__ = [
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteDeleteResponse",
    # Connection schemas
    "ConnectionCreate",
    "ConnectionResponse",
    # Sync schemas
    "GitHubSyncRequest",
    "SyncItemResult",
    "SyncReport",
    # Transfer schemas
    "ExportDocument",
    "ImportRequest",
    "ImportResult",
    # User schemas
    "PreferencesResponse",
    "PreferencesUpdate",
    "IntegrationStatus",
    "GitHubConnectRequest",
    "GitHubConnectResponse",
    "GoogleAuthorizationResponse",
    # Common schemas
    "ErrorResponse",
    "MessageResponse",
    "HealthCheckResponse",
]
