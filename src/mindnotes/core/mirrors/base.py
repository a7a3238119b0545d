"""
Mirror adapter contract, provider credentials and markdown rendering.

A mirror is a one-way, eventually stale copy of a note in an external
system. Adapters only talk to that system; recording the returned
reference on the note is the orchestrator's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

import httpx

from ..exceptions import ExternalApiError

MARKDOWN_FORMAT_VERSION = "1"


@dataclass
class DriveCredential:
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[datetime]


@dataclass
class GitHubCredential:
    token: str
    owner: Optional[str] = None
    repo: Optional[str] = None


@dataclass(frozen=True)
class NoteSnapshot:
    """Detached copy of the fields a mirror needs.

    Adapters work on snapshots so a rolled-back session cannot expire the
    note halfway through a batch.
    """

    id: Any
    title: str
    content: str
    x: float
    y: float
    color: str
    tags: List[str]
    created_at: Optional[datetime]
    last_modified: Optional[datetime]
    drive_file_id: Optional[str] = None
    github_path: Optional[str] = None

    @classmethod
    def from_model(cls, note: Any) -> "NoteSnapshot":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content or "",
            x=note.x,
            y=note.y,
            color=note.color,
            tags=list(note.tags or []),
            created_at=note.created_at,
            last_modified=note.last_modified,
            drive_file_id=note.drive_file_id,
            github_path=note.github_path,
        )


@dataclass(frozen=True)
class ExternalRef:
    """Where a note ended up: a Drive file id or a repository path."""

    provider: str
    ref: str


class MirrorAdapter(ABC):
    """Upserts rendered notes into one external location."""

    provider: str = ""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @abstractmethod
    async def upsert(self, note: Any, credential: Any) -> ExternalRef:
        """Create or overwrite the mirror of ``note``."""

    @abstractmethod
    async def delete(self, ref: ExternalRef, credential: Any) -> None:
        """Remove a mirror. Already-gone counts as success."""

    async def _send(self, method: str, url: str, note_id: Any = None, **kwargs) -> httpx.Response:
        """Issue a request, turning transport failures into ExternalApiError."""
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ExternalApiError(self.provider, f"{self.label} request timed out", note_id=note_id) from e
        except httpx.HTTPError as e:
            raise ExternalApiError(self.provider, f"{self.label} request failed: {e}", note_id=note_id) from e

    def _error(self, response: httpx.Response, note_id: Any = None) -> ExternalApiError:
        return ExternalApiError(
            self.provider,
            f"{self.label} API returned {response.status_code}: {_error_message(response)}",
            status_code=response.status_code,
            note_id=note_id,
        )

    @property
    def label(self) -> str:
        return {"drive": "Google Drive", "github": "GitHub"}.get(self.provider, self.provider)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message", error))
        if error:
            return str(error)
        if body.get("message"):
            return str(body["message"])
    return response.reason_phrase


# Rendering


def format_coordinate(value: float) -> str:
    """120.0 -> '120', 12.5 -> '12.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _format_timestamp(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def _header(note: Any) -> str:
    tags = ", ".join(note.tags or [])
    return f"# {note.title}\n\n{note.content or ''}\n\n**Tags:** {tags}"


def render_drive_markdown(note: Any) -> str:
    """Drive form: carries canvas position and color."""
    return (
        f"{_header(note)}\n"
        f"**Position:** ({format_coordinate(note.x)}, {format_coordinate(note.y)})\n"
        f"**Color:** {note.color}"
    )


def render_github_markdown(note: Any) -> str:
    """GitHub form: carries creation and modification times."""
    return (
        f"{_header(note)}\n"
        f"**Created:** {_format_timestamp(note.created_at)}\n"
        f"**Modified:** {_format_timestamp(note.last_modified)}"
    )
