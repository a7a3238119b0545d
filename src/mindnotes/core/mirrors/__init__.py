"""Mirror adapters: one-way copies of notes in Google Drive and GitHub."""

from .base import (
    MARKDOWN_FORMAT_VERSION,
    DriveCredential,
    ExternalRef,
    GitHubCredential,
    MirrorAdapter,
    NoteSnapshot,
    render_drive_markdown,
    render_github_markdown,
)
from .drive import DriveAdapter
from .github import GitHubAdapter, note_path

__all__ = [
    "MARKDOWN_FORMAT_VERSION",
    "MirrorAdapter",
    "NoteSnapshot",
    "ExternalRef",
    "DriveCredential",
    "GitHubCredential",
    "DriveAdapter",
    "GitHubAdapter",
    "note_path",
    "render_drive_markdown",
    "render_github_markdown",
]
