"""GitHub mirror: each note is a markdown file committed under ``notes/``."""

import base64
import logging
import re
from typing import Any, Optional

import httpx

from ..exceptions import ExternalApiError, ValidationError
from .base import ExternalRef, GitHubCredential, MirrorAdapter, NoteSnapshot, render_github_markdown

logger = logging.getLogger(__name__)

_UNSAFE_PATH_CHARS = re.compile(r"[^a-zA-Z0-9]")

COMMIT_MESSAGE = "Update note: {title}"
DELETE_MESSAGE = "Delete note: {path}"


def note_path(title: str) -> str:
    """Deterministic repository path for a note title."""
    return f"notes/{_UNSAFE_PATH_CHARS.sub('_', title)}.md"


class GitHubAdapter(MirrorAdapter):
    """Contents API client bound to one repository."""

    provider = "github"

    def __init__(
        self,
        http: httpx.AsyncClient,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        api_url: str = "https://api.github.com",
    ):
        super().__init__(http)
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")

    async def upsert(self, note: NoteSnapshot, credential: GitHubCredential) -> ExternalRef:
        path = note_path(note.title)
        # the contents API wants the current blob sha when overwriting
        sha = await self._current_sha(path, credential, note.id)

        payload = {
            "message": COMMIT_MESSAGE.format(title=note.title),
            "content": base64.b64encode(render_github_markdown(note).encode("utf-8")).decode("ascii"),
        }
        if sha:
            payload["sha"] = sha

        response = await self._send(
            "PUT", self._contents_url(path), note_id=note.id, headers=self._headers(credential), json=payload
        )
        if response.status_code >= 400:
            raise self._error(response, note.id)
        logger.debug(f"Committed note {note.id} to {self.owner}/{self.repo}:{path}")
        return ExternalRef(provider=self.provider, ref=path)

    async def delete(self, ref: ExternalRef, credential: GitHubCredential) -> None:
        sha = await self._current_sha(ref.ref, credential)
        if sha is None:
            return
        response = await self._send(
            "DELETE",
            self._contents_url(ref.ref),
            headers=self._headers(credential),
            json={"message": DELETE_MESSAGE.format(path=ref.ref), "sha": sha},
        )
        if response.status_code == 404:
            return
        if response.status_code >= 400:
            raise self._error(response)

    def for_repository(self, owner: Optional[str], repo: Optional[str]) -> "GitHubAdapter":
        """Same client, different target repository."""
        return GitHubAdapter(self.http, owner=owner, repo=repo, api_url=self.api_url)

    async def get_authenticated_login(self, token: str) -> str:
        """Login of the token's owner; used to check a token before storing it."""
        response = await self._send(
            "GET", f"{self.api_url}/user", headers=self._headers(GitHubCredential(token=token))
        )
        if response.status_code >= 400:
            raise self._error(response)
        return response.json()["login"]

    async def _current_sha(self, path: str, credential: GitHubCredential, note_id: Any = None) -> Optional[str]:
        """Blob sha of the file at ``path``; None when it does not exist yet."""
        response = await self._send(
            "GET", self._contents_url(path), note_id=note_id, headers=self._headers(credential)
        )
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise self._error(response, note_id)
        body = response.json()
        if not isinstance(body, dict) or "sha" not in body:
            raise ExternalApiError(
                self.provider, f"{path} is not a file", status_code=response.status_code, note_id=note_id
            )
        return body["sha"]

    def _contents_url(self, path: str) -> str:
        if not (self.owner and self.repo):
            raise ValidationError("GitHub repository owner and name are required")
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{path}"

    @staticmethod
    def _headers(credential: GitHubCredential) -> dict:
        return {
            "Authorization": f"Bearer {credential.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
