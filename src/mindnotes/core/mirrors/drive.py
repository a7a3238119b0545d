"""Google Drive mirror: one markdown file per note."""

import json
import logging
import uuid
from typing import Optional

import httpx

from .base import (
    MARKDOWN_FORMAT_VERSION,
    DriveCredential,
    ExternalRef,
    MirrorAdapter,
    NoteSnapshot,
    render_drive_markdown,
)

logger = logging.getLogger(__name__)

MARKDOWN_MIME = "text/markdown"


class DriveAdapter(MirrorAdapter):
    """Drive v3 over REST. Creates on first sync, updates in place afterwards."""

    provider = "drive"

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_url: str = "https://www.googleapis.com/drive/v3",
        upload_url: str = "https://www.googleapis.com/upload/drive/v3",
        folder_id: Optional[str] = None,
    ):
        super().__init__(http)
        self.api_url = api_url.rstrip("/")
        self.upload_url = upload_url.rstrip("/")
        self.folder_id = folder_id

    async def upsert(self, note: NoteSnapshot, credential: DriveCredential) -> ExternalRef:
        body = render_drive_markdown(note)
        if note.drive_file_id:
            file_id = await self._update(note, body, credential)
        else:
            file_id = await self._create(note, body, credential)
        return ExternalRef(provider=self.provider, ref=file_id)

    async def delete(self, ref: ExternalRef, credential: DriveCredential) -> None:
        response = await self._send(
            "DELETE",
            f"{self.api_url}/files/{ref.ref}",
            headers=self._auth(credential),
        )
        if response.status_code == 404:
            logger.info(f"Drive file {ref.ref} already gone")
            return
        if response.status_code >= 400:
            raise self._error(response)

    async def _create(self, note: NoteSnapshot, body: str, credential: DriveCredential) -> str:
        metadata = {
            "name": f"{note.title}.md",
            "mimeType": MARKDOWN_MIME,
            "appProperties": {"mindnotesNoteId": str(note.id), "mindnotesFormat": MARKDOWN_FORMAT_VERSION},
        }
        if self.folder_id:
            metadata["parents"] = [self.folder_id]

        boundary = f"mindnotes_{uuid.uuid4().hex}"
        payload = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {MARKDOWN_MIME}; charset=UTF-8\r\n\r\n"
            f"{body}\r\n"
            f"--{boundary}--"
        ).encode("utf-8")

        headers = self._auth(credential)
        headers["Content-Type"] = f"multipart/related; boundary={boundary}"
        response = await self._send(
            "POST",
            f"{self.upload_url}/files",
            note_id=note.id,
            params={"uploadType": "multipart", "fields": "id"},
            headers=headers,
            content=payload,
        )
        if response.status_code >= 400:
            raise self._error(response, note.id)
        file_id = response.json()["id"]
        logger.debug(f"Created Drive file {file_id} for note {note.id}")
        return file_id

    async def _update(self, note: NoteSnapshot, body: str, credential: DriveCredential) -> str:
        headers = self._auth(credential)
        headers["Content-Type"] = f"{MARKDOWN_MIME}; charset=UTF-8"
        response = await self._send(
            "PATCH",
            f"{self.upload_url}/files/{note.drive_file_id}",
            note_id=note.id,
            params={"uploadType": "media", "fields": "id"},
            headers=headers,
            content=body.encode("utf-8"),
        )
        if response.status_code >= 400:
            raise self._error(response, note.id)
        return response.json().get("id", note.drive_file_id)

    @staticmethod
    def _auth(credential: DriveCredential) -> dict:
        return {"Authorization": f"Bearer {credential.access_token}"}
