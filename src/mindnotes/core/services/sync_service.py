"""Sync orchestrator: mirrors notes to Drive and GitHub."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import MindNotesError, ValidationError
from ..mirrors.base import ExternalRef, MirrorAdapter, NoteSnapshot
from ..mirrors.drive import DriveAdapter
from ..mirrors.github import GitHubAdapter
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.sync import SyncItemResult, SyncReport
from .credential_service import Credential, CredentialService
from .interfaces import ISyncService

logger = logging.getLogger(__name__)


class SyncService(ISyncService):
    """Pushes notes through the mirror adapters and records where they landed.

    Batches run sequentially in note order. A failing note is reported and
    the batch moves on; there are no retries.
    """

    def __init__(
        self,
        session: AsyncSession,
        credentials: CredentialService,
        drive: DriveAdapter,
        github: GitHubAdapter,
    ):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.user_repo = UserRepository(session)
        self.credentials = credentials
        self.drive = drive
        self.github = github

    async def sync_all(
        self, user_id: UUID, provider: str, owner: Optional[str] = None, repo: Optional[str] = None
    ) -> SyncReport:
        """Mirror every note of the user to ``provider``.

        Missing or unrefreshable credentials fail the whole call; anything
        that goes wrong for a single note ends up in its result.
        """
        credential = await self.credentials.get_credential(user_id, provider)
        adapter = self._adapter_for(provider, credential, owner, repo)

        notes = [NoteSnapshot.from_model(n) for n in await self.note_repo.list_user_notes(user_id)]
        results = []
        for note in notes:
            results.append(await self._mirror(user_id, note, adapter, credential))

        report = SyncReport.from_results(provider, results)
        logger.info(
            f"Synced {len(notes)} note(s) to {provider} for user {user_id}: "
            f"{report.succeeded} succeeded, {report.failed} failed"
        )
        return report

    async def sync_note(self, user_id: UUID, note: Note) -> List[SyncItemResult]:
        """Auto-sync after a create or update.

        Drive when ``auto_sync`` is on and Drive is connected; GitHub when
        ``auto_commit`` is on, GitHub is connected and a default repository
        is stored. Failures come back as results; the note stays saved.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return []

        targets = []
        if user.auto_sync and user.drive_connected:
            targets.append("drive")
        if user.auto_commit and user.github_connected and user.has_default_repository:
            targets.append("github")

        snapshot = NoteSnapshot.from_model(note)
        results = []
        for provider in targets:
            try:
                credential = await self.credentials.get_credential(user_id, provider)
                adapter = self._adapter_for(provider, credential)
            except MindNotesError as e:
                logger.warning(f"Auto-sync to {provider} skipped for note {snapshot.id}: {e.message}")
                results.append(SyncItemResult.failure(snapshot.id, provider, e.message))
                continue
            results.append(await self._mirror(user_id, snapshot, adapter, credential))

        if results:
            # the back-references were written through another query
            await self.session.refresh(note)
        return results

    async def remove_note_mirror(self, user_id: UUID, note: NoteSnapshot) -> List[SyncItemResult]:
        """Best-effort removal of the Drive copy of a deleted note."""
        if not note.drive_file_id:
            return []
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.drive_connected:
            return []

        ref = ExternalRef(provider="drive", ref=note.drive_file_id)
        try:
            credential = await self.credentials.get_credential(user_id, "drive")
            await self.drive.delete(ref, credential)
        except MindNotesError as e:
            logger.warning(f"Could not remove Drive file {ref.ref} of note {note.id}: {e.message}")
            return [SyncItemResult.failure(note.id, "drive", e.message)]
        return [SyncItemResult.success(note.id, "drive", ref.ref)]

    def _adapter_for(
        self,
        provider: str,
        credential: Credential,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
    ) -> MirrorAdapter:
        if provider == "drive":
            return self.drive
        if provider == "github":
            owner = owner or credential.owner
            repo = repo or credential.repo
            if not (owner and repo):
                raise ValidationError("GitHub repository owner and name are required")
            return self.github.for_repository(owner, repo)
        raise ValidationError(f"Unknown provider: {provider}")

    async def _mirror(
        self, user_id: UUID, note: NoteSnapshot, adapter: MirrorAdapter, credential: Credential
    ) -> SyncItemResult:
        provider = adapter.provider
        try:
            ref = await adapter.upsert(note, credential)
            if provider == "drive":
                await self.note_repo.set_mirror_reference(note.id, user_id, drive_file_id=ref.ref)
            else:
                await self.note_repo.set_mirror_reference(note.id, user_id, github_path=ref.ref)
        except MindNotesError as e:
            logger.warning(f"Failed to sync note {note.id} to {provider}: {e.message}")
            return SyncItemResult.failure(note.id, provider, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error syncing note {note.id} to {provider}")
            return SyncItemResult.failure(note.id, provider, str(e) or type(e).__name__)
        return SyncItemResult.success(note.id, provider, ref.ref)
