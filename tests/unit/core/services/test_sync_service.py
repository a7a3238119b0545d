"""SyncService with real repositories and scripted Drive/GitHub APIs."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from mindnotes.core.exceptions import CredentialRefreshError, NotConnectedError, ValidationError
from mindnotes.core.mirrors import DriveAdapter, GitHubAdapter, NoteSnapshot
from mindnotes.core.repositories import NoteRepository
from mindnotes.core.services import CredentialService, SyncService
from mindnotes.security.google_oauth import GoogleOAuthClient

DRIVE_CREATE = "/upload/drive/v3/files"


@pytest.fixture
def sync_service(test_session, http_client, test_settings):
    oauth = GoogleOAuthClient(http_client, test_settings)
    credentials = CredentialService(test_session, oauth_client=oauth, settings=test_settings)
    return SyncService(test_session, credentials, DriveAdapter(http_client), GitHubAdapter(http_client))


def _drive_create_failing_for(title):
    """Drive create endpoint that rejects one note by title and names the rest file-<title>."""

    def _respond(request):
        body = request.content.decode()
        if f'"name": "{title}.md"' in body:
            return httpx.Response(500, json={"error": {"message": "backend error"}})
        name = body.split('"name": "')[1].split('.md"')[0]
        return httpx.Response(200, json={"id": f"file-{name}"})

    return _respond


@pytest.mark.asyncio
async def test_sync_all_reports_each_note_and_continues_past_failures(
    sync_service, mock_api, test_session, drive_user, make_note
):
    first = await make_note(drive_user, "First")
    second = await make_note(drive_user, "Second")
    third = await make_note(drive_user, "Third")
    mock_api.add("POST", DRIVE_CREATE, _drive_create_failing_for("Second"))

    report = await sync_service.sync_all(drive_user.id, "drive")

    assert [r.note_id for r in report.results] == [first.id, second.id, third.id]
    assert [r.status for r in report.results] == ["success", "error", "success"]
    assert report.results[0].external_ref == "file-First"
    assert report.results[2].external_ref == "file-Third"
    assert "backend error" in report.results[1].error
    assert (report.succeeded, report.failed) == (2, 1)

    repo = NoteRepository(test_session)
    assert (await repo.get_by_id_and_user(first.id, drive_user.id)).drive_file_id == "file-First"
    assert (await repo.get_by_id_and_user(second.id, drive_user.id)).drive_file_id is None


@pytest.mark.asyncio
async def test_sync_all_with_no_notes_is_an_empty_report(sync_service, drive_user, mock_api):
    report = await sync_service.sync_all(drive_user.id, "drive")
    assert report.results == []
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_sync_all_without_credential_fails_whole_call(sync_service, test_user, make_note):
    await make_note(test_user, "Lonely")
    with pytest.raises(NotConnectedError, match="Google Drive not connected"):
        await sync_service.sync_all(test_user.id, "drive")
    with pytest.raises(NotConnectedError, match="GitHub not connected"):
        await sync_service.sync_all(test_user.id, "github")


@pytest.mark.asyncio
async def test_sync_all_fails_when_refresh_fails(sync_service, mock_api, test_session, drive_user, make_note):
    drive_user.drive_token_expires_at = datetime.now(timezone.utc) - timedelta(minutes=5)
    await test_session.commit()
    await make_note(drive_user, "N")
    mock_api.add("POST", "/token", httpx.Response(400, json={"error": "invalid_grant"}))

    with pytest.raises(CredentialRefreshError):
        await sync_service.sync_all(drive_user.id, "drive")
    assert mock_api.calls("POST", DRIVE_CREATE) == []


@pytest.mark.asyncio
async def test_github_sync_uses_request_target_over_default(sync_service, mock_api, github_user, make_note):
    await make_note(github_user, "Plan")
    path = "/repos/grace/archive/contents/notes/Plan.md"
    mock_api.add("GET", path, httpx.Response(404))
    mock_api.add("PUT", path, httpx.Response(201, json={}))

    report = await sync_service.sync_all(github_user.id, "github", owner="grace", repo="archive")

    assert report.results[0].external_ref == "notes/Plan.md"
    assert len(mock_api.calls("PUT", path)) == 1


@pytest.mark.asyncio
async def test_github_sync_falls_back_to_stored_repository(sync_service, mock_api, test_session, github_user, make_note):
    note = await make_note(github_user, "Plan")
    path = "/repos/ada/notes/contents/notes/Plan.md"
    mock_api.add("GET", path, httpx.Response(404))
    mock_api.add("PUT", path, httpx.Response(201, json={}))

    report = await sync_service.sync_all(github_user.id, "github")

    assert report.succeeded == 1
    stored = await NoteRepository(test_session).get_by_id_and_user(note.id, github_user.id)
    assert stored.github_path == "notes/Plan.md"


@pytest.mark.asyncio
async def test_github_sync_without_any_target_is_rejected(sync_service, test_session, github_user):
    github_user.github_owner = None
    github_user.github_repo = None
    await test_session.commit()

    with pytest.raises(ValidationError):
        await sync_service.sync_all(github_user.id, "github")


@pytest.mark.asyncio
async def test_sync_note_follows_preferences(sync_service, mock_api, test_session, drive_user, make_note):
    drive_user.github_token = "gh"
    drive_user.github_owner = "ada"
    drive_user.github_repo = "notes"
    drive_user.auto_commit = True
    await test_session.commit()
    note = await make_note(drive_user, "Both")

    mock_api.add("POST", DRIVE_CREATE, httpx.Response(200, json={"id": "drive-1"}))
    mock_api.add("GET", "/repos/ada/notes/contents/notes/Both.md", httpx.Response(404))
    mock_api.add("PUT", "/repos/ada/notes/contents/notes/Both.md", httpx.Response(201, json={}))

    results = await sync_service.sync_note(drive_user.id, note)

    assert [(r.provider, r.status) for r in results] == [("drive", "success"), ("github", "success")]
    assert note.drive_file_id == "drive-1"
    assert note.github_path == "notes/Both.md"


@pytest.mark.asyncio
async def test_sync_note_skips_when_preferences_are_off(sync_service, mock_api, test_session, drive_user, make_note):
    drive_user.auto_sync = False
    await test_session.commit()
    note = await make_note(drive_user, "Quiet")

    assert await sync_service.sync_note(drive_user.id, note) == []
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_sync_note_reports_refresh_failure_without_raising(
    sync_service, mock_api, test_session, drive_user, make_note
):
    drive_user.drive_token_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await test_session.commit()
    note = await make_note(drive_user, "Kept")
    mock_api.add("POST", "/token", httpx.Response(401, json={"error": "invalid_client"}))

    results = await sync_service.sync_note(drive_user.id, note)

    assert len(results) == 1
    assert results[0].status == "error"
    assert results[0].provider == "drive"


@pytest.mark.asyncio
async def test_sync_note_updates_existing_drive_file(sync_service, mock_api, drive_user, make_note):
    note = await make_note(drive_user, "Again", drive_file_id="drive-9")
    mock_api.add("PATCH", "/upload/drive/v3/files/drive-9", httpx.Response(200, json={"id": "drive-9"}))

    results = await sync_service.sync_note(drive_user.id, note)

    assert results[0].external_ref == "drive-9"
    assert mock_api.calls("POST") == []


@pytest.mark.asyncio
async def test_remove_note_mirror(sync_service, mock_api, drive_user, make_note):
    note = await make_note(drive_user, "Bye", drive_file_id="drive-5")
    mock_api.add("DELETE", "/drive/v3/files/drive-5", httpx.Response(204))

    results = await sync_service.remove_note_mirror(drive_user.id, NoteSnapshot.from_model(note))

    assert [(r.status, r.external_ref) for r in results] == [("success", "drive-5")]


@pytest.mark.asyncio
async def test_remove_note_mirror_failure_is_reported(sync_service, mock_api, drive_user, make_note):
    note = await make_note(drive_user, "Bye", drive_file_id="drive-5")
    mock_api.add("DELETE", "/drive/v3/files/drive-5", httpx.Response(500, json={"error": "boom"}))

    results = await sync_service.remove_note_mirror(drive_user.id, NoteSnapshot.from_model(note))

    assert results[0].status == "error"


@pytest.mark.asyncio
async def test_remove_note_mirror_without_drive_file(sync_service, mock_api, drive_user, make_note):
    note = await make_note(drive_user, "Never synced")
    assert await sync_service.remove_note_mirror(drive_user.id, NoteSnapshot.from_model(note)) == []
    assert mock_api.requests == []

