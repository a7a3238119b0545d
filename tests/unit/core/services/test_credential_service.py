"""CredentialService: lookup, Drive refresh, OAuth state and GitHub connect."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from mindnotes.core.exceptions import (
    CredentialRefreshError,
    ExternalApiError,
    NotConnectedError,
    NotFoundError,
    ValidationError,
)
from mindnotes.core.mirrors import DriveCredential, GitHubAdapter, GitHubCredential
from mindnotes.core.repositories import UserRepository
from mindnotes.core.services import CredentialService
from mindnotes.security.google_oauth import GoogleOAuthClient

TOKEN_PATH = "/token"


@pytest.fixture
def credential_service(test_session, http_client, fake_redis, test_settings):
    oauth = GoogleOAuthClient(http_client, test_settings)
    return CredentialService(test_session, oauth_client=oauth, state_store=fake_redis, settings=test_settings)


async def _expire(session, user, delta=timedelta(minutes=-5)):
    user.drive_token_expires_at = datetime.now(timezone.utc) + delta
    await session.commit()


@pytest.mark.asyncio
async def test_fresh_drive_credential_is_returned_as_is(credential_service, mock_api, drive_user):
    credential = await credential_service.get_credential(drive_user.id, "drive")

    assert isinstance(credential, DriveCredential)
    assert credential.access_token == "drive-access"
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_expired_credential_is_refreshed_exactly_once(credential_service, mock_api, test_session, drive_user):
    await _expire(test_session, drive_user)
    mock_api.add("POST", TOKEN_PATH, httpx.Response(200, json={"access_token": "new-access", "expires_in": 3600}))

    before = datetime.now(timezone.utc)
    credential = await credential_service.get_credential(drive_user.id, "drive")

    assert credential.access_token == "new-access"
    assert credential.expires_at > before + timedelta(minutes=55)
    assert credential.refresh_token == "drive-refresh"
    (refresh,) = mock_api.calls("POST", TOKEN_PATH)
    form = parse_qs(refresh.content.decode())
    assert form["grant_type"] == ["refresh_token"]
    assert form["refresh_token"] == ["drive-refresh"]

    stored = await UserRepository(test_session).get_by_id(drive_user.id)
    assert stored.drive_access_token == "new-access"

    # second call sees the persisted expiry and does not refresh again
    again = await credential_service.get_credential(drive_user.id, "drive")
    assert again.access_token == "new-access"
    assert len(mock_api.calls("POST", TOKEN_PATH)) == 1


@pytest.mark.asyncio
async def test_credential_inside_leeway_is_refreshed(credential_service, mock_api, test_session, drive_user):
    await _expire(test_session, drive_user, timedelta(seconds=30))
    mock_api.add("POST", TOKEN_PATH, httpx.Response(200, json={"access_token": "early", "expires_in": 3600}))

    credential = await credential_service.get_drive_credential(drive_user.id)
    assert credential.access_token == "early"


@pytest.mark.asyncio
async def test_rotated_refresh_token_is_stored(credential_service, mock_api, test_session, drive_user):
    await _expire(test_session, drive_user)
    mock_api.add(
        "POST",
        TOKEN_PATH,
        httpx.Response(200, json={"access_token": "a2", "refresh_token": "r2", "expires_in": 60}),
    )

    credential = await credential_service.get_drive_credential(drive_user.id)

    assert credential.refresh_token == "r2"
    assert (await UserRepository(test_session).get_by_id(drive_user.id)).drive_refresh_token == "r2"


@pytest.mark.asyncio
async def test_refresh_failure_keeps_stale_credential(credential_service, mock_api, test_session, drive_user):
    await _expire(test_session, drive_user)
    mock_api.add("POST", TOKEN_PATH, httpx.Response(400, json={"error": "invalid_grant"}))

    with pytest.raises(CredentialRefreshError):
        await credential_service.get_drive_credential(drive_user.id)

    stored = await UserRepository(test_session).get_by_id(drive_user.id)
    assert stored.drive_access_token == "drive-access"
    assert stored.drive_refresh_token == "drive-refresh"


@pytest.mark.asyncio
async def test_refresh_without_refresh_token_fails(credential_service, mock_api, test_session, drive_user):
    drive_user.drive_refresh_token = None
    await _expire(test_session, drive_user)

    with pytest.raises(CredentialRefreshError):
        await credential_service.get_drive_credential(drive_user.id)
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_credential_without_expiry_is_used_without_refresh(credential_service, mock_api, test_session, drive_user):
    drive_user.drive_token_expires_at = None
    await test_session.commit()

    credential = await credential_service.get_drive_credential(drive_user.id)
    assert credential.access_token == "drive-access"
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_missing_credentials(credential_service, test_user):
    with pytest.raises(NotConnectedError) as exc_info:
        await credential_service.get_credential(test_user.id, "drive")
    assert exc_info.value.provider == "drive"

    with pytest.raises(NotConnectedError):
        await credential_service.get_credential(test_user.id, "github")

    with pytest.raises(ValidationError):
        await credential_service.get_credential(test_user.id, "dropbox")


@pytest.mark.asyncio
async def test_github_credential_carries_default_repository(credential_service, github_user):
    credential = await credential_service.get_credential(github_user.id, "github")
    assert credential == GitHubCredential(token="gh-token", owner="ada", repo="notes")


@pytest.mark.asyncio
async def test_unknown_user(credential_service):
    import uuid

    with pytest.raises(NotFoundError):
        await credential_service.get_credential(uuid.uuid4(), "drive")


@pytest.mark.asyncio
async def test_google_authorization_roundtrip(credential_service, mock_api, fake_redis, test_session, test_user):
    url = await credential_service.build_google_authorization_url(test_user.id)

    query = parse_qs(urlparse(url).query)
    assert query["access_type"] == ["offline"]
    assert query["prompt"] == ["consent"]
    assert "https://www.googleapis.com/auth/drive.file" in query["scope"][0]
    state = query["state"][0]
    assert fake_redis.redis.ttls[f"oauth_state:{state}"] == 300

    mock_api.add(
        "POST",
        TOKEN_PATH,
        httpx.Response(200, json={"access_token": "granted", "refresh_token": "keep", "expires_in": 3599}),
    )
    user_id = await credential_service.complete_google_authorization("auth-code", state)

    assert user_id == test_user.id
    stored = await UserRepository(test_session).get_by_id(test_user.id)
    assert stored.drive_access_token == "granted"
    assert stored.drive_refresh_token == "keep"
    assert stored.drive_token_expires_at > datetime.now(timezone.utc)

    # state is single use
    with pytest.raises(ValidationError):
        await credential_service.complete_google_authorization("auth-code", state)


@pytest.mark.asyncio
async def test_unknown_state_is_rejected(credential_service, mock_api):
    with pytest.raises(ValidationError):
        await credential_service.complete_google_authorization("code", "never-issued")
    assert mock_api.requests == []


@pytest.mark.asyncio
async def test_failed_code_exchange(credential_service, mock_api, test_user):
    url = await credential_service.build_google_authorization_url(test_user.id)
    state = parse_qs(urlparse(url).query)["state"][0]
    mock_api.add("POST", TOKEN_PATH, httpx.Response(400, json={"error": "invalid_grant"}))

    with pytest.raises(ExternalApiError):
        await credential_service.complete_google_authorization("bad-code", state)


@pytest.mark.asyncio
async def test_connect_github_stores_token_and_repository(credential_service, mock_api, http_client, test_session, test_user):
    mock_api.add("GET", "/user", httpx.Response(200, json={"login": "ada-gh"}))

    login = await credential_service.connect_github(
        test_user.id, "ghp_token", GitHubAdapter(http_client), owner="ada", repo="notes"
    )

    assert login == "ada-gh"
    stored = await UserRepository(test_session).get_by_id(test_user.id)
    assert (stored.github_token, stored.github_owner, stored.github_repo) == ("ghp_token", "ada", "notes")


@pytest.mark.asyncio
async def test_connect_github_rejects_bad_token(credential_service, mock_api, http_client, test_session, test_user):
    mock_api.add("GET", "/user", httpx.Response(401, json={"message": "Bad credentials"}))

    with pytest.raises(ValidationError, match="Invalid GitHub token"):
        await credential_service.connect_github(test_user.id, "nope", GitHubAdapter(http_client))

    assert (await UserRepository(test_session).get_by_id(test_user.id)).github_token is None


@pytest.mark.asyncio
async def test_integration_status(credential_service, drive_user):
    status = await credential_service.get_integration_status(drive_user.id)
    assert status.drive_connected is True
    assert status.github_connected is False
    assert status.drive_token_expires_at is not None
