"""
Tests for the repository registration flow.
"""

import pytest

from repo_tracker.exceptions import (
    ConflictError,
    GitHubAPIError,
    NotFoundError,
    RepoNameValidationError,
    UnauthorizedError,
)
from repo_tracker.models import GitHubRepo, NotificationPreferences, PreferenceUpdate
from repo_tracker.registration import RegistrationService


@pytest.fixture
def service(mock_github_client, store, sample_repo_data):
    """Registration service whose GitHub lookups succeed."""
    mock_github_client.get_repository.return_value = GitHubRepo.model_validate(
        sample_repo_data
    )
    return RegistrationService(mock_github_client, store)


class TestAddTrackedRepo:
    """Test starting to track a repository."""

    @pytest.mark.asyncio
    async def test_add_creates_user_and_registration(
        self, service, store, mock_github_client
    ):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")

        assert tracked.repo_name == "facebook/react"
        user = await store.find_user_by_email("dev@example.com")
        assert tracked.user_id == user.id
        mock_github_client.get_repository.assert_awaited_once_with("facebook", "react")

    @pytest.mark.asyncio
    async def test_add_with_preferences(self, service):
        preferences = NotificationPreferences(notify_stars=False, notify_prs=False)

        tracked = await service.add_tracked_repo(
            "dev@example.com", "facebook/react", preferences
        )

        assert tracked.notify_stars is False
        assert tracked.notify_prs is False
        assert tracked.notify_issues is True

    @pytest.mark.asyncio
    async def test_second_registration_conflicts(self, service, store):
        await service.add_tracked_repo("dev@example.com", "facebook/react")

        with pytest.raises(ConflictError, match="already being tracked"):
            await service.add_tracked_repo("dev@example.com", "facebook/react")

        assert store.get_memory_stats()["tracked_repos_count"] == 1

    @pytest.mark.asyncio
    async def test_different_users_may_track_same_repo(self, service, store):
        await service.add_tracked_repo("alice@example.com", "facebook/react")
        await service.add_tracked_repo("bob@example.com", "facebook/react")

        assert store.get_memory_stats()["tracked_repos_count"] == 2

    @pytest.mark.parametrize(
        "email,repo_name",
        [("", "facebook/react"), ("dev@example.com", ""), (None, None)],
    )
    @pytest.mark.asyncio
    async def test_missing_fields(self, service, email, repo_name):
        with pytest.raises(RepoNameValidationError, match="required"):
            await service.add_tracked_repo(email, repo_name)

    @pytest.mark.asyncio
    async def test_malformed_name(self, service, mock_github_client):
        with pytest.raises(RepoNameValidationError, match="owner/repo"):
            await service.add_tracked_repo("dev@example.com", "invalid-repo")

        mock_github_client.get_repository.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repository_missing_on_github(
        self, service, store, mock_github_client
    ):
        mock_github_client.get_repository.side_effect = NotFoundError("Not Found")

        with pytest.raises(NotFoundError, match="Repository not found on GitHub"):
            await service.add_tracked_repo("dev@example.com", "ghost/missing")

        assert store.get_memory_stats()["tracked_repos_count"] == 0

    @pytest.mark.asyncio
    async def test_bad_credentials_skip_validation(
        self, service, mock_github_client
    ):
        mock_github_client.get_repository.side_effect = UnauthorizedError(
            "Bad credentials"
        )

        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")

        assert tracked.repo_name == "facebook/react"

    @pytest.mark.asyncio
    async def test_other_github_errors_propagate(
        self, service, store, mock_github_client
    ):
        mock_github_client.get_repository.side_effect = GitHubAPIError(
            "Server Error", status_code=502
        )

        with pytest.raises(GitHubAPIError):
            await service.add_tracked_repo("dev@example.com", "facebook/react")

        assert store.get_memory_stats()["tracked_repos_count"] == 0


class TestListTrackedRepos:
    """Test listing a user's repositories."""

    @pytest.mark.asyncio
    async def test_list_for_known_user(self, service):
        await service.add_tracked_repo("dev@example.com", "facebook/react")
        await service.add_tracked_repo("other@example.com", "microsoft/vscode")

        repos = await service.list_tracked_repos("dev@example.com")

        assert [r.repo_name for r in repos] == ["facebook/react"]

    @pytest.mark.asyncio
    async def test_list_for_unknown_email_is_empty(self, service):
        assert await service.list_tracked_repos("nobody@example.com") == []

    @pytest.mark.asyncio
    async def test_list_requires_email(self, service):
        with pytest.raises(RepoNameValidationError):
            await service.list_tracked_repos("")


class TestUpdatePreferences:
    """Test changing notification preferences."""

    @pytest.mark.asyncio
    async def test_owner_updates_preferences(self, service):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")

        updated = await service.update_preferences(
            tracked.id,
            "dev@example.com",
            PreferenceUpdate(notify_issues=False),
        )

        assert updated.notify_issues is False
        assert updated.notify_stars is True

    @pytest.mark.asyncio
    async def test_unset_switches_keep_stored_value(self, service):
        tracked = await service.add_tracked_repo(
            "dev@example.com",
            "facebook/react",
            NotificationPreferences(notify_stars=False, notify_prs=False),
        )

        updated = await service.update_preferences(
            tracked.id, "dev@example.com", PreferenceUpdate(notify_releases=False)
        )

        assert updated.notify_stars is False
        assert updated.notify_prs is False
        assert updated.notify_releases is False
        assert updated.notify_issues is True

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, service):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")
        await service.add_tracked_repo("other@example.com", "microsoft/vscode")

        with pytest.raises(NotFoundError):
            await service.update_preferences(
                tracked.id, "other@example.com", PreferenceUpdate()
            )


class TestRemoveTrackedRepo:
    """Test stopping tracking."""

    @pytest.mark.asyncio
    async def test_owner_removes(self, service):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")

        await service.remove_tracked_repo(tracked.id, "dev@example.com")

        assert await service.list_tracked_repos("dev@example.com") == []

    @pytest.mark.asyncio
    async def test_non_owner_gets_not_found(self, service):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")
        await service.add_tracked_repo("other@example.com", "microsoft/vscode")

        with pytest.raises(NotFoundError):
            await service.remove_tracked_repo(tracked.id, "other@example.com")

        assert len(await service.list_tracked_repos("dev@example.com")) == 1

    @pytest.mark.asyncio
    async def test_unknown_email_gets_not_found(self, service):
        tracked = await service.add_tracked_repo("dev@example.com", "facebook/react")

        with pytest.raises(NotFoundError):
            await service.remove_tracked_repo(tracked.id, "nobody@example.com")

    @pytest.mark.asyncio
    async def test_remove_requires_email(self, service):
        with pytest.raises(RepoNameValidationError):
            await service.remove_tracked_repo("some-id", None)
