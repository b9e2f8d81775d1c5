"""
Tests for the repository store.
"""

from datetime import UTC, datetime, timedelta

import pytest

from repo_tracker.exceptions import ConflictError, NotFoundError
from repo_tracker.models import RepoStats
from repo_tracker.storage import InMemoryRepositoryStore, RepositoryStore


class TestUsers:
    """Test user lookup and creation."""

    @pytest.mark.asyncio
    async def test_get_or_create_user_is_idempotent(self, store):
        first = await store.get_or_create_user("dev@example.com")
        second = await store.get_or_create_user("dev@example.com")

        assert first.id == second.id
        assert store.get_memory_stats()["users_count"] == 1

    @pytest.mark.asyncio
    async def test_find_user_by_email(self, store):
        assert await store.find_user_by_email("dev@example.com") is None

        created = await store.get_or_create_user("dev@example.com")
        found = await store.find_user_by_email("dev@example.com")

        assert found is not None
        assert found.id == created.id


class TestTrackedRepos:
    """Test tracked repository creation and listing."""

    @pytest.mark.asyncio
    async def test_create_uses_default_preferences(self, store):
        user = await store.get_or_create_user("dev@example.com")

        tracked = await store.create_tracked_repo(user.id, "facebook/react")

        assert tracked.repo_name == "facebook/react"
        assert tracked.user_id == user.id
        assert tracked.notify_issues and tracked.notify_stars
        assert tracked.notify_prs and tracked.notify_releases
        assert tracked.last_star_count == 0
        assert tracked.last_checked_at is None

    @pytest.mark.asyncio
    async def test_duplicate_registration_conflicts(self, store):
        user = await store.get_or_create_user("dev@example.com")
        await store.create_tracked_repo(user.id, "facebook/react")

        with pytest.raises(ConflictError):
            await store.create_tracked_repo(user.id, "facebook/react")

        assert store.get_memory_stats()["tracked_repos_count"] == 1

    @pytest.mark.asyncio
    async def test_same_repository_for_different_users(self, store):
        alice = await store.get_or_create_user("alice@example.com")
        bob = await store.get_or_create_user("bob@example.com")

        await store.create_tracked_repo(alice.id, "facebook/react")
        await store.create_tracked_repo(bob.id, "facebook/react")

        assert store.get_memory_stats()["tracked_repos_count"] == 2

    @pytest.mark.asyncio
    async def test_get_tracked_repos_newest_first(self, store):
        user = await store.get_or_create_user("dev@example.com")
        older = await store.create_tracked_repo(user.id, "facebook/react")
        newer = await store.create_tracked_repo(user.id, "microsoft/vscode")
        store.tracked_repos[older.id] = store.tracked_repos[older.id].model_copy(
            update={"created_at": newer.created_at - timedelta(minutes=5)}
        )

        repos = await store.get_tracked_repos(user.id)

        assert [r.repo_name for r in repos] == ["microsoft/vscode", "facebook/react"]

    @pytest.mark.asyncio
    async def test_get_all_tracked_repos_orders_never_checked_first(self, store):
        user = await store.get_or_create_user("dev@example.com")
        checked_late = await store.create_tracked_repo(user.id, "a/late")
        checked_early = await store.create_tracked_repo(user.id, "a/early")
        await store.create_tracked_repo(user.id, "a/never")

        now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
        await store.update_tracked_repo(checked_late.id, last_checked_at=now)
        await store.update_tracked_repo(
            checked_early.id, last_checked_at=now - timedelta(hours=1)
        )

        repos = await store.get_all_tracked_repos()

        assert [r.repo_name for r in repos] == ["a/never", "a/early", "a/late"]
        assert all(r.user.email == "dev@example.com" for r in repos)

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")

        tracked.notify_stars = False

        stored = await store.find_tracked_repo(user.id, "facebook/react")
        assert stored.notify_stars is True


class TestUpdates:
    """Test updates to tracked repositories."""

    @pytest.mark.asyncio
    async def test_update_preferences(self, store):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")

        updated = await store.update_tracked_repo(tracked.id, notify_stars=False)

        assert updated.notify_stars is False
        assert updated.notify_issues is True

    @pytest.mark.parametrize("field", ["repo_name", "user_id", "id", "created_at"])
    @pytest.mark.asyncio
    async def test_update_rejects_identity_fields(self, store, field):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")

        with pytest.raises(ValueError):
            await store.update_tracked_repo(tracked.id, **{field: "changed"})

    @pytest.mark.asyncio
    async def test_update_unknown_repo(self, store):
        with pytest.raises(NotFoundError):
            await store.update_tracked_repo("missing", notify_stars=False)

    @pytest.mark.asyncio
    async def test_update_repo_stats_stamps_check_time(self, store):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")
        stats = RepoStats(
            last_issue_count=12,
            last_star_count=130,
            last_pr_count=3,
            last_release_count=1,
        )

        updated = await store.update_repo_stats(tracked.id, stats)

        assert updated.last_star_count == 130
        assert updated.last_issue_count == 12
        assert updated.last_pr_count == 3
        assert updated.last_release_count == 1
        assert updated.last_checked_at is not None

    @pytest.mark.asyncio
    async def test_update_repo_stats_with_explicit_time(self, store):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")
        checked_at = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        stats = RepoStats(
            last_issue_count=0,
            last_star_count=0,
            last_pr_count=0,
            last_release_count=0,
        )

        updated = await store.update_repo_stats(tracked.id, stats, checked_at)

        assert updated.last_checked_at == checked_at


class TestRemoval:
    """Test removing tracked repositories."""

    @pytest.mark.asyncio
    async def test_owner_can_remove(self, store):
        user = await store.get_or_create_user("dev@example.com")
        tracked = await store.create_tracked_repo(user.id, "facebook/react")

        removed = await store.remove_tracked_repo(tracked.id, user.id)

        assert removed.id == tracked.id
        assert await store.get_tracked_repos(user.id) == []

    @pytest.mark.asyncio
    async def test_other_user_cannot_remove(self, store):
        owner = await store.get_or_create_user("owner@example.com")
        other = await store.get_or_create_user("other@example.com")
        tracked = await store.create_tracked_repo(owner.id, "facebook/react")

        with pytest.raises(NotFoundError):
            await store.remove_tracked_repo(tracked.id, other.id)

        assert len(await store.get_tracked_repos(owner.id)) == 1

    @pytest.mark.asyncio
    async def test_remove_unknown_repo(self, store):
        user = await store.get_or_create_user("dev@example.com")

        with pytest.raises(NotFoundError):
            await store.remove_tracked_repo("missing", user.id)


class TestHealth:
    """Test the storage health check."""

    @pytest.mark.asyncio
    async def test_health_check(self, store):
        assert isinstance(store, RepositoryStore)
        assert await store.health_check() is True

    def test_abstract_store_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            RepositoryStore()

    def test_memory_stats_start_empty(self):
        assert InMemoryRepositoryStore().get_memory_stats() == {
            "users_count": 0,
            "tracked_repos_count": 0,
        }
