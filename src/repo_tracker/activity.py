"""
Change detection for tracked repositories.

Compares a fresh RepoActivity snapshot against the counters stored on a
TrackedRepo and decides which notification channels have something new.
"""

from dataclasses import dataclass

from .models import NotificationPreferences, RepoActivity, RepoStats, TrackedRepo

CHANNEL_ISSUES = "issues"
CHANNEL_PULL_REQUESTS = "pull_requests"
CHANNEL_RELEASES = "releases"
CHANNEL_STARS = "stars"

CHANNELS = (CHANNEL_ISSUES, CHANNEL_PULL_REQUESTS, CHANNEL_RELEASES, CHANNEL_STARS)


def compute_star_delta(stored_star_count: int, live_star_count: int) -> int:
    """Newly gained stars; a dropped star count counts as zero."""
    return max(0, live_star_count - stored_star_count)


def channel_fires(enabled: bool, observed: int) -> bool:
    """A channel fires only when enabled and something new was observed."""
    return enabled and observed > 0


def active_channels(
    preferences: NotificationPreferences | TrackedRepo, activity: RepoActivity
) -> list[str]:
    """
    Get the channels that have new activity the user asked to hear about.

    Args:
        preferences: Anything carrying the four ``notify_*`` flags
        activity: Activity with ``star_count_change`` already computed

    Returns:
        Channel names in a stable order
    """
    observed = {
        CHANNEL_ISSUES: (preferences.notify_issues, len(activity.new_issues)),
        CHANNEL_PULL_REQUESTS: (preferences.notify_prs, len(activity.new_prs)),
        CHANNEL_RELEASES: (preferences.notify_releases, len(activity.new_releases)),
        CHANNEL_STARS: (preferences.notify_stars, activity.star_count_change),
    }
    return [
        channel
        for channel in CHANNELS
        if channel_fires(*observed[channel])
    ]


def has_new_activity(
    preferences: NotificationPreferences | TrackedRepo, activity: RepoActivity
) -> bool:
    """Check if any enabled channel has new activity."""
    return bool(active_channels(preferences, activity))


@dataclass
class ActivityDiff:
    """Outcome of comparing one snapshot with the stored counters."""

    activity: RepoActivity
    channels: list[str]
    stats: RepoStats

    @property
    def has_new_activity(self) -> bool:
        return bool(self.channels)


def diff_activity(tracked_repo: TrackedRepo, activity: RepoActivity) -> ActivityDiff:
    """
    Diff a repository snapshot against the stored counters.

    Sets ``activity.star_count_change`` and derives the counters to persist.
    Issue and star counters mirror GitHub's live values. PR and release
    counters accumulate the items observed as new in each cycle.

    Args:
        tracked_repo: Stored state of the repository
        activity: Snapshot fetched from GitHub

    Returns:
        ActivityDiff with the firing channels and the counters to persist
    """
    activity.star_count_change = compute_star_delta(
        tracked_repo.last_star_count, activity.repo.stargazers_count
    )

    stats = RepoStats(
        last_issue_count=activity.repo.open_issues_count,
        last_star_count=activity.repo.stargazers_count,
        last_pr_count=tracked_repo.last_pr_count + len(activity.new_prs),
        last_release_count=(
            tracked_repo.last_release_count + len(activity.new_releases)
        ),
    )

    return ActivityDiff(
        activity=activity,
        channels=active_channels(tracked_repo, activity),
        stats=stats,
    )
