"""
Repository name helpers.
"""

import re
from typing import NamedTuple

REPO_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+/[A-Za-z0-9._-]+$")


class RepoRef(NamedTuple):
    """Owner and repository parts of an ``owner/repo`` name."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def validate_repo_name(repo_name: str) -> bool:
    """Check that a string is a well-formed ``owner/repo`` name."""
    if not isinstance(repo_name, str):
        return False
    return REPO_NAME_PATTERN.fullmatch(repo_name) is not None


def parse_repo_name(repo_name: str) -> RepoRef | None:
    """
    Split a repository name into owner and repository.

    Args:
        repo_name: Repository full name (owner/repo)

    Returns:
        RepoRef, or None if the name is malformed
    """
    if not validate_repo_name(repo_name):
        return None

    owner, repo = repo_name.split("/")
    return RepoRef(owner=owner, repo=repo)
