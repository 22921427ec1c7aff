"""Capability set the branch ensurer needs from a GitHub client"""
from typing import Protocol

from git_branch_ensure.models.reference import Reference


class RefClient(Protocol):
    """Reads, creates and deletes git references in a remote repository.

    Failures are reported with ``github.GithubException``: status 404 when a
    reference is missing, 422 when ``create_ref`` finds it already exists.
    """

    def get_ref(self, owner: str, repo: str, ref: str) -> Reference:
        """Read ``ref`` given in short form, e.g. ``heads/main``."""
        ...

    def create_ref(self, owner: str, repo: str, full_ref: str, sha: str) -> Reference:
        """Create ``full_ref`` (``refs/heads/<name>``) pointing at ``sha``."""
        ...

    def delete_ref(self, owner: str, repo: str, full_ref: str) -> None:
        """Delete ``full_ref`` (``refs/heads/<name>``)."""
        ...
