"""GitHub API integration service"""

import os
from typing import Dict, TYPE_CHECKING, Union
from urllib.parse import quote

from github import Auth, Github

from git_branch_ensure.constants import DEFAULT_GITHUB_API_URL
from git_branch_ensure.exceptions import ClientNotConfiguredError
from git_branch_ensure.logging_config import get_logger
from git_branch_ensure.models.reference import Reference

if TYPE_CHECKING:
    from github.GitRef import GitRef
    from github.Repository import Repository
    from git_branch_ensure.config import Config

logger = get_logger(__name__)


class GitHubRefClient:
    """Reference client backed by PyGithub.

    GithubException raised by PyGithub is passed through untouched so callers
    can inspect its ``status``.
    """

    def __init__(self, github: Github):
        self.github = github
        self._repos: Dict[str, "Repository"] = {}

    @classmethod
    def from_config(cls, config: Union["Config", dict]) -> "GitHubRefClient":
        """Build an authenticated client.

        The token comes from the config or GITHUB_TOKEN, the API URL from the
        config or GITHUB_API_URL (set by GitHub Actions, also on Enterprise Server).
        """
        token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        if not token:
            raise ClientNotConfiguredError(
                "No GitHub token found. Set the GITHUB_TOKEN environment variable"
            )
        base_url = (
            config.get("github_api_url")
            or os.environ.get("GITHUB_API_URL")
            or DEFAULT_GITHUB_API_URL
        )

        logger.debug(f"[GitHub] GitHub API URL: {base_url}")
        return cls(Github(auth=Auth.Token(token), base_url=base_url))

    def _get_repo(self, owner: str, repo: str) -> "Repository":
        """Get a repository handle without fetching it."""
        full_name = f"{owner}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self.github.get_repo(full_name, lazy=True)
        return self._repos[full_name]

    @staticmethod
    def _to_reference(git_ref: "GitRef") -> Reference:
        return Reference(name=git_ref.ref, sha=git_ref.object.sha)

    def get_ref(self, owner: str, repo: str, ref: str) -> Reference:
        """Read a reference given in short form (``heads/<name>``)."""
        git_ref = self._get_repo(owner, repo).get_git_ref(ref)
        return self._to_reference(git_ref)

    def create_ref(self, owner: str, repo: str, full_ref: str, sha: str) -> Reference:
        """Create a fully-qualified reference (``refs/heads/<name>``) at ``sha``."""
        git_ref = self._get_repo(owner, repo).create_git_ref(ref=full_ref, sha=sha)
        return self._to_reference(git_ref)

    def delete_ref(self, owner: str, repo: str, full_ref: str) -> None:
        """Delete a fully-qualified reference.

        PyGithub can only delete a GitRef it has already read, and a stale
        reference cannot be read, so the request is sent directly.
        """
        ref_path = full_ref[len("refs/"):] if full_ref.startswith("refs/") else full_ref
        url = f"/repos/{owner}/{repo}/git/refs/{quote(ref_path)}"
        self.github.requester.requestJsonAndCheck("DELETE", url)
        logger.debug(f"[GitHub] Deleted {full_ref} in {owner}/{repo}")

    def close(self) -> None:
        """Close the GitHub API connection to clean up resources."""
        try:
            self.github.close()
            logger.debug("[GitHub] Closed GitHub API connection")
        except Exception as e:
            logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")

    def __enter__(self) -> "GitHubRefClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

