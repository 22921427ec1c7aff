"""Services for git-branch-ensure."""

from .branch_ensurer import BranchEnsurer, ensure_branch_exists
from .github_service import GitHubRefClient
from .ref_client import RefClient
from .repository_service import resolve_repository

__all__ = [
    "BranchEnsurer",
    "ensure_branch_exists",
    "GitHubRefClient",
    "RefClient",
    "resolve_repository",
]
