"""Resolve which GitHub repository to operate on"""

import os
from typing import Mapping, Optional

import git

from git_branch_ensure.exceptions import RepositoryNotFoundError
from git_branch_ensure.logging_config import get_logger
from git_branch_ensure.models.reference import RepositoryId

logger = get_logger(__name__)


def repository_from_checkout(repo_path: str, remote_name: str = "origin") -> Optional[RepositoryId]:
    """Read the GitHub repository from a local checkout's remote URL."""
    try:
        repo = git.Repo(repo_path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        logger.debug(f"No git repository at {repo_path}")
        return None

    try:
        remote_url = repo.remote(remote_name).url
    except ValueError:
        logger.debug(f"Repository at {repo_path} has no remote named {remote_name}")
        return None
    finally:
        repo.close()

    if "github" not in remote_url:
        logger.debug(f"Remote {remote_name} is not a GitHub URL: {remote_url}")
        return None

    return RepositoryId.from_remote_url(remote_url)


def resolve_repository(
    explicit: Optional[str] = None,
    repo_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RepositoryId:
    """Determine the target repository.

    Tries, in order: the explicit ``owner/repo`` value, GITHUB_REPOSITORY,
    and the ``origin`` remote of the checkout at ``repo_path``.
    """
    if explicit:
        return RepositoryId.parse(explicit)

    from_env = RepositoryId.from_environment(environ)
    if from_env is not None:
        logger.debug(f"Using repository {from_env} from GITHUB_REPOSITORY")
        return from_env

    path = repo_path or os.getcwd()
    from_checkout = repository_from_checkout(path)
    if from_checkout is not None:
        logger.debug(f"Using repository {from_checkout} from the origin remote")
        return from_checkout

    raise RepositoryNotFoundError(
        "pass --repo owner/repo, set GITHUB_REPOSITORY, or run inside a GitHub checkout"
    )
