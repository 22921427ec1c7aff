"""Pytest fixtures for git-branch-ensure tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git
from github import GithubException

from git_branch_ensure.models.reference import Reference, RepositoryId


class InMemoryRefClient:
    """Reference client keeping refs in a dict, with GitHub's error statuses."""

    def __init__(self, refs=None):
        self.refs = dict(refs or {})
        self.created = []
        self.deleted = []

    def get_ref(self, owner, repo, ref):
        full = f"refs/{ref}"
        if full not in self.refs:
            raise GithubException(404, {"message": "Not Found"}, None)
        return Reference(full, self.refs[full])

    def create_ref(self, owner, repo, full_ref, sha):
        if full_ref in self.refs:
            raise GithubException(422, {"message": "Reference already exists"}, None)
        self.refs[full_ref] = sha
        self.created.append(full_ref)
        return Reference(full_ref, sha)

    def delete_ref(self, owner, repo, full_ref):
        if full_ref not in self.refs:
            raise GithubException(422, {"message": "Reference does not exist"}, None)
        del self.refs[full_ref]
        self.deleted.append(full_ref)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'base_branch': 'main',
        'github_token': 'test_token_for_testing',
        'github_api_url': None,
        'repository': 'octo/repo',
        'max_creation_attempts': 2,
        'max_verification_attempts': 7,
        'verification_base_delay_ms': 500,
    }


@pytest.fixture
def repository():
    """Repository the tests operate on."""
    return RepositoryId("octo", "repo")


@pytest.fixture
def ref_client():
    """Create a mock reference client where every ref already exists."""
    client = Mock()
    client.get_ref = Mock(return_value=Reference("refs/heads/test-branch", "existing-sha"))
    client.create_ref = Mock(return_value=Reference("refs/heads/test-branch", "base-sha"))
    client.delete_ref = Mock(return_value=None)
    return client


@pytest.fixture
def in_memory_client():
    """Create a stateful reference client holding only a main branch."""
    return InMemoryRefClient({"refs/heads/main": "main-sha"})


@pytest.fixture
def sleep():
    """Sleep replacement recording requested delays."""
    return Mock()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with a GitHub remote."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    repo.create_remote('origin', 'git@github.com:test/test-repo.git')

    yield repo

    repo.close()
