"""Reference model and related enums"""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urlparse

from git_branch_ensure.constants import FULL_REF_PREFIX, SHORT_REF_PREFIX


class EnsureState(Enum):
    """States of the ensure-branch state machine."""
    CHECK_EXISTS = "check-exists"
    CREATE_WITH_CLEANUP = "create-with-cleanup"
    VERIFY = "verify"
    SUCCESS = "success"
    FAILED = "failed"


class EnsureOutcome(Enum):
    """How a branch came to exist."""
    EXISTED = "existed"  # Found on the first read
    REUSED = "reused"    # Created concurrently by someone else
    CREATED = "created"

    @property
    def existed_already(self) -> bool:
        return self is not EnsureOutcome.CREATED


@dataclass(frozen=True)
class Reference:
    """A named pointer to a commit in a remote repository."""
    name: str
    sha: str


@dataclass(frozen=True)
class RepositoryId:
    """Owner and name of a GitHub repository."""
    owner: str
    name: str

    def __post_init__(self):
        if not self.owner or not self.name:
            raise ValueError(f"Invalid repository '{self.owner}/{self.name}'")

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryId":
        """Parse an ``owner/repo`` string."""
        owner, _, name = value.strip().strip("/").partition("/")
        if "/" in name:
            raise ValueError(f"Invalid repository '{value}', expected 'owner/repo'")
        return cls(owner, name)

    @classmethod
    def from_remote_url(cls, remote_url: str) -> "RepositoryId":
        """Parse a GitHub remote URL in SSH or HTTPS form."""
        if remote_url.startswith("git@"):
            # Handle SSH URL format (git@github.com:org/repo.git)
            path = remote_url.split(":", 1)[1] if ":" in remote_url else ""
        else:
            # Handle HTTPS URL format (https://github.com/org/repo.git)
            path = urlparse(remote_url).path.strip("/")

        if path.endswith(".git"):
            path = path[:-4]

        return cls.parse(path)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> Optional["RepositoryId"]:
        """Read the repository GitHub Actions exposes in GITHUB_REPOSITORY."""
        environ = os.environ if environ is None else environ
        value = environ.get("GITHUB_REPOSITORY")
        if not value:
            return None
        return cls.parse(value)


def short_ref(branch_name: str) -> str:
    """Ref form used by the read endpoint (``heads/<name>``)."""
    return f"{SHORT_REF_PREFIX}{branch_name}"


def full_ref(branch_name: str) -> str:
    """Fully-qualified ref form used by create and delete (``refs/heads/<name>``)."""
    return f"{FULL_REF_PREFIX}{branch_name}"
