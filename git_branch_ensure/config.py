"""Configuration handling for git-branch-ensure"""

from dataclasses import dataclass
from typing import Optional

from git_branch_ensure.constants import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_MAX_CREATION_ATTEMPTS,
    DEFAULT_MAX_VERIFICATION_ATTEMPTS,
    DEFAULT_VERIFICATION_BASE_DELAY_MS,
)


@dataclass
class Config:
    """Configuration for git-branch-ensure with validation."""

    # Branch selection
    base_branch: str = DEFAULT_BASE_BRANCH

    # GitHub integration
    github_token: Optional[str] = None
    github_api_url: Optional[str] = None  # None = GITHUB_API_URL or api.github.com
    repository: Optional[str] = None  # owner/repo, None = resolve from environment

    # Retry tunables
    max_creation_attempts: int = DEFAULT_MAX_CREATION_ATTEMPTS
    max_verification_attempts: int = DEFAULT_MAX_VERIFICATION_ATTEMPTS
    verification_base_delay_ms: int = DEFAULT_VERIFICATION_BASE_DELAY_MS

    # Execution modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_base_branch()
        self._validate_repository()
        self._validate_attempts()
        self._validate_base_delay()

    def _validate_base_branch(self):
        """Validate base_branch is not empty."""
        if not self.base_branch or not self.base_branch.strip():
            raise ValueError("base_branch cannot be empty")
        self.base_branch = self.base_branch.strip()

    def _validate_repository(self):
        """Validate repository has the owner/repo form when given."""
        if self.repository is None:
            return
        owner, _, name = self.repository.strip().partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(f"repository must be in 'owner/repo' form, got '{self.repository}'")
        self.repository = f"{owner}/{name}"

    def _validate_attempts(self):
        """Validate attempt counts are positive."""
        if self.max_creation_attempts <= 0:
            raise ValueError(
                f"max_creation_attempts must be positive, got {self.max_creation_attempts}"
            )
        if self.max_verification_attempts <= 0:
            raise ValueError(
                f"max_verification_attempts must be positive, got {self.max_verification_attempts}"
            )

    def _validate_base_delay(self):
        """Validate the backoff base delay is not negative."""
        if self.verification_base_delay_ms < 0:
            raise ValueError(
                f"verification_base_delay_ms cannot be negative, got {self.verification_base_delay_ms}"
            )

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "base_branch": self.base_branch,
            "github_token": self.github_token,
            "github_api_url": self.github_api_url,
            "repository": self.repository,
            "max_creation_attempts": self.max_creation_attempts,
            "max_verification_attempts": self.max_verification_attempts,
            "verification_base_delay_ms": self.verification_base_delay_ms,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "base_branch",
            "github_token",
            "github_api_url",
            "repository",
            "max_creation_attempts",
            "max_verification_attempts",
            "verification_base_delay_ms",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
