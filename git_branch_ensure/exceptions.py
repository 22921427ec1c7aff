"""Custom exceptions for git-branch-ensure"""

from typing import Optional


class GitBranchEnsureError(Exception):
    """Base exception for all git-branch-ensure errors."""
    pass


class ClientNotConfiguredError(GitBranchEnsureError):
    """Exception raised when no authenticated reference client is available."""

    def __init__(self, message: Optional[str] = None):
        self.message = message
        super().__init__(message or "An authenticated GitHub reference client is required")


class RepositoryNotFoundError(GitBranchEnsureError):
    """Exception raised when the target repository cannot be determined."""

    def __init__(self, message: Optional[str] = None):
        self.message = message

        error_msg = "Unable to determine the GitHub repository"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class BranchEnsureError(GitBranchEnsureError):
    """Exception raised when a branch could not be ensured."""

    def __init__(self, operation: str, branch: str, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Branch {branch}"
        if message:
            error_msg += f" {message}"
        else:
            error_msg += f": operation '{operation}' failed"

        super().__init__(error_msg)


class BranchCreationError(BranchEnsureError):
    """Exception raised when creation attempts are exhausted."""

    def __init__(self, branch: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            "create_branch",
            branch,
            f"could not be created after {attempts} attempts to clean up a stale reference",
        )


class BranchNotAccessibleError(BranchEnsureError):
    """Exception raised when a branch never becomes readable after creation."""

    def __init__(self, branch: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            "verify_branch",
            branch,
            "was created but is not accessible after multiple retries",
        )
