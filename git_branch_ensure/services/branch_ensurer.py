"""Idempotent "ensure branch exists" protocol against the GitHub refs API.

The protocol is a small state machine::

    CHECK_EXISTS -> CREATE_WITH_CLEANUP -> VERIFY -> SUCCESS
         |                  |                 |
         +------------------+-----------------+----> FAILED (raised)

CHECK_EXISTS reads the branch and stops if it is already there.
CREATE_WITH_CLEANUP creates it from the base branch. A 422 from the create
call means some other actor got there first: if the branch is readable it is
reused, otherwise the conflicting reference is stale and is deleted before
creation is retried. VERIFY polls the branch with exponential backoff because
the API may not serve a just-written reference right away.

Only 404 and 422 responses are interpreted. Every other error is re-raised
unchanged.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TYPE_CHECKING, Union

from github import GithubException

from git_branch_ensure.constants import (
    DEFAULT_MAX_CREATION_ATTEMPTS,
    DEFAULT_MAX_VERIFICATION_ATTEMPTS,
    DEFAULT_VERIFICATION_BASE_DELAY_MS,
    STATUS_CONFLICT,
    STATUS_NOT_FOUND,
)
from git_branch_ensure.exceptions import (
    BranchCreationError,
    BranchNotAccessibleError,
    ClientNotConfiguredError,
    RepositoryNotFoundError,
)
from git_branch_ensure.logging_config import get_logger
from git_branch_ensure.models.reference import (
    EnsureOutcome,
    EnsureState,
    Reference,
    RepositoryId,
    full_ref,
    short_ref,
)

if TYPE_CHECKING:
    from git_branch_ensure.config import Config
    from git_branch_ensure.services.ref_client import RefClient

logger = get_logger(__name__)

# 404/422 on delete are treated as "already gone". This is inherited from the
# action this tool replaces and is not a documented API guarantee.
TOLERATED_DELETE_STATUSES = (STATUS_NOT_FOUND, STATUS_CONFLICT)


@dataclass
class EnsureAttempt:
    """Call-scoped progress of one ensure operation."""
    branch_name: str
    base_branch: str
    state: EnsureState = EnsureState.CHECK_EXISTS
    outcome: Optional[EnsureOutcome] = None
    creation_attempts: int = 0
    verification_attempts: int = 0


class BranchEnsurer:
    """Guarantees a branch exists, creating it from a base branch if needed."""

    def __init__(
        self,
        client: "RefClient",
        repository: RepositoryId,
        max_creation_attempts: int = DEFAULT_MAX_CREATION_ATTEMPTS,
        max_verification_attempts: int = DEFAULT_MAX_VERIFICATION_ATTEMPTS,
        verification_base_delay_ms: int = DEFAULT_VERIFICATION_BASE_DELAY_MS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the ensurer.

        Args:
            client: Reference client with get/create/delete capabilities
            repository: Repository the branch lives in
            max_creation_attempts: Create calls allowed, counting retries after stale cleanup
            max_verification_attempts: Reads allowed while waiting for the branch to appear
            verification_base_delay_ms: First backoff delay, doubled after every miss
            sleep: Called with the backoff delay in seconds
        """
        if client is None:
            raise ClientNotConfiguredError(
                "BranchEnsurer requires an authenticated reference client"
            )
        if max_creation_attempts <= 0 or max_verification_attempts <= 0:
            raise ValueError("Attempt limits must be positive")

        self.client = client
        self.repository = repository
        self.max_creation_attempts = max_creation_attempts
        self.max_verification_attempts = max_verification_attempts
        self.verification_base_delay_ms = verification_base_delay_ms
        self.sleep = sleep

    @classmethod
    def from_config(
        cls,
        client: "RefClient",
        repository: RepositoryId,
        config: Union["Config", dict],
        sleep: Callable[[float], None] = time.sleep,
    ) -> "BranchEnsurer":
        """Create an ensurer using the retry tunables from a config."""
        return cls(
            client,
            repository,
            max_creation_attempts=config.get("max_creation_attempts", DEFAULT_MAX_CREATION_ATTEMPTS),
            max_verification_attempts=config.get(
                "max_verification_attempts", DEFAULT_MAX_VERIFICATION_ATTEMPTS
            ),
            verification_base_delay_ms=config.get(
                "verification_base_delay_ms", DEFAULT_VERIFICATION_BASE_DELAY_MS
            ),
            sleep=sleep,
        )

    def ensure(self, branch_name: str, base_branch: str) -> EnsureOutcome:
        """Make sure ``branch_name`` exists, creating it from ``base_branch``.

        Returns:
            How the branch came to exist

        Raises:
            ValueError: If either branch name is blank
            BranchCreationError: If stale cleanup never let the create succeed
            BranchNotAccessibleError: If the branch never became readable
            GithubException: Any other API failure, unchanged
        """
        if not branch_name or not branch_name.strip():
            raise ValueError("branch_name cannot be empty")
        if not base_branch or not base_branch.strip():
            raise ValueError("base_branch cannot be empty")

        attempt = EnsureAttempt(branch_name=branch_name, base_branch=base_branch)
        handlers: Dict[EnsureState, Callable[[EnsureAttempt], EnsureState]] = {
            EnsureState.CHECK_EXISTS: self._check_exists,
            EnsureState.CREATE_WITH_CLEANUP: self._create_with_cleanup,
            EnsureState.VERIFY: self._verify,
        }

        try:
            while attempt.state is not EnsureState.SUCCESS:
                attempt.state = handlers[attempt.state](attempt)
        except Exception:
            logger.debug(f"Ensuring branch {branch_name} failed in state {attempt.state.value}")
            attempt.state = EnsureState.FAILED
            raise

        assert attempt.outcome is not None
        return attempt.outcome

    def _check_exists(self, attempt: EnsureAttempt) -> EnsureState:
        branch = attempt.branch_name
        logger.info(f"Checking if branch {branch} exists via GitHub API...")
        try:
            existing = self._get_ref(branch)
        except GithubException as e:
            if e.status != STATUS_NOT_FOUND:
                logger.warning(f"Failed to check branch {branch} existence via GitHub API: {e}")
                raise
            logger.info(
                f"Branch {branch} does not exist (404), will create it from {attempt.base_branch}"
            )
            return EnsureState.CREATE_WITH_CLEANUP

        logger.info(f"Branch {branch} already exists at SHA: {existing.sha}")
        attempt.outcome = EnsureOutcome.EXISTED
        return EnsureState.SUCCESS

    def _create_with_cleanup(self, attempt: EnsureAttempt) -> EnsureState:
        branch = attempt.branch_name
        base = attempt.base_branch

        logger.info(f"Fetching base branch {base} via GitHub API...")
        base_sha = self._get_ref(base).sha
        logger.info(f"Base branch {base} SHA: {base_sha}")

        while attempt.creation_attempts < self.max_creation_attempts:
            attempt.creation_attempts += 1
            logger.info(
                f"Creating branch {branch} from {base} via GitHub API "
                f"(attempt {attempt.creation_attempts}/{self.max_creation_attempts})..."
            )
            try:
                self.client.create_ref(
                    self.repository.owner, self.repository.name, full_ref(branch), base_sha
                )
            except GithubException as e:
                if e.status != STATUS_CONFLICT:
                    logger.warning(
                        f"Failed to create branch {branch} via GitHub API: {e} (status: {e.status})"
                    )
                    raise
                logger.info(f"Branch {branch} already exists (422), checking whether it is readable...")
            else:
                logger.info(f"Successfully created branch {branch}")
                attempt.outcome = EnsureOutcome.CREATED
                return EnsureState.VERIFY

            existing = self._find_ref(branch)
            if existing is not None:
                logger.info(f"Reusing branch {branch} created concurrently at SHA: {existing.sha}")
                attempt.outcome = EnsureOutcome.REUSED
                return EnsureState.VERIFY

            if attempt.creation_attempts >= self.max_creation_attempts:
                break

            logger.info(f"Branch {branch} reference is stale (422 on create, 404 on read), deleting it")
            self._delete_stale_ref(branch)

        logger.warning(
            f"Branch {branch} could not be created after {attempt.creation_attempts} attempts"
        )
        raise BranchCreationError(branch, attempt.creation_attempts)

    def _verify(self, attempt: EnsureAttempt) -> EnsureState:
        branch = attempt.branch_name
        logger.info(f"Verifying branch {branch} is accessible via GitHub API...")

        for index in range(self.max_verification_attempts):
            attempt.verification_attempts = index + 1
            verified = self._find_ref(branch)
            if verified is not None:
                logger.info(f"Branch {branch} verified at SHA: {verified.sha}")
                return EnsureState.SUCCESS

            if index < self.max_verification_attempts - 1:
                delay_ms = self.backoff_delay_ms(index)
                logger.info(
                    f"Branch {branch} not yet accessible (404), retrying in {delay_ms}ms "
                    f"(attempt {index + 1}/{self.max_verification_attempts})..."
                )
                self.sleep(delay_ms / 1000)

        logger.warning(
            f"Branch {branch} still not accessible after "
            f"{self.max_verification_attempts} attempts via GitHub API"
        )
        raise BranchNotAccessibleError(branch, self.max_verification_attempts)

    def backoff_delay_ms(self, attempt_index: int) -> int:
        """Delay after the failed verification read number ``attempt_index`` (0-based)."""
        return self.verification_base_delay_ms * 2 ** attempt_index

    def _get_ref(self, branch_name: str) -> Reference:
        return self.client.get_ref(self.repository.owner, self.repository.name, short_ref(branch_name))

    def _find_ref(self, branch_name: str) -> Optional[Reference]:
        """Read a branch, returning None on 404."""
        try:
            return self._get_ref(branch_name)
        except GithubException as e:
            if e.status != STATUS_NOT_FOUND:
                raise
            return None

    def _delete_stale_ref(self, branch_name: str) -> None:
        try:
            self.client.delete_ref(self.repository.owner, self.repository.name, full_ref(branch_name))
        except GithubException as e:
            if e.status not in TOLERATED_DELETE_STATUSES:
                logger.warning(f"Failed to delete stale reference for {branch_name}: {e}")
                raise
            logger.info(f"Stale reference for {branch_name} already gone ({e.status})")


def ensure_branch_exists(
    client: Optional["RefClient"],
    branch_name: str,
    base_branch: str,
    *,
    repository: Union[RepositoryId, str, None] = None,
    max_creation_attempts: int = DEFAULT_MAX_CREATION_ATTEMPTS,
    max_verification_attempts: int = DEFAULT_MAX_VERIFICATION_ATTEMPTS,
    verification_base_delay_ms: int = DEFAULT_VERIFICATION_BASE_DELAY_MS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Ensure a branch exists, creating it from the base branch if needed.

    When ``repository`` is omitted it is read from GITHUB_REPOSITORY, which
    GitHub Actions sets for every workflow run.

    Returns:
        True if the branch already existed (or was created concurrently by
        someone else), False if this call created it
    """
    if client is None:
        raise ClientNotConfiguredError(
            "ensure_branch_exists requires an authenticated reference client"
        )

    if repository is None:
        repository = RepositoryId.from_environment()
        if repository is None:
            raise RepositoryNotFoundError("GITHUB_REPOSITORY is not set")
    elif isinstance(repository, str):
        repository = RepositoryId.parse(repository)

    ensurer = BranchEnsurer(
        client,
        repository,
        max_creation_attempts=max_creation_attempts,
        max_verification_attempts=max_verification_attempts,
        verification_base_delay_ms=verification_base_delay_ms,
        sleep=sleep,
    )
    return ensurer.ensure(branch_name, base_branch).existed_already
