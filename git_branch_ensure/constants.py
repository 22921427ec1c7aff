"""Shared constants for git-branch-ensure."""

# Retry tunables
DEFAULT_MAX_CREATION_ATTEMPTS = 2
DEFAULT_MAX_VERIFICATION_ATTEMPTS = 7
DEFAULT_VERIFICATION_BASE_DELAY_MS = 500

# GitHub API
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_BASE_BRANCH = "main"

# HTTP statuses the ensurer interprets; anything else is propagated
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 422

# Reference name prefixes
SHORT_REF_PREFIX = "heads/"
FULL_REF_PREFIX = "refs/heads/"
