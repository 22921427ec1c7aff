"""Command-line argument parsing for git-branch-ensure."""

import argparse
from typing import List, Optional

from git_branch_ensure.__version__ import __version__
from git_branch_ensure.constants import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_MAX_CREATION_ATTEMPTS,
    DEFAULT_MAX_VERIFICATION_ATTEMPTS,
    DEFAULT_VERIFICATION_BASE_DELAY_MS,
)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="git-branch-ensure",
        description="Make sure a branch exists on GitHub, creating it from a base branch if needed",
        epilog="Setup: Requires GITHUB_TOKEN environment variable. "
        "Get a token at https://github.com/settings/tokens (scopes: repo or public_repo)",
    )
    parser.add_argument("branch", help="Branch that must exist")
    parser.add_argument(
        "--base",
        default=DEFAULT_BASE_BRANCH,
        help=f"Branch to create from when missing (default: {DEFAULT_BASE_BRANCH})",
    )
    parser.add_argument(
        "--repo",
        metavar="OWNER/REPO",
        help="Target repository (default: GITHUB_REPOSITORY, then the origin remote)",
    )
    parser.add_argument(
        "--api-url",
        metavar="URL",
        help="GitHub API URL (default: GITHUB_API_URL or https://api.github.com)",
    )
    parser.add_argument(
        "--max-creation-attempts",
        type=int,
        default=DEFAULT_MAX_CREATION_ATTEMPTS,
        metavar="N",
        help=f"Create attempts when a stale reference is in the way (default: {DEFAULT_MAX_CREATION_ATTEMPTS})",
    )
    parser.add_argument(
        "--max-verification-attempts",
        type=int,
        default=DEFAULT_MAX_VERIFICATION_ATTEMPTS,
        metavar="N",
        help=f"Reads while waiting for a new branch to become visible (default: {DEFAULT_MAX_VERIFICATION_ATTEMPTS})",
    )
    parser.add_argument(
        "--base-delay-ms",
        type=int,
        default=DEFAULT_VERIFICATION_BASE_DELAY_MS,
        metavar="MS",
        help=f"First verification backoff delay, doubled on each retry (default: {DEFAULT_VERIFICATION_BASE_DELAY_MS})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-branch-ensure {__version__}")

    return parser.parse_args(argv)
