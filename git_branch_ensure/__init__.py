"""
git-branch-ensure - Idempotently make sure a GitHub branch exists
"""

from .__version__ import __version__
from .services.branch_ensurer import BranchEnsurer, ensure_branch_exists
from .cli.main import main

__all__ = ["BranchEnsurer", "ensure_branch_exists", "main", "__version__"]
