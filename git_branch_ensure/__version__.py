"""Version information for git-branch-ensure."""

__version__ = "0.1.0"
