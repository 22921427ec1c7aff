"""Data models for git-branch-ensure."""

from .reference import EnsureOutcome, EnsureState, Reference, RepositoryId, full_ref, short_ref

__all__ = [
    "EnsureOutcome",
    "EnsureState",
    "Reference",
    "RepositoryId",
    "full_ref",
    "short_ref",
]
