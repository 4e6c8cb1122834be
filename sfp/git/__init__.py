"""Git operations."""

from .repository import GitError, GitIdentity, Repository

__all__ = [
    "GitError",
    "GitIdentity",
    "Repository",
]
