"""Git access and unreleased commit scanning."""

from .models import Commit, RepositoryScan
from .repository import GitRepository, open_repositories, scan, scan_repository

__all__ = [
    "Commit",
    "RepositoryScan",
    "GitRepository",
    "open_repositories",
    "scan",
    "scan_repository",
]
