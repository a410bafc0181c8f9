"""Local git repository access using GitPython."""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import git
import git.exc

from ..config import RepositoryRef
from ..errors import ConfigurationError, StorynotesError
from .models import Commit, RepositoryScan


logger = logging.getLogger(__name__)

_UNRESOLVABLE = (git.exc.BadName, git.exc.BadObject, ValueError, IndexError)


class GitRepository:
    """Read-only view over a local repository."""

    def __init__(self, name: str, location: Path):
        """Open the repository at ``location``.

        Args:
            name: Repository name from the configuration
            location: Path to the working tree or bare repository

        Raises:
            ConfigurationError: If the location is not a git repository
        """
        self.name = name
        self.location = Path(location)
        try:
            self.repo = git.Repo(self.location)
        except (git.exc.NoSuchPathError, git.exc.InvalidGitRepositoryError) as e:
            raise ConfigurationError(
                f"Repository '{name}': {self.location} is not a git repository"
            ) from e

    def close(self) -> None:
        self.repo.close()

    def __enter__(self) -> "GitRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _to_commit(self, commit: git.Commit) -> Commit:
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return Commit(id=commit.hexsha, message=message, repository=self.name)

    def resolve_ref(self, ref: str) -> Commit:
        """Resolve a branch, tag or commit name to the commit it points to.

        Raises:
            ConfigurationError: If the reference does not resolve to a commit
        """
        try:
            commit = self.repo.commit(ref)
        except _UNRESOLVABLE as e:
            raise ConfigurationError(
                f"Repository '{self.name}': reference '{ref}' does not resolve to a commit"
            ) from e
        return self._to_commit(commit)

    def commits_exclusive(self, release_ref: str, next_ref: str) -> List[Commit]:
        """List commits reachable from ``next_ref`` but not from ``release_ref``.

        Equivalent to ``git rev-list --topo-order next_ref ^release_ref``: the
        references do not need to be linearly related. Commits are returned
        newest first, in topological order.
        """
        release = self.resolve_ref(release_ref)
        head = self.resolve_ref(next_ref)
        try:
            commits = self.repo.iter_commits(f"{release.id}..{head.id}", topo_order=True)
            return [self._to_commit(commit) for commit in commits]
        except git.exc.GitCommandError as e:
            raise StorynotesError(
                f"Repository '{self.name}': failed to list commits: {e}"
            ) from e


def scan(repository_location: Path, release_ref: str, next_ref: str,
         name: Optional[str] = None) -> List[Commit]:
    """Return the commits of ``next_ref`` that are not part of ``release_ref``.

    Args:
        repository_location: Path of the local repository
        release_ref: Reference which has already been released
        next_ref: Reference which is about to be released
        name: Repository name attached to the commits, defaults to the directory name

    Returns:
        Unreleased commits, newest first
    """
    name = name or Path(repository_location).name
    with GitRepository(name, repository_location) as repository:
        return repository.commits_exclusive(release_ref, next_ref)


def open_repositories(refs: Sequence[RepositoryRef]) -> Dict[str, GitRepository]:
    """Open every repository and check both of its references.

    All repositories are validated before any of them is scanned, so a broken
    entry aborts the run without doing any work.

    Raises:
        ConfigurationError: On the first invalid repository or reference
    """
    opened: Dict[str, GitRepository] = {}
    try:
        for ref in refs:
            if ref.name in opened:
                raise ConfigurationError(f"Repository '{ref.name}' is configured twice")
            repository = GitRepository(ref.name, ref.location)
            opened[ref.name] = repository
            repository.resolve_ref(ref.release_ref)
            repository.resolve_ref(ref.next_ref)
    except ConfigurationError:
        for repository in opened.values():
            repository.close()
        raise
    return opened


def scan_repository(repository: GitRepository, ref: RepositoryRef) -> RepositoryScan:
    """Find unreleased commits and the next head of one repository."""
    logger.info(
        f"Scanning {ref.name}: release={ref.release_ref} next={ref.next_ref}"
    )
    start = time.monotonic()
    head = repository.resolve_ref(ref.next_ref)
    commits = repository.commits_exclusive(ref.release_ref, ref.next_ref)
    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info(f"Found {len(commits)} unreleased commits in {ref.name} in {elapsed_ms:.0f}ms")
    return RepositoryScan(name=ref.name, head=head, commits=commits)
