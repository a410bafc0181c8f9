"""Test configuration and fixtures."""

import shutil
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Dict, List, Optional

import git
import pytest

from storynotes.errors import NotFound, TrackerTransportError
from storynotes.git import Commit
from storynotes.shortcut import Epic, Label, Story


class GitHistory:
    """Builds an explicit commit graph in a temporary repository."""

    def __init__(self, repo: git.Repo):
        self.repo = repo
        self.commits: Dict[str, git.Commit] = {}

    @property
    def path(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def commit(self, label: str, message: str, parents: Iterable[str] = ()) -> git.Commit:
        commit = self.repo.index.commit(
            message,
            parent_commits=[self.commits[parent] for parent in parents],
            head=False,
        )
        self.commits[label] = commit
        return commit

    def branch(self, name: str, label: str) -> None:
        self.repo.create_head(name, self.commits[label])

    def sha(self, label: str) -> str:
        return self.commits[label].hexsha


@pytest.fixture
def git_history(tmp_path: Path) -> Callable[[str], GitHistory]:
    """Factory creating empty repositories with a configured identity."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    repos = []

    def factory(name: str = "repo") -> GitHistory:
        repo = git.Repo.init(tmp_path / name)
        with repo.config_writer() as writer:
            writer.set_value("user", "name", "Test User")
            writer.set_value("user", "email", "test@example.com")
        repos.append(repo)
        return GitHistory(repo)

    yield factory

    for repo in repos:
        repo.close()


@pytest.fixture
def linear_history(git_history: Callable[[str], GitHistory]) -> GitHistory:
    """A -> B -> C -> D with ``release`` at A and ``next`` at D."""
    history = git_history("linear")
    history.commit("A", "[sc-1] initial release")
    history.commit("B", "[sc-42] fix", parents=["A"])
    history.commit("C", "oops typo", parents=["B"])
    history.commit("D", "[sc-43] feat", parents=["C"])
    history.branch("release", "A")
    history.branch("next", "D")
    return history


def make_story(story_id: int, labels: Iterable[str] = (), epic_id: Optional[int] = None,
               **extra) -> Story:
    fields = {"name": f"Story {story_id}", **extra}
    return Story(
        id=story_id,
        labels=[Label(name=label) for label in labels],
        epic_id=epic_id,
        **fields,
    )


def make_epic(epic_id: int, **extra) -> Epic:
    fields = {"name": f"Epic {epic_id}", "stats": {"num_stories_total": 3}, **extra}
    return Epic(id=epic_id, **fields)


def make_commit(sha: str, message: str, repository: str = "repo") -> Commit:
    return Commit(id=sha, message=message, repository=repository)


class FakeShortcutClient:
    """In-memory stand-in for ShortcutClient."""

    def __init__(self, stories: Iterable[Story] = (), epics: Iterable[Epic] = (),
                 fail_with: Optional[Exception] = None):
        self.stories = {story.id: story for story in stories}
        self.epics = {epic.id: epic for epic in epics}
        self.fail_with = fail_with
        self.story_calls: List[int] = []
        self.epic_calls: List[int] = []

    def get_story(self, story_id: int) -> Story:
        self.story_calls.append(story_id)
        if self.fail_with is not None:
            raise self.fail_with
        if story_id not in self.stories:
            raise NotFound("story", story_id)
        return self.stories[story_id]

    def get_epic(self, epic_id: int) -> Epic:
        self.epic_calls.append(epic_id)
        if self.fail_with is not None:
            raise self.fail_with
        if epic_id not in self.epics:
            raise NotFound("epic", epic_id)
        return self.epics[epic_id]


@pytest.fixture
def unreachable_client() -> FakeShortcutClient:
    return FakeShortcutClient(fail_with=TrackerTransportError("connection refused"))
