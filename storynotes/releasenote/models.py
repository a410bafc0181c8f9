"""Data passed between the stages of the release notes pipeline."""

from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from ..git import Commit
from ..shortcut import Epic, Story


class IssueReference(BaseModel):
    """A story id read from a commit message."""

    model_config = ConfigDict(frozen=True)

    numeric_id: int
    source_commit: Commit


class ParsedCommits(BaseModel):
    model_config = ConfigDict(frozen=True)

    references: Tuple[IssueReference, ...] = ()
    unparsed: Tuple[Commit, ...] = ()


class RepositoryResult(BaseModel):
    """Scan and parse output of a single repository."""

    model_config = ConfigDict(frozen=True)

    name: str
    head: Commit
    references: Tuple[IssueReference, ...]
    unparsed: Tuple[Commit, ...]


class FilterConfig(BaseModel):
    """Story filtering rules for one run."""

    model_config = ConfigDict(frozen=True)

    excluded_ids: FrozenSet[int] = frozenset()
    excluded_labels: FrozenSet[str] = frozenset()
    included_labels: FrozenSet[str] = frozenset()
    drop_unparsed: bool = False

    @classmethod
    def from_options(cls, exclude_story_id: Iterable[int] = (),
                     exclude_story_label: Iterable[str] = (),
                     include_story_label: Iterable[str] = (),
                     exclude_unparsed_commits: bool = False) -> "FilterConfig":
        return cls(
            excluded_ids=frozenset(exclude_story_id),
            excluded_labels=frozenset(exclude_story_label),
            included_labels=frozenset(include_story_label),
            drop_unparsed=exclude_unparsed_commits,
        )


class StoryCandidate(BaseModel):
    """A story id seen in one or more commits, across all repositories."""

    model_config = ConfigDict(frozen=True)

    story_id: int
    commits: Tuple[Commit, ...]

    @property
    def repositories(self) -> List[str]:
        return sorted({commit.repository for commit in self.commits})


class ResolvedCandidate(BaseModel):
    """A candidate after the tracker lookup; ``story`` is None when not found."""

    model_config = ConfigDict(frozen=True)

    candidate: StoryCandidate
    story: Optional[Story] = None

    @property
    def story_id(self) -> int:
        return self.candidate.story_id


class FilterResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kept: FrozenSet[int]
    dropped_as_filtered: FrozenSet[int]


class ReleaseSnapshot(BaseModel):
    """Everything the renderer needs, fully resolved and filtered.

    ``stories`` and ``epics`` are sorted by id with no duplicate ids. The two
    mappings are keyed by repository name, in name order, and read-only.
    """

    model_config = ConfigDict(frozen=True)

    stories: Tuple[Story, ...]
    epics: Tuple[Epic, ...]
    unparsed_commits: Mapping[str, Tuple[Commit, ...]]
    repo_heads: Mapping[str, Commit]

    @field_validator("unparsed_commits", "repo_heads", mode="after")
    @classmethod
    def read_only(cls, v):
        return MappingProxyType(dict(v))

    @field_serializer("unparsed_commits", "repo_heads")
    def serialize_mapping(self, v):
        return dict(v)

    def template_context(self) -> dict:
        """Plain data view used by the template renderer."""
        return {
            "stories": [story.model_dump() for story in self.stories],
            "epics": [epic.model_dump() for epic in self.epics],
            "unparsed_commits": {
                name: [commit.model_dump() for commit in commits]
                for name, commits in self.unparsed_commits.items()
            },
            "next_heads": {
                name: head.model_dump() for name, head in self.repo_heads.items()
            },
        }
