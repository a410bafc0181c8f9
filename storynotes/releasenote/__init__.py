"""Release note generation module."""

from .filters import StoryFilter
from .generator import (
    assemble,
    build_release,
    collect_candidates,
    filter_candidates,
    process_repository,
    resolve_candidates,
    scan_repositories,
)
from .models import (
    FilterConfig,
    FilterResult,
    IssueReference,
    ParsedCommits,
    ReleaseSnapshot,
    RepositoryResult,
    ResolvedCandidate,
    StoryCandidate,
)
from .parser import parse_commits, parse_story_id
from .resolver import DEFAULT_WORKER_COUNT, StoryResolver

__all__ = [
    "StoryFilter",
    "assemble",
    "build_release",
    "collect_candidates",
    "filter_candidates",
    "process_repository",
    "resolve_candidates",
    "scan_repositories",
    "FilterConfig",
    "FilterResult",
    "IssueReference",
    "ParsedCommits",
    "ReleaseSnapshot",
    "RepositoryResult",
    "ResolvedCandidate",
    "StoryCandidate",
    "parse_commits",
    "parse_story_id",
    "DEFAULT_WORKER_COUNT",
    "StoryResolver",
]
