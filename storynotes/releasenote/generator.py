"""Release snapshot generation.

Repositories are scanned and parsed independently, then every story id found
in any repository is merged into one candidate set. Stories are fetched once
for the whole run, filtered, and their epics fetched last.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import RepositoryRef
from ..git import Commit, GitRepository, open_repositories, scan_repository
from ..shortcut import Epic, Story
from .filters import StoryFilter
from .models import (
    FilterConfig,
    ReleaseSnapshot,
    RepositoryResult,
    ResolvedCandidate,
    StoryCandidate,
)
from .parser import parse_commits
from .resolver import DEFAULT_WORKER_COUNT, StoryResolver


logger = logging.getLogger(__name__)


def process_repository(repository: GitRepository, ref: RepositoryRef) -> RepositoryResult:
    """Scan one repository and parse its unreleased commits."""
    scan = scan_repository(repository, ref)
    parsed = parse_commits(scan.commits)
    logger.debug(
        f"{ref.name}: {len(parsed.references)} commits with a story, "
        f"{len(parsed.unparsed)} unparsed"
    )
    return RepositoryResult(
        name=ref.name,
        head=scan.head,
        references=parsed.references,
        unparsed=parsed.unparsed,
    )


def scan_repositories(refs: Sequence[RepositoryRef],
                      workers: int = DEFAULT_WORKER_COUNT) -> List[RepositoryResult]:
    """Validate then scan every repository, one task per repository.

    Raises:
        ConfigurationError: If any repository or reference is invalid; nothing is
            scanned in that case
    """
    if not refs:
        return []

    repositories = open_repositories(refs)
    results: Dict[str, RepositoryResult] = {}
    try:
        with ThreadPoolExecutor(max_workers=min(workers, len(refs))) as executor:
            future_to_name = {
                executor.submit(process_repository, repositories[ref.name], ref): ref.name
                for ref in refs
            }
            try:
                for future in as_completed(future_to_name):
                    results[future_to_name[future]] = future.result()
            except BaseException:
                for pending in future_to_name:
                    pending.cancel()
                raise
    finally:
        for repository in repositories.values():
            repository.close()

    return [results[name] for name in sorted(results)]


def collect_candidates(results: Iterable[RepositoryResult]) -> Dict[int, StoryCandidate]:
    """Merge story references of all repositories, keyed by story id."""
    commits_by_id: Dict[int, List[Commit]] = {}
    for result in results:
        for reference in result.references:
            commits_by_id.setdefault(reference.numeric_id, []).append(reference.source_commit)

    return {
        story_id: StoryCandidate(story_id=story_id, commits=tuple(commits))
        for story_id, commits in sorted(commits_by_id.items())
    }


def resolve_candidates(candidates: Mapping[int, StoryCandidate], resolver: StoryResolver,
                       story_filter: StoryFilter) -> List[ResolvedCandidate]:
    """Fetch the stories of all candidates not excluded by id."""
    wanted = [story_id for story_id in candidates if not story_filter.excluded_by_id(story_id)]
    skipped = len(candidates) - len(wanted)
    if skipped:
        logger.info(f"Skipping {skipped} stories excluded by id")

    stories = resolver.resolve_stories(wanted)
    return [
        ResolvedCandidate(candidate=candidate, story=stories.get(story_id))
        for story_id, candidate in candidates.items()
    ]


def filter_candidates(resolved: Sequence[ResolvedCandidate],
                      story_filter: StoryFilter) -> List[Story]:
    """Apply the filter rules and return the stories that remain, sorted by id."""
    lookup = {item.story_id: item.story for item in resolved if item.story is not None}
    result = story_filter.apply((item.story_id for item in resolved), lookup)
    if result.dropped_as_filtered:
        logger.info(f"Filtered out stories: {sorted(result.dropped_as_filtered)}")
    return [lookup[story_id] for story_id in sorted(result.kept) if story_id in lookup]


def assemble(results: Sequence[RepositoryResult], stories: Iterable[Story],
             epics: Iterable[Epic], drop_unparsed: bool = False) -> ReleaseSnapshot:
    """Merge per-repository results and resolved records into a snapshot.

    Stories and epics are deduplicated by id, the first record wins.
    """
    unique_stories: Dict[int, Story] = {}
    for story in stories:
        unique_stories.setdefault(story.id, story)

    unique_epics: Dict[int, Epic] = {}
    for epic in epics:
        unique_epics.setdefault(epic.id, epic)

    ordered = sorted(results, key=lambda result: result.name)
    return ReleaseSnapshot(
        stories=tuple(story for _, story in sorted(unique_stories.items())),
        epics=tuple(epic for _, epic in sorted(unique_epics.items())),
        unparsed_commits={
            result.name: () if drop_unparsed else result.unparsed
            for result in ordered
        },
        repo_heads={result.name: result.head for result in ordered},
    )


def build_release(repositories: Sequence[RepositoryRef], filter_config: FilterConfig,
                  resolver: StoryResolver,
                  workers: Optional[int] = None) -> ReleaseSnapshot:
    """Build the release snapshot for the given repositories.

    Args:
        repositories: Repositories with their release and next references
        filter_config: Story filtering rules
        resolver: Resolver used to fetch stories and epics
        workers: Number of repositories scanned concurrently

    Returns:
        The release snapshot

    Raises:
        ConfigurationError: If a repository or reference is invalid
        TrackerTransportError: If Shortcut cannot be reached
    """
    results = scan_repositories(repositories, workers or DEFAULT_WORKER_COUNT)

    story_filter = StoryFilter(filter_config)
    candidates = collect_candidates(results)
    logger.info(f"Found {len(candidates)} distinct stories in {len(results)} repositories")

    resolved = resolve_candidates(candidates, resolver, story_filter)
    stories = filter_candidates(resolved, story_filter)
    epics = resolver.resolve_epics(stories)

    return assemble(results, stories, epics.values(), filter_config.drop_unparsed)
