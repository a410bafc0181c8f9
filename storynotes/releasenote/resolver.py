"""Fetching stories and epics from Shortcut."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Iterable, Optional, Tuple, TypeVar

from ..errors import NotFound
from ..shortcut import Epic, Story


DEFAULT_WORKER_COUNT = 4

Record = TypeVar("Record", Story, Epic)


class StoryResolver:
    """Resolves story ids to stories and stories to their epics.

    Every distinct id is requested once. Ids the tracker does not know are
    dropped with a warning; transport errors abort the whole resolution.
    """

    def __init__(self, client, workers: int = DEFAULT_WORKER_COUNT,
                 logger: Optional[logging.Logger] = None):
        """Initialize resolver.

        Args:
            client: Object with ``get_story(id)`` and ``get_epic(id)``
            workers: Maximum number of concurrent requests
            logger: Logger instance
        """
        self.client = client
        self.workers = workers
        self.logger = logger or logging.getLogger(__name__)

    def _fetch_all(self, ids: Iterable[int], fetch: Callable[[int], Record],
                   kind: str) -> Dict[int, Record]:
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return {}

        records: Dict[int, Record] = {}
        max_workers = min(self.workers, len(unique_ids))

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_id = {
                executor.submit(fetch, entity_id): entity_id
                for entity_id in unique_ids
            }

            try:
                for future in as_completed(future_to_id):
                    entity_id = future_to_id[future]
                    try:
                        record = future.result()
                    except NotFound:
                        self.logger.warning(f"Could not find {kind} {entity_id}, skipping it")
                        continue
                    if entity_id in records:
                        self.logger.debug(f"Ignoring duplicate {kind} {entity_id}")
                        continue
                    records[entity_id] = record
            except BaseException:
                for pending in future_to_id:
                    pending.cancel()
                raise

        self.logger.info(f"Fetched {len(records)} of {len(unique_ids)} {kind} records")
        return dict(sorted(records.items()))

    def resolve_stories(self, story_ids: Iterable[int]) -> Dict[int, Story]:
        """Fetch stories by id; unknown ids are left out of the result."""
        return self._fetch_all(story_ids, self.client.get_story, "story")

    def resolve_epics(self, stories: Iterable[Story]) -> Dict[int, Epic]:
        """Fetch the distinct epics the given stories belong to."""
        epic_ids = {story.epic_id for story in stories if story.epic_id is not None}
        return self._fetch_all(epic_ids, self.client.get_epic, "epic")

    def resolve(self, story_ids: Iterable[int]) -> Tuple[Dict[int, Story], Dict[int, Epic]]:
        """Fetch stories and then the epics of those stories."""
        stories = self.resolve_stories(story_ids)
        return stories, self.resolve_epics(stories.values())
