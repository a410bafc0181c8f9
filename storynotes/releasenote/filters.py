"""Story filtering by id and label."""

from typing import Iterable, Mapping, Optional

from ..shortcut import Story
from .models import FilterConfig, FilterResult


class StoryFilter:
    """Applies the exclusion and inclusion rules of a :class:`FilterConfig`.

    Rules are checked in this order and the first match decides:

    1. an excluded id is dropped
    2. a story carrying any excluded label is dropped, even if it also carries an
       included label
    3. when included labels are configured, a story carrying none of them is
       dropped
    4. everything else is kept

    Ids with no story record cannot be checked against labels and are kept.
    """

    def __init__(self, config: FilterConfig):
        self.config = config

    def excluded_by_id(self, story_id: int) -> bool:
        return story_id in self.config.excluded_ids

    def keeps(self, story_id: int, story: Optional[Story] = None) -> bool:
        if self.excluded_by_id(story_id):
            return False
        if story is None:
            return True

        labels = story.label_names
        if labels & self.config.excluded_labels:
            return False
        if self.config.included_labels and not labels & self.config.included_labels:
            return False
        return True

    def apply(self, candidate_ids: Iterable[int], story_lookup: Mapping[int, Story]) -> FilterResult:
        """Split candidate ids into kept and dropped ids.

        Args:
            candidate_ids: Story ids found in commits
            story_lookup: Story records fetched so far, keyed by id

        Returns:
            Kept ids and ids dropped by a filtering rule
        """
        kept = set()
        dropped = set()
        for story_id in candidate_ids:
            if self.keeps(story_id, story_lookup.get(story_id)):
                kept.add(story_id)
            else:
                dropped.add(story_id)
        return FilterResult(kept=frozenset(kept), dropped_as_filtered=frozenset(dropped))
