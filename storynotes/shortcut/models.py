"""Shortcut story and epic records.

Only the fields the correlation engine relies on are declared; everything else
returned by the API is kept as extra data so templates can use it.
"""

from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict


class Label(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    id: Optional[int] = None


class Story(BaseModel):
    """A Shortcut story (issue)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    name: str = ""
    story_type: Optional[str] = None
    app_url: Optional[str] = None
    labels: List[Label] = []
    epic_id: Optional[int] = None
    workflow_state_id: Optional[int] = None
    started: bool = False
    completed: bool = False

    @property
    def label_names(self) -> FrozenSet[str]:
        return frozenset(label.name for label in self.labels)


class Epic(BaseModel):
    """A Shortcut epic (group of stories).

    ``stats`` covers every story of the epic, not only the ones in the release.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    name: str = ""
    app_url: Optional[str] = None
    state: Optional[str] = None
    stats: dict = {}
