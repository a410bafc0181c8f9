"""Commit models produced by the scanner."""

from typing import List

from pydantic import BaseModel


class Commit(BaseModel):
    """A commit of a configured repository."""

    id: str
    message: str
    repository: str

    model_config = {"frozen": True}

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def title(self) -> str:
        return self.message.split("\n", 1)[0].strip()


class RepositoryScan(BaseModel):
    """Unreleased commits of one repository plus the head of its next reference."""

    name: str
    head: Commit
    commits: List[Commit]

    model_config = {"frozen": True}
