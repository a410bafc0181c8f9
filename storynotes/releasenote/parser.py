"""Story reference parsing for commit messages."""

import re
from typing import Iterable, List, Optional

from ..git import Commit
from .models import IssueReference, ParsedCommits


STORY_PREFIX = "sc-"

# Shortcut ids are signed 64 bit integers
MAX_STORY_ID = 2 ** 63 - 1

# A well-formed tag at the very start of the message, e.g. "[sc-123] Fix login"
LEADING_TAG_RE = re.compile(r"\[" + re.escape(STORY_PREFIX) + r"([0-9]+)\]")

# Anything that looks like a tag, well-formed or not
ANY_TAG_RE = re.compile(r"\[" + re.escape(STORY_PREFIX))


def parse_story_id(message: Optional[str]) -> Optional[int]:
    """Extract the story id from a commit message.

    Args:
        message: Commit message

    Returns:
        Story id, or None when the message does not start with a ``[sc-<id>]``
        tag or its subject line carries more than one tag. Tags in the body
        are ignored.
    """
    if not message:
        return None

    match = LEADING_TAG_RE.match(message)
    if not match:
        return None

    subject = message.split("\n", 1)[0]
    if len(ANY_TAG_RE.findall(subject)) > 1:
        return None

    story_id = int(match.group(1))
    if story_id > MAX_STORY_ID:
        return None
    return story_id


def parse_commits(commits: Iterable[Commit]) -> ParsedCommits:
    """Split commits into story references and unparsed commits, keeping order."""
    references: List[IssueReference] = []
    unparsed: List[Commit] = []

    for commit in commits:
        story_id = parse_story_id(commit.message)
        if story_id is None:
            unparsed.append(commit)
        else:
            references.append(IssueReference(numeric_id=story_id, source_commit=commit))

    return ParsedCommits(references=tuple(references), unparsed=tuple(unparsed))
