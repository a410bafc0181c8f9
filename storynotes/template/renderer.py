"""Rendering release notes through a Jinja2 template."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import jinja2
from jinja2 import Environment, StrictUndefined

from ..errors import ConfigurationError, TemplateError
from ..releasenote import ReleaseSnapshot


logger = logging.getLogger(__name__)


def stories_for_epic(stories: Iterable[Mapping[str, Any]], epic_id: int) -> List[Mapping[str, Any]]:
    """Stories belonging to the given epic."""
    return [story for story in stories if story.get("epic_id") == epic_id]


def stories_without_epic(stories: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return [story for story in stories if story.get("epic_id") is None]


def label_names(story: Mapping[str, Any]) -> List[str]:
    """Sorted label names of a story."""
    return sorted(label["name"] for label in story.get("labels", []))


def short_sha(sha: str, length: int = 7) -> str:
    return sha[:length]


def first_line(message: Optional[str]) -> str:
    if not message:
        return ""
    return message.split("\n", 1)[0].strip()


FILTERS = {
    "stories_for_epic": stories_for_epic,
    "stories_without_epic": stories_without_epic,
    "label_names": label_names,
    "short_sha": short_sha,
    "first_line": first_line,
}


def create_environment() -> Environment:
    env = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters.update(FILTERS)
    return env


class FileTemplate:
    """A release notes template."""

    def __init__(self, content: str):
        """Compile the template.

        Args:
            content: Jinja2 template source

        Raises:
            TemplateError: If the template does not compile
        """
        self.env = create_environment()
        try:
            self.template = self.env.from_string(content)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(f"Invalid template (line {e.lineno}): {e.message}") from e

    @classmethod
    def from_path(cls, path: Path) -> "FileTemplate":
        """Load a template from disk."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Error reading template file {path}: {e}") from e
        return cls(content)

    def build_context(self, snapshot: ReleaseSnapshot, name: Optional[str] = None,
                      version: Optional[str] = None,
                      description: Optional[str] = None) -> Dict[str, Any]:
        context = snapshot.template_context()
        context.update({
            "name": name,
            "version": version,
            "description": description,
        })
        return context

    def render(self, snapshot: ReleaseSnapshot, name: Optional[str] = None,
               version: Optional[str] = None, description: Optional[str] = None) -> str:
        """Render the template for a snapshot.

        Raises:
            TemplateError: If rendering fails
        """
        context = self.build_context(snapshot, name, version, description)
        try:
            return self.template.render(**context)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Error rendering template: {e}") from e

    def render_to_file(self, snapshot: ReleaseSnapshot, output_file: Path,
                       name: Optional[str] = None, version: Optional[str] = None,
                       description: Optional[str] = None) -> None:
        """Render the template and write the result to ``output_file``.

        Nothing is written when rendering fails.
        """
        content = self.render(snapshot, name, version, description)
        try:
            Path(output_file).write_text(content, encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Error writing to file {output_file}: {e}") from e
        logger.info(f"Release notes written to {output_file}")
