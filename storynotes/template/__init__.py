"""Release notes template rendering."""

from .renderer import FILTERS, FileTemplate, create_environment

__all__ = ["FILTERS", "FileTemplate", "create_environment"]
