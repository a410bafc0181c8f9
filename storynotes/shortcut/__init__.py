"""Shortcut tracker access."""

from .client import ShortcutClient
from .models import Epic, Label, Story

__all__ = ["ShortcutClient", "Epic", "Label", "Story"]
