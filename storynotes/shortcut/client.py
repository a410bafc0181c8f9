"""Shortcut REST API client using requests."""

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from ..config import Settings
from ..errors import ConfigurationError, NotFound, TrackerTransportError
from .models import Epic, Story


class ShortcutClient:
    """Read-only wrapper for the Shortcut v3 API."""

    def __init__(self, settings: Settings, logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None):
        """Initialize Shortcut client.

        Args:
            settings: Settings holding the API token and URL
            logger: Logger instance
            session: Optional pre-built HTTP session

        Raises:
            ConfigurationError: If no API token is configured
        """
        if not settings.shortcut_token:
            raise ConfigurationError(
                "Missing SHORTCUT_TOKEN environment variable. "
                "Please provide it in a .env file or set it in your environment."
            )

        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = settings.shortcut_api_url
        self.timeout = settings.request_timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            "Shortcut-Token": settings.shortcut_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def close(self) -> None:
        self.session.close()

    def _get(self, path: str, kind: str, entity_id: int) -> Dict[str, Any]:
        """GET a single entity.

        Raises:
            NotFound: On HTTP 404
            TrackerTransportError: On network failure, rejected credentials or any
                other unexpected status
        """
        url = f"{self.base_url}{path}"
        self.logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TrackerTransportError(f"Error contacting Shortcut at {url}: {e}") from e

        if response.status_code == 404:
            raise NotFound(kind, entity_id)
        if response.status_code in (401, 403):
            raise TrackerTransportError(
                f"Shortcut rejected the API token (HTTP {response.status_code})"
            )
        if not response.ok:
            raise TrackerTransportError(
                f"Unexpected response from Shortcut for {kind} {entity_id}: "
                f"HTTP {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise TrackerTransportError(
                f"Invalid JSON from Shortcut for {kind} {entity_id}: {e}"
            ) from e

    def get_story(self, story_id: int) -> Story:
        """Get a story by id."""
        data = self._get(f"/stories/{story_id}", "story", story_id)
        try:
            return Story.model_validate(data)
        except ValidationError as e:
            raise TrackerTransportError(f"Malformed story {story_id}: {e}") from e

    def get_epic(self, epic_id: int) -> Epic:
        """Get an epic by id."""
        data = self._get(f"/epics/{epic_id}", "epic", epic_id)
        try:
            return Epic.model_validate(data)
        except ValidationError as e:
            raise TrackerTransportError(f"Malformed epic {epic_id}: {e}") from e
