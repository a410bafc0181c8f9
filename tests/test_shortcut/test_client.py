"""Tests for the Shortcut client."""

from unittest.mock import Mock

import pytest
import requests

from storynotes.config import Settings
from storynotes.errors import ConfigurationError, NotFound, TrackerTransportError
from storynotes.shortcut import ShortcutClient


def _response(status_code: int, payload=None) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = payload
    return response


@pytest.fixture
def session() -> Mock:
    mock_session = Mock(spec=requests.Session)
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def client(session: Mock) -> ShortcutClient:
    settings = Settings(shortcut_token="test_token", shortcut_api_url="https://shortcut.test/api/v3/")
    return ShortcutClient(settings, session=session)


class TestShortcutClient:
    """Test ShortcutClient class."""

    def test_init_sets_token_header(self, client: ShortcutClient, session: Mock) -> None:
        assert session.headers["Shortcut-Token"] == "test_token"
        assert client.base_url == "https://shortcut.test/api/v3"

    def test_init_without_token(self, session: Mock) -> None:
        settings = Settings(shortcut_token=None)
        with pytest.raises(ConfigurationError, match="SHORTCUT_TOKEN"):
            ShortcutClient(settings, session=session)

    def test_get_story(self, client: ShortcutClient, session: Mock) -> None:
        session.get.return_value = _response(200, {
            "id": 42,
            "name": "Fix login",
            "story_type": "bug",
            "labels": [{"id": 1, "name": "Technical", "color": "#fff"}],
            "epic_id": 10,
            "workflow_state_id": 500,
            "owner_ids": ["abc"],
        })

        story = client.get_story(42)

        session.get.assert_called_once_with("https://shortcut.test/api/v3/stories/42", timeout=30.0)
        assert story.id == 42
        assert story.label_names == frozenset({"Technical"})
        assert story.epic_id == 10
        assert story.model_dump()["owner_ids"] == ["abc"]

    def test_get_epic(self, client: ShortcutClient, session: Mock) -> None:
        session.get.return_value = _response(200, {
            "id": 10,
            "name": "Login revamp",
            "state": "in progress",
            "stats": {"num_stories_total": 12, "num_stories_done": 4},
        })

        epic = client.get_epic(10)

        session.get.assert_called_once_with("https://shortcut.test/api/v3/epics/10", timeout=30.0)
        assert epic.stats["num_stories_total"] == 12

    def test_not_found(self, client: ShortcutClient, session: Mock) -> None:
        session.get.return_value = _response(404)

        with pytest.raises(NotFound) as exc_info:
            client.get_story(404)

        assert exc_info.value.entity_id == 404
        assert exc_info.value.kind == "story"

    @pytest.mark.parametrize("status_code", [401, 403, 500, 503])
    def test_error_status(self, client: ShortcutClient, session: Mock, status_code: int) -> None:
        session.get.return_value = _response(status_code)

        with pytest.raises(TrackerTransportError):
            client.get_story(1)

    def test_connection_error(self, client: ShortcutClient, session: Mock) -> None:
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TrackerTransportError, match="refused"):
            client.get_epic(1)

    def test_invalid_json(self, client: ShortcutClient, session: Mock) -> None:
        response = _response(200)
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response

        with pytest.raises(TrackerTransportError, match="Invalid JSON"):
            client.get_story(1)

    def test_malformed_story(self, client: ShortcutClient, session: Mock) -> None:
        session.get.return_value = _response(200, {"name": "no id"})

        with pytest.raises(TrackerTransportError, match="Malformed story"):
            client.get_story(1)
