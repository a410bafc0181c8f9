"""Tests for the command line interface."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import FakeShortcutClient, make_story
from storynotes.cli.main import cli
from storynotes.errors import TrackerTransportError


TEMPLATE = """\
{{ name }} {{ version }}
{% for story in stories %}- {{ story.id }} {{ story.name }}
{% endfor %}{% for repo, commits in unparsed_commits.items() %}{% for commit in commits %}? {{ commit.message | first_line }}
{% endfor %}{% endfor %}"""


@pytest.fixture
def project(tmp_path: Path, linear_history) -> Path:
    """Working directory with config.toml and template pointing at linear_history."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    (workdir / "template.md.jinja").write_text(TEMPLATE, encoding="utf-8")
    (workdir / "config.toml").write_text(
        'template_file = "template.md.jinja"\n\n[repositories]\n'
        f'linear = {{ location = "{linear_history.path.as_posix()}", '
        'release_branch = "release", next_branch = "next" }\n',
        encoding="utf-8",
    )
    return workdir


class TestCli:
    """Test CLI commands."""

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "Storynotes version" in result.output

    def test_init_config(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        result = CliRunner().invoke(cli, ["init-config", "--path", str(path)])

        assert result.exit_code == 0
        assert path.exists()

    def test_init_config_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("x", encoding="utf-8")

        result = CliRunner().invoke(cli, ["init-config", "--path", str(path)])

        assert result.exit_code == 1

    @patch.dict(os.environ, {"SHORTCUT_TOKEN": "token"}, clear=True)
    def test_generate(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(project)
        fake = FakeShortcutClient(stories=[make_story(42, labels=["Technical"]), make_story(43)])

        with patch("storynotes.cli.generate.ShortcutClient") as client_class:
            client_class.return_value.get_story.side_effect = fake.get_story
            client_class.return_value.get_epic.side_effect = fake.get_epic
            result = CliRunner().invoke(cli, [
                "generate", "notes.md",
                "--name", "Super release", "--version", "3.4.0",
                "--include-story-label", "Technical",
            ])

        assert result.exit_code == 0, result.output
        assert "Total stories" in result.output
        assert "Total unparsed commits in" in result.output
        notes = (project / "notes.md").read_text(encoding="utf-8")
        assert notes == "Super release 3.4.0\n- 42 Story 42\n? oops typo\n"

    @patch.dict(os.environ, {"SHORTCUT_TOKEN": "token"}, clear=True)
    def test_generate_exclude_unparsed(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(project)
        fake = FakeShortcutClient(stories=[make_story(42), make_story(43)])

        with patch("storynotes.cli.generate.ShortcutClient") as client_class:
            client_class.return_value.get_story.side_effect = fake.get_story
            result = CliRunner().invoke(cli, [
                "generate", "notes.md", "--exclude-unparsed-commits", "--exclude-story-id", "43",
            ])

        assert result.exit_code == 0, result.output
        notes = (project / "notes.md").read_text(encoding="utf-8")
        assert notes == "None None\n- 42 Story 42\n"

    @patch.dict(os.environ, {}, clear=True)
    def test_generate_without_token(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(project)

        result = CliRunner().invoke(cli, ["generate", "notes.md"])

        assert result.exit_code == 1
        assert "SHORTCUT_TOKEN" in result.output
        assert not (project / "notes.md").exists()

    @patch.dict(os.environ, {"SHORTCUT_TOKEN": "token"}, clear=True)
    def test_generate_tracker_unreachable(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(project)

        with patch("storynotes.cli.generate.ShortcutClient") as client_class:
            client_class.return_value.get_story.side_effect = TrackerTransportError("unreachable")
            result = CliRunner().invoke(cli, ["generate", "notes.md"])

        assert result.exit_code == 1
        assert "unreachable" in result.output
        assert not (project / "notes.md").exists()

    @patch.dict(os.environ, {"SHORTCUT_TOKEN": "token"}, clear=True)
    def test_generate_invalid_workers(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(project)

        result = CliRunner().invoke(cli, ["generate", "notes.md", "--workers", "0"])

        assert result.exit_code == 1
        assert "Error: Invalid settings" in result.output
        assert "workers must be at least 1" in result.output
        assert not (project / "notes.md").exists()

    def test_generate_missing_config(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["--config-file", str(tmp_path / "nope.toml"), "generate", "out.md"])

        assert result.exit_code == 1
        assert "Error loading config file" in result.output
