"""Configuration management for Storynotes."""

import tomllib
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError


DEFAULT_SHORTCUT_API_URL = "https://api.app.shortcut.com/api/v3"


class Settings(BaseSettings):
    """Environment settings for Storynotes.

    ``SHORTCUT_TOKEN`` is read without prefix, everything else uses ``STORYNOTES_``.
    Values may also come from a ``.env`` file in the working directory.
    """

    shortcut_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("shortcut_token", "SHORTCUT_TOKEN", "STORYNOTES_SHORTCUT_TOKEN"),
    )
    shortcut_api_url: str = DEFAULT_SHORTCUT_API_URL
    workers: int = 4
    request_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="STORYNOTES_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("shortcut_api_url")
    @classmethod
    def normalize_api_url(cls, v):
        """Ensure the API URL has a protocol and no trailing slash."""
        if v and not v.startswith(("http://", "https://")):
            v = f"https://{v}"
        return v.rstrip("/")

    @field_validator("workers")
    @classmethod
    def positive_workers(cls, v):
        if v < 1:
            raise ValueError("workers must be at least 1")
        return v


class RepositoryConfiguration(BaseModel):
    """One ``[repositories]`` entry of ``config.toml``."""

    # Path to the location of the repository on disk
    location: Path
    # Branch or commit name which has been released
    release_branch: str
    # Branch or commit name which has not been released
    next_branch: str

    model_config = {"frozen": True, "extra": "forbid"}


class RepositoryRef(BaseModel):
    """A named repository together with its two references."""

    name: str
    location: Path
    release_ref: str
    next_ref: str

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """Contents of ``config.toml``."""

    template_file: Path
    repositories: Dict[str, RepositoryConfiguration]

    @field_validator("repositories")
    @classmethod
    def at_least_one_repository(cls, v):
        if not v:
            raise ValueError("at least one repository must be configured")
        return v

    def repository_refs(self) -> List[RepositoryRef]:
        """Return the configured repositories, ordered by name."""
        return [
            RepositoryRef(
                name=name,
                location=repo.location,
                release_ref=repo.release_branch,
                next_ref=repo.next_branch,
            )
            for name, repo in sorted(self.repositories.items())
        ]


def load_toml_config(config_path: str) -> dict:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to TOML configuration file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Error loading config file {config_path}: {e}") from e


def find_config_file() -> Optional[str]:
    """Find configuration file in common locations.

    Returns:
        Path to config file or None if not found
    """
    search_paths = [
        "config.toml",
        "storynotes.toml",
        "~/.config/storynotes/config.toml",
    ]

    for path_str in search_paths:
        path = Path(path_str).expanduser()
        if path.exists() and path.is_file():
            return str(path)

    return None


def get_app_config(config_file: Optional[str] = None) -> AppConfig:
    """Load and validate ``config.toml``.

    Relative ``location`` and ``template_file`` paths are resolved against the
    directory holding the config file.

    Args:
        config_file: Optional path to the TOML config file

    Returns:
        Validated application configuration
    """
    config_path = config_file or find_config_file()
    if not config_path:
        raise ConfigurationError(
            "No configuration file found. Create config.toml or use --config-file"
        )

    raw = load_toml_config(config_path)
    try:
        app_config = AppConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    base_dir = Path(config_path).expanduser().resolve().parent
    return AppConfig(
        template_file=_resolve_path(base_dir, app_config.template_file),
        repositories={
            name: repo.model_copy(update={"location": _resolve_path(base_dir, repo.location)})
            for name, repo in app_config.repositories.items()
        },
    )


def _resolve_path(base_dir: Path, path: Path) -> Path:
    path = path.expanduser()
    if path.is_absolute():
        return path
    return base_dir / path


def get_settings(**overrides) -> Settings:
    """Load settings from the environment and ``.env``, applying non-None overrides."""
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


SAMPLE_CONFIG = """\
# Jinja2 template used to render the release notes
template_file = "template.md.jinja"

[repositories]
# Name of the first repository, can be anything
dev = { location = "../project1", release_branch = "master", next_branch = "next" }
# Same for the second repository
legacy = { location = "../project2", release_branch = "master", next_branch = "next" }
"""


def create_sample_config(path: str = "config.toml") -> None:
    """Create a sample configuration file.

    Args:
        path: Path where to create the sample config file
    """
    if Path(path).exists():
        raise ConfigurationError(f"Refusing to overwrite existing file {path}")

    with open(path, "w", encoding="utf-8") as f:
        f.write(SAMPLE_CONFIG)
