"""Configuration management with embedded defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .similarity import ERROR_ADJ

GITHUB_API_BASE = "https://api.github.com"

# Repository-level bot settings, same place the GitHub app reads them from
DEFAULT_SETTINGS_PATH = Path(".github") / "issuetwin.yml"

# Default threshold above which two titles are reported as duplicates
DEFAULT_THRESHOLD = 0.60

DEFAULT_COMMENT_HEADER = "Potential duplicates:"
DEFAULT_REFERENCE_COMMENT = "- [#{number}] {title} ({accuracy}%)"

# Config file locations (checked in order)
CONFIG_PATHS = [
    Path.cwd() / ".env",  # Local project .env first
    Path.home() / ".config" / "issuetwin" / "config.env",
    Path.home() / ".issuetwin.env",
    Path("/etc/issuetwin/config.env"),
]


class SettingsError(ValueError):
    """Raised when duplicate-detection settings are invalid."""


class DuplicateSettings(BaseModel):
    """Duplicate-detection behaviour. ``False`` disables a feature."""

    issue_label: str | Literal[False] = "potential-duplicate"
    label_color: str | Literal[False] = "cfd3d7"
    threshold: float | Literal[False] = Field(default=DEFAULT_THRESHOLD)
    error_adj: float = Field(default=ERROR_ADJ, ge=0.0)
    comment_header: str = DEFAULT_COMMENT_HEADER
    reference_comment: str | Literal[False] = DEFAULT_REFERENCE_COMMENT

    @field_validator("threshold")
    @classmethod
    def check_threshold(cls, value: float | bool) -> float | bool:
        if value is not False and not 0.0 <= value <= 1.0:
            raise ValueError("threshold must be a float between 0 and 1 or false")
        return value

    @field_validator("label_color")
    @classmethod
    def check_label_color(cls, value: str | bool) -> str | bool:
        if value is False:
            return value
        color = value.lstrip("#").lower()
        if len(color) != 6 or any(c not in "0123456789abcdef" for c in color):
            raise ValueError("label_color must be a 6-digit hex color or false")
        return color

    @field_validator("issue_label", "reference_comment")
    @classmethod
    def check_not_blank(cls, value: str | bool) -> str | bool:
        if value is not False and not value.strip():
            raise ValueError("must be a non-empty string or false")
        return value

    @field_validator("reference_comment")
    @classmethod
    def check_placeholders(cls, value: str | bool) -> str | bool:
        if value is False:
            return value
        try:
            value.format(number=1, title="", accuracy=100)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                "reference_comment may only use {number}, {title} and {accuracy}"
            ) from e
        return value

    @property
    def enabled(self) -> bool:
        """Whether duplicate detection runs at all."""
        return self.threshold is not False

    @classmethod
    def from_mapping(cls, data: dict | None) -> DuplicateSettings:
        """Validate a raw mapping (camelCase keys from the app schema accepted)."""
        data = dict(data or {})
        aliases = {
            "issueLabel": "issue_label",
            "labelColor": "label_color",
            "referenceComment": "reference_comment",
            "commentHeader": "comment_header",
            "errorAdj": "error_adj",
        }
        for alias, name in aliases.items():
            if alias in data:
                data[name] = data.pop(alias)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SettingsError(f"Invalid duplicate settings: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> DuplicateSettings:
        """Load settings from YAML; a missing file means defaults."""
        if not path.exists():
            return cls()
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Error parsing settings file {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise SettingsError(f"Invalid settings file format: {path}")
        return cls.from_mapping(data)


@dataclass
class IssueTwinConfig:
    """IssueTwin process configuration."""

    # GitHub API
    github_token: str = ""
    api_base: str = GITHUB_API_BASE

    # Webhook
    webhook_secret: str = ""

    # Data files
    settings_path: Path = DEFAULT_SETTINGS_PATH
    dictionaries_path: Path | None = None

    @classmethod
    def load(cls) -> IssueTwinConfig:
        """Load config from environment and config files."""
        config = cls()

        # Try config files first
        for config_path in CONFIG_PATHS:
            if config_path.exists():
                config._load_from_file(config_path)
                break

        # Environment variables override config files
        config._load_from_env()

        return config

    def _load_from_file(self, path: Path) -> None:
        """Load configuration from .env file."""
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip().strip('"').strip("'")
                    self._set_from_key(key, value)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        env_keys = [
            "GITHUB_TOKEN",
            "ISSUETWIN_GITHUB_TOKEN",
            "ISSUETWIN_API_BASE",
            "ISSUETWIN_WEBHOOK_SECRET",
            "ISSUETWIN_SETTINGS",
            "ISSUETWIN_DICTIONARIES",
        ]

        for env_key in env_keys:
            value = os.environ.get(env_key)
            if value:
                self._set_from_key(env_key, value)

    def _set_from_key(self, key: str, value: str) -> None:
        """Set attribute from key-value pair."""
        key_lower = key.lower()

        if "token" in key_lower:
            self.github_token = value
        elif "api_base" in key_lower:
            self.api_base = value.rstrip("/")
        elif "webhook_secret" in key_lower:
            self.webhook_secret = value
        elif "settings" in key_lower:
            self.settings_path = Path(value).expanduser()
        elif "dictionaries" in key_lower:
            self.dictionaries_path = Path(value).expanduser()

    def load_settings(self) -> DuplicateSettings:
        """Load duplicate-detection settings from ``settings_path``."""
        return DuplicateSettings.from_yaml(self.settings_path)

    def save_default_config(self) -> Path:
        """Save default config to user's config directory."""
        config_dir = Path.home() / ".config" / "issuetwin"
        config_dir.mkdir(parents=True, exist_ok=True)
        config_path = config_dir / "config.env"

        content = f"""# IssueTwin Configuration

# GitHub token (required for check/serve)
GITHUB_TOKEN={self.github_token}

# GitHub API base URL
ISSUETWIN_API_BASE={self.api_base}

# Webhook secret (optional, enables signature checks)
ISSUETWIN_WEBHOOK_SECRET={self.webhook_secret}

# Duplicate-detection settings file
ISSUETWIN_SETTINGS={self.settings_path}
"""
        if self.dictionaries_path:
            content += f"\n# Custom dictionaries\nISSUETWIN_DICTIONARIES={self.dictionaries_path}\n"

        with open(config_path, "w") as f:
            f.write(content)

        return config_path
