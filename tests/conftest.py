"""Shared fixtures: isolate tests from local config files and environment."""

import pytest

from issuetwin.dictionaries import Dictionaries, load_dictionaries

ENV_KEYS = [
    "GITHUB_TOKEN",
    "ISSUETWIN_GITHUB_TOKEN",
    "ISSUETWIN_API_BASE",
    "ISSUETWIN_WEBHOOK_SECRET",
    "ISSUETWIN_SETTINGS",
    "ISSUETWIN_DICTIONARIES",
]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """No config files, no env overrides, and a clean working directory."""
    monkeypatch.setattr("issuetwin.config.CONFIG_PATHS", [])
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def dictionaries() -> Dictionaries:
    """Embedded default dictionaries."""
    return load_dictionaries()
