# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskboard.config import DEFAULT_API_URL, Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "TASKBOARD_API_URL",
        "API_URL",
        "TASKBOARD_OFFLINE",
        "TASKBOARD_READ_TIMEOUT_SECONDS",
        "TASKBOARD_DATA_DIR",
        "TASKBOARD_DEFAULT_FILTER",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_point_at_local_backend(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.api_url == DEFAULT_API_URL
    assert s.offline is False
    assert s.default_filter == "all"
    assert s.data_dir == Path(".local/taskboard")


def test_env_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("API_URL", "http://fallback:9000")
    clean_env.setenv("TASKBOARD_API_URL", "http://tasks.internal:8080")
    clean_env.setenv("TASKBOARD_OFFLINE", "yes")
    clean_env.setenv("TASKBOARD_READ_TIMEOUT_SECONDS", "not-a-number")

    s = Settings.from_env()

    assert s.api_url == "http://tasks.internal:8080"
    assert s.offline is True
    assert s.read_timeout_seconds == 15.0


def test_unprefixed_api_url_is_accepted(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("API_URL", "http://fallback:9000")
    assert Settings.from_env().api_url == "http://fallback:9000"
