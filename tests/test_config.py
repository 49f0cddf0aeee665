"""Tests for YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from daily_digest.config import AppConfig, load_config
from daily_digest.core.errors import ConfigError


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.fetch.timeout_ms == 15000
    assert cfg.fetch.concurrency == 15
    assert cfg.window.hours == 24


def test_load_config_merges_partial_sections(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n"
        "  concurrency: 4\n"
        "window:\n"
        "  hours: 72\n"
        "unknown_section:\n"
        "  anything: true\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  not_a_field: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.concurrency == 4
    assert cfg.fetch.timeout_ms == 15000
    assert cfg.window.hours == 72
    assert cfg.logging.level == "DEBUG"


def test_load_config_does_not_mutate_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("fetch:\n  concurrency: 2\n", encoding="utf-8")

    load_config(str(path))

    assert AppConfig().fetch.concurrency == 15


def test_load_config_rejects_invalid_yaml(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("fetch: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize(
    "section",
    [
        "fetch:\n  concurrency: 0\n",
        "fetch:\n  timeout_ms: 0\n",
        "fetch:\n  timeout_ms: -5\n",
        "fetch:\n  concurrency: many\n",
        "window:\n  hours: soon\n",
    ],
)
def test_load_config_rejects_unusable_values(tmp_path: Path, section: str):
    path = tmp_path / "config.yaml"
    path.write_text(section, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))
