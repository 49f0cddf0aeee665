"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching and concurrency settings
- WindowConfig: Lookback window
- SourcesConfig: Location of the source list
- OutputConfig: JSON output and progress reporting
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

from .core.errors import ConfigError


@dataclass
class FetchConfig:
    """Configuration for feed fetching.

    Attributes:
        timeout_ms: Hard wall-clock limit per request, in milliseconds
        concurrency: Maximum number of requests in flight
        user_agent: HTTP User-Agent header string
        trust_env: Whether to respect system proxy settings
        follow_redirects: Whether to follow HTTP redirects
    """

    timeout_ms: int = 15000
    concurrency: int = 15
    user_agent: str = "DailyDigest/0.1 (+feed fetcher)"
    trust_env: bool = True
    follow_redirects: bool = True


@dataclass
class WindowConfig:
    """Configuration for the lookback window.

    Attributes:
        hours: Only articles published within this many hours are kept
    """

    hours: float = 24


@dataclass
class SourcesConfig:
    """Configuration for the source list.

    Attributes:
        path: Path to a JSON or YAML file of {name, xmlUrl, htmlUrl} records
    """

    path: str = "sources.json"


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        indent: JSON indentation, or None for compact output
        progress_every: Log a progress line after this many completed sources
    """

    indent: int | None = 2
    progress_every: int = 20


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to the console (stderr)
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory for the log file; the working directory if None
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"
    directory: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return validate_config(_merge_config(AppConfig(), raw))


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig, ignoring unknown keys."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            fetch=FetchConfig(**data["fetch"]),
            window=WindowConfig(**data["window"]),
            sources=SourcesConfig(**data["sources"]),
            output=OutputConfig(**data["output"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration section: {exc}") from exc


def validate_config(cfg: AppConfig) -> AppConfig:
    """Reject values that would only fail once a run has started."""
    fetch = cfg.fetch
    if not isinstance(fetch.concurrency, int) or fetch.concurrency < 1:
        raise ConfigError(f"fetch.concurrency must be an integer >= 1, got {fetch.concurrency!r}")
    if not isinstance(fetch.timeout_ms, int) or fetch.timeout_ms < 1:
        raise ConfigError(f"fetch.timeout_ms must be an integer >= 1, got {fetch.timeout_ms!r}")
    if not isinstance(cfg.window.hours, (int, float)):
        raise ConfigError(f"window.hours must be a number, got {cfg.window.hours!r}")
    return cfg
