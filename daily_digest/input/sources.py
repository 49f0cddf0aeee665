"""
Source list loading.

Sources are `{name, xmlUrl, htmlUrl}` records, the shape produced by OPML
exports, stored either as a JSON array or as YAML (a list, or a mapping
with a `sources` key). Any problem here is fatal to the run, so everything
is validated before a single request is made.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import SourceListError
from ..core.types import Source

YAML_SUFFIXES = {".yaml", ".yml"}


def load_sources(path: Path | str) -> list[Source]:
    """Load and validate a source list.

    Args:
        path: Path to a JSON or YAML source list

    Returns:
        Sources in file order

    Raises:
        SourceListError: If the file is missing, unparseable, or contains
            a record without a name or feed URL
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceListError(f"Cannot read sources file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SourceListError(f"Invalid sources file {path}: {exc}") from exc

    return parse_sources(data)


def parse_sources(data: Any) -> list[Source]:
    """Validate already-decoded source records."""
    if isinstance(data, dict):
        data = data.get("sources")
    if not isinstance(data, list):
        raise SourceListError("Source list must be an array of {name, xmlUrl, htmlUrl} records")

    sources: list[Source] = []
    for position, record in enumerate(data):
        if not isinstance(record, dict):
            raise SourceListError(f"Source #{position} is not an object")
        try:
            sources.append(Source.from_dict(record))
        except KeyError as exc:
            raise SourceListError(f"Source #{position} is missing {exc.args[0]}") from exc
    return sources
