from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, TextIO

from ..core.types import Article


def render_json(articles: Iterable[Article], indent: int | None = 2) -> str:
    """Serialize articles as a JSON array using their wire-format keys."""
    return json.dumps([article.to_dict() for article in articles], indent=indent, ensure_ascii=False)


def write_json(articles: Iterable[Article], target: TextIO | Path, indent: int | None = 2) -> None:
    """Write the JSON array to an open stream or a file path."""
    text = render_json(articles, indent)
    if isinstance(target, Path):
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text + "\n", encoding="utf-8")
        return
    target.write(text)
    target.write("\n")
    target.flush()
