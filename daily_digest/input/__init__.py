from .sources import load_sources, parse_sources

__all__ = ["load_sources", "parse_sources"]
