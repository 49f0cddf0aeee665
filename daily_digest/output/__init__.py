"""
Output generation.

This package serializes the final article list.
"""

from .writer import render_json, write_json

__all__ = ["render_json", "write_json"]
