"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import Formatter, format_code, get_formatter
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffFormatter

__all__ = [
    "BlackFormatter",
    "Formatter",
    "RuffFormatter",
    "format_code",
    "get_formatter",
]
