"""
Base class for code formatters.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..config import FormatterConfig

logger = logging.getLogger(__name__)


class Formatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (dependencies installed).

        Returns:
            True if the formatter can be used
        """


def get_formatter(tool: str) -> Formatter:
    """
    Get the formatter for a tool name.

    Raises:
        ValueError: If the tool is not "ruff" or "black"
    """
    from .black_formatter import BlackFormatter
    from .ruff_formatter import RuffFormatter

    formatters = {"ruff": RuffFormatter, "black": BlackFormatter}
    if tool not in formatters:
        raise ValueError(f"Unknown formatter {tool!r}, expected one of {sorted(formatters)}")
    return formatters[tool]()


def format_code(code: str, config: FormatterConfig) -> str:
    """Run the configured formatter, returning the code unchanged when it is disabled or unavailable."""
    if not config.enabled:
        return code
    formatter = get_formatter(config.tool)
    if not formatter.is_available():
        logger.warning("Formatter %s is not available, output is left unformatted", config.tool)
        return code
    return formatter.format(code, config)
