"""
Path API construction.

Builds the path structs and accessor methods used to address schema nodes.
"""

from __future__ import annotations

from .path_constructor import (
    WILDCARD_KEY,
    WILDCARD_SUFFIX,
    ChildConstructor,
    KeyBuilder,
    KeyParam,
    PathAPI,
    PathConstructor,
    PathStruct,
    combinations,
)

__all__ = [
    "WILDCARD_KEY",
    "WILDCARD_SUFFIX",
    "ChildConstructor",
    "KeyBuilder",
    "KeyParam",
    "PathAPI",
    "PathConstructor",
    "PathStruct",
    "combinations",
]
