"""
Analyzer module.

Contains name resolution, enum naming, type resolution and IR building.
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer, check_binary_keys
from .ir_nodes import (
    IR,
    EnumeratedType,
    EnumKind,
    EnumValue,
    ListKey,
    MappedType,
    NodeData,
    ParsedDirectory,
    ParsedField,
    UnionDef,
)
from .name_resolver import NameResolver, make_name_unique
from .state import ResolverState

__all__ = [
    "IR",
    "EnumeratedType",
    "EnumKind",
    "EnumValue",
    "ListKey",
    "MappedType",
    "NameResolver",
    "NodeData",
    "ParsedDirectory",
    "ParsedField",
    "ResolverState",
    "SchemaAnalyzer",
    "UnionDef",
    "check_binary_keys",
    "make_name_unique",
]
