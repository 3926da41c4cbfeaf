"""
Runtime support for generated code.

Generated data and path modules import their base classes and scalar types
from here.
"""

from __future__ import annotations

from .enums import EnumValueInfo, YangEnum
from .ordered_map import OrderedMap
from .path import WILDCARD, NodePath, PathElem, RootPath
from .types import (
    Binary,
    UnionWrapper,
    YANGEmpty,
    float64,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
)

__all__ = [
    "WILDCARD",
    "Binary",
    "EnumValueInfo",
    "NodePath",
    "OrderedMap",
    "PathElem",
    "RootPath",
    "UnionWrapper",
    "YANGEmpty",
    "YangEnum",
    "float64",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
]
