"""
Schema IR module.

Holds the parsed YANG schema as a path-addressed arena and builds the
Directories that map to generated structs.
"""

from .loader import build_directories, ensure_fakeroot, is_compressed_valid, load_schema
from .nodes import (
    Directory,
    DirectoryField,
    EntryKind,
    EnumValueDef,
    Identity,
    ModuleInfo,
    SchemaEntry,
    SchemaIR,
    YangType,
)

__all__ = [
    "Directory",
    "DirectoryField",
    "EntryKind",
    "EnumValueDef",
    "Identity",
    "ModuleInfo",
    "SchemaEntry",
    "SchemaIR",
    "YangType",
    "build_directories",
    "ensure_fakeroot",
    "is_compressed_valid",
    "load_schema",
]
