"""
Run-scoped state shared by the resolvers.

A ResolverState is created for each generation run and never shared
between runs, so repeated or concurrent runs cannot see each other's
name tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .ir_nodes import EnumeratedType, UnionDef


@dataclass
class ResolverState:
    """Lookup tables owned by one generation run."""

    # Every struct and union name handed out in the output module
    defined_globals: set[str] = field(default_factory=set)

    # Schema path -> struct name
    directory_names: dict[str, str] = field(default_factory=dict)

    # Leaf schema path -> union type name
    union_names: dict[str, str] = field(default_factory=dict)

    # Enumerated types keyed by name
    enums: dict[str, EnumeratedType] = field(default_factory=dict)

    # Enum type identifier -> generated enum name
    enum_names: dict[str, str] = field(default_factory=dict)

    # Enum names already handed out, per category
    identity_names: dict[str, str] = field(default_factory=dict)  # name -> identity base key
    typedef_enum_names: dict[str, str] = field(default_factory=dict)  # name -> typedef identifier
    enum_leaf_names: set[str] = field(default_factory=set)

    # Union types keyed by name
    unions: dict[str, UnionDef] = field(default_factory=dict)

    # Every struct name handed out in the path module
    path_struct_names: set[str] = field(default_factory=set)
