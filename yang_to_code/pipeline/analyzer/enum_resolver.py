"""
Enumerated type naming and catalog.

Names are resolved in two passes: identities and typedef enumerations are
named as they are found (a clash between two of them is an error), while
names proposed for enumeration leaves are grouped into clash sets and made
unique at the end, in sorted order, so that the result does not depend on
the order in which leaves were visited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...utils import safe_enum_member_name, trim_org_prefix, yang_to_camel_case
from ..config import CodeGeneratorConfig
from ..errors import GenerationError, NamingConflictError, SchemaInconsistencyError
from ..schema_ir.nodes import SchemaEntry, SchemaIR, YangType
from .ir_nodes import UNSET_MEMBER, EnumeratedType, EnumKind, EnumValue
from .name_resolver import make_name_unique
from .state import ResolverState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnumKey:
    """How an enumerated type is identified and what it is proposed to be called."""

    category: str  # "identity", "typedef" or "leaf"
    identifier: str  # Unique identifier within the category
    proposed_name: str
    kind: EnumKind


def enumerated_types(yang_type: YangType, typedef_union: YangType | None = None) -> list[tuple[YangType, YangType | None]]:
    """
    Find the enumerated types within a type, looking through unions.

    Args:
        yang_type: The type to search
        typedef_union: Nearest enclosing union declared through a typedef

    Returns:
        (enumerated type, nearest enclosing typedef union) pairs, in declaration order
    """
    if yang_type.kind in ("enumeration", "identityref"):
        return [(yang_type, typedef_union)]
    if yang_type.kind != "union":
        return []
    if yang_type.is_typedef:
        typedef_union = yang_type
    found = []
    for member in yang_type.types:
        found.extend(enumerated_types(member, typedef_union))
    return found


class EnumResolver:
    """Names enumerated types and builds the enum catalog for one run."""

    def __init__(self, schema: SchemaIR, config: CodeGeneratorConfig, state: ResolverState):
        self.schema = schema
        self.config = config
        self.state = state
        # Proposed leaf enum name -> identifiers proposing it
        self._clash_sets: dict[str, set[str]] = {}
        # Identifier -> (kind, type holding the values, leaf path)
        self._pending: dict[str, tuple[EnumKind, YangType, str]] = {}
        self._resolved = False
        # Identifier -> naming error that prevented the type from being generated
        self._conflicts: dict[str, NamingConflictError] = {}

    def collect(self, leaves: list[SchemaEntry]) -> list[GenerationError]:
        """
        Register the enumerated types used by a set of leaves.

        Args:
            leaves: Leaf and leaf-list entries, in sorted path order

        Returns:
            Naming errors found, one per offending leaf
        """
        errors: list[GenerationError] = []
        for leaf in leaves:
            if leaf.type is None:
                continue
            for enum_type, typedef_union in enumerated_types(leaf.type):
                try:
                    key = self.enum_key(leaf, enum_type, typedef_union)
                    self._register(leaf, key, enum_type)
                except SchemaInconsistencyError:
                    raise
                except NamingConflictError as e:
                    self._conflicts[key.identifier] = e
                    errors.append(e)
        return errors

    def _register(self, leaf: SchemaEntry, key: EnumKey, enum_type: YangType) -> None:
        if key.category == "leaf":
            if key.identifier not in self._pending:
                self._pending[key.identifier] = (key.kind, enum_type, leaf.path)
                self._clash_sets.setdefault(key.proposed_name, set()).add(key.identifier)
            return

        table = self.state.identity_names if key.category == "identity" else self.state.typedef_enum_names
        if key.identifier in self.state.enum_names:
            return
        if key.proposed_name in table or key.proposed_name in self.state.enums:
            raise NamingConflictError(f"{key.category} enumerated name conflict {key.proposed_name!r}", leaf.path)
        table[key.proposed_name] = key.identifier
        self.state.enum_names[key.identifier] = key.proposed_name
        self.state.enums[key.proposed_name] = self._build_type(key.proposed_name, key.kind, enum_type, leaf.path)

    def resolve_clash_sets(self) -> None:
        """Assign unique names to every enumeration leaf that was collected."""
        if self._resolved:
            return
        defined = set(self.state.enums)
        for proposed_name in sorted(self._clash_sets):
            for identifier in sorted(self._clash_sets[proposed_name]):
                if identifier in self.state.enum_names:
                    continue
                name = make_name_unique(proposed_name, defined, self._pending[identifier][2])
                self.state.enum_names[identifier] = name
                self.state.enum_leaf_names.add(name)
                kind, enum_type, path = self._pending[identifier]
                self.state.enums[name] = self._build_type(name, kind, enum_type, path)
        self._resolved = True
        logger.debug("Resolved %d enumerated types", len(self.state.enums))

    def lookup(self, leaf: SchemaEntry, enum_type: YangType, typedef_union: YangType | None = None) -> EnumeratedType:
        """
        Get the enumerated type generated for an enumeration or identityref.

        Raises:
            SchemaInconsistencyError: If the type was never collected
        """
        key = self.enum_key(leaf, enum_type, typedef_union)
        name = self.state.enum_names.get(key.identifier)
        if name is None and key.identifier in self._conflicts:
            raise NamingConflictError(self._conflicts[key.identifier].message, leaf.path)
        if name is None:
            raise SchemaInconsistencyError(f"no enumerated type generated for {enum_type.name}", leaf.path)
        return self.state.enums[name]

    def enum_key(self, leaf: SchemaEntry, enum_type: YangType, typedef_union: YangType | None) -> EnumKey:
        """Compute the identifier and proposed name of an enumerated type."""
        if enum_type.kind == "identityref":
            base = self.schema.identities.get(enum_type.identity_base)
            if base is None:
                raise SchemaInconsistencyError(f"unknown identity base {enum_type.identity_base!r}", leaf.path)
            name = f"{self._module_name(base.module)}_{yang_to_camel_case(base.name)}"
            return EnumKey("identity", f"identity:{base.key}", name, EnumKind.IDENTITY)

        if enum_type.is_typedef:
            module = enum_type.module if self.config.use_defining_module_for_typedef_enum_names else leaf.module
            name = f"{self._module_name(module)}_{yang_to_camel_case(enum_type.name)}"
            return EnumKey("typedef", f"typedef:{enum_type.module}/{enum_type.name}", name, EnumKind.DERIVED)

        if typedef_union is not None:
            module = typedef_union.module if self.config.use_defining_module_for_typedef_enum_names else leaf.module
            name = f"{self._module_name(module)}_{yang_to_camel_case(typedef_union.name)}_Enum"
            identifier = f"typedef:{typedef_union.module}/{typedef_union.name}_Enum"
            return EnumKey("typedef", identifier, name, EnumKind.DERIVED_UNION)

        kind = EnumKind.UNION if leaf.type is not None and leaf.type.kind == "union" else EnumKind.SIMPLE
        identifier, name = self._leaf_identifier(leaf)
        return EnumKey("leaf", identifier, name, kind)

    def _leaf_identifier(self, leaf: SchemaEntry) -> tuple[str, str]:
        compress = self.config.compress_paths
        skip_dedup = self.config.skip_enum_deduplication

        identifier = leaf.path
        if not skip_dedup or compress:
            identifier = leaf.definition_id

        if compress:
            parent = self.schema.parent(leaf)
            context = self.schema.parent(parent) if parent is not None else None
            context = context or parent
            parts = [yang_to_camel_case(context.name)] if context is not None else []
            parts.append(yang_to_camel_case(leaf.name))
            if not self.config.shorten_enum_leaf_names:
                parts.insert(0, self._module_name(leaf.module))
            name = "_".join(parts)
            if skip_dedup:
                identifier += name
        else:
            elements = [leaf, *self.schema.ancestors(leaf)]
            name = "_".join(yang_to_camel_case(e.name) for e in reversed(elements) if not e.is_choice_or_case)
        return f"leaf:{identifier}", name

    def _module_name(self, module: str) -> str:
        return yang_to_camel_case(trim_org_prefix(module, self.config.enum_org_prefixes_to_trim))

    def _build_type(self, name: str, kind: EnumKind, enum_type: YangType, source_path: str) -> EnumeratedType:
        """
        Build a catalog entry, with UNSET at index 0.

        Enumeration values are numbered by their YANG value plus one. Identities
        have no value and are numbered by their rank in name order from 1.
        """
        values = [EnumValue(index=0, name=UNSET_MEMBER, member_name=UNSET_MEMBER)]
        if kind == EnumKind.IDENTITY:
            for index, identity in enumerate(self.schema.derived_identities(enum_type.identity_base), start=1):
                values.append(
                    EnumValue(
                        index=index,
                        name=identity.name,
                        member_name=safe_enum_member_name(identity.name),
                        defining_module=identity.module,
                    )
                )
        else:
            ordered = sorted(enum_type.enums, key=lambda v: v.value)
            for enum_value in ordered:
                values.append(
                    EnumValue(
                        index=enum_value.value + 1,
                        name=enum_value.name,
                        member_name=safe_enum_member_name(enum_value.name),
                        defining_module=enum_type.module,
                    )
                )
        _dedupe_member_names(values)
        return EnumeratedType(
            name=name,
            kind=kind,
            values=values,
            identity_base=enum_type.identity_base,
            type_name=enum_type.name,
            source_path=source_path,
        )


def _dedupe_member_names(values: list[EnumValue]) -> None:
    """Member names must be unique even when two YANG names sanitize to the same string."""
    used: set[str] = set()
    for value in values:
        value.member_name = make_name_unique(value.member_name, used)
