"""
Type resolver: maps YANG types to target type descriptors.

Phase 2 of the pipeline, after naming. Each leaf type becomes a MappedType
holding the Python type name, its zero value and the Python expression of
its default value.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace

from ..config import CodeGeneratorConfig, UnionStyle
from ..errors import CyclicReferenceError, UnsupportedConstructError, ValueConversionError
from ..schema_ir.nodes import INTEGER_KINDS, SchemaEntry, SchemaIR, YangType
from . import default_values
from .enum_resolver import EnumResolver
from .ir_nodes import EnumeratedType, MappedType, UnionDef
from .name_resolver import NameResolver
from .reference_resolver import LeafrefResolver
from .state import ResolverState

logger = logging.getLogger(__name__)

# Built-in kinds with a fixed native type and zero value
_FIXED_TYPES = {
    **{kind: ("0", kind) for kind in INTEGER_KINDS},
    "string": ('""', "str"),
    "boolean": ("False", "bool"),
    "decimal64": ("0.0", "float64"),
    "binary": ("None", "Binary"),
    "empty": ("False", "YANGEmpty"),
}

# Native types that are wrapped in their constructor when used as a union default
_WRAPPED_UNION_DEFAULTS = {*INTEGER_KINDS, "float64"}

# Open placeholder for kinds with no dedicated representation
UNTYPED = MappedType(native_type="Any", zero_value="None")


@dataclass
class _Subtype:
    """One flattened member of a union, with the context it resolves in."""

    yang_type: YangType
    context: SchemaEntry
    mapped_type: MappedType
    typedef_union: YangType | None = None


class TypeResolver:
    """Resolves YANG types to MappedTypes for one generation run."""

    def __init__(
        self,
        schema: SchemaIR,
        config: CodeGeneratorConfig,
        state: ResolverState,
        names: NameResolver,
        enums: EnumResolver,
    ):
        self.schema = schema
        self.config = config
        self.state = state
        self.names = names
        self.enums = enums
        self.leafrefs = LeafrefResolver(schema)

    def resolve(self, yang_type: YangType, context: SchemaEntry) -> MappedType:
        """
        Map a YANG type to its target type.

        Args:
            yang_type: The type to resolve
            context: Leaf the type belongs to, used for naming and leafref resolution

        Returns:
            The MappedType, without a default value

        Raises:
            GenerationError: If the type cannot be resolved
        """
        return self._resolve(yang_type, context, frozenset({context.path}), None)

    def resolve_leaf(self, leaf: SchemaEntry) -> MappedType:
        """
        Resolve the type of a leaf or leaf-list, including its default.

        The default declared on the leaf wins over the default of its type.

        Raises:
            ValueConversionError: If the default does not validate against the type
            UnsupportedConstructError: If the type cannot carry a default
        """
        if leaf.type is None:
            raise UnsupportedConstructError("leaf has no type", leaf.path)
        mapped = self.resolve(leaf.type, leaf)

        defaults = leaf.defaults or ([leaf.type.default] if leaf.type.default is not None else [])
        if not defaults:
            return mapped

        literals = [self.default_literal(leaf.type, leaf, value, mapped) for value in defaults]
        if leaf.is_leaf_list:
            default = f"[{', '.join(literals)}]"
        else:
            default = literals[0]
        return replace(mapped, default_value=default)

    def _resolve(
        self,
        yang_type: YangType,
        context: SchemaEntry,
        visited: frozenset[str],
        typedef_union: YangType | None,
    ) -> MappedType:
        kind = yang_type.kind
        if kind in _FIXED_TYPES:
            zero, native = _FIXED_TYPES[kind]
            return MappedType(native_type=native, zero_value=zero)

        if kind in ("enumeration", "identityref"):
            enum = self.enums.lookup(context, yang_type, typedef_union)
            return MappedType(native_type=enum.class_name, zero_value="0", is_enumerated_value=True)

        if kind == "leafref":
            target = self._leafref_target(yang_type, context, visited)
            return self._resolve(target.type, target, visited | {target.path}, None)

        if kind == "union":
            return self._resolve_union(yang_type, context, visited, typedef_union)

        logger.debug("Using untyped placeholder for %s type at %s", kind, context.path)
        return replace(UNTYPED)

    def _leafref_target(self, yang_type: YangType, context: SchemaEntry, visited: frozenset[str]) -> SchemaEntry:
        target = self.leafrefs.resolve_target(context, yang_type.path)
        if target.path in visited:
            chain = " -> ".join(sorted(visited))
            raise CyclicReferenceError(f"leafref cycle through {target.path} ({chain})", context.path)
        if target.type is None:
            raise UnsupportedConstructError(f"leafref target {target.path} has no type", context.path)
        return target

    def _resolve_union(
        self,
        yang_type: YangType,
        context: SchemaEntry,
        visited: frozenset[str],
        typedef_union: YangType | None,
    ) -> MappedType:
        subtypes = self.flatten_union(yang_type, context, visited, typedef_union)

        union_types: dict[str, int] = {}
        distinct: list[_Subtype] = []
        for subtype in subtypes:
            native = subtype.mapped_type.native_type
            if native not in union_types:
                union_types[native] = len(union_types)
                distinct.append(subtype)

        if len(distinct) == 1:
            return replace(distinct[0].mapped_type)

        name = self.names.union_name(context)
        if name not in self.state.unions:
            self.state.unions[name] = UnionDef(
                name=name,
                subtypes=list(union_types),
                enum_subtypes={s.mapped_type.native_type for s in distinct if s.mapped_type.is_enumerated_value},
                source_path=context.path,
            )
        return MappedType(native_type=name, zero_value="None", union_types=union_types)

    def flatten_union(
        self,
        yang_type: YangType,
        context: SchemaEntry,
        visited: frozenset[str] | None = None,
        typedef_union: YangType | None = None,
    ) -> list[_Subtype]:
        """
        Flatten a union into its non-union members, in declaration order.

        Nested unions are inlined; leafref members are followed to their
        target type. Duplicates are kept so that defaults can be tried
        against every member.
        """
        if visited is None:
            visited = frozenset({context.path})
        if yang_type.is_typedef:
            typedef_union = yang_type

        flattened = []
        for member in yang_type.types:
            member_context = context
            member_visited = visited
            if member.kind == "leafref":
                member_context = self._leafref_target(member, context, visited)
                member_visited = visited | {member_context.path}
                member = member_context.type
            if member.kind == "union":
                flattened.extend(self.flatten_union(member, member_context, member_visited, typedef_union))
                continue
            inner_union = typedef_union if member_context is context else None
            mapped = self._resolve(member, member_context, member_visited, inner_union)
            flattened.append(_Subtype(member, member_context, mapped, inner_union))
        return flattened

    def default_literal(self, yang_type: YangType, context: SchemaEntry, value: str, mapped: MappedType) -> str:
        """
        Compute the Python expression of a default value.

        Args:
            yang_type: Declared type of the leaf
            context: The leaf
            value: The literal as written in the schema
            mapped: The leaf's resolved type

        Returns:
            A Python expression

        Raises:
            ValueConversionError: If the value does not validate
            UnsupportedConstructError: For defaults on multi-type wrapper unions
        """
        if yang_type.kind == "leafref":
            target = self._leafref_target(yang_type, context, frozenset({context.path}))
            return self.default_literal(target.type, target, value, mapped)

        if yang_type.kind == "union":
            return self._union_default(yang_type, context, value, mapped)

        try:
            return self._scalar_default(yang_type, context, value, None)
        except ValueError as e:
            raise ValueConversionError(str(e), context.path) from e

    def _union_default(self, yang_type: YangType, context: SchemaEntry, value: str, mapped: MappedType) -> str:
        if mapped.is_union and self.config.union_style == UnionStyle.WRAPPER:
            raise UnsupportedConstructError("default values are not supported for wrapper union types", context.path)

        problems = []
        for subtype in self.flatten_union(yang_type, context):
            try:
                literal = self._scalar_default(subtype.yang_type, subtype.context, value, subtype.typedef_union)
            except ValueError as e:
                problems.append(f"{subtype.yang_type.name}: {e}")
                continue
            native = subtype.mapped_type.native_type
            if mapped.is_union and native in _WRAPPED_UNION_DEFAULTS:
                return f"{native}({literal})"
            return literal
        raise ValueConversionError(f"default {value!r} matches no member of the union ({'; '.join(problems)})", context.path)

    def _scalar_default(self, yang_type: YangType, context: SchemaEntry, value: str, typedef_union: YangType | None) -> str:
        """Literal of a default for a non-union type; raises ValueError when invalid."""
        kind = yang_type.kind
        if kind in INTEGER_KINDS:
            return default_values.integer_literal(value, yang_type)
        if kind == "decimal64":
            return default_values.decimal64_literal(value, yang_type)
        if kind == "string":
            return default_values.string_literal(value, yang_type)
        if kind == "boolean":
            return default_values.boolean_literal(value)
        if kind == "binary":
            return default_values.binary_literal(value, yang_type)
        if kind == "empty":
            raise ValueError("a leaf of type empty cannot have a default value")
        if kind in ("enumeration", "identityref"):
            enum = self.enums.lookup(context, yang_type, typedef_union)
            return _enum_default(enum, value)
        return json.dumps(value)


def _enum_default(enum: EnumeratedType, value: str) -> str:
    """Expression of an enum member named by a default, with any "prefix:" removed."""
    name = value.split(":", 1)[1] if ":" in value else value
    member = enum.member_for(name)
    if member is None:
        raise ValueError(f"{value!r} is not a value of {enum.class_name}")
    return f"{enum.class_name}.{member.member_name}"
