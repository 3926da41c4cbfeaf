"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed schema, ready for code generation:
every directory, field and list key has its generated name and every leaf
has its resolved MappedType.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..errors import GenerationErrors
from ..schema_ir.nodes import EntryKind

# Prefix of generated enumerated type class names
ENUM_PREFIX = "E_"

# Member name of the "value not set" enum sentinel
UNSET_MEMBER = "UNSET"


@dataclass
class MappedType:
    """Target type descriptor for a YANG leaf."""

    native_type: str = ""  # e.g. "uint8", "str", "E_Interface_AdminStatus", "Interface_Foo_Union"
    zero_value: str = ""  # Python literal of the zero value
    default_value: str | None = None  # Python expression of the default, if any
    is_enumerated_value: bool = False

    # Union subtypes: native type name -> first-seen index
    union_types: dict[str, int] = field(default_factory=dict)

    @property
    def is_union(self) -> bool:
        return len(self.union_types) > 1

    @property
    def has_default(self) -> bool:
        return self.default_value is not None


@dataclass
class ListKey:
    """A key of a YANG list."""

    name: str = ""  # Schema name of the key leaf
    field_name: str = ""  # Unique CamelCase name within the list
    attr_name: str = ""  # Attribute of the generated struct holding the key
    mapped_type: MappedType | None = None


class EnumKind(Enum):
    """Where an enumerated type comes from."""

    SIMPLE = "simple"  # enumeration leaf
    DERIVED = "derived"  # typedef of an enumeration
    UNION = "union"  # enumeration within a union leaf
    DERIVED_UNION = "derived_union"  # enumeration within a union typedef
    IDENTITY = "identity"  # identityref


@dataclass
class EnumValue:
    """One value of a generated enumerated type."""

    index: int = 0
    name: str = ""  # Original YANG name
    member_name: str = ""  # Python member name
    defining_module: str = ""  # Module defining the value (identities)


@dataclass
class EnumeratedType:
    """Catalog entry for a generated enumerated type.

    Index 0 is always the UNSET sentinel; schema values start at 1.
    """

    name: str = ""  # Name without the "E_" prefix
    kind: EnumKind = EnumKind.SIMPLE
    values: list[EnumValue] = field(default_factory=list)

    # For identities: qualified name of the base identity
    identity_base: str = ""

    # YANG type name (typedef name, or "enumeration"/"identityref")
    type_name: str = ""

    # Schema path the type was first generated for
    source_path: str = ""

    @property
    def class_name(self) -> str:
        return f"{ENUM_PREFIX}{self.name}"

    def member_for(self, yang_name: str) -> EnumValue | None:
        """Find the value with a given YANG name."""
        for value in self.values:
            if value.index and value.name == yang_name:
                return value
        return None


@dataclass
class UnionDef:
    """A generated union type (wrapper or alias)."""

    name: str = ""
    # Subtype native type names in index order
    subtypes: list[str] = field(default_factory=list)
    # Subtypes that are generated enumerated types
    enum_subtypes: set[str] = field(default_factory=set)
    source_path: str = ""


@dataclass
class ParsedField:
    """A resolved field of a ParsedDirectory."""

    name: str = ""  # Schema name
    field_name: str = ""  # Unique CamelCase name within the directory
    attr_name: str = ""  # Python attribute name within the struct
    kind: EntryKind = EntryKind.LEAF
    path: str = ""  # Primary schema path
    shadow_paths: list[str] = field(default_factory=list)
    mapped_type: MappedType | None = None  # None for containers and lists
    yang_type_name: str = ""
    description: str = ""

    @property
    def is_leaf(self) -> bool:
        return self.kind in (EntryKind.LEAF, EntryKind.LEAF_LIST)

    @property
    def is_leaf_list(self) -> bool:
        return self.kind == EntryKind.LEAF_LIST

    @property
    def is_scalar(self) -> bool:
        """Whether the field holds a single plain value rather than a reference type."""
        if self.kind != EntryKind.LEAF or self.mapped_type is None:
            return False
        mtype = self.mapped_type
        if mtype.is_union or mtype.is_enumerated_value:
            return False
        return mtype.native_type not in ("Binary", "YANGEmpty", "Any")


@dataclass
class ParsedDirectory:
    """A resolved Directory, mapped to one generated struct."""

    name: str = ""  # Unique generated struct name
    path: str = ""
    fields: dict[str, ParsedField] = field(default_factory=dict)
    list_keys: list[ListKey] = field(default_factory=list)
    is_fakeroot: bool = False
    is_list: bool = False
    ordered_by_user: bool = False
    description: str = ""

    @property
    def is_keyless_list(self) -> bool:
        return self.is_list and not self.list_keys

    @property
    def key_class_name(self) -> str:
        """Name of the generated key tuple for multi-key lists."""
        return f"{self.name}_Key"


@dataclass
class NodeData:
    """Metadata about the generated code of one schema node."""

    type_name: str = ""  # Target type of the node's value
    field_name: str = ""  # Name under its parent struct
    parent_type_name: str = ""  # Struct the node belongs to
    is_leaf: bool = False
    is_scalar: bool = False
    has_default: bool = False
    yang_type_name: str = ""
    yang_path: str = ""


@dataclass
class IR:
    """Complete intermediate representation of one generation run."""

    # Directories keyed by schema path, in sorted order
    directories: dict[str, ParsedDirectory] = field(default_factory=dict)

    # Enumerated types keyed by name
    enums: dict[str, EnumeratedType] = field(default_factory=dict)

    # Union types keyed by name
    unions: dict[str, UnionDef] = field(default_factory=dict)

    # Schema paths of directories whose output is withheld because of an error
    failed_paths: set[str] = field(default_factory=set)

    errors: GenerationErrors = field(default_factory=GenerationErrors)

    # Name of the fakeroot struct, empty when there is none
    root_name: str = ""

    generation_comment: str | None = None

    def directory_by_name(self, name: str) -> ParsedDirectory | None:
        for directory in self.directories.values():
            if directory.name == name:
                return directory
        return None
