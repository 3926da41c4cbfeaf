"""
Schema IR node definitions.

The schema is held as a path-addressed arena: every SchemaEntry is stored
under its absolute schema path and refers to its parent and children by
path, never by object reference. Directories are the subset of entries that
map to one generated struct, with their fields computed under the active
compression mode.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from ..errors import SchemaInconsistencyError

# Built-in YANG type names
INTEGER_KINDS = {
    "int8": (8, True),
    "int16": (16, True),
    "int32": (32, True),
    "int64": (64, True),
    "uint8": (8, False),
    "uint16": (16, False),
    "uint32": (32, False),
    "uint64": (64, False),
}
BUILTIN_KINDS = set(INTEGER_KINDS) | {
    "string",
    "boolean",
    "decimal64",
    "binary",
    "empty",
    "bits",
    "enumeration",
    "identityref",
    "leafref",
    "union",
    "instance-identifier",
}


class EntryKind(str, Enum):
    """Kind of schema statement an entry was built from."""

    MODULE = "module"
    CONTAINER = "container"
    LIST = "list"
    LEAF = "leaf"
    LEAF_LIST = "leaf-list"
    CHOICE = "choice"
    CASE = "case"
    FAKEROOT = "fakeroot"


@dataclass
class EnumValueDef:
    """One value of a YANG enumeration."""

    name: str = ""
    value: int = 0


@dataclass
class YangType:
    """A YANG type as written in the schema, with its restrictions."""

    kind: str = "string"  # Built-in type this resolves to
    name: str = ""  # Typedef name, or the built-in name when not a typedef
    module: str = ""  # Module that defines the typedef

    # Default declared on the typedef
    default: str | None = None

    # Restrictions as raw (low, high) bounds; "min"/"max" stand for the type limits
    ranges: list[tuple[str, str]] = field(default_factory=list)
    lengths: list[tuple[str, str]] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)

    # For enumeration
    enums: list[EnumValueDef] = field(default_factory=list)

    # For identityref: qualified base identity "module:NAME"
    identity_base: str = ""

    # For leafref
    path: str = ""

    # For union
    types: list[YangType] = field(default_factory=list)

    # For decimal64
    fraction_digits: int | None = None

    def __post_init__(self):
        if not self.name:
            self.name = self.kind

    @property
    def is_typedef(self) -> bool:
        """Whether the type was declared through a typedef."""
        return self.name != self.kind and self.name not in BUILTIN_KINDS


@dataclass
class Identity:
    """A YANG identity."""

    name: str = ""
    module: str = ""
    base: str = ""  # Qualified "module:NAME" of the base identity, empty for a root identity

    @property
    def key(self) -> str:
        return f"{self.module}:{self.name}"


@dataclass
class ModuleInfo:
    """A YANG module."""

    name: str = ""
    prefix: str = ""
    namespace: str = ""


@dataclass
class SchemaEntry:
    """A node of the schema tree, stored in the SchemaIR arena."""

    name: str = ""
    kind: EntryKind = EntryKind.CONTAINER
    path: str = ""  # Absolute schema path, including module, choice and case names
    parent: str | None = None  # Path of the parent entry
    children: list[str] = field(default_factory=list)  # Paths, in declaration order
    module: str = ""  # Module the entry belongs to

    # For leaves and leaf-lists
    type: YangType | None = None
    defaults: list[str] = field(default_factory=list)

    # For lists
    keys: list[str] = field(default_factory=list)
    ordered_by_user: bool = False

    config: bool | None = None
    description: str = ""

    # Path of the statement that defined the entry (e.g. inside a grouping)
    definition: str = ""

    # Name override taken from a camelcase-name extension
    camelcase_name: str = ""

    @property
    def is_dir(self) -> bool:
        return self.kind in (EntryKind.CONTAINER, EntryKind.LIST, EntryKind.FAKEROOT)

    @property
    def is_leaf(self) -> bool:
        return self.kind == EntryKind.LEAF

    @property
    def is_leaf_list(self) -> bool:
        return self.kind == EntryKind.LEAF_LIST

    @property
    def is_list(self) -> bool:
        return self.kind == EntryKind.LIST

    @property
    def is_choice_or_case(self) -> bool:
        return self.kind in (EntryKind.CHOICE, EntryKind.CASE)

    @property
    def is_config_state(self) -> bool:
        return self.kind == EntryKind.CONTAINER and self.name in ("config", "state")

    @property
    def default(self) -> str | None:
        """The instance default of a leaf, if any."""
        return self.defaults[0] if self.defaults else None

    @property
    def definition_id(self) -> str:
        return self.definition or self.path


@dataclass
class DirectoryField:
    """A child of a Directory: container, list, leaf or leaf-list."""

    name: str = ""  # Schema name, unique within the directory
    path: str = ""  # Path of the entry the field maps to
    shadow_paths: list[str] = field(default_factory=list)  # Other routings removed by compression


@dataclass
class Directory:
    """A schema subtree that maps to one generated struct."""

    path: str = ""  # Path of the entry the directory is built from
    fields: dict[str, DirectoryField] = field(default_factory=dict)
    list_keys: list[str] = field(default_factory=list)  # Schema key names, in key statement order
    is_fakeroot: bool = False
    is_list: bool = False
    ordered_by_user: bool = False

    @property
    def field_names(self) -> list[str]:
        return list(self.fields)

    @property
    def is_keyless_list(self) -> bool:
        return self.is_list and not self.list_keys


class SchemaIR:
    """Path-addressed arena holding every schema entry of a run."""

    def __init__(self):
        self.entries: dict[str, SchemaEntry] = {}
        self.modules: dict[str, ModuleInfo] = {}
        self.identities: dict[str, Identity] = {}

    def add(self, entry: SchemaEntry) -> None:
        """Add an entry and link it into its parent's children."""
        if entry.path in self.entries:
            raise SchemaInconsistencyError("duplicate schema path", entry.path)
        self.entries[entry.path] = entry
        if entry.parent is not None:
            self.entry(entry.parent).children.append(entry.path)

    def entry(self, path: str) -> SchemaEntry:
        """Return the entry at path, raising SchemaInconsistencyError if absent."""
        try:
            return self.entries[path]
        except KeyError:
            raise SchemaInconsistencyError("no schema entry at path", path) from None

    def get(self, path: str | None) -> SchemaEntry | None:
        if path is None:
            return None
        return self.entries.get(path)

    def parent(self, entry: SchemaEntry) -> SchemaEntry | None:
        if entry.parent is None:
            return None
        return self.entry(entry.parent)

    def children(self, entry: SchemaEntry) -> list[SchemaEntry]:
        return [self.entry(path) for path in entry.children]

    def child(self, entry: SchemaEntry, name: str) -> SchemaEntry | None:
        """Find a data child by name, looking through choice and case nodes."""
        for child in self.children(entry):
            if child.is_choice_or_case:
                found = self.child(child, name)
                if found is not None:
                    return found
            elif child.name == name:
                return child
        return None

    def ancestors(self, entry: SchemaEntry) -> Iterator[SchemaEntry]:
        """Yield the entry's ancestors, nearest first."""
        current = self.parent(entry)
        while current is not None:
            yield current
            current = self.parent(current)

    def data_path(self, entry: SchemaEntry) -> list[str]:
        """Data tree path of an entry: schema path without module, choice and case nodes."""
        if entry.kind in (EntryKind.FAKEROOT, EntryKind.MODULE):
            return []
        elements = [entry]
        elements.extend(self.ancestors(entry))
        return [
            e.name
            for e in reversed(elements)
            if e.kind != EntryKind.MODULE and not e.is_choice_or_case
        ]

    def module_prefix(self, module: str) -> str:
        info = self.modules.get(module)
        return info.prefix if info else ""

    def module_for_prefix(self, prefix: str, default: str = "") -> str:
        """Resolve a YANG prefix to a module name."""
        for info in self.modules.values():
            if info.prefix == prefix or info.name == prefix:
                return info.name
        return default

    def derived_identities(self, base_key: str) -> list[Identity]:
        """All identities derived (transitively) from base_key, sorted by name."""
        found: dict[str, Identity] = {}
        pending = [base_key]
        while pending:
            current = pending.pop()
            for identity in self.identities.values():
                if identity.base == current and identity.key not in found:
                    found[identity.key] = identity
                    pending.append(identity.key)
        return sorted(found.values(), key=lambda i: (i.name, i.module))
