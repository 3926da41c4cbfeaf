"""
Name resolver for generated identifiers.

Computes compression-aware struct names for directories, CamelCase field
names, Python attribute names and list key names. Every name table belongs
to the ResolverState of a single generation run.
"""

from __future__ import annotations

from ...utils import to_python_identifier, yang_to_camel_case
from ..config import CodeGeneratorConfig
from ..errors import NamingConflictError
from ..schema_ir.loader import is_compressed_valid
from ..schema_ir.nodes import Directory, EntryKind, SchemaEntry, SchemaIR
from .state import ResolverState

# Upper bound on "_" suffixes tried before giving up on a name
MAX_NAME_SUFFIXES = 32

# Attribute names the generated structs and path classes use themselves
RESERVED_ATTR_NAMES = {"self", "cls", "field", "populate_defaults", "list_key"}


def make_name_unique(name: str, defined_names: set[str], path: str = "") -> str:
    """
    Make a name unique within a set of already defined names.

    An underscore is appended until the name is unused, then the name is
    recorded as defined.

    Args:
        name: Candidate name
        defined_names: Names already in use; updated in place
        path: Schema path reported if no unique name can be found

    Returns:
        The unique name

    Raises:
        NamingConflictError: If no unique name is found within MAX_NAME_SUFFIXES attempts
    """
    candidate = name
    for _ in range(MAX_NAME_SUFFIXES + 1):
        if candidate not in defined_names:
            defined_names.add(candidate)
            return candidate
        candidate = f"{candidate}_"
    raise NamingConflictError(f"cannot make name {name!r} unique", path)


def entry_camel_case_name(entry: SchemaEntry) -> str:
    """CamelCase name of an entry, honouring a camelcase-name override."""
    if entry.camelcase_name:
        return entry.camelcase_name
    return yang_to_camel_case(entry.name)


class NameResolver:
    """Resolves generated names for directories, fields and keys."""

    def __init__(self, schema: SchemaIR, config: CodeGeneratorConfig, state: ResolverState):
        self.schema = schema
        self.config = config
        self.state = state

    def directory_name(self, entry: SchemaEntry, compress: bool | None = None) -> str:
        """
        Get the unique struct name of a directory entry.

        Names are CamelCase path elements joined by "_", keeping only the
        ancestors that remain visible under the compression mode. The first
        request for an entry fixes its name for the rest of the run.

        Args:
            entry: Container, list or fakeroot entry
            compress: Compression mode, defaults to the configured mode

        Returns:
            Unique struct name
        """
        cached = self.state.directory_names.get(entry.path)
        if cached is not None:
            return cached

        name = self.path_camel_case_name(entry, compress)
        unique = make_name_unique(name, self.state.defined_globals, entry.path)
        self.state.directory_names[entry.path] = unique
        return unique

    def path_camel_case_name(self, entry: SchemaEntry, compress: bool | None = None) -> str:
        """CamelCase names of the entry and its visible ancestors, root first, joined by "_"."""
        if compress is None:
            compress = self.config.compress_paths

        if entry.kind == EntryKind.FAKEROOT:
            elements = [entry]
        else:
            chain = [entry, *self.schema.ancestors(entry)]
            elements = [e for e in chain if e is entry or self._is_name_element(e, compress)]
            elements.reverse()

        return "_".join(entry_camel_case_name(e) for e in elements)

    def _is_name_element(self, entry: SchemaEntry, compress: bool) -> bool:
        if compress:
            return is_compressed_valid(self.schema, entry)
        return not entry.is_choice_or_case

    def field_name(self, entry: SchemaEntry) -> str:
        """CamelCase name of a field, before per-directory uniquification."""
        return entry_camel_case_name(entry)

    def field_names(self, directory: Directory) -> dict[str, tuple[str, str]]:
        """
        Resolve the names of every field of a directory.

        Fields are processed in sorted schema-name order so that the same
        suffixes are assigned on every run.

        Args:
            directory: The directory

        Returns:
            Mapping of schema field name to (CamelCase field name, Python attribute name)
        """
        used_fields: set[str] = set()
        used_attrs: set[str] = set(RESERVED_ATTR_NAMES)
        names = {}
        for schema_name in sorted(directory.fields):
            entry = self.schema.entry(directory.fields[schema_name].path)
            field_name = make_name_unique(self.field_name(entry), used_fields, entry.path)
            attr_name = make_name_unique(to_python_identifier(entry.name), used_attrs, entry.path)
            names[schema_name] = (field_name, attr_name)
        return names

    def key_names(self, list_entry: SchemaEntry) -> dict[str, str]:
        """Unique CamelCase names of a list's keys, in key statement order."""
        used: set[str] = set()
        names = {}
        for key in list_entry.keys:
            key_entry = self.schema.child(list_entry, key)
            camel = entry_camel_case_name(key_entry) if key_entry else yang_to_camel_case(key)
            names[key] = make_name_unique(camel, used, list_entry.path)
        return names

    def leaf_type_name(self, directory_name: str, field_name: str, parent_is_fakeroot: bool) -> str:
        """
        Name of the path type of a leaf.

        A leaf directly under the fakeroot is named by its field name alone;
        every other leaf is "<Directory>_<Field>".
        """
        if parent_is_fakeroot:
            return field_name
        return f"{directory_name}_{field_name}"

    def path_struct_name(self, name: str, path: str) -> str:
        """Reserve a unique name in the path module, e.g. "Interface_Mtu" or "Interface_Mtu_"."""
        return make_name_unique(name, self.state.path_struct_names, path)

    def union_name(self, leaf: SchemaEntry) -> str:
        """Reserve a unique "<Path>_Union" name for the union type of a leaf."""
        cached = self.state.union_names.get(leaf.path)
        if cached is not None:
            return cached
        base_name = self.path_camel_case_name(leaf)
        unique = make_name_unique(f"{base_name}_Union", self.state.defined_globals, leaf.path)
        self.state.union_names[leaf.path] = unique
        return unique
