"""
Path constructor: builds the path-accessor API of every reachable node.

Each directory and leaf gets a path struct (and a wildcard "...Any" twin).
Each field of a directory gets child constructor methods on its parent's
path structs. For keyed lists one method is built per combination of
specified and wildcarded keys, or, above the configured key-count
threshold, a single wildcard constructor plus one With<Key> method per key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...utils import to_python_identifier
from ..analyzer.ir_nodes import IR, ListKey, NodeData, ParsedDirectory, ParsedField
from ..analyzer.name_resolver import NameResolver, make_name_unique
from ..config import CodeGeneratorConfig
from ..errors import NamingConflictError
from ..schema_ir.nodes import SchemaIR

logger = logging.getLogger(__name__)

# Suffix of wildcard path struct names and wildcard accessors
WILDCARD_SUFFIX = "Any"

# Value of a wildcarded key in a path
WILDCARD_KEY = "*"

# Python expression of a wildcarded key value
WILDCARD_KEY_EXPRESSION = f'"{WILDCARD_KEY}"'

# Parameter names the generated methods use themselves
RESERVED_PARAM_NAMES = {"self"}

# Names the path module defines or imports besides its path structs
RESERVED_STRUCT_NAMES = {"NodePath", "RootPath", "TYPE_CHECKING", "Any", "Binary", "YANGEmpty"}


def combinations(n: int) -> list[list[int]]:
    """
    Return every combination of the numbers 0 to n-1.

    The order is built up by starting from the empty combination and, for
    each i in turn, appending a copy of every combination found so far with i
    added. So combinations(2) == [[], [0], [1], [0, 1]].

    The first combination is always empty, the last one always holds every
    number, and numbers within a combination are increasing. A negative n
    gives the result for 0.
    """
    combos: list[list[int]] = [[]]
    for i in range(n):
        combos.extend([*combo, i] for combo in list(combos))
    return combos


@dataclass
class KeyParam:
    """A key parameter of a list accessor."""

    key_name: str  # Schema name of the key
    param_name: str  # Python parameter name
    type_name: str  # Python type of the parameter


@dataclass
class ChildConstructor:
    """A method of a path struct returning the path struct of a child node."""

    method_name: str = ""
    parent_type_name: str = ""  # Path struct the method is defined on
    type_name: str = ""  # Path struct returned
    schema_name: str = ""
    rel_path: list[str] = field(default_factory=list)
    params: list[KeyParam] = field(default_factory=list)
    # Schema key name -> Python expression of its value; empty for non-lists
    key_values: dict[str, str] = field(default_factory=dict)


@dataclass
class KeyBuilder:
    """A With<Key> method rewriting one key of a wildcard list path in place."""

    method_name: str = ""
    parent_type_name: str = ""  # Path struct the method is defined on (and returns)
    key: KeyParam | None = None


@dataclass
class PathStruct:
    """A generated path struct."""

    name: str = ""
    yang_path: str = ""
    is_fakeroot: bool = False
    is_leaf: bool = False
    is_wildcard: bool = False
    constructors: list[ChildConstructor] = field(default_factory=list)
    builders: list[KeyBuilder] = field(default_factory=list)


@dataclass
class PathNames:
    """Path struct names of one node."""

    name: str
    wildcard: str | None = None  # None when wildcard paths are off


@dataclass
class PathAPI:
    """All path structs of a run, with the node metadata index."""

    structs: dict[str, PathStruct] = field(default_factory=dict)
    node_data: dict[str, NodeData] = field(default_factory=dict)


class PathConstructor:
    """Builds path structs and accessors from an analyzed IR."""

    def __init__(self, ir: IR, schema: SchemaIR, config: CodeGeneratorConfig, names: NameResolver):
        self.ir = ir
        self.schema = schema
        self.config = config
        self.names = names
        # Directory or leaf schema path -> its path struct names
        self.struct_names: dict[str, PathNames] = {}

    def build(self) -> PathAPI:
        """
        Build the path API of every reachable directory.

        Returns:
            The path structs, keyed by name, and the node metadata index

        Raises:
            NamingConflictError: If two path structs end up with the same name
        """
        api = PathAPI()
        self.reserve_names()
        unreachable = self.unreachable_paths()
        for path, directory in self.ir.directories.items():
            if path in unreachable:
                continue
            for struct in self.directory_structs(directory, unreachable):
                if struct.name in api.structs:
                    raise NamingConflictError(f"duplicate path struct name {struct.name!r}", struct.yang_path)
                api.structs[struct.name] = struct

        api.node_data = self.node_data_map()
        logger.debug("Built %d path structs", len(api.structs))
        return api

    def reserve_names(self) -> None:
        """
        Hand out every path struct name of the run.

        Directories keep their struct names, then leaf path types are named,
        then the wildcard twins. A name that is taken gets "_" appended, so a
        concrete struct never loses its name to a wildcard twin and no leaf
        can take the name of the root.
        """
        used = self.names.state.path_struct_names
        used.clear()
        self.struct_names.clear()
        used.update(RESERVED_STRUCT_NAMES)
        used.update(enum.class_name for enum in self.ir.enums.values())
        used.update(self.ir.unions)

        directories = sorted(
            (d for path, d in self.ir.directories.items() if path not in self.ir.failed_paths),
            key=lambda d: (not d.is_fakeroot, d.path),
        )
        for directory in directories:
            self.struct_names[directory.path] = PathNames(self.names.path_struct_name(directory.name, directory.path))

        leaves = []
        for directory in directories:
            for schema_name in sorted(directory.fields):
                parsed_field = directory.fields[schema_name]
                if not parsed_field.is_leaf:
                    continue
                name = self.names.leaf_type_name(directory.name, parsed_field.field_name, directory.is_fakeroot)
                self.struct_names[parsed_field.path] = PathNames(self.names.path_struct_name(name, parsed_field.path))
                leaves.append(parsed_field.path)

        if not self.config.generate_wildcard_paths:
            return
        for directory in directories:
            if not directory.is_fakeroot:
                names = self.struct_names[directory.path]
                names.wildcard = self.names.path_struct_name(f"{names.name}{WILDCARD_SUFFIX}", directory.path)
        for path in leaves:
            names = self.struct_names[path]
            names.wildcard = self.names.path_struct_name(f"{names.name}{WILDCARD_SUFFIX}", path)

    def unreachable_paths(self) -> set[str]:
        """
        Directories that get no path struct.

        A keyless list cannot be addressed by a path, and a failed directory
        has no output; neither can anything beneath them be reached.
        """
        roots = set(self.ir.failed_paths)
        for path, directory in self.ir.directories.items():
            if directory.is_keyless_list:
                logger.debug("Skipping path accessors for keyless list %s", path)
                roots.add(path)
        return {path for path in self.ir.directories if any(path == r or path.startswith(f"{r}/") for r in roots)}

    def directory_structs(self, directory: ParsedDirectory, unreachable: set[str]) -> list[PathStruct]:
        """Path structs of a directory and of its leaves, with their child constructors."""
        names = self.struct_names[directory.path]
        struct = PathStruct(name=names.name, yang_path=directory.path, is_fakeroot=directory.is_fakeroot)
        structs = [struct]
        wildcard_struct = None
        if names.wildcard is not None:
            wildcard_struct = PathStruct(name=names.wildcard, yang_path=directory.path, is_wildcard=True)
            structs.append(wildcard_struct)
        if self.uses_builder_api(directory):
            host = wildcard_struct or struct
            host.builders = self.key_builders(directory, host)

        for schema_name in sorted(directory.fields):
            parsed_field = directory.fields[schema_name]
            rel_path = self.relative_path(directory, parsed_field)

            if parsed_field.is_leaf:
                leaf_names = self.struct_names[parsed_field.path]
                structs.append(PathStruct(name=leaf_names.name, yang_path=parsed_field.path, is_leaf=True))
                if leaf_names.wildcard is not None:
                    structs.append(PathStruct(name=leaf_names.wildcard, yang_path=parsed_field.path, is_leaf=True, is_wildcard=True))
                self._add_container_constructors(struct, wildcard_struct, parsed_field, leaf_names, rel_path)
                continue

            child = self.ir.directories.get(parsed_field.path)
            if child is None or child.path in unreachable:
                continue
            if child.is_list:
                self._add_list_constructors(struct, wildcard_struct, parsed_field, child, rel_path)
            else:
                self._add_container_constructors(struct, wildcard_struct, parsed_field, self.struct_names[child.path], rel_path)
        return structs

    def relative_path(self, directory: ParsedDirectory, parsed_field: ParsedField) -> list[str]:
        """
        Path elements from a directory to one of its fields.

        When compression leaves more than one routing to the field, the
        longest one is used.
        """
        parent_path = self.schema.data_path(self.schema.entry(directory.path))
        candidates = []
        for path in [parsed_field.path, *parsed_field.shadow_paths]:
            data_path = self.schema.data_path(self.schema.entry(path))
            candidates.append(data_path[len(parent_path):])
        return max(candidates, key=len)

    def _add_container_constructors(
        self,
        struct: PathStruct,
        wildcard_struct: PathStruct | None,
        parsed_field: ParsedField,
        child_names: PathNames,
        rel_path: list[str],
    ) -> None:
        constructor = ChildConstructor(
            method_name=parsed_field.field_name,
            parent_type_name=struct.name,
            type_name=child_names.name,
            schema_name=parsed_field.name,
            rel_path=rel_path,
        )
        struct.constructors.append(constructor)
        if wildcard_struct is not None:
            wildcard_struct.constructors.append(
                ChildConstructor(
                    method_name=constructor.method_name,
                    parent_type_name=wildcard_struct.name,
                    type_name=child_names.wildcard or child_names.name,
                    schema_name=constructor.schema_name,
                    rel_path=rel_path,
                )
            )

    def _add_list_constructors(
        self,
        struct: PathStruct,
        wildcard_struct: PathStruct | None,
        parsed_field: ParsedField,
        child: ParsedDirectory,
        rel_path: list[str],
    ) -> None:
        key_params = self.key_params(child.list_keys)
        if self.uses_builder_api(child):
            constructors = self.builder_constructors(parsed_field, child, key_params, rel_path)
        else:
            constructors = self.key_combination_constructors(parsed_field, child, key_params, rel_path)

        for constructor in constructors:
            constructor.parent_type_name = struct.name
            struct.constructors.append(constructor)
            if wildcard_struct is not None:
                wildcard_struct.constructors.append(self._on_wildcard_parent(constructor, wildcard_struct.name, child))

    def _on_wildcard_parent(self, constructor: ChildConstructor, parent_name: str, child: ParsedDirectory) -> ChildConstructor:
        """The same accessor on a wildcard parent, which always returns a wildcard child."""
        return ChildConstructor(
            method_name=constructor.method_name,
            parent_type_name=parent_name,
            type_name=self._list_type_name(child, wildcard=True),
            schema_name=constructor.schema_name,
            rel_path=constructor.rel_path,
            params=list(constructor.params),
            key_values=dict(constructor.key_values),
        )

    def _list_type_name(self, child: ParsedDirectory, wildcard: bool) -> str:
        names = self.struct_names[child.path]
        if wildcard and names.wildcard is not None:
            return names.wildcard
        return names.name

    def key_params(self, list_keys: list[ListKey]) -> list[KeyParam]:
        """Parameters for a list's keys, in key order."""
        used = set(RESERVED_PARAM_NAMES)
        params = []
        for key in list_keys:
            type_name = "str"
            if key.mapped_type is not None and key.mapped_type.native_type != "Any":
                type_name = key.mapped_type.native_type
            params.append(
                KeyParam(
                    key_name=key.name,
                    param_name=make_name_unique(to_python_identifier(key.name), used),
                    type_name=type_name,
                )
            )
        return params

    def key_combination_constructors(
        self,
        parsed_field: ParsedField,
        child: ParsedDirectory,
        key_params: list[KeyParam],
        rel_path: list[str],
    ) -> list[ChildConstructor]:
        """
        One accessor per combination of specified keys.

        The all-wildcard combination is named "<Base>Any"; partially
        wildcarded ones append "Any<Key>" for each wildcarded key. Only the
        fully specified accessor returns the concrete path struct.
        """
        base_name = parsed_field.field_name
        key_field_names = [key.field_name for key in child.list_keys]
        combos = combinations(len(key_params))
        if not self.config.generate_wildcard_paths:
            combos = combos[-1:]

        constructors = []
        for combo_index, combo in enumerate(combos):
            selected = set(combo)
            params = [key_params[i] for i in combo]
            key_values = {}
            any_suffixes = []
            for i, param in enumerate(key_params):
                if i in selected:
                    key_values[param.key_name] = param.param_name
                else:
                    key_values[param.key_name] = WILDCARD_KEY_EXPRESSION
                    any_suffixes.append(f"{WILDCARD_SUFFIX}{key_field_names[i]}")

            is_full = len(combo) == len(key_params)
            if combo_index == 0 and not is_full:
                method_name = f"{base_name}{WILDCARD_SUFFIX}"
                if self.config.simplify_wildcard_paths:
                    key_values = {}
            else:
                method_name = base_name + "".join(any_suffixes)

            constructors.append(
                ChildConstructor(
                    method_name=method_name,
                    type_name=self._list_type_name(child, wildcard=not is_full),
                    schema_name=parsed_field.name,
                    rel_path=rel_path,
                    params=params,
                    key_values=key_values,
                )
            )
        return constructors

    def builder_constructors(
        self,
        parsed_field: ParsedField,
        child: ParsedDirectory,
        key_params: list[KeyParam],
        rel_path: list[str],
    ) -> list[ChildConstructor]:
        """
        A single wildcard accessor; keys are then set with With<Key> methods.

        The With<Key> methods are attached to the wildcard path struct of the
        list and rewrite one key in place.
        """
        key_values = {} if self.config.simplify_wildcard_paths else {p.key_name: WILDCARD_KEY_EXPRESSION for p in key_params}
        constructor = ChildConstructor(
            method_name=f"{parsed_field.field_name}{WILDCARD_SUFFIX}",
            type_name=self._list_type_name(child, wildcard=True),
            schema_name=parsed_field.name,
            rel_path=rel_path,
            key_values=key_values,
        )
        return [constructor]

    def uses_builder_api(self, directory: ParsedDirectory) -> bool:
        """Whether a list's keys are set with With<Key> methods rather than accessor parameters."""
        threshold = self.config.list_builder_key_threshold
        return directory.is_list and bool(threshold) and len(directory.list_keys) >= threshold

    def key_builders(self, directory: ParsedDirectory, host: PathStruct) -> list[KeyBuilder]:
        """With<Key> methods of a list path struct, in key order."""
        return [
            KeyBuilder(method_name=f"With{key.field_name}", parent_type_name=host.name, key=param)
            for key, param in zip(directory.list_keys, self.key_params(directory.list_keys))
        ]

    def node_data_map(self) -> dict[str, NodeData]:
        """
        Metadata of every generated node, keyed by path struct name.

        Fields of failed directories, and fields leading to them, are left out.
        """
        node_data = {}
        for directory in self.ir.directories.values():
            if directory.path in self.ir.failed_paths:
                continue
            for schema_name in sorted(directory.fields):
                parsed_field = directory.fields[schema_name]
                if parsed_field.is_leaf:
                    name = self.struct_names[parsed_field.path].name
                    mapped = parsed_field.mapped_type
                    type_name = mapped.native_type if mapped else "Any"
                    if parsed_field.is_leaf_list:
                        type_name = f"list[{type_name}]"
                    node_data[name] = NodeData(
                        type_name=type_name,
                        field_name=parsed_field.attr_name,
                        parent_type_name=directory.name,
                        is_leaf=True,
                        is_scalar=parsed_field.is_scalar,
                        has_default=bool(mapped and mapped.has_default),
                        yang_type_name=parsed_field.yang_type_name,
                        yang_path=parsed_field.path,
                    )
                    continue
                child = self.ir.directories.get(parsed_field.path)
                if child is None or child.path in self.ir.failed_paths:
                    continue
                node_data[self.struct_names[child.path].name] = NodeData(
                    type_name=child.name,
                    field_name=parsed_field.attr_name,
                    parent_type_name=directory.name,
                    yang_path=parsed_field.path,
                )
        return dict(sorted(node_data.items()))
