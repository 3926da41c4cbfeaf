"""
Schema analyzer that orchestrates the resolution passes and builds the IR.

Passes:
1. Build Directories under the compression mode (front end)
2. Name every directory, fakeroot first, then in sorted path order
3. Collect enumerated types from every leaf and settle their names
4. Resolve fields, list keys and leaf types per directory
5. Reject lists with binary keys, in one pass over every list
"""

from __future__ import annotations

import logging

from ..config import CodeGeneratorConfig
from ..errors import GenerationError, SchemaInconsistencyError, UnsupportedConstructError
from ..schema_ir.loader import build_directories
from ..schema_ir.nodes import Directory, EntryKind, SchemaIR
from .enum_resolver import EnumResolver
from .ir_nodes import IR, ListKey, ParsedDirectory, ParsedField
from .name_resolver import NameResolver
from .state import ResolverState
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)

# Native type name of the binary marker type
BINARY_TYPE_NAME = "Binary"


class SchemaAnalyzer:
    """
    Analyzes a SchemaIR and produces the IR used by the backends.

    A fresh ResolverState is created for every call to analyze(), so one
    analyzer can be reused and repeated runs give identical results.
    """

    def __init__(self, config: CodeGeneratorConfig):
        self.config = config

    def analyze(self, schema: SchemaIR) -> IR:
        """
        Analyze a schema.

        Per-node errors are collected in IR.errors and the nodes they concern
        are listed in IR.failed_paths.

        Args:
            schema: The schema arena

        Returns:
            The resolved IR

        Raises:
            SchemaInconsistencyError: If the schema references missing nodes
        """
        state = ResolverState()
        names = NameResolver(schema, self.config, state)
        enums = EnumResolver(schema, self.config, state)
        types = TypeResolver(schema, self.config, state, names, enums)
        ir = IR(root_name=self.config.root_name)

        directories, conflicts = build_directories(schema, self.config)
        for conflict in conflicts:
            self._fail(ir, conflict, conflict.path)

        # Pass 2: names
        for path in self._naming_order(directories):
            names.directory_name(schema.entry(path))

        # Pass 3: enumerated types
        leaves = [
            entry
            for path, entry in sorted(schema.entries.items())
            if entry.kind in (EntryKind.LEAF, EntryKind.LEAF_LIST)
        ]
        failed_leaves: dict[str, GenerationError] = {}
        for error in enums.collect(leaves):
            failed_leaves[error.path] = error
        enums.resolve_clash_sets()

        # Pass 4: fields and types
        for path, directory in directories.items():
            parsed, errors = self._parse_directory(schema, directory, names, types, failed_leaves)
            ir.directories[path] = parsed
            for error in errors:
                self._fail(ir, error, path)

        # Pass 5: binary list keys
        for error in check_binary_keys(list(ir.directories.values())):
            self._fail(ir, error, error.path)

        ir.enums = dict(sorted(state.enums.items()))
        ir.unions = dict(sorted(state.unions.items()))
        logger.debug(
            "Analyzed %d directories, %d enums, %d unions, %d errors",
            len(ir.directories),
            len(ir.enums),
            len(ir.unions),
            len(ir.errors),
        )
        return ir

    def _naming_order(self, directories: dict[str, Directory]) -> list[str]:
        roots = [path for path, d in directories.items() if d.is_fakeroot]
        return roots + sorted(path for path, d in directories.items() if not d.is_fakeroot)

    @staticmethod
    def _fail(ir: IR, error: GenerationError, path: str) -> None:
        ir.errors.add(error)
        ir.failed_paths.add(path)

    def _parse_directory(
        self,
        schema: SchemaIR,
        directory: Directory,
        names: NameResolver,
        types: TypeResolver,
        failed_leaves: dict[str, GenerationError],
    ) -> tuple[ParsedDirectory, list[GenerationError]]:
        """Resolve the fields and keys of one directory, collecting every error found."""
        entry = schema.entry(directory.path)
        parsed = ParsedDirectory(
            name=names.directory_name(entry),
            path=directory.path,
            is_fakeroot=directory.is_fakeroot,
            is_list=directory.is_list,
            ordered_by_user=directory.ordered_by_user,
            description=entry.description,
        )
        errors: list[GenerationError] = []

        field_names = names.field_names(directory)
        for schema_name, dir_field in directory.fields.items():
            field_entry = schema.entry(dir_field.path)
            field_name, attr_name = field_names[schema_name]
            parsed_field = ParsedField(
                name=schema_name,
                field_name=field_name,
                attr_name=attr_name,
                kind=field_entry.kind,
                path=dir_field.path,
                shadow_paths=list(dir_field.shadow_paths),
                description=field_entry.description,
            )
            if field_entry.kind in (EntryKind.LEAF, EntryKind.LEAF_LIST):
                parsed_field.yang_type_name = field_entry.type.name if field_entry.type else ""
                if dir_field.path in failed_leaves:
                    errors.append(failed_leaves[dir_field.path])
                else:
                    try:
                        parsed_field.mapped_type = types.resolve_leaf(field_entry)
                    except SchemaInconsistencyError:
                        raise
                    except GenerationError as e:
                        errors.append(e)
            parsed.fields[schema_name] = parsed_field

        if directory.is_list:
            key_names = names.key_names(entry)
            for key in directory.list_keys:
                key_field = parsed.fields.get(key)
                if key_field is None:
                    raise SchemaInconsistencyError(f"list key {key!r} is not a field of the list", directory.path)
                parsed.list_keys.append(
                    ListKey(
                        name=key,
                        field_name=key_names[key],
                        attr_name=key_field.attr_name,
                        mapped_type=key_field.mapped_type,
                    )
                )
        return parsed, errors


def check_binary_keys(directories: list[ParsedDirectory]) -> list[UnsupportedConstructError]:
    """
    Find every list keyed by a binary value.

    All lists are checked before anything is reported, and each offending
    list gives exactly one error naming all of its binary keys.

    Args:
        directories: Every parsed directory of the run

    Returns:
        One error per offending list, in directory order
    """
    errors = []
    for directory in directories:
        offending = []
        for key in directory.list_keys:
            mapped = key.mapped_type
            if mapped is None:
                continue
            if mapped.native_type == BINARY_TYPE_NAME:
                offending.append(key.name)
            elif BINARY_TYPE_NAME in mapped.union_types:
                offending.append(f"{key.name} (union)")
        if offending:
            errors.append(
                UnsupportedConstructError(
                    f"list has binary keys, which are not supported: {', '.join(offending)}",
                    directory.path,
                )
            )
    return errors
