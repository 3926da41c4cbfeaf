"""
Leafref target resolution.

Follows a leafref path expression through the schema arena to the leaf it
refers to. Predicates are ignored and prefixes are dropped, so only the
schema location of the target is determined.
"""

from __future__ import annotations

import re

from ...utils import split_schema_path, strip_prefix
from ..errors import SchemaInconsistencyError
from ..schema_ir.nodes import EntryKind, SchemaEntry, SchemaIR

# A path element predicate, e.g. "[name=current()/../name]"
_PREDICATE_PATTERN = re.compile(r"\[.*\]")


class LeafrefResolver:
    """Resolves leafref path expressions to schema entries."""

    def __init__(self, schema: SchemaIR):
        self.schema = schema
        # (leaf path, leafref path) -> target path
        self._target_cache: dict[tuple[str, str], str] = {}

    def resolve_target(self, leaf: SchemaEntry, path: str) -> SchemaEntry:
        """
        Find the leaf a leafref path refers to.

        Args:
            leaf: The leaf whose type is the leafref
            path: The leafref path expression

        Returns:
            The target leaf or leaf-list

        Raises:
            SchemaInconsistencyError: If the path leads outside the schema or to a missing node
        """
        cache_key = (leaf.path, path)
        if cache_key in self._target_cache:
            return self.schema.entry(self._target_cache[cache_key])

        elements = [_PREDICATE_PATTERN.sub("", e) for e in split_schema_path(path.strip())]
        if elements and elements[0] == "":
            target = self._resolve_absolute(leaf, elements[1:], path)
        else:
            target = self._resolve_relative(leaf, elements, path)

        if target.kind not in (EntryKind.LEAF, EntryKind.LEAF_LIST):
            raise SchemaInconsistencyError(f"leafref {path!r} does not refer to a leaf", leaf.path)
        self._target_cache[cache_key] = target.path
        return target

    def _resolve_absolute(self, leaf: SchemaEntry, elements: list[str], path: str) -> SchemaEntry:
        if not elements:
            raise SchemaInconsistencyError(f"empty leafref path {path!r}", leaf.path)
        first = elements[0]
        candidates = self._top_level_modules(first, leaf.module)
        for module in candidates:
            current = self.schema.child(module, strip_prefix(first))
            if current is not None:
                return self._walk(current, elements[1:], leaf, path)
        raise SchemaInconsistencyError(f"leafref {path!r} refers to a missing node", leaf.path)

    def _top_level_modules(self, element: str, default_module: str) -> list[SchemaEntry]:
        """Modules to search for the first element of an absolute path."""
        if ":" in element:
            prefix = element.split(":", 1)[0]
            module = self.schema.module_for_prefix(prefix, default=default_module)
            entry = self.schema.get(f"/{module}")
            return [entry] if entry is not None else []
        return sorted(
            (e for e in self.schema.entries.values() if e.kind == EntryKind.MODULE),
            key=lambda e: e.path,
        )

    def _resolve_relative(self, leaf: SchemaEntry, elements: list[str], path: str) -> SchemaEntry:
        return self._walk(leaf, elements, leaf, path)

    def _walk(self, start: SchemaEntry, elements: list[str], leaf: SchemaEntry, path: str) -> SchemaEntry:
        current = start
        for element in elements:
            if element in ("", "."):
                continue
            if element == "..":
                current = self._data_parent(current, leaf, path)
                continue
            child = self.schema.child(current, strip_prefix(element))
            if child is None:
                raise SchemaInconsistencyError(f"leafref {path!r} refers to a missing node", leaf.path)
            current = child
        return current

    def _data_parent(self, entry: SchemaEntry, leaf: SchemaEntry, path: str) -> SchemaEntry:
        """Parent in the data tree: choice and case nodes are skipped."""
        parent = self.schema.parent(entry)
        while parent is not None and parent.is_choice_or_case:
            parent = self.schema.parent(parent)
        if parent is None:
            raise SchemaInconsistencyError(f"leafref {path!r} goes above the schema root", leaf.path)
        return parent
