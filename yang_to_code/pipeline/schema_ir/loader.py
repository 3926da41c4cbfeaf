"""
Schema front end: loads a JSON description of a parsed YANG schema into a
SchemaIR arena and builds the Directories used for code generation.

Phase 1 of the pipeline. Textual YANG parsing happens upstream; this module
only consumes the already parsed tree.
"""

from __future__ import annotations

import logging
from typing import Any

from ...utils import strip_prefix
from ..config import CodeGeneratorConfig
from ..errors import NamingConflictError, SchemaInconsistencyError
from .nodes import (
    BUILTIN_KINDS,
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

logger = logging.getLogger(__name__)


class SchemaLoader:
    """Builds a SchemaIR from a dictionary (typically parsed from JSON)."""

    def __init__(self):
        self.ir = SchemaIR()
        # Typedefs per module, raw dictionaries keyed by typedef name
        self._typedefs: dict[str, dict[str, Any]] = {}

    def load(self, data: dict[str, Any]) -> SchemaIR:
        """
        Load a schema description.

        Args:
            data: Dictionary with a "modules" list

        Returns:
            The populated SchemaIR
        """
        modules = data.get("modules", [])

        # Register modules first so that prefixes resolve across modules
        for raw_module in modules:
            name = raw_module["name"]
            self.ir.modules[name] = ModuleInfo(
                name=name,
                prefix=raw_module.get("prefix", name),
                namespace=raw_module.get("namespace", ""),
            )
            self._typedefs[name] = dict(raw_module.get("typedefs", {}))

        for raw_module in modules:
            module = raw_module["name"]
            for raw_identity in raw_module.get("identities", []):
                identity = Identity(
                    name=raw_identity["name"],
                    module=module,
                    base=self._qualify(raw_identity.get("base", ""), module),
                )
                self.ir.identities[identity.key] = identity

            self.ir.add(SchemaEntry(name=module, kind=EntryKind.MODULE, path=f"/{module}", module=module))
            for raw_child in raw_module.get("children", []):
                self._add_entry(raw_child, f"/{module}", module, inherited_config=True)

        logger.debug("Loaded %d schema entries from %d modules", len(self.ir.entries), len(modules))
        return self.ir

    def _qualify(self, name: str, module: str) -> str:
        """Turn "prefix:NAME" or "NAME" into "module:NAME"."""
        if not name:
            return ""
        if ":" in name:
            prefix = name.split(":", 1)[0]
            module = self.ir.module_for_prefix(prefix, default=module)
        return f"{module}:{strip_prefix(name)}"

    def _add_entry(self, raw: dict[str, Any], parent_path: str, module: str, inherited_config: bool) -> None:
        try:
            kind = EntryKind(raw.get("kind", "container"))
        except ValueError:
            raise SchemaInconsistencyError(f"unknown entry kind {raw.get('kind')!r}", parent_path) from None

        name = raw["name"]
        config = raw.get("config", inherited_config)
        entry = SchemaEntry(
            name=name,
            kind=kind,
            path=f"{parent_path}/{name}",
            parent=parent_path,
            module=raw.get("module", module),
            keys=_split_keys(raw.get("keys", [])),
            ordered_by_user=raw.get("ordered_by", "system") == "user",
            config=config,
            description=raw.get("description", ""),
            definition=raw.get("definition", ""),
            camelcase_name=raw.get("camelcase_name", ""),
        )
        if kind in (EntryKind.LEAF, EntryKind.LEAF_LIST):
            entry.type = self._parse_type(raw.get("type", "string"), entry.module, set())
            default = raw.get("default")
            if isinstance(default, list):
                entry.defaults = [str(d) for d in default]
            elif default is not None:
                entry.defaults = [str(default)]

        self.ir.add(entry)
        for raw_child in raw.get("children", []):
            self._add_entry(raw_child, entry.path, entry.module, config)

    def _parse_type(self, raw: dict[str, Any] | str, module: str, visiting: set[str]) -> YangType:
        if isinstance(raw, str):
            raw = {"kind": raw}

        kind = raw.get("kind", "string")
        if kind not in BUILTIN_KINDS:
            return self._resolve_typedef(kind, raw, module, visiting)

        yang_type = YangType(
            kind=kind,
            name=raw.get("name", kind),
            module=raw.get("module", module),
            default=_optional_str(raw.get("default")),
            ranges=_parse_bounds(raw.get("range")),
            lengths=_parse_bounds(raw.get("length")),
            patterns=_as_list(raw.get("pattern")),
            enums=_parse_enums(raw.get("enums", [])),
            identity_base=self._qualify(raw.get("base", ""), module),
            path=raw.get("path", ""),
            fraction_digits=raw.get("fraction_digits"),
        )
        yang_type.types = [self._parse_type(t, module, visiting) for t in raw.get("types", [])]
        return yang_type

    def _resolve_typedef(self, ref: str, raw: dict[str, Any], module: str, visiting: set[str]) -> YangType:
        """Resolve a reference to a typedef, applying restrictions given at the use site."""
        qualified = self._qualify(ref, module)
        if qualified in visiting:
            raise SchemaInconsistencyError(f"typedef {ref} refers to itself", qualified)
        defining_module, typedef_name = qualified.split(":", 1)
        definition = self._typedefs.get(defining_module, {}).get(typedef_name)
        if definition is None:
            raise SchemaInconsistencyError(f"unknown type {ref!r}", qualified)

        base = self._parse_type(definition, defining_module, visiting | {qualified})
        base.name = typedef_name
        base.module = defining_module
        if "default" in definition:
            base.default = str(definition["default"])
        # Restrictions at the use site narrow the typedef
        if "range" in raw:
            base.ranges = _parse_bounds(raw["range"])
        if "length" in raw:
            base.lengths = _parse_bounds(raw["length"])
        if "pattern" in raw:
            base.patterns = base.patterns + _as_list(raw["pattern"])
        return base


def load_schema(data: dict[str, Any]) -> SchemaIR:
    """Load a schema dictionary into a SchemaIR."""
    return SchemaLoader().load(data)


def ensure_fakeroot(ir: SchemaIR, name: str) -> SchemaEntry:
    """Return the fakeroot entry, adding it to the arena on first use."""
    path = f"/{name}"
    existing = ir.entries.get(path)
    if existing is not None:
        if existing.kind != EntryKind.FAKEROOT:
            raise SchemaInconsistencyError(f"fakeroot name {name!r} clashes with a module", path)
        return existing
    root = SchemaEntry(name=name, kind=EntryKind.FAKEROOT, path=path, config=True)
    ir.entries[path] = root
    return root


class DirectoryBuilder:
    """Builds the Directories of a schema under a compression mode."""

    def __init__(self, ir: SchemaIR, config: CodeGeneratorConfig):
        self.ir = ir
        self.config = config
        self.errors: list[NamingConflictError] = []

    def build(self) -> dict[str, Directory]:
        """
        Build every Directory of the schema.

        Returns:
            Directories keyed by entry path, in sorted path order
        """
        directories: dict[str, Directory] = {}
        if self.config.generate_fakeroot:
            root = ensure_fakeroot(self.ir, self.config.fakeroot_name)
            directories[root.path] = self._build_directory(root)

        for path in sorted(self.ir.entries):
            entry = self.ir.entries[path]
            if entry.kind == EntryKind.FAKEROOT or not entry.is_dir:
                continue
            if self.config.compress_paths and not is_compressed_valid(self.ir, entry):
                continue
            directories[path] = self._build_directory(entry)

        return dict(sorted(directories.items()))

    def _build_directory(self, entry: SchemaEntry) -> Directory:
        directory = Directory(
            path=entry.path,
            is_fakeroot=entry.kind == EntryKind.FAKEROOT,
            is_list=entry.is_list,
            ordered_by_user=entry.ordered_by_user,
        )
        if entry.is_list:
            for key in entry.keys:
                if self.ir.child(entry, key) is None:
                    raise SchemaInconsistencyError(f"list key {key!r} is not a child of the list", entry.path)
            directory.list_keys = list(entry.keys)

        candidates: list[tuple[int, SchemaEntry]] = []
        if directory.is_fakeroot:
            for module in sorted(
                (e for e in self.ir.entries.values() if e.kind == EntryKind.MODULE), key=lambda e: e.path
            ):
                self._collect(module, candidates, rank=2)
        else:
            self._collect(entry, candidates, rank=2)

        # Lower rank wins; equal ranks keep declaration order
        for rank, child in sorted(candidates, key=lambda c: c[0]):
            existing = directory.fields.get(child.name)
            if existing is None:
                directory.fields[child.name] = DirectoryField(name=child.name, path=child.path)
                continue
            if rank == 2 and not self._is_key_route(entry, child):
                self.errors.append(
                    NamingConflictError(f"field {child.name!r} is reachable through {existing.path} and {child.path}", entry.path)
                )
                continue
            existing.shadow_paths.append(child.path)

        # Restore declaration order once precedence is settled
        order = {child.path: index for index, (_, child) in enumerate(candidates)}
        directory.fields = dict(sorted(directory.fields.items(), key=lambda item: order[item[1].path]))
        return directory

    def _is_key_route(self, parent: SchemaEntry, child: SchemaEntry) -> bool:
        """A key leaf directly under a compressed list duplicates the config leaf."""
        return self.config.compress_paths and parent.is_list and child.name in parent.keys

    def _collect(self, parent: SchemaEntry, candidates: list[tuple[int, SchemaEntry]], rank: int) -> None:
        compress = self.config.compress_paths
        preferred = "state" if self.config.prefer_operational_state else "config"
        for child in self.ir.children(parent):
            if child.is_choice_or_case:
                self._collect(child, candidates, rank)
            elif compress and child.is_config_state and parent.kind != EntryKind.MODULE:
                self._collect(child, candidates, 0 if child.name == preferred else 1)
            elif compress and is_surrounding_container(self.ir, child):
                candidates.append((rank, self.ir.children(child)[0]))
            else:
                candidates.append((rank, child))


def build_directories(ir: SchemaIR, config: CodeGeneratorConfig) -> tuple[dict[str, Directory], list[NamingConflictError]]:
    """Build the Directories of a schema, returning them with any field conflicts found."""
    builder = DirectoryBuilder(ir, config)
    directories = builder.build()
    logger.debug("Built %d directories (compressed=%s)", len(directories), config.compress_paths)
    return directories, builder.errors


def is_surrounding_container(ir: SchemaIR, entry: SchemaEntry) -> bool:
    """A container whose only child is a list."""
    if entry.kind != EntryKind.CONTAINER or len(entry.children) != 1:
        return False
    return ir.entry(entry.children[0]).is_list


def is_compressed_valid(ir: SchemaIR, entry: SchemaEntry) -> bool:
    """Whether an entry keeps its own struct when paths are compressed."""
    if entry.kind == EntryKind.FAKEROOT:
        return True
    if is_surrounding_container(ir, entry):
        return False
    if entry.kind == EntryKind.MODULE or entry.parent is None:
        return False
    return not entry.is_config_state and not entry.is_choice_or_case


def _split_keys(keys: list[str] | str) -> list[str]:
    if isinstance(keys, str):
        return keys.split()
    return list(keys)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _parse_bounds(value: Any) -> list[tuple[str, str]]:
    """Parse a YANG range or length argument such as "1..10 | 20..max"."""
    if value is None:
        return []
    if isinstance(value, str):
        bounds = []
        for part in value.split("|"):
            part = part.strip()
            if not part:
                continue
            if ".." in part:
                low, high = part.split("..", 1)
                bounds.append((low.strip(), high.strip()))
            else:
                bounds.append((part, part))
        return bounds
    return [(str(low), str(high)) for low, high in value]


def _parse_enums(values: list[Any]) -> list[EnumValueDef]:
    """Parse enumeration values, assigning implicit values the way YANG does."""
    enums = []
    next_value = 0
    for raw in values:
        if isinstance(raw, str):
            raw = {"name": raw}
        value = int(raw.get("value", next_value))
        enums.append(EnumValueDef(name=raw["name"], value=value))
        next_value = max(next_value, value + 1)
    return enums
