"""
Python code generation backend.

Generates dataclass structs, enum classes, union types and path structs from
the IR. The declaration of each node is computed here; the templates only lay
it out.
"""

from __future__ import annotations

import collections
import json
import re
from dataclasses import dataclass, field

from ..analyzer.ir_nodes import IR, EnumeratedType, EnumKind, MappedType, ParsedDirectory, ParsedField, UnionDef
from ..analyzer.name_resolver import RESERVED_ATTR_NAMES, make_name_unique
from ..config import CodeGeneratorConfig, UnionStyle
from ..pathgen.path_constructor import ChildConstructor, PathAPI, PathStruct
from .base import CodeBackend

# Module generated code imports its support types from
RUNTIME_MODULE = "yang_to_code.runtime"

# Native types provided by the runtime module
RUNTIME_TYPES = {
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float64",
    "Binary",
    "YANGEmpty",
}

# Runtime type constructors appearing in default expressions, e.g. "uint32(5)"
_RUNTIME_CALL_PATTERN = re.compile(r"\b(" + "|".join(sorted(RUNTIME_TYPES)) + r")\(")

STDLIB_MODULES = {"collections", "dataclasses", "enum", "typing"}


@dataclass
class FieldDecl:
    """Declaration of one attribute of a generated struct."""

    attr_name: str
    annotation: str
    init: str
    # Statements (relative indentation) of populate_defaults() for this field
    populate: list[str] = field(default_factory=list)


@dataclass
class ListKeyDecl:
    """How a generated list struct exposes its key."""

    type_name: str
    expression: str
    # (attribute, type) of each field of the key tuple, for multi-key lists
    key_class_fields: list[tuple[str, str]] = field(default_factory=list)


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()

    def reset_imports(self) -> None:
        self.python_imports = {("__future__", "annotations")}

    def generate(self, ir: IR) -> str:
        """Generate the data module from IR."""
        self.reset_imports()
        enums, unions, structs = self.render_data(ir)
        body = [*enums.values(), *unions.values(), *structs.values()]
        return self._assemble(ir, f"Data structs generated for the {ir.root_name or 'schema'} tree.", body)

    def render_data(self, ir: IR) -> tuple[dict[str, str], dict[str, str], dict[str, str]]:
        """
        Render every enum, union and struct of the IR.

        Structs of failed directories are left out.

        Returns:
            (enums, unions, structs), each keyed by generated type name
        """
        enums = {enum.class_name: self.render_enum(enum) for enum in ir.enums.values()}
        unions = {union.name: self.render_union(union) for union in ir.unions.values()}
        structs = {
            directory.name: self.render_struct(directory, ir)
            for path, directory in ir.directories.items()
            if path not in ir.failed_paths
        }
        return enums, unions, structs

    def generate_paths(self, ir: IR, api: PathAPI, data_module: str) -> str:
        """Generate the path module from the path structs."""
        self.reset_imports()
        self.python_imports.add((RUNTIME_MODULE, "NodePath"))
        body = [self.render_path_struct(struct) for struct in api.structs.values()]

        # Enum and union key types live in the data module
        data_types = set()
        for struct in api.structs.values():
            for constructor in struct.constructors:
                data_types.update(p.type_name for p in constructor.params)
            data_types.update(b.key.type_name for b in struct.builders if b.key is not None)
        data_types = {t for t in data_types if t in ir.unions or t.startswith("E_")}

        return self._assemble(
            ir,
            f"Path structs generated for the {ir.root_name or 'schema'} tree.",
            body,
            type_checking_imports=[(data_module, sorted(data_types))] if data_types else [],
        )

    def _assemble(
        self,
        ir: IR,
        module_doc: str,
        body: list[str],
        type_checking_imports: list[tuple[str, list[str]]] | None = None,
    ) -> str:
        if type_checking_imports:
            self.python_imports.add(("typing", "TYPE_CHECKING"))
        prefix = self.templates["prefix"].render(
            generation_comment=ir.generation_comment,
            module_doc=module_doc,
            required_imports=self._assemble_imports(),
            type_checking_imports=[self._import_line(m, names, indent="    ") for m, names in type_checking_imports or []],
        )
        snippets = [snippet.strip("\n") for snippet in body]
        return prefix.rstrip("\n") + "\n\n\n" + "\n\n\n".join(snippets) + "\n"

    def _use_type(self, type_name: str) -> str:
        """Record the import a type name needs and return the name."""
        if type_name in RUNTIME_TYPES:
            self.python_imports.add((RUNTIME_MODULE, type_name))
        elif type_name == "Any":
            self.python_imports.add(("typing", "Any"))
        return type_name

    def _use_expression(self, expression: str) -> str:
        """Record the imports of the runtime constructors an expression calls."""
        for match in _RUNTIME_CALL_PATTERN.finditer(expression):
            self._use_type(match.group(1))
        return expression

    # Enums and unions

    def render_enum(self, enum: EnumeratedType) -> str:
        self.python_imports.add((RUNTIME_MODULE, "YangEnum"))
        if len(enum.values) > 1:
            self.python_imports.add((RUNTIME_MODULE, "EnumValueInfo"))
        return self.templates["enum"].render(
            class_name=enum.class_name,
            description=_enum_description(enum),
            values=enum.values,
            table=[(v.index, json.dumps(v.name), json.dumps(v.defining_module)) for v in enum.values if v.index],
        )

    def render_union(self, union: UnionDef) -> str:
        for subtype in union.subtypes:
            self._use_type(subtype)
        if self.config.union_style == UnionStyle.SIMPLIFIED:
            return self.templates["union"].render(simplified=True, name=union.name, subtypes=union.subtypes, path=union.source_path)

        self.python_imports.add((RUNTIME_MODULE, "UnionWrapper"))
        self.python_imports.add(("dataclasses", "dataclass"))
        members = [(self.union_member_class_name(union, subtype), subtype) for subtype in union.subtypes]
        return self.templates["union"].render(simplified=False, name=union.name, members=members, path=union.source_path)

    @staticmethod
    def union_member_class_name(union: UnionDef, subtype: str) -> str:
        """Name of the wrapper class of one member type, e.g. "Foo_Union_Uint32"."""
        return f"{union.name}_{subtype[:1].upper()}{subtype[1:]}"

    # Structs

    def render_struct(self, directory: ParsedDirectory, ir: IR) -> str:
        self.python_imports.add(("dataclasses", "dataclass"))
        fields = [decl for f in directory.fields.values() if (decl := self.field_declaration(f, ir)) is not None]
        if any(decl.init.startswith("field(") for decl in fields):
            self.python_imports.add(("dataclasses", "field"))

        list_key = self.list_key_declaration(directory)
        if list_key is not None and list_key.key_class_fields:
            self.python_imports.add(("typing", "NamedTuple"))

        ordered_map = None
        if directory.ordered_by_user and directory.list_keys:
            self.python_imports.add((RUNTIME_MODULE, "OrderedMap"))
            ordered_map = {
                "name": self.ordered_map_name(directory),
                "key_fields": [key.attr_name for key in directory.list_keys],
                "key_type": list_key.type_name,
                "key_class": directory.key_class_name if list_key.key_class_fields else None,
            }

        return self.templates["struct"].render(
            class_name=directory.name,
            path=directory.path,
            description=_first_line(directory.description),
            fields=fields,
            populate=[line for decl in fields for line in decl.populate],
            list_key=list_key,
            key_class_name=directory.key_class_name,
            methods=self.helper_methods(directory, ir, fields),
            ordered_map=ordered_map,
        )

    @staticmethod
    def ordered_map_name(directory: ParsedDirectory) -> str:
        return f"{directory.name}_OrderedMap"

    def list_key_declaration(self, directory: ParsedDirectory) -> ListKeyDecl | None:
        """Key type and key expression of a keyed list struct."""
        if not directory.list_keys:
            return None
        key_types = [self._use_type(k.mapped_type.native_type if k.mapped_type else "Any") for k in directory.list_keys]
        if len(directory.list_keys) == 1:
            return ListKeyDecl(type_name=key_types[0], expression=f"self.{directory.list_keys[0].attr_name}")
        attrs = [key.attr_name for key in directory.list_keys]
        return ListKeyDecl(
            type_name=directory.key_class_name,
            expression=f"{directory.key_class_name}({', '.join(f'self.{a}' for a in attrs)})",
            key_class_fields=list(zip(attrs, key_types)),
        )

    def field_declaration(self, parsed_field: ParsedField, ir: IR) -> FieldDecl | None:
        """
        Declare one struct attribute.

        Args:
            parsed_field: The field
            ir: The IR, to look up child directories

        Returns:
            The declaration, or None when the field leads to a directory whose output was withheld
        """
        attr = parsed_field.attr_name
        if parsed_field.is_leaf:
            return self._leaf_declaration(parsed_field)

        child = ir.directories.get(parsed_field.path)
        if child is None or child.path in ir.failed_paths:
            return None

        if not child.is_list:
            return FieldDecl(
                attr_name=attr,
                annotation=f"{child.name} | None",
                init="None",
                populate=[f"if self.{attr} is not None:", f"    self.{attr}.populate_defaults()"],
            )

        each_item = [f"for item in self.{attr}:", "    item.populate_defaults()"]
        if child.is_keyless_list:
            return FieldDecl(attr, f"list[{child.name}]", "field(default_factory=list)", each_item)
        if child.ordered_by_user:
            map_name = self.ordered_map_name(child)
            return FieldDecl(attr, map_name, f"field(default_factory=lambda: {map_name}())", each_item)

        key_decl = self.list_key_declaration(child)
        return FieldDecl(
            attr_name=attr,
            annotation=f"dict[{key_decl.type_name}, {child.name}]",
            init="field(default_factory=dict)",
            populate=[f"for item in self.{attr}.values():", "    item.populate_defaults()"],
        )

    def _leaf_declaration(self, parsed_field: ParsedField) -> FieldDecl:
        attr = parsed_field.attr_name
        mapped = parsed_field.mapped_type
        native = self._use_type(mapped.native_type if mapped else "Any")
        default = self._use_expression(mapped.default_value) if mapped and mapped.has_default else None

        if parsed_field.is_leaf_list:
            populate = [f"if not self.{attr}:", f"    self.{attr} = {default}"] if default else []
            return FieldDecl(attr, f"list[{native}]", "field(default_factory=list)", populate)

        if mapped is not None and mapped.is_enumerated_value:
            populate = [f"if self.{attr} == {native}.UNSET:", f"    self.{attr} = {default}"] if default else []
            return FieldDecl(attr, native, f"{native}.UNSET", populate)

        populate = [f"if self.{attr} is None:", f"    self.{attr} = {default}"] if default else []
        annotation = native if native == "Any" else f"{native} | None"
        return FieldDecl(attr, annotation, "None", populate)

    # Helper methods

    def helper_methods(self, directory: ParsedDirectory, ir: IR, fields: list[FieldDecl]) -> list[list[str]]:
        """
        Accessor methods of a struct, each as a list of source lines.

        Keyed lists always get new_<list>(); every other helper is enabled by
        its generate_* option. Method names are made unique against the
        attributes of the struct so that no method shadows a field default.

        Args:
            directory: The struct's directory
            ir: The IR, to look up child directories
            fields: The rendered attribute declarations

        Returns:
            One list of lines per method, indented relative to the class body
        """
        used = set(RESERVED_ATTR_NAMES) | {decl.attr_name for decl in fields}
        methods = []
        for parsed_field in directory.fields.values():
            if parsed_field.is_leaf:
                methods.extend(self._leaf_helpers(parsed_field, used))
                continue
            child = ir.directories.get(parsed_field.path)
            if child is None or child.path in ir.failed_paths or child.is_keyless_list:
                continue
            if child.is_list:
                methods.extend(self._list_helpers(parsed_field.attr_name, child, used))
            elif self.config.generate_getters:
                methods.extend(self._container_helpers(parsed_field.attr_name, child, used))
        return methods

    def _container_helpers(self, attr: str, child: ParsedDirectory, used: set[str]) -> list[list[str]]:
        get_or_create = make_name_unique(f"get_or_create_{attr}", used)
        get = make_name_unique(f"get_{attr}", used)
        return [
            [
                f"def {get_or_create}(self) -> {child.name}:",
                f"    if self.{attr} is None:",
                f"        self.{attr} = {child.name}()",
                f"    return self.{attr}",
            ],
            [
                f"def {get}(self) -> {child.name} | None:",
                f"    return self.{attr}",
            ],
        ]

    def _list_helpers(self, attr: str, child: ParsedDirectory, used: set[str]) -> list[list[str]]:
        key_decl = self.list_key_declaration(child)
        key_fields = key_decl.key_class_fields or [(child.list_keys[0].attr_name, key_decl.type_name)]
        params = [name for name, _ in key_fields]
        signature = ", ".join(f"{name}: {type_name}" for name, type_name in key_fields)
        key_expr = params[0] if len(params) == 1 else f"{child.key_class_name}({', '.join(params)})"
        local_names = {"self", *params}
        key_var = make_name_unique("key", local_names)
        entry_var = make_name_unique("entry", local_names)
        ordered = child.ordered_by_user

        new = make_name_unique(f"new_{attr}", used)
        new_method = [
            f"def {new}(self, {signature}) -> {child.name}:",
            f'    """Create an entry of {attr} with the given key and add it."""',
        ]
        if ordered:
            new_method.append(f"    return self.{attr}.append_new({', '.join(params)})")
        else:
            new_method += [
                f"    {key_var} = {key_expr}",
                f"    if {key_var} in self.{attr}:",
                f'        raise ValueError(f"duplicate key {{{key_var}!r}} in {attr}")',
                f"    self.{attr}[{key_var}] = {child.name}({', '.join(f'{p}={p}' for p in params)})",
                f"    return self.{attr}[{key_var}]",
            ]
        methods = [new_method]

        if self.config.generate_getters:
            get_or_create = make_name_unique(f"get_or_create_{attr}", used)
            get = make_name_unique(f"get_{attr}", used)
            methods.append(
                [
                    f"def {get_or_create}(self, {signature}) -> {child.name}:",
                    f"    {entry_var} = self.{attr}.get({key_expr})",
                    f"    if {entry_var} is None:",
                    f"        {entry_var} = self.{new}({', '.join(params)})",
                    f"    return {entry_var}",
                ]
            )
            methods.append(
                [
                    f"def {get}(self, {signature}) -> {child.name} | None:",
                    f"    return self.{attr}.get({key_expr})",
                ]
            )

        if self.config.generate_delete_method:
            delete = make_name_unique(f"delete_{attr}", used)
            removal = f"self.{attr}.delete({key_expr})" if ordered else f"self.{attr}.pop({key_expr}, None)"
            methods.append([f"def {delete}(self, {signature}) -> None:", f"    {removal}"])

        if self.config.generate_append_method:
            append = make_name_unique(f"append_{attr}", used)
            append_method = [
                f"def {append}(self, value: {child.name}) -> None:",
                f'    """Add an entry to {attr}, keyed by its key fields."""',
            ]
            if ordered:
                append_method.append(f"    self.{attr}.append(value)")
            else:
                unset = " or ".join(self._unset_condition(f"value.{key.attr_name}", key.mapped_type) for key in child.list_keys)
                append_method += [
                    f"    if {unset}:",
                    f'        raise ValueError("every key field of {child.name} must be set")',
                    "    key = value.list_key()",
                    f"    if key in self.{attr}:",
                    f'        raise ValueError(f"duplicate key {{key!r}} in {attr}")',
                    f"    self.{attr}[key] = value",
                ]
            methods.append(append_method)

        if self.config.generate_rename_method and not ordered:
            rename = make_name_unique(f"rename_{attr}", used)
            targets = ", ".join(f"entry.{p}" for p in params)
            methods.append(
                [
                    f"def {rename}(self, old_key: {key_decl.type_name}, new_key: {key_decl.type_name}) -> None:",
                    f'    """Move the entry of {attr} at old_key to new_key, updating its key fields."""',
                    f"    if new_key in self.{attr}:",
                    f'        raise ValueError(f"duplicate key {{new_key!r}} in {attr}")',
                    f"    entry = self.{attr}.pop(old_key, None)",
                    "    if entry is None:",
                    f'        raise ValueError(f"no entry with key {{old_key!r}} in {attr}")',
                    f"    {targets} = new_key",
                    f"    self.{attr}[new_key] = entry",
                ]
            )
        return methods

    @staticmethod
    def _unset_condition(expression: str, mapped: MappedType | None) -> str:
        if mapped is not None and mapped.is_enumerated_value:
            return f"{expression} == {mapped.native_type}.UNSET"
        return f"{expression} is None"

    def _leaf_helpers(self, parsed_field: ParsedField, used: set[str]) -> list[list[str]]:
        attr = parsed_field.attr_name
        mapped = parsed_field.mapped_type
        native = self._use_type(mapped.native_type if mapped else "Any")
        default = self._use_expression(mapped.default_value) if mapped and mapped.has_default else None
        if parsed_field.is_leaf_list:
            native = f"list[{native}]"

        methods = []
        if self.config.generate_leaf_getters:
            get = make_name_unique(f"get_{attr}", used)
            if parsed_field.is_leaf_list:
                fallback = [f"    if not self.{attr}:", f"        return {default}"] if default else []
                returns = native
            elif mapped is not None and mapped.is_enumerated_value:
                fallback = [f"    if self.{attr} == {native}.UNSET:", f"        return {default}"] if default else []
                returns = native
            else:
                value = default or (mapped.zero_value if mapped else "None")
                fallback = [f"    if self.{attr} is None:", f"        return {value}"] if value != "None" else []
                returns = native if value != "None" or native == "Any" else f"{native} | None"
            methods.append([f"def {get}(self) -> {returns}:", *fallback, f"    return self.{attr}"])

        if self.config.generate_leaf_setters:
            set_ = make_name_unique(f"set_{attr}", used)
            methods.append([f"def {set_}(self, value: {native}) -> None:", f"    self.{attr} = value"])
        return methods

    # Path structs

    def render_path_struct(self, struct: PathStruct) -> str:
        if struct.is_fakeroot:
            self.python_imports.add((RUNTIME_MODULE, "RootPath"))
        return self.templates["path_struct"].render(
            class_name=struct.name,
            base_class="RootPath" if struct.is_fakeroot else "NodePath",
            path=struct.yang_path,
            wildcard=struct.is_wildcard,
            key_order=[json.dumps(b.key.key_name) for b in struct.builders],
            constructors=[self.constructor_context(c) for c in struct.constructors],
            builders=[
                {
                    "method_name": b.method_name,
                    "param": f"{b.key.param_name}: {self._use_type(b.key.type_name)}",
                    "key_name": json.dumps(b.key.key_name),
                    "param_name": b.key.param_name,
                    "return_type": b.parent_type_name,
                }
                for b in struct.builders
            ],
        )

    def constructor_context(self, constructor: ChildConstructor) -> dict:
        """Template variables of one child accessor."""
        params = "".join(f", {p.param_name}: {self._use_type(p.type_name)}" for p in constructor.params)
        keys = ", ".join(f"{json.dumps(name)}: {value}" for name, value in constructor.key_values.items())
        return {
            "method_name": constructor.method_name,
            "params": params,
            "return_type": constructor.type_name,
            "rel_path": json.dumps(constructor.rel_path),
            "keys": f"{{{keys}}}",
        }

    # Imports

    def _assemble_imports(self) -> list[str]:
        """Assemble Python import statements."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in STDLIB_MODULES}
        third_party_groups = {m: import_groups[m] for m in import_groups if m not in STDLIB_MODULES and m != "__future__"}

        assembled = []
        if "__future__" in import_groups:
            assembled.append(f"from __future__ import {', '.join(sorted(import_groups['__future__']))}")
            if stdlib_groups or third_party_groups:
                assembled.append("")

        for module in sorted(stdlib_groups):
            assembled.append(self._import_line(module, sorted(stdlib_groups[module])))

        if stdlib_groups and third_party_groups:
            assembled.append("")

        for module in sorted(third_party_groups):
            assembled.append(self._import_line(module, sorted(third_party_groups[module])))

        return assembled

    def _import_line(self, module: str, names: list[str], indent: str = "") -> str:
        line = f"{indent}from {module} import {', '.join(names)}"
        if len(line) <= self.config.formatter.line_length:
            return line
        inner = "".join(f"{indent}    {name},\n" for name in names)
        return f"{indent}from {module} import (\n{inner}{indent})"


def _first_line(text: str) -> str:
    """First line of a description, safe to place in a docstring."""
    if not text.strip():
        return ""
    line = text.strip().splitlines()[0].strip()
    return line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def _enum_description(enum: EnumeratedType) -> str:
    if enum.kind == EnumKind.IDENTITY:
        return f"Identities derived from {enum.identity_base}."
    return f"Values of {enum.type_name} at {enum.source_path}."
