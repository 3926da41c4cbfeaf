"""
Configuration for the code generator pipeline.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum


class UnionStyle(str, Enum):
    """How union-typed leaves with more than one subtype are represented."""

    WRAPPER = "wrapper"  # A generated wrapper class per union, one subclass per subtype
    SIMPLIFIED = "simplified"  # A plain typing alias over the native subtypes


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters."""

    # Whether formatting is enabled
    enabled: bool = False

    # Which formatter to run ("ruff" or "black")
    tool: str = "ruff"

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Elide config/state containers, module roots, choice/case and list
    # surrounding containers from generated names and paths
    compress_paths: bool = True

    # Synthesize a single root directory holding every top-level node
    generate_fakeroot: bool = True

    # Name of the synthesized root
    fakeroot_name: str = "device"

    # With compression, keep the state leaf rather than the config leaf when
    # both exist under the same parent
    prefer_operational_state: bool = False

    # Emit one enum type per enumeration leaf rather than sharing a type
    # between leaves that come from the same definition
    skip_enum_deduplication: bool = False

    # Drop the module name from compressed enumeration leaf type names
    shorten_enum_leaf_names: bool = False

    # Prefix typedef enumerations with the module that defines the typedef
    # rather than the module in which it is used
    use_defining_module_for_typedef_enum_names: bool = True

    # Organisation prefixes (e.g. "openconfig") removed from module names in enum names
    enum_org_prefixes_to_trim: list[str] = field(default_factory=list)

    # Representation of multi-subtype unions
    union_style: UnionStyle = UnionStyle.WRAPPER

    # Lists with at least this many keys get a builder API (0 = never)
    list_builder_key_threshold: int = 0

    # Generate the "...Any" wildcard path structs and accessors
    generate_wildcard_paths: bool = True

    # Omit explicit "*" key values when every key of a list is wildcarded
    simplify_wildcard_paths: bool = False

    # Generate path structs in addition to data structs
    generate_path_structs: bool = True

    # Struct helper methods. Keyed lists always get new_<list>(); these add
    # get_<x>() and get_or_create_<x>() for containers and keyed lists,
    # delete_<list>(), append_<list>(), rename_<list>() (lists that are not
    # ordered by the user), and get_<leaf>() / set_<leaf>() for leaves
    generate_getters: bool = False
    generate_delete_method: bool = False
    generate_append_method: bool = False
    generate_rename_method: bool = False
    generate_leaf_getters: bool = False
    generate_leaf_setters: bool = False

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Post-processing formatter
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    def __post_init__(self):
        if not isinstance(self.union_style, UnionStyle):
            self.union_style = UnionStyle(self.union_style)
        if isinstance(self.formatter, dict):
            self.formatter = FormatterConfig(**self.formatter)
        if self.list_builder_key_threshold < 0:
            raise ValueError("list_builder_key_threshold must be >= 0")

    @property
    def root_name(self) -> str:
        """Name of the fakeroot, or an empty string if it is not generated."""
        return self.fakeroot_name if self.generate_fakeroot else ""

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        config.__post_init__()
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        d = asdict(self)
        d["union_style"] = self.union_style.value
        return d
