"""
Base class for code generation backends.

Defines the interface that language-specific backends implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import IR, EnumeratedType, ParsedDirectory, UnionDef
from ..config import CodeGeneratorConfig
from ..pathgen.path_constructor import PathAPI, PathStruct


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Template names, without the extension
    TEMPLATES = ("prefix", "enum", "union", "struct", "path_struct")

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.templates = {
            name: self.jinja_env.get_template(f"{name}.{self.FILE_EXTENSION}.jinja2") for name in self.TEMPLATES
        }

    @abstractmethod
    def render_enum(self, enum: EnumeratedType) -> str:
        """Render the declaration of an enumerated type."""

    @abstractmethod
    def render_union(self, union: UnionDef) -> str:
        """Render the declaration of a union type."""

    @abstractmethod
    def render_struct(self, directory: ParsedDirectory, ir: IR) -> str:
        """Render the data struct of a directory, with its list helpers."""

    @abstractmethod
    def render_path_struct(self, struct: PathStruct) -> str:
        """Render a path struct and its accessor methods."""

    @abstractmethod
    def generate(self, ir: IR) -> str:
        """
        Generate the data module from the IR.

        Args:
            ir: The intermediate representation

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def generate_paths(self, ir: IR, api: PathAPI, data_module: str) -> str:
        """
        Generate the path module.

        Args:
            ir: The intermediate representation
            api: Path structs built from the IR
            data_module: Import name of the data module, for the types of key parameters

        Returns:
            Generated code as a string
        """
