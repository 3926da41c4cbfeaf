"""
Pipeline generator: wires the phases together.

1. Front end: load the schema description into a SchemaIR
2. Analyzer: resolve names and types, collect per-node errors
3. Path constructor: build the path structs of every reachable node
4. Backend: render Python source with jinja2 templates
5. Formatter: optionally run ruff or black over the result
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .analyzer.analyzer import SchemaAnalyzer
from .analyzer.ir_nodes import IR, NodeData
from .analyzer.name_resolver import NameResolver
from .analyzer.state import ResolverState
from .backends.python_backend import PythonBackend
from .config import CodeGeneratorConfig
from .errors import GenerationErrors
from .formatters.base import format_code
from .pathgen.path_constructor import PathAPI, PathConstructor
from .schema_ir.loader import load_schema
from .schema_ir.nodes import SchemaIR

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Per-node output of a generation run."""

    # Code snippets keyed by generated type name
    structs: dict[str, str] = field(default_factory=dict)
    enums: dict[str, str] = field(default_factory=dict)
    unions: dict[str, str] = field(default_factory=dict)
    path_structs: dict[str, str] = field(default_factory=dict)

    # Node metadata keyed by path struct name
    node_data: dict[str, NodeData] = field(default_factory=dict)

    errors: GenerationErrors = field(default_factory=GenerationErrors)


class PipelineGenerator:
    """
    Generates Python code from a YANG schema tree.

    Example:
        generator = PipelineGenerator("openconfig", schema_dict, config)
        code = generator.generate()
        paths = generator.generate_paths()
    """

    def __init__(
        self,
        name: str,
        schema: dict[str, Any] | SchemaIR,
        config: CodeGeneratorConfig | None = None,
        generation_comment: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            name: Name of the generated data module; the path module imports types from it
            schema: Schema description dictionary, or an already loaded SchemaIR
            config: Code generation configuration
            generation_comment: Comment placed at the top of generated files
        """
        self.name = name
        self.config = config or CodeGeneratorConfig()
        self.generation_comment = generation_comment
        self.schema = schema if isinstance(schema, SchemaIR) else load_schema(schema)
        self.backend = PythonBackend(self.config)
        self._ir: IR | None = None
        self._api: PathAPI | None = None

    @property
    def ir(self) -> IR:
        """The analyzed IR, computed on first use."""
        if self._ir is None:
            self._ir = SchemaAnalyzer(self.config).analyze(self.schema)
            if self.config.add_generation_comment:
                self._ir.generation_comment = self.generation_comment or f"Generated by yang_to_code for {self.name}"
        return self._ir

    @property
    def path_api(self) -> PathAPI:
        """The path structs and node metadata, computed on first use."""
        if self._api is None:
            names = NameResolver(self.schema, self.config, ResolverState())
            self._api = PathConstructor(self.ir, self.schema, self.config, names).build()
        return self._api

    def generate_all(self) -> GenerationResult:
        """
        Run every phase and return the per-node output.

        Errors are collected in the result instead of being raised; the
        output of the nodes they concern is withheld.

        Raises:
            SchemaInconsistencyError: If the schema references missing nodes
        """
        ir = self.ir
        self.backend.reset_imports()
        enums, unions, structs = self.backend.render_data(ir)
        result = GenerationResult(structs=structs, enums=enums, unions=unions, errors=GenerationErrors(ir.errors))
        if self.config.generate_path_structs:
            api = self.path_api
            result.path_structs = {name: self.backend.render_path_struct(s) for name, s in api.structs.items()}
            result.node_data = dict(api.node_data)
        logger.debug(
            "Generated %d structs, %d enums, %d unions, %d path structs",
            len(result.structs),
            len(result.enums),
            len(result.unions),
            len(result.path_structs),
        )
        return result

    def generate(self) -> str:
        """
        Generate the data module.

        Returns:
            Generated Python source

        Raises:
            GenerationErrors: If any node failed to generate
        """
        self.ir.errors.raise_if_any()
        code = self.backend.generate(self.ir)
        return format_code(code, self.config.formatter)

    def generate_paths(self) -> str:
        """
        Generate the path module.

        Returns:
            Generated Python source

        Raises:
            GenerationErrors: If any node failed to generate
        """
        self.ir.errors.raise_if_any()
        code = self.backend.generate_paths(self.ir, self.path_api, self.name)
        return format_code(code, self.config.formatter)
