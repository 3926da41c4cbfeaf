"""
Pipeline - YANG schema tree to Python code generator.

1. Phase 1 (Schema IR): Load the parsed schema tree and build Directories
2. Phase 2 (Analyzer): Resolve names, enums, types and defaults into the IR
3. Phase 3 (Path constructor): Build path structs and key accessors
4. Phase 4 (Backend): Render Python source with jinja2 templates
5. Phase 5 (Formatter): Optional post-processing with ruff or black
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, OutputValidationError
from .config import CodeGeneratorConfig, FormatterConfig, UnionStyle
from .errors import (
    CyclicReferenceError,
    GenerationError,
    GenerationErrors,
    NamingConflictError,
    SchemaInconsistencyError,
    UnsupportedConstructError,
    ValueConversionError,
)
from .generator import GenerationResult, PipelineGenerator

__all__ = [
    "AtomicWriter",
    "CodeGeneratorConfig",
    "CyclicReferenceError",
    "FormatterConfig",
    "GenerationError",
    "GenerationErrors",
    "GenerationResult",
    "NamingConflictError",
    "OutputValidationError",
    "PipelineGenerator",
    "SchemaInconsistencyError",
    "UnionStyle",
    "UnsupportedConstructError",
    "ValueConversionError",
]
