"""YANG to Code Generator

A Python package for generating typed Python code from parsed YANG schema
trees: dataclass structs, enum classes, union types and path accessors.
"""

__version__ = "0.1.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationErrors,
    PipelineGenerator,
    UnionStyle,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "GenerationErrors",
    "UnionStyle",
    "AtomicWriter",
]
