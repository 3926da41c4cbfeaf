"""
Error taxonomy for code generation.

Per-node errors are collected into a GenerationErrors aggregate so that
unrelated nodes can still be generated. SchemaInconsistencyError is raised
immediately since it means the input IR itself is malformed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class GenerationError(Exception):
    """Base class for errors raised while generating code for a schema node."""

    # Short category name used when reporting
    category = "error"

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class SchemaInconsistencyError(GenerationError):
    """The IR references a path, field or key that does not exist."""

    category = "schema-inconsistency"


class UnsupportedConstructError(GenerationError):
    """The schema uses a construct that is intentionally not supported."""

    category = "unsupported"


class ValueConversionError(GenerationError):
    """A default value does not parse or validate against its type."""

    category = "value-conversion"


class NamingConflictError(GenerationError):
    """Two generated identifiers collide and cannot be disambiguated."""

    category = "naming-conflict"


class CyclicReferenceError(GenerationError):
    """A chain of leafrefs refers back to itself."""

    category = "cyclic-reference"


class GenerationErrors(Exception):
    """Aggregated collection of per-node generation errors."""

    def __init__(self, errors: Iterable[GenerationError] = ()):
        self.errors: list[GenerationError] = list(errors)
        super().__init__(self._summary())

    def _summary(self) -> str:
        return f"{len(self.errors)} error(s) during code generation"

    def add(self, error: GenerationError) -> None:
        """Record a single error."""
        self.errors.append(error)

    def extend(self, errors: Iterable[GenerationError]) -> None:
        """Record several errors."""
        self.errors.extend(errors)

    @property
    def paths(self) -> list[str]:
        """Schema paths named by the collected errors, in report order."""
        return [error.path for error in self.errors]

    def by_category(self, category: type[GenerationError]) -> list[GenerationError]:
        """Return the collected errors of a given class."""
        return [error for error in self.errors if isinstance(error, category)]

    def raise_if_any(self) -> None:
        """Raise this collection if it holds any error."""
        if self.errors:
            raise GenerationErrors(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[GenerationError]:
        return iter(self.errors)

    def __str__(self) -> str:
        lines = [self._summary()]
        lines.extend(f"  [{error.category}] {error}" for error in self.errors)
        return "\n".join(lines)
