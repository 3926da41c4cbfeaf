"""
Base class of generated enumerated types.
"""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple


class EnumValueInfo(NamedTuple):
    """Schema name of an enumerated value and the module defining it."""

    name: str
    defining_module: str = ""


class YangEnum(IntEnum):
    """
    An enumeration or identityref type.

    Member 0 is always UNSET. Subclasses override value_table() to map every
    other member to its schema name.
    """

    @classmethod
    def value_table(cls) -> dict[int, EnumValueInfo]:
        return {}

    @classmethod
    def from_yang_name(cls, name: str) -> YangEnum:
        """
        Find the member for a schema value name, with or without a "prefix:".

        Raises:
            ValueError: If no member has that name
        """
        if ":" in name:
            name = name.split(":", 1)[1]
        for index, info in cls.value_table().items():
            if info.name == name:
                return cls(index)
        raise ValueError(f"{name!r} is not a value of {cls.__name__}")

    @property
    def yang_name(self) -> str | None:
        """Schema name of the member, or None for UNSET."""
        info = self.value_table().get(self.value)
        return info.name if info else None
