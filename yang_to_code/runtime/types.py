"""
Scalar types used by generated code.

Integer types are named after their YANG width so that the schema type of a
field stays visible in annotations; at runtime they are plain ints.
"""

from __future__ import annotations

from typing import Any, NewType

int8 = NewType("int8", int)
int16 = NewType("int16", int)
int32 = NewType("int32", int)
int64 = NewType("int64", int)
uint8 = NewType("uint8", int)
uint16 = NewType("uint16", int)
uint32 = NewType("uint32", int)
uint64 = NewType("uint64", int)
float64 = NewType("float64", float)

# A leaf of type empty: present or not
YANGEmpty = NewType("YANGEmpty", bool)


class Binary(bytes):
    """Value of a binary leaf."""

    def __repr__(self) -> str:
        return f"Binary({bytes(self)!r})"


class UnionWrapper:
    """
    Base class of generated union types.

    Each union gets one subclass of this class, and one subclass of that per
    member type, holding the value in `value`.
    """

    value: Any

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"
