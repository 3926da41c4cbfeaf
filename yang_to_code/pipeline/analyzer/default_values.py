"""
Parsing and validation of YANG default value literals.

Each function takes the literal as written in the schema and returns the
Python expression to emit, raising ValueError when the literal is not a
valid value of its type.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import re

from ..schema_ir.nodes import INTEGER_KINDS, YangType

# Integer literal forms accepted by YANG defaults (base 10, 16 or 8 with a leading 0)
_DECIMAL_PATTERN = re.compile(r"[0-9]+")
_HEX_PATTERN = re.compile(r"0[xX]([0-9a-fA-F]+)")
_OCTAL_PATTERN = re.compile(r"0[oO]?([0-7]+)")
_DECIMAL64_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def integer_bounds(kind: str) -> tuple[int, int]:
    """Smallest and largest value of a YANG integer type."""
    width, signed = INTEGER_KINDS[kind]
    if signed:
        return -(1 << (width - 1)), (1 << (width - 1)) - 1
    return 0, (1 << width) - 1


def parse_integer(literal: str) -> int:
    """
    Parse an integer default the way YANG tooling does.

    A sign is accepted, followed by a decimal, hexadecimal ("0x") or octal
    (leading "0") number. Binary ("0b") literals and "_" digit separators
    are rejected.

    Args:
        literal: The literal as written in the schema

    Returns:
        The parsed value

    Raises:
        ValueError: If the literal is not an integer in an accepted form
    """
    if "_" in literal:
        raise ValueError(f"underscores are not allowed in integer value {literal!r}")

    body = literal
    sign = 1
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if not body:
        raise ValueError(f"empty integer value {literal!r}")
    if body[:2] in ("0b", "0B"):
        raise ValueError(f"binary integer literals are not allowed: {literal!r}")

    if match := _HEX_PATTERN.fullmatch(body):
        return sign * int(match.group(1), 16)
    if len(body) > 1 and body[0] == "0":
        if match := _OCTAL_PATTERN.fullmatch(body):
            return sign * int(match.group(1), 8)
        raise ValueError(f"invalid octal integer value {literal!r}")
    if _DECIMAL_PATTERN.fullmatch(body):
        return sign * int(body, 10)
    raise ValueError(f"invalid integer value {literal!r}")


def _in_ranges(value, ranges: list[tuple[str, str]], low_limit, high_limit, parse) -> bool:
    """Whether value lies within any of the (low, high) bounds; no bounds means any value."""
    if not ranges:
        return True
    for low, high in ranges:
        low_value = low_limit if low == "min" else parse(low)
        high_value = high_limit if high == "max" else parse(high)
        if low_value <= value <= high_value:
            return True
    return False


def integer_literal(literal: str, yang_type: YangType) -> str:
    """Validate an integer default against its width and ranges."""
    value = parse_integer(literal)
    low, high = integer_bounds(yang_type.kind)
    if not low <= value <= high:
        raise ValueError(f"value {literal!r} out of range for {yang_type.kind}")
    if not _in_ranges(value, yang_type.ranges, low, high, parse_integer):
        raise ValueError(f"value {literal!r} outside of range restriction of {yang_type.name}")
    return str(value)


def decimal64_literal(literal: str, yang_type: YangType) -> str:
    """Validate a decimal64 default."""
    if not _DECIMAL64_PATTERN.fullmatch(literal):
        raise ValueError(f"invalid decimal64 value {literal!r}")
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"invalid decimal64 value {literal!r}")
    if yang_type.fraction_digits is not None and "." in literal:
        if len(literal.split(".", 1)[1]) > yang_type.fraction_digits:
            raise ValueError(f"value {literal!r} has more than {yang_type.fraction_digits} fraction digits")
    if not _in_ranges(value, yang_type.ranges, -math.inf, math.inf, float):
        raise ValueError(f"value {literal!r} outside of range restriction of {yang_type.name}")
    return repr(value)


def string_literal(literal: str, yang_type: YangType) -> str:
    """Validate a string default against length and pattern restrictions."""
    if not _in_ranges(len(literal), yang_type.lengths, 0, math.inf, int):
        raise ValueError(f"length of {literal!r} outside of length restriction of {yang_type.name}")
    for pattern in yang_type.patterns:
        try:
            matched = re.fullmatch(pattern, literal)
        except re.error as e:
            raise ValueError(f"cannot compile pattern {pattern!r}: {e}") from e
        if matched is None:
            raise ValueError(f"value {literal!r} does not match pattern {pattern!r}")
    return json.dumps(literal)


def boolean_literal(literal: str) -> str:
    """Validate a boolean default; only "true" and "false" are accepted."""
    if literal == "true":
        return "True"
    if literal == "false":
        return "False"
    raise ValueError(f"invalid boolean value {literal!r}")


def binary_literal(literal: str, yang_type: YangType) -> str:
    """Validate a base64-encoded binary default against its length restriction."""
    try:
        decoded = base64.b64decode(literal, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 value {literal!r}: {e}") from e
    if not _in_ranges(len(decoded), yang_type.lengths, 0, math.inf, int):
        raise ValueError(f"decoded length of {literal!r} outside of length restriction of {yang_type.name}")
    return f"Binary({decoded!r})"
