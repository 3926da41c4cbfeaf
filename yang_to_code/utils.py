"""
Utility functions for YANG to code generation.
"""

import keyword
import re

# Separators that split a YANG identifier into words
_SEPARATOR_PATTERN = re.compile(r"[-_.]")

# Characters that are not valid in a Python identifier
_NON_IDENTIFIER_PATTERN = re.compile(r"\W")

# Replacements applied to enumerated value names, applied in order
_ENUM_VALUE_REPLACEMENTS = (
    (".", "_"),
    ("-", "_"),
    ("/", "_"),
    ("+", "_PLUS"),
    ("*", "_ASTERISK"),
    (" ", "_"),
)


def yang_to_camel_case(name: str) -> str:
    """Convert a YANG identifier to CamelCase.

    Only the first letter of each part is upper-cased, the remainder of the
    part is kept as written.

    Examples:
        "interfaces" -> "Interfaces"
        "ipv4-address" -> "Ipv4Address"
        "oper_status" -> "OperStatus"
        "IPv6" -> "IPv6"

    Args:
        name: The YANG identifier

    Returns:
        CamelCase string
    """
    if not name:
        return ""
    parts = _SEPARATOR_PATTERN.split(name)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def to_python_identifier(name: str) -> str:
    """Turn a YANG identifier into a valid Python identifier.

    "admin-status" -> "admin_status", "class" -> "class_", "1st" -> "_1st".
    """
    ident = _NON_IDENTIFIER_PATTERN.sub("_", name)
    if not ident or ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def safe_enum_member_name(name: str) -> str:
    """Convert a YANG enum or identity name into an enum member name.

    Examples:
        "UP" -> "UP"
        "10G-ETHERNET" -> "_10G_ETHERNET"
        "a.b/c+" -> "A_B_C_PLUS"
    """
    for old, new in _ENUM_VALUE_REPLACEMENTS:
        name = name.replace(old, new)
    name = _NON_IDENTIFIER_PATTERN.sub("_", name).upper()
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


def strip_prefix(value: str) -> str:
    """Remove a "prefix:" qualifier from a YANG identifier or value."""
    if ":" in value:
        return value.split(":", 1)[1]
    return value


def trim_org_prefix(module_name: str, org_prefixes: list[str]) -> str:
    """Remove the first matching organisation prefix from a module name.

    With ["openconfig"], "openconfig-interfaces" becomes "interfaces".
    """
    for prefix in org_prefixes:
        trimmed = module_name.removeprefix(f"{prefix}-")
        if trimmed != module_name:
            return trimmed
    return module_name


def split_schema_path(path: str) -> list[str]:
    """Split a schema path on "/" while ignoring separators inside [...] predicates.

    "/a/b[name=current()/../c]/d" -> ["", "a", "b[name=current()/../c]", "d"]
    """
    parts = []
    current = []
    depth = 0
    for char in path:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == "/" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts
