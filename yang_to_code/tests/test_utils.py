import pytest

from yang_to_code.utils import (
    safe_enum_member_name,
    split_schema_path,
    strip_prefix,
    to_python_identifier,
    trim_org_prefix,
    yang_to_camel_case,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("interfaces", "Interfaces"),
        ("ipv4-address", "Ipv4Address"),
        ("oper_status", "OperStatus"),
        ("IPv6", "IPv6"),
        ("a.b-c", "ABC"),
        ("--x", "X"),
        ("", ""),
    ],
)
def test_yang_to_camel_case(name, expected):
    assert yang_to_camel_case(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("admin-status", "admin_status"),
        ("class", "class_"),
        ("1st", "_1st"),
        ("in.octets", "in_octets"),
        ("", "_"),
    ],
)
def test_to_python_identifier(name, expected):
    assert to_python_identifier(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("UP", "UP"),
        ("10G-ETHERNET", "_10G_ETHERNET"),
        ("a.b/c+", "A_B_C_PLUS"),
        ("any*", "ANY_ASTERISK"),
        ("lower case", "LOWER_CASE"),
    ],
)
def test_safe_enum_member_name(name, expected):
    assert safe_enum_member_name(name) == expected


def test_strip_prefix():
    assert strip_prefix("oc-if:ethernet") == "ethernet"
    assert strip_prefix("ethernet") == "ethernet"


def test_trim_org_prefix():
    assert trim_org_prefix("openconfig-interfaces", ["ietf", "openconfig"]) == "interfaces"
    assert trim_org_prefix("openconfig", ["openconfig"]) == "openconfig"
    assert trim_org_prefix("ietf-ip", []) == "ietf-ip"


def test_split_schema_path():
    assert split_schema_path("/a/b[name=current()/../c]/d") == ["", "a", "b[name=current()/../c]", "d"]
    assert split_schema_path("../x") == ["..", "x"]


if __name__ == "__main__":
    pytest.main([__file__])
