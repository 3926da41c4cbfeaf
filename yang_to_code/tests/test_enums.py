import pytest

from yang_to_code.pipeline import CodeGeneratorConfig, NamingConflictError, PipelineGenerator
from yang_to_code.pipeline.analyzer.ir_nodes import EnumKind


def analyze(schema, **config):
    return PipelineGenerator("test", schema, CodeGeneratorConfig(**config)).ir


def enum_leaf(name, enums, **extra):
    return {"name": name, "kind": "leaf", "type": {"kind": "enumeration", "enums": enums}, **extra}


def config_container(name, leaves):
    """A container /test/<name> holding the leaves in a config child."""
    return {
        "name": name,
        "kind": "container",
        "children": [{"name": "config", "kind": "container", "children": leaves}],
    }


def module(children, typedefs=None, identities=None, name="test"):
    return {
        "modules": [
            {
                "name": name,
                "prefix": "t",
                "typedefs": typedefs or {},
                "identities": identities or [],
                "children": children,
            }
        ]
    }


def native_type(ir, directory, field):
    return ir.directories[directory].fields[field].mapped_type.native_type


class TestEnumValues:
    def test_unset_sentinel_and_value_order(self):
        schema = module(
            [config_container("top", [enum_leaf("speed", [{"name": "high", "value": 10}, {"name": "low", "value": 1}])])]
        )
        enum = analyze(schema).enums["Test_Top_Speed"]
        assert [(v.index, v.name, v.member_name) for v in enum.values] == [
            (0, "UNSET", "UNSET"),
            (2, "low", "LOW"),
            (11, "high", "HIGH"),
        ]
        assert enum.kind == EnumKind.SIMPLE
        assert enum.class_name == "E_Test_Top_Speed"

    def test_implicit_values_follow_the_last_explicit_one(self):
        schema = module([config_container("top", [enum_leaf("mode", ["a", {"name": "b", "value": 5}, "c"])])])
        enum = analyze(schema).enums["Test_Top_Mode"]
        assert [(v.index, v.name) for v in enum.values] == [(0, "UNSET"), (1, "a"), (6, "b"), (7, "c")]

    def test_member_names_are_sanitized_and_unique(self):
        schema = module([config_container("top", [enum_leaf("rate", ["10G", "a.b", "a-b", "unset"])])])
        enum = analyze(schema).enums["Test_Top_Rate"]
        assert [v.member_name for v in enum.values] == ["UNSET", "_10G", "A_B", "A_B_", "UNSET_"]

    def test_identities(self):
        identities = [
            {"name": "afi"},
            {"name": "ipv6", "base": "afi"},
            {"name": "ipv4", "base": "t:afi"},
            {"name": "ipv4-unicast", "base": "ipv4"},
        ]
        leaf = {"name": "family", "kind": "leaf", "type": {"kind": "identityref", "base": "afi"}}
        ir = analyze(module([config_container("top", [leaf])], identities=identities))
        enum = ir.enums["Test_Afi"]
        assert enum.kind == EnumKind.IDENTITY
        assert enum.identity_base == "test:afi"
        assert [(v.name, v.member_name, v.defining_module) for v in enum.values[1:]] == [
            ("ipv4", "IPV4", "test"),
            ("ipv4-unicast", "IPV4_UNICAST", "test"),
            ("ipv6", "IPV6", "test"),
        ]
        assert [v.index for v in enum.values] == [0, 1, 2, 3]
        assert native_type(ir, "/test/top", "family") == "E_Test_Afi"


class TestEnumNames:
    def test_typedef_enum_is_shared(self):
        typedefs = {"state": {"kind": "enumeration", "enums": ["on", "off"]}}
        schema = module(
            [
                config_container("one", [{"name": "s", "kind": "leaf", "type": "state"}]),
                config_container("two", [{"name": "s", "kind": "leaf", "type": "state"}]),
            ],
            typedefs=typedefs,
        )
        ir = analyze(schema)
        assert list(ir.enums) == ["Test_State"]
        assert ir.enums["Test_State"].kind == EnumKind.DERIVED
        assert native_type(ir, "/test/one", "s") == native_type(ir, "/test/two", "s") == "E_Test_State"

    def test_same_definition_is_deduplicated(self):
        leaf = enum_leaf("mode", ["a", "b"], definition="/test/grouping/mode")
        schema = module([config_container("one", [leaf]), config_container("two", [dict(leaf)])])
        ir = analyze(schema)
        assert list(ir.enums) == ["Test_One_Mode"]
        assert native_type(ir, "/test/two", "mode") == "E_Test_One_Mode"

    def test_skip_deduplication(self):
        leaf = enum_leaf("mode", ["a", "b"], definition="/test/grouping/mode")
        schema = module([config_container("one", [leaf]), config_container("two", [dict(leaf)])])
        ir = analyze(schema, skip_enum_deduplication=True)
        assert sorted(ir.enums) == ["Test_One_Mode", "Test_Two_Mode"]
        assert native_type(ir, "/test/two", "mode") == "E_Test_Two_Mode"

    def test_clashing_leaf_names_are_suffixed_in_sorted_order(self):
        schema = module(
            [
                config_container("a_b", [enum_leaf("mode", ["x"])]),
                config_container("a-b", [enum_leaf("mode", ["y"])]),
            ]
        )
        ir = analyze(schema)
        assert sorted(ir.enums) == ["Test_AB_Mode", "Test_AB_Mode_"]
        assert native_type(ir, "/test/a-b", "mode") == "E_Test_AB_Mode"
        assert native_type(ir, "/test/a_b", "mode") == "E_Test_AB_Mode_"

    def test_shorten_enum_leaf_names(self):
        schema = module([config_container("top", [enum_leaf("speed", ["slow"])])])
        ir = analyze(schema, shorten_enum_leaf_names=True)
        assert list(ir.enums) == ["Top_Speed"]

    def test_org_prefix_trim(self):
        typedefs = {"state": {"kind": "enumeration", "enums": ["on"]}}
        schema = module(
            [config_container("top", [{"name": "s", "kind": "leaf", "type": "state"}])],
            typedefs=typedefs,
            name="openconfig-system",
        )
        assert list(analyze(schema).enums) == ["OpenconfigSystem_State"]
        assert list(analyze(schema, enum_org_prefixes_to_trim=["openconfig"]).enums) == ["System_State"]

    def test_uncompressed_leaf_names(self):
        schema = module([config_container("top", [enum_leaf("speed", ["slow"])])])
        ir = analyze(schema, compress_paths=False)
        assert list(ir.enums) == ["Test_Top_Config_Speed"]

    def test_union_enum_in_typedef(self):
        typedefs = {"mode": {"kind": "union", "types": [{"kind": "enumeration", "enums": ["auto"]}, "uint8"]}}
        schema = module([config_container("top", [{"name": "m", "kind": "leaf", "type": "mode"}])], typedefs=typedefs)
        ir = analyze(schema)
        assert ir.enums["Test_Mode_Enum"].kind == EnumKind.DERIVED_UNION
        mapped = ir.directories["/test/top"].fields["m"].mapped_type
        assert mapped.union_types == {"E_Test_Mode_Enum": 0, "uint8": 1}

    def test_union_enum_in_leaf(self):
        leaf = {"name": "m", "kind": "leaf", "type": {"kind": "union", "types": [{"kind": "enumeration", "enums": ["auto"]}, "string"]}}
        ir = analyze(module([config_container("top", [leaf])]))
        assert ir.enums["Test_Top_M"].kind == EnumKind.UNION
        union = ir.unions["Top_M_Union"]
        assert union.subtypes == ["E_Test_Top_M", "str"]
        assert union.enum_subtypes == {"E_Test_Top_M"}

    def test_identity_name_conflict(self):
        schema = {
            "modules": [
                {
                    "name": name,
                    "prefix": name,
                    "identities": [{"name": "kind"}],
                    "children": [
                        {
                            "name": container,
                            "kind": "container",
                            "children": [{"name": "k", "kind": "leaf", "type": {"kind": "identityref", "base": "kind"}}],
                        }
                    ],
                }
                for name, container in (("a-b", "one"), ("a_b", "two"))
            ]
        }
        ir = analyze(schema)
        assert [e.path for e in ir.errors.by_category(NamingConflictError)] == ["/a_b/two/k"]
        assert "/a_b/two" in ir.failed_paths
        assert "/a-b/one" not in ir.failed_paths
        assert list(ir.enums) == ["AB_Kind"]


if __name__ == "__main__":
    pytest.main([__file__])
