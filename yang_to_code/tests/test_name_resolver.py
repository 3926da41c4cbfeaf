import json
from pathlib import Path

import pytest

from yang_to_code.pipeline import CodeGeneratorConfig, NamingConflictError, PipelineGenerator
from yang_to_code.pipeline.analyzer.name_resolver import MAX_NAME_SUFFIXES, make_name_unique

SCHEMA_PATH = Path(__file__).parent / "test_data" / "schemas" / "interfaces.json"
PREFIX = "/openconfig-interfaces"


def load_schema():
    with open(SCHEMA_PATH) as f:
        return json.load(f)


def analyze(schema, **config):
    return PipelineGenerator("test", schema, CodeGeneratorConfig(**config)).ir


def module(children, name="test"):
    return {"modules": [{"name": name, "prefix": name[:1], "children": children}]}


class TestMakeNameUnique:
    def test_appends_underscores(self):
        defined = set()
        assert [make_name_unique("A", defined) for _ in range(3)] == ["A", "A_", "A__"]
        assert defined == {"A", "A_", "A__"}

    def test_unused_name_is_kept(self):
        defined = {"B"}
        assert make_name_unique("A", defined) == "A"

    def test_gives_up_after_limit(self):
        defined = {"A" + "_" * i for i in range(MAX_NAME_SUFFIXES + 1)}
        with pytest.raises(NamingConflictError) as exc_info:
            make_name_unique("A", defined, "/m/a")
        assert exc_info.value.path == "/m/a"


class TestDirectoryNames:
    def test_compressed_names(self):
        ir = analyze(load_schema())
        names = {path: d.name for path, d in ir.directories.items()}
        assert names == {
            "/device": "Device",
            f"{PREFIX}/interfaces/interface": "Interface",
            f"{PREFIX}/interfaces/interface/state/counters": "Interface_Counters",
            f"{PREFIX}/interfaces/interface/subinterfaces/subinterface": "Interface_Subinterface",
            f"{PREFIX}/logs/entry": "Entry",
            f"{PREFIX}/route-policy/statement": "Statement",
            f"{PREFIX}/system": "System",
        }

    def test_uncompressed_names(self):
        ir = analyze(load_schema(), compress_paths=False)
        names = {path: d.name for path, d in ir.directories.items()}
        assert names["/device"] == "Device"
        assert names[f"{PREFIX}/interfaces"] == "OpenconfigInterfaces_Interfaces"
        assert names[f"{PREFIX}/interfaces/interface/config"] == "OpenconfigInterfaces_Interfaces_Interface_Config"
        assert names[f"{PREFIX}/interfaces/interface/state/counters"] == (
            "OpenconfigInterfaces_Interfaces_Interface_State_Counters"
        )
        assert len(ir.directories) == 14

    def test_fakeroot_name(self):
        ir = analyze(load_schema(), fakeroot_name="network-element")
        assert ir.directories["/network-element"].name == "NetworkElement"
        assert ir.root_name == "network-element"

    def test_no_fakeroot(self):
        ir = analyze(load_schema(), generate_fakeroot=False)
        assert not any(d.is_fakeroot for d in ir.directories.values())
        assert ir.root_name == ""

    def test_colliding_names_are_suffixed_in_path_order(self):
        schema = module(
            [
                {"name": "a_b", "kind": "container", "children": [{"name": "x", "kind": "leaf", "type": "string"}]},
                {"name": "a-b", "kind": "container", "children": [{"name": "y", "kind": "leaf", "type": "string"}]},
            ]
        )
        ir = analyze(schema)
        assert ir.directories["/test/a-b"].name == "AB"
        assert ir.directories["/test/a_b"].name == "AB_"

    def test_fakeroot_is_named_first(self):
        schema = module([{"name": "device", "kind": "container", "children": []}])
        ir = analyze(schema)
        assert ir.directories["/device"].name == "Device"
        assert ir.directories["/test/device"].name == "Device_"

    def test_camelcase_name_override(self):
        schema = module([{"name": "bgp", "kind": "container", "camelcase_name": "BGP", "children": []}])
        ir = analyze(schema)
        assert ir.directories["/test/bgp"].name == "BGP"


class TestFields:
    def test_config_state_flattening(self):
        ir = analyze(load_schema())
        interface = ir.directories[f"{PREFIX}/interfaces/interface"]
        assert list(interface.fields) == [
            "name",
            "mtu",
            "enabled",
            "type",
            "description",
            "admin-status",
            "oper-status",
            "counters",
            "subinterface",
        ]
        name = interface.fields["name"]
        assert name.path == f"{PREFIX}/interfaces/interface/config/name"
        assert name.shadow_paths == [
            f"{PREFIX}/interfaces/interface/state/name",
            f"{PREFIX}/interfaces/interface/name",
        ]

    def test_prefer_operational_state(self):
        ir = analyze(load_schema(), prefer_operational_state=True)
        name = ir.directories[f"{PREFIX}/interfaces/interface"].fields["name"]
        assert name.path == f"{PREFIX}/interfaces/interface/state/name"
        assert f"{PREFIX}/interfaces/interface/config/name" in name.shadow_paths

    def test_surrounding_container_is_elided(self):
        ir = analyze(load_schema())
        root = ir.directories["/device"]
        assert list(root.fields) == ["interface", "statement", "entry", "system"]
        assert root.fields["interface"].path == f"{PREFIX}/interfaces/interface"

    def test_names_and_attributes(self):
        ir = analyze(load_schema())
        interface = ir.directories[f"{PREFIX}/interfaces/interface"]
        assert interface.fields["admin-status"].field_name == "AdminStatus"
        assert interface.fields["admin-status"].attr_name == "admin_status"
        assert [(k.name, k.field_name, k.attr_name) for k in interface.list_keys] == [("name", "Name", "name")]
        assert interface.list_keys[0].mapped_type.native_type == "str"

    def test_reserved_and_keyword_attributes(self):
        leaves = ["field", "class", "populate-defaults", "list_key", "self"]
        schema = module(
            [{"name": "top", "kind": "container", "children": [{"name": n, "kind": "leaf", "type": "string"} for n in leaves]}]
        )
        fields = analyze(schema).directories["/test/top"].fields
        assert {name: f.attr_name for name, f in fields.items()} == {
            "field": "field_",
            "class": "class_",
            "populate-defaults": "populate_defaults_",
            "list_key": "list_key_",
            "self": "self_",
        }

    def test_colliding_field_names(self):
        schema = module(
            [
                {
                    "name": "top",
                    "kind": "container",
                    "children": [
                        {"name": "a-b", "kind": "leaf", "type": "string"},
                        {"name": "a_b", "kind": "leaf", "type": "string"},
                    ],
                }
            ]
        )
        fields = analyze(schema).directories["/test/top"].fields
        assert (fields["a-b"].field_name, fields["a-b"].attr_name) == ("AB", "a_b")
        assert (fields["a_b"].field_name, fields["a_b"].attr_name) == ("AB_", "a_b_")

    def test_field_reachable_twice_is_a_conflict(self):
        schema = module(
            [
                {
                    "name": "top",
                    "kind": "container",
                    "children": [
                        {"name": "x", "kind": "leaf", "type": "string"},
                        {"name": "config", "kind": "container", "children": [{"name": "x", "kind": "leaf", "type": "string"}]},
                    ],
                }
            ]
        )
        ir = analyze(schema)
        conflicts = ir.errors.by_category(NamingConflictError)
        assert [e.path for e in conflicts] == ["/test/top"]
        assert "/test/top" in ir.failed_paths


if __name__ == "__main__":
    pytest.main([__file__])
