import json
from pathlib import Path

import pytest

from yang_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator
from yang_to_code.pipeline.pathgen import WILDCARD_SUFFIX, combinations

SCHEMA_PATH = Path(__file__).parent / "test_data" / "schemas" / "interfaces.json"

PEER_SCHEMA = {
    "modules": [
        {
            "name": "net",
            "prefix": "net",
            "children": [
                {
                    "name": "peers",
                    "kind": "container",
                    "children": [
                        {
                            "name": "peer",
                            "kind": "list",
                            "keys": "address port vrf",
                            "children": [
                                {"name": "address", "kind": "leaf", "type": "string"},
                                {"name": "port", "kind": "leaf", "type": "uint16"},
                                {"name": "vrf", "kind": "leaf", "type": "string"},
                                {"name": "description", "kind": "leaf", "type": "string"},
                            ],
                        }
                    ],
                }
            ],
        }
    ]
}


def path_api(schema, **config):
    return PipelineGenerator("test", schema, CodeGeneratorConfig(**config)).path_api


def interfaces_api(**config):
    with open(SCHEMA_PATH) as f:
        return path_api(json.load(f), **config)


def method_names(struct):
    return [c.method_name for c in struct.constructors]


class TestCombinations:
    def test_two(self):
        assert combinations(2) == [[], [0], [1], [0, 1]]

    def test_three(self):
        assert combinations(3) == [[], [0], [1], [0, 1], [2], [0, 2], [1, 2], [0, 1, 2]]

    @pytest.mark.parametrize("n", range(7))
    def test_properties(self, n):
        combos = combinations(n)
        assert len(combos) == 2**n
        assert combos[0] == []
        assert combos[-1] == list(range(n))
        assert len({tuple(c) for c in combos}) == len(combos)
        for combo in combos:
            assert combo == sorted(set(combo))
            assert all(0 <= i < n for i in combo)

    def test_negative(self):
        assert combinations(-1) == [[]]


class TestKeyCombinations:
    def test_every_combination_gets_an_accessor(self):
        api = path_api(PEER_SCHEMA)
        root = api.structs["Device"]
        assert method_names(root) == [
            "PeerAny",
            "PeerAnyPortAnyVrf",
            "PeerAnyAddressAnyVrf",
            "PeerAnyVrf",
            "PeerAnyAddressAnyPort",
            "PeerAnyPort",
            "PeerAnyAddress",
            "Peer",
        ]
        assert [c.type_name for c in root.constructors] == ["PeerAny"] * 7 + ["Peer"]

    def test_parameters_and_key_values(self):
        root = path_api(PEER_SCHEMA).structs["Device"]
        accessors = {c.method_name: c for c in root.constructors}

        partial = accessors["PeerAnyAddress"]
        assert [(p.param_name, p.type_name) for p in partial.params] == [("port", "uint16"), ("vrf", "str")]
        assert partial.key_values == {"address": '"*"', "port": "port", "vrf": "vrf"}

        full = accessors["Peer"]
        assert [p.key_name for p in full.params] == ["address", "port", "vrf"]
        assert full.rel_path == ["peers", "peer"]

        assert accessors["PeerAny"].params == []
        assert accessors["PeerAny"].key_values == {"address": '"*"', "port": '"*"', "vrf": '"*"'}

    def test_simplified_wildcards(self):
        root = path_api(PEER_SCHEMA, simplify_wildcard_paths=True).structs["Device"]
        accessors = {c.method_name: c for c in root.constructors}
        assert accessors["PeerAny"].key_values == {}
        assert accessors["PeerAnyVrf"].key_values == {"address": "address", "port": "port", "vrf": '"*"'}

    def test_without_wildcards(self):
        api = path_api(PEER_SCHEMA, generate_wildcard_paths=False)
        assert method_names(api.structs["Device"]) == ["Peer"]
        assert not any(name.endswith(WILDCARD_SUFFIX) for name in api.structs)


class TestBuilderApi:
    def test_threshold_reached(self):
        api = path_api(PEER_SCHEMA, list_builder_key_threshold=2)
        root = api.structs["Device"]
        assert method_names(root) == ["PeerAny"]
        assert root.constructors[0].type_name == "PeerAny"
        assert root.constructors[0].params == []

        wildcard = api.structs["PeerAny"]
        assert [(b.method_name, b.key.param_name, b.key.type_name) for b in wildcard.builders] == [
            ("WithAddress", "address", "str"),
            ("WithPort", "port", "uint16"),
            ("WithVrf", "vrf", "str"),
        ]
        assert all(b.parent_type_name == "PeerAny" for b in wildcard.builders)
        assert api.structs["Peer"].builders == []

    def test_threshold_not_reached(self):
        api = path_api(PEER_SCHEMA, list_builder_key_threshold=4)
        assert len(api.structs["Device"].constructors) == 8
        assert api.structs["PeerAny"].builders == []

    def test_threshold_zero_never_uses_builders(self):
        api = path_api(PEER_SCHEMA, list_builder_key_threshold=0)
        assert all(not s.builders for s in api.structs.values())

    def test_single_key_list_with_threshold_one(self):
        api = interfaces_api(list_builder_key_threshold=1)
        assert "InterfaceAny" in method_names(api.structs["Device"])
        assert "Interface" not in method_names(api.structs["Device"])
        assert [b.method_name for b in api.structs["InterfaceAny"].builders] == ["WithName"]


class TestPathStructs:
    def test_struct_names(self):
        api = interfaces_api()
        assert "Device" in api.structs
        assert "DeviceAny" not in api.structs
        for name in ("Interface", "InterfaceAny", "Interface_Mtu", "Interface_MtuAny", "Interface_SubinterfaceAny"):
            assert name in api.structs
        assert api.structs["Device"].is_fakeroot
        assert api.structs["Interface_Mtu"].is_leaf
        assert api.structs["InterfaceAny"].is_wildcard

    def test_keyless_list_is_unreachable(self):
        api = interfaces_api()
        assert "Entry" not in api.structs
        assert "Entry_Message" not in api.structs
        assert "Entry" not in method_names(api.structs["Device"])

    def test_longest_relative_path(self):
        interface = interfaces_api().structs["Interface"]
        accessors = {c.method_name: c for c in interface.constructors}
        assert accessors["Name"].rel_path == ["config", "name"]
        assert accessors["Counters"].rel_path == ["state", "counters"]
        assert accessors["Subinterface"].rel_path == ["subinterfaces", "subinterface"]

    def test_wildcard_parent_returns_wildcard_children(self):
        api = interfaces_api()
        wildcard = {c.method_name: c for c in api.structs["InterfaceAny"].constructors}
        assert wildcard["Subinterface"].type_name == "Interface_SubinterfaceAny"
        assert wildcard["SubinterfaceAny"].type_name == "Interface_SubinterfaceAny"
        assert wildcard["Mtu"].type_name == "Interface_MtuAny"
        assert wildcard["Counters"].type_name == "Interface_CountersAny"

        concrete = {c.method_name: c for c in api.structs["Interface"].constructors}
        assert concrete["Subinterface"].type_name == "Interface_Subinterface"
        assert concrete["Mtu"].type_name == "Interface_Mtu"

    def test_constructors_are_sorted_by_field(self):
        system = interfaces_api().structs["System"]
        assert method_names(system) == ["Flags", "Hostname", "Ntp", "Secret", "Tags"]

    def test_failed_directories_are_unreachable(self):
        schema = {
            "modules": [
                {
                    "name": "test",
                    "prefix": "t",
                    "children": [
                        {
                            "name": "bad",
                            "kind": "container",
                            "children": [
                                {"name": "x", "kind": "leaf", "type": "uint8", "default": "300"},
                                {"name": "inner", "kind": "container", "children": []},
                            ],
                        },
                        {"name": "good", "kind": "container", "children": []},
                    ],
                }
            ]
        }
        api = path_api(schema)
        assert "Good" in api.structs
        assert "Bad" not in api.structs
        assert "Bad_Inner" not in api.structs
        assert method_names(api.structs["Device"]) == ["Good"]


class TestPathStructNames:
    @staticmethod
    def module(children):
        return {"modules": [{"name": "m", "prefix": "m", "children": children}]}

    def test_leaf_named_like_a_wildcard_twin(self):
        schema = self.module(
            [
                {
                    "name": "x",
                    "kind": "container",
                    "children": [
                        {"name": "foo", "kind": "leaf", "type": "string"},
                        {"name": "foo-any", "kind": "leaf", "type": "string"},
                    ],
                }
            ]
        )
        api = path_api(schema)
        assert sorted(api.structs) == ["Device", "X", "XAny", "X_Foo", "X_FooAny", "X_FooAnyAny", "X_FooAny_"]

        # The concrete leaf keeps its name, the twin of foo moves aside
        assert api.structs["X_FooAny"].yang_path == "/m/x/foo-any"
        assert not api.structs["X_FooAny"].is_wildcard

        wildcard = {c.method_name: c.type_name for c in api.structs["XAny"].constructors}
        assert wildcard == {"Foo": "X_FooAny_", "FooAny": "X_FooAnyAny"}
        twin = api.structs[wildcard["Foo"]]
        assert twin.is_wildcard
        assert twin.yang_path == "/m/x/foo"

    def test_top_level_leaf_named_like_the_root(self):
        schema = self.module(
            [
                {"name": "device", "kind": "leaf", "type": "string"},
                {"name": "system", "kind": "container", "children": [{"name": "device", "kind": "leaf", "type": "string"}]},
            ]
        )
        api = path_api(schema)
        root = api.structs["Device"]
        assert root.is_fakeroot
        assert not root.is_leaf

        accessors = {c.method_name: c.type_name for c in root.constructors}
        assert accessors["Device"] == "Device_"
        assert api.structs["Device_"].is_leaf
        assert api.structs["Device_"].yang_path == "/m/device"
        assert api.structs["Device_Any"].is_wildcard
        assert api.structs["System_Device"].yang_path == "/m/system/device"
        assert api.node_data["Device_"].yang_path == "/m/device"

    def test_runtime_names_are_reserved(self):
        schema = self.module([{"name": "node-path", "kind": "container", "children": []}])
        api = path_api(schema)
        assert "NodePath" not in api.structs
        assert api.structs["NodePath_"].yang_path == "/m/node-path"
        assert method_names(api.structs["Device"]) == ["NodePath"]

    def test_concrete_names_do_not_depend_on_wildcards(self):
        with_wildcards = {n for n, s in interfaces_api().structs.items() if not s.is_wildcard}
        without_wildcards = set(interfaces_api(generate_wildcard_paths=False).structs)
        assert with_wildcards == without_wildcards

    def test_paths_module_uses_unique_names(self, tmp_path):
        schema = self.module([{"name": "device", "kind": "leaf", "type": "string"}])
        code = PipelineGenerator("test", schema).generate_paths()
        assert code.count("class Device(") == 1
        assert "class Device_(NodePath):" in code
        assert "return Device_([\"device\"], {}, self)" in code


class TestNodeData:
    def test_leaf_data(self):
        data = interfaces_api().node_data["Interface_Mtu"]
        assert data.type_name == "uint16"
        assert data.field_name == "mtu"
        assert data.parent_type_name == "Interface"
        assert data.is_leaf
        assert data.is_scalar
        assert data.has_default
        assert data.yang_type_name == "mtu-type"
        assert data.yang_path == "/openconfig-interfaces/interfaces/interface/config/mtu"

    def test_non_scalar_leaves(self):
        node_data = interfaces_api().node_data
        assert not node_data["Interface_Type"].is_scalar
        assert not node_data["System_Secret"].is_scalar
        assert not node_data["Interface_Subinterface_Vlan"].is_scalar
        assert node_data["System_Tags"].type_name == "list[str]"

    def test_directory_data(self):
        data = interfaces_api().node_data["Interface_Subinterface"]
        assert data.type_name == "Interface_Subinterface"
        assert data.parent_type_name == "Interface"
        assert data.field_name == "subinterface"
        assert not data.is_leaf

    def test_sorted_by_name(self):
        node_data = interfaces_api().node_data
        assert list(node_data) == sorted(node_data)


if __name__ == "__main__":
    pytest.main([__file__])
