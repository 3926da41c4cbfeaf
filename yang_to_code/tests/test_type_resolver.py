import pytest

from yang_to_code.pipeline import (
    CodeGeneratorConfig,
    CyclicReferenceError,
    PipelineGenerator,
    SchemaInconsistencyError,
    UnsupportedConstructError,
)


def analyze(leaves, typedefs=None, **config):
    """Analyze a schema holding the leaves in container /test/top."""
    schema = {
        "modules": [
            {
                "name": "test",
                "prefix": "t",
                "typedefs": typedefs or {},
                "children": [{"name": "top", "kind": "container", "children": leaves}],
            }
        ]
    }
    return PipelineGenerator("test", schema, CodeGeneratorConfig(**config)).ir


def leaf(name, yang_type, **extra):
    return {"name": name, "kind": "leaf", "type": yang_type, **extra}


def mapped(ir, field):
    return ir.directories["/test/top"].fields[field].mapped_type


class TestScalarTypes:
    @pytest.mark.parametrize(
        "yang_type, native, zero",
        [
            ("int8", "int8", "0"),
            ("uint64", "uint64", "0"),
            ("string", "str", '""'),
            ("boolean", "bool", "False"),
            ({"kind": "decimal64", "fraction_digits": 3}, "float64", "0.0"),
            ("binary", "Binary", "None"),
            ("empty", "YANGEmpty", "False"),
            ("bits", "Any", "None"),
            ("instance-identifier", "Any", "None"),
        ],
    )
    def test_builtin_kinds(self, yang_type, native, zero):
        result = mapped(analyze([leaf("x", yang_type)]), "x")
        assert (result.native_type, result.zero_value) == (native, zero)
        assert not result.is_union

    def test_typedef_resolves_to_base(self):
        typedefs = {"port": {"kind": "uint16"}, "dst-port": {"kind": "port"}}
        assert mapped(analyze([leaf("p", "dst-port")], typedefs), "p").native_type == "uint16"

    def test_unknown_typedef(self):
        with pytest.raises(SchemaInconsistencyError):
            analyze([leaf("p", "no-such-type")])


class TestUnions:
    def test_duplicates_keep_first_index(self):
        result = mapped(analyze([leaf("u", {"kind": "union", "types": ["int32", "string", "int32"]})]), "u")
        assert result.union_types == {"int32": 0, "str": 1}
        assert result.native_type == "Top_U_Union"
        assert result.is_union

    def test_nested_unions_are_flattened(self):
        nested = {"kind": "union", "types": [{"kind": "union", "types": ["int8", "string"]}, "int8", "boolean"]}
        result = mapped(analyze([leaf("u", nested)]), "u")
        assert result.union_types == {"int8": 0, "str": 1, "bool": 2}

    def test_single_distinct_subtype_is_not_a_union(self):
        ir = analyze([leaf("u", {"kind": "union", "types": ["string", "string"]})])
        assert mapped(ir, "u").native_type == "str"
        assert not mapped(ir, "u").is_union
        assert ir.unions == {}

    def test_union_definition(self):
        ir = analyze([leaf("u", {"kind": "union", "types": ["uint32", "string"]})])
        union = ir.unions["Top_U_Union"]
        assert union.subtypes == ["uint32", "str"]
        assert union.source_path == "/test/top/u"

    def test_leafref_member_follows_target(self):
        ir = analyze(
            [
                leaf("target", "uint32"),
                leaf("u", {"kind": "union", "types": [{"kind": "leafref", "path": "../target"}, "string"]}),
            ]
        )
        assert mapped(ir, "u").union_types == {"uint32": 0, "str": 1}

    def test_union_names_are_unique(self):
        # Both leaves propose "Top_AB_Union"
        ir = analyze(
            [
                leaf("a-b", {"kind": "union", "types": ["int8", "string"]}),
                leaf("a_b", {"kind": "union", "types": ["int16", "string"]}),
            ]
        )
        assert sorted(ir.unions) == ["Top_AB_Union", "Top_AB_Union_"]


class TestLeafrefs:
    def test_relative_leafref(self):
        ir = analyze([leaf("name", "string"), leaf("ref", {"kind": "leafref", "path": "../name"})])
        assert mapped(ir, "ref").native_type == "str"

    def test_absolute_leafref_with_prefixes(self):
        ir = analyze([leaf("mtu", "uint16"), leaf("ref", {"kind": "leafref", "path": "/t:top/t:mtu"})])
        assert mapped(ir, "ref").native_type == "uint16"

    def test_leafref_chain(self):
        ir = analyze(
            [
                leaf("a", "int64"),
                leaf("b", {"kind": "leafref", "path": "../a"}),
                leaf("c", {"kind": "leafref", "path": "../b"}),
            ]
        )
        assert mapped(ir, "c").native_type == "int64"

    def test_leafref_cycle(self):
        ir = analyze(
            [
                leaf("a", {"kind": "leafref", "path": "../b"}),
                leaf("b", {"kind": "leafref", "path": "../a"}),
                leaf("ok", "string"),
            ]
        )
        assert ir.errors.by_category(CyclicReferenceError)
        assert "/test/top" in ir.failed_paths

    def test_missing_target_aborts(self):
        with pytest.raises(SchemaInconsistencyError):
            analyze([leaf("ref", {"kind": "leafref", "path": "../missing"})])

    def test_leafref_to_container_aborts(self):
        leaves = [{"name": "inner", "kind": "container", "children": []}, leaf("ref", {"kind": "leafref", "path": "../inner"})]
        with pytest.raises(SchemaInconsistencyError):
            analyze(leaves)


class TestUnsupported:
    def test_wrapper_union_default_is_unsupported(self):
        ir = analyze([leaf("u", {"kind": "union", "types": ["int32", "string"]}, default="1")])
        errors = ir.errors.by_category(UnsupportedConstructError)
        assert [e.path for e in errors] == ["/test/top/u"]

    def test_errors_do_not_stop_other_directories(self):
        schema = {
            "modules": [
                {
                    "name": "test",
                    "prefix": "t",
                    "children": [
                        {"name": "bad", "kind": "container", "children": [leaf("x", "uint8", default="300")]},
                        {"name": "good", "kind": "container", "children": [leaf("y", "uint8", default="30")]},
                    ],
                }
            ]
        }
        result = PipelineGenerator("test", schema).generate_all()
        assert result.errors.paths == ["/test/bad/x"]
        assert "Good" in result.structs
        assert "Bad" not in result.structs
        assert "    good: Good | None = None" in result.structs["Device"]
        assert "bad" not in result.structs["Device"]


if __name__ == "__main__":
    pytest.main([__file__])
