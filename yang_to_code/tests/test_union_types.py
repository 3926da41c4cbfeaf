import json
from pathlib import Path
from unittest import TestCase

from yang_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator


class TestUnionTypes(TestCase):
    """Test union handling with wrapper classes vs type aliases"""

    def setUp(self):
        self.test_data_path = Path(__file__).parent / "test_data" / "union_types_tests.json"
        with open(self.test_data_path) as f:
            self.test_cases = {tc["name"]: tc for tc in json.load(f)}

    def _generate_code(self, test_case):
        """Generate the data module for leaves placed in container /test/top"""
        schema = {
            "modules": [
                {
                    "name": "test",
                    "prefix": "t",
                    "children": [{"name": "top", "kind": "container", "children": test_case["leaves"]}],
                }
            ]
        }
        config = CodeGeneratorConfig.from_dict(test_case["config"])
        return PipelineGenerator("test", schema, config).generate()

    def _check(self, name):
        test_case = self.test_cases[name]
        generated_code = self._generate_code(test_case)

        for expected in test_case["expected_contains"]:
            self.assertIn(expected, generated_code, f"Expected '{expected}' not found in generated code")

        for not_expected in test_case["expected_not_contains"]:
            self.assertNotIn(not_expected, generated_code, f"Unwanted '{not_expected}' found in generated code")

        compile(generated_code, f"<{name}>", "exec")

    def test_wrapper_unions(self):
        """Each member type gets a frozen wrapper subclass"""
        self._check("wrapper_unions")

    def test_simplified_unions(self):
        """Simplified unions are plain type aliases"""
        self._check("simplified_unions")

    def test_simplified_union_default(self):
        """The first member that accepts the default wins"""
        self._check("simplified_union_default")

    def test_single_subtype_collapses(self):
        self._check("single_subtype_collapses")

    def test_enum_member(self):
        self._check("enum_member")
