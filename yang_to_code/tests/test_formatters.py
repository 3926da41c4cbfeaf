import pytest

from yang_to_code.pipeline.config import FormatterConfig
from yang_to_code.pipeline.formatters import BlackFormatter, RuffFormatter, format_code, get_formatter

UNFORMATTED = "x = {  'a':1 }\n"


class TestFormatters:
    def test_disabled_returns_code_unchanged(self):
        assert format_code(UNFORMATTED, FormatterConfig(enabled=False)) == UNFORMATTED

    def test_get_formatter(self):
        assert isinstance(get_formatter("ruff"), RuffFormatter)
        assert isinstance(get_formatter("black"), BlackFormatter)

    def test_unknown_tool(self):
        with pytest.raises(ValueError):
            get_formatter("yapf")
        with pytest.raises(ValueError):
            format_code(UNFORMATTED, FormatterConfig(enabled=True, tool="yapf"))

    def test_black(self):
        formatter = BlackFormatter()
        if not formatter.is_available():
            pytest.skip("black is not installed")
        config = FormatterConfig(enabled=True, tool="black")
        assert format_code(UNFORMATTED, config) == 'x = {"a": 1}\n'

    def test_black_leaves_invalid_code_alone(self):
        formatter = BlackFormatter()
        if not formatter.is_available():
            pytest.skip("black is not installed")
        assert formatter.format("def broken(:\n", FormatterConfig(enabled=True, tool="black")) == "def broken(:\n"

    def test_ruff(self):
        formatter = RuffFormatter()
        if not formatter.is_available():
            pytest.skip("ruff is not installed")
        assert format_code(UNFORMATTED, FormatterConfig(enabled=True, tool="ruff")) == 'x = {"a": 1}\n'


if __name__ == "__main__":
    pytest.main([__file__])
