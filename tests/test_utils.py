"""
Tests for StubTap common utilities.

Tests StubFileParser, safe_json_parse() and get_env_setting().
"""

import json

import pytest

from stubtap.common import StubFileParser, safe_json_parse, get_env_setting


class TestStubFileParser:
    """Test suite for StubFileParser."""

    def test_json_object(self, tmp_path):
        path = tmp_path / "stub.json"
        path.write_text(json.dumps({"service": "A", "method": "B"}), encoding='utf-8')

        assert StubFileParser(str(path)).load() == [{"service": "A", "method": "B"}]

    def test_json_list(self, tmp_path):
        path = tmp_path / "stubs.json"
        path.write_text(json.dumps([{"service": "A"}, {"service": "B"}]), encoding='utf-8')

        assert len(StubFileParser(str(path)).load()) == 2

    def test_yaml_detected_by_suffix(self, tmp_path):
        path = tmp_path / "stub.yml"
        path.write_text("service: A\nmethod: B\n", encoding='utf-8')

        parser = StubFileParser(str(path))
        assert parser.is_yaml
        assert parser.load() == [{"service": "A", "method": "B"}]

    def test_non_yaml_suffix_parsed_as_json(self, tmp_path):
        path = tmp_path / "stub.txt"
        path.write_text('{"service": "A"}', encoding='utf-8')

        assert StubFileParser(str(path)).load() == [{"service": "A"}]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops", encoding='utf-8')

        with pytest.raises(ValueError, match="Invalid stub definition"):
            StubFileParser(str(path)).load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("service: [unclosed\n", encoding='utf-8')

        with pytest.raises(ValueError, match="Invalid stub definition"):
            StubFileParser(str(path)).load()

    def test_unexpected_shape(self, tmp_path):
        path = tmp_path / "scalar.json"
        path.write_text("42", encoding='utf-8')

        with pytest.raises(ValueError, match="Expected object or list"):
            StubFileParser(str(path)).load()

    def test_list_of_non_objects(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding='utf-8')

        with pytest.raises(ValueError, match="Expected a list of objects"):
            StubFileParser(str(path)).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StubFileParser(str(tmp_path / "nope.json")).load()


class TestSafeJsonParse:
    """Test suite for safe_json_parse()."""

    def test_valid_json(self):
        assert safe_json_parse('{"a": 1}') == {"a": 1}

    def test_bytes(self):
        assert safe_json_parse(b'[1, 2]') == [1, 2]

    def test_invalid_returns_default(self):
        assert safe_json_parse('{bad', default={}) == {}

    def test_empty_returns_default(self):
        assert safe_json_parse('', default='x') == 'x'
        assert safe_json_parse(b'') is None


class TestGetEnvSetting:
    """Test suite for get_env_setting()."""

    def test_reads_prefixed_variable(self, monkeypatch):
        monkeypatch.setenv('STUBTAP_PORT', '9000')
        assert get_env_setting('port') == '9000'

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv('STUBTAP_HOST', raising=False)
        assert get_env_setting('host', '127.0.0.1') == '127.0.0.1'

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv('STUBTAP_LOG_LEVEL', '')
        assert get_env_setting('log_level', 'info') == 'info'
