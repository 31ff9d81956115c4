"""
Tests for StubTap Stub Loader

Tests recursive loading of stub definition directories, including
YAML files, multi-stub files and skipping of malformed files.
"""

import json
import logging

import pytest

from stubtap.stub import StubLoader, StubRepository


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding='utf-8')


@pytest.fixture
def stub_dir(tmp_path):
    """Directory tree with valid and invalid stub definitions."""
    write_json(tmp_path / "greeter" / "hello.json", {
        "service": "Greeter",
        "method": "SayHello",
        "input": {"equals": {"name": "tokopedia"}},
        "output": {"data": {"message": "Hello Tokopedia"}}
    })
    write_json(tmp_path / "greeter" / "nested" / "bye.json", {
        "service": "Greeter",
        "method": "SayBye",
        "input": {"contains": {"name": "john"}},
        "output": {"data": {"message": "Bye"}}
    })
    (tmp_path / "users.yaml").write_text(
        "- service: Users\n"
        "  method: Get\n"
        "  input:\n"
        "    matches:\n"
        "      id: '^\\d+$'\n"
        "  output:\n"
        "    name: Alice\n"
        "- service: Users\n"
        "  method: Get\n"
        "  input:\n"
        "    equals:\n"
        "      id: admin\n"
        "  output:\n"
        "    name: Root\n",
        encoding='utf-8'
    )
    (tmp_path / "broken.json").write_text("{not json", encoding='utf-8')
    write_json(tmp_path / "missing_service.json", {"method": "Get", "input": {}, "output": {}})
    (tmp_path / "scalar.json").write_text("42", encoding='utf-8')
    return tmp_path


class TestStubLoader:
    """Test StubLoader."""

    def test_load_directory(self, stub_dir):
        repo = StubRepository()
        loader = StubLoader(repo)

        loaded = loader.load_directory(str(stub_dir))

        assert loaded == 4
        snapshot = repo.snapshot()
        assert set(snapshot) == {"Greeter", "Users"}
        assert set(snapshot["Greeter"]) == {"SayHello", "SayBye"}
        assert len(snapshot["Users"]["Get"]) == 2

    def test_loaded_stubs_are_matchable(self, stub_dir):
        repo = StubRepository()
        StubLoader(repo).load_directory(stub_dir)

        assert repo.lookup("Greeter", "SayHello", {"name": "tokopedia"}) == {"data": {"message": "Hello Tokopedia"}}
        assert repo.lookup("Greeter", "SayBye", {"name": "john", "x": 1}) == {"data": {"message": "Bye"}}
        assert repo.lookup("Users", "Get", {"id": "123"}) == {"name": "Alice"}
        assert repo.lookup("Users", "Get", {"id": "admin"}) == {"name": "Root"}

    def test_yaml_list_keeps_file_order(self, stub_dir):
        repo = StubRepository()
        StubLoader(repo).load_directory(stub_dir)

        outputs = [stub.output for stub in repo.snapshot()["Users"]["Get"]]
        assert outputs == [{"name": "Alice"}, {"name": "Root"}]

    def test_malformed_files_are_skipped(self, stub_dir, caplog):
        repo = StubRepository()
        loader = StubLoader(repo)

        with caplog.at_level(logging.WARNING, logger="stubtap.stub.loader"):
            loader.load_directory(stub_dir)

        assert loader.skipped_files == 2
        assert "broken.json" in caplog.text
        assert "scalar.json" in caplog.text
        assert "missing_service.json" in caplog.text

    def test_missing_directory(self, tmp_path, caplog):
        repo = StubRepository()

        with caplog.at_level(logging.WARNING, logger="stubtap.stub.loader"):
            loaded = StubLoader(repo).load_directory(tmp_path / "does-not-exist")

        assert loaded == 0
        assert repo.snapshot() == {}
        assert "Can't read stub" in caplog.text

    def test_load_file(self, tmp_path):
        path = tmp_path / "single.json"
        write_json(path, [
            {"service": "A", "method": "B", "input": {"equals": {"k": 1}}, "output": {"v": 1}},
            {"service": "A", "method": "B", "input": {"equals": {"k": 2}}, "output": {"v": 2}},
        ])
        repo = StubRepository()

        assert StubLoader(repo).load_file(path) == 2
        assert repo.lookup("A", "B", {"k": 2}) == {"v": 2}

    def test_invalid_input_mode_is_skipped(self, tmp_path):
        write_json(tmp_path / "bad_input.json", {
            "service": "A", "method": "B", "input": {"equals": "not-a-map"}, "output": {}
        })
        repo = StubRepository()

        assert StubLoader(repo).load_directory(tmp_path) == 0
