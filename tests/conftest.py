"""Pytest configuration and fixtures."""
import os

import pytest

from space_cli.errors import StorageError

# Keep tests away from the real per-user config
for _var in ("SPACE_ENDPOINT", "SPACE_APIKEY", "SPACE_AUTHORIZATION", "SPACE_TIMEOUT"):
    os.environ.pop(_var, None)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at a temporary location."""
    from space_cli.config import reset_settings

    config_dir = tmp_path / "config"
    monkeypatch.setenv("SPACE_CONFIG_DIR", str(config_dir))
    reset_settings()
    yield config_dir
    reset_settings()


class FakeStorage:
    """In-memory blob store recording every upload attempt."""

    def __init__(self, fail_on_call=None):
        self.objects = {}
        self.calls = []
        self.fail_on_call = fail_on_call

    def upload(self, bucket, path, data):
        self.calls.append((bucket, path))
        if self.fail_on_call == len(self.calls):
            raise StorageError("HTTP error 500: boom", status_code=500)
        self.objects[path] = data


class FakeCatalog:
    """In-memory catalog recording inserted rows."""

    def __init__(self, error=None):
        self.rows = []
        self.calls = 0
        self.error = error

    def insert(self, table, record):
        self.calls += 1
        if self.error is not None:
            raise self.error
        self.rows.append((table, record))


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def fake_catalog():
    return FakeCatalog()


@pytest.fixture
def hello_manifest():
    """Manifest text for a node with one input and one output."""
    from space_cli.schema import Format

    return Format.create(
        "Hello",
        "0.1",
        "Says hello",
        [("value", "u64")],
        [("name", "string")],
    ).to_json()


@pytest.fixture
def node_files(tmp_path, hello_manifest):
    """Artifact, source and manifest files on disk."""
    artifact = tmp_path / "hello.wasm"
    artifact.write_bytes(b"\x00asm\x01\x00\x00\x00")
    source = tmp_path / "main.rs"
    source.write_text("fn main() {}\n")
    manifest = tmp_path / "hello.json"
    manifest.write_text(hello_manifest)
    return artifact, source, manifest


@pytest.fixture
def storage_factory():
    return FakeStorage


@pytest.fixture
def catalog_factory():
    return FakeCatalog
