"""Tests for project scaffolding."""
import pytest

from space_cli.errors import ScaffoldError
from space_cli.project import Toolchain, get_spec
from space_cli.scaffold import PROJECT_FILES, create_project


class TestCreateProject:
    """Test project scaffolding."""

    @pytest.mark.parametrize("toolchain", list(Toolchain))
    def test_writes_marker_and_source(self, tmp_path, toolchain):
        """Test the new project has its marker and source file."""
        written = create_project("demo", toolchain, parent=tmp_path)

        spec = get_spec(toolchain)
        root = tmp_path / "demo"
        assert (root / spec.marker).is_file()
        assert (root / spec.source_path).is_file()
        assert len(written) == len(PROJECT_FILES[toolchain])

    def test_name_substituted(self, tmp_path):
        """Test the project name is filled into the templates."""
        create_project("demo", Toolchain.RUST, parent=tmp_path)

        assert 'name = "demo"' in (tmp_path / "demo" / "Cargo.toml").read_text()
        assert "wasm32-wasi" in (tmp_path / "demo" / ".cargo" / "config.toml").read_text()

    @pytest.mark.parametrize("name", ["", "../escape", "has space", "1abc"])
    def test_invalid_name(self, tmp_path, name):
        """Test names that are not identifiers are rejected."""
        with pytest.raises(ScaffoldError):
            create_project(name, Toolchain.ZIG, parent=tmp_path)

    def test_existing_directory(self, tmp_path):
        """Test an existing directory is never overwritten."""
        (tmp_path / "demo").mkdir()

        with pytest.raises(ScaffoldError):
            create_project("demo", Toolchain.ZIG, parent=tmp_path)
