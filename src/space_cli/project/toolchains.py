"""
Supported build toolchains.

Each toolchain is one record: the marker file that identifies a project
root, the release-build command, the glob the artifact is found by and the
source file published next to it. Adding a toolchain means adding one
``Toolchain`` member and one ``ToolchainSpec`` entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class Toolchain(str, Enum):
    """Closed set of toolchains a project can be built with."""
    RUST = "rust"
    ZIG = "zig"


@dataclass(frozen=True)
class ToolchainSpec:
    """How to recognise, build and package one toolchain's projects."""
    toolchain: Toolchain
    marker: str
    build_command: Tuple[str, ...]
    artifact_glob: str
    source_path: str


TOOLCHAINS: Dict[Toolchain, ToolchainSpec] = {
    Toolchain.RUST: ToolchainSpec(
        toolchain=Toolchain.RUST,
        marker="Cargo.toml",
        build_command=("cargo", "build", "--release", "--target", "wasm32-wasi"),
        artifact_glob="target/wasm32-wasi/release/*.wasm",
        source_path="src/lib.rs",
    ),
    Toolchain.ZIG: ToolchainSpec(
        toolchain=Toolchain.ZIG,
        marker="build.zig",
        build_command=("zig", "build"),
        artifact_glob="zig-out/lib/*.wasm",
        source_path="src/main.zig",
    ),
}


def get_spec(toolchain: Toolchain) -> ToolchainSpec:
    """Return the record for a toolchain."""
    return TOOLCHAINS[toolchain]


def root_markers() -> List[str]:
    """Marker file names in toolchain order."""
    return [spec.marker for spec in TOOLCHAINS.values()]


def toolchain_for_marker(filename: str) -> Toolchain | None:
    """Toolchain identified by a marker file name, if any."""
    for spec in TOOLCHAINS.values():
        if spec.marker == filename:
            return spec.toolchain
    return None
