"""
Project discovery and build.

This package provides:
- Toolchain / TOOLCHAINS: closed set of supported build systems
- locate_project: nearest enclosing project root and its toolchain
- build_project: release build plus artifact lookup
"""

from .builder import BuildOutput, build_project, find_artifact, run_build
from .locator import ProjectLocation, classify_toolchain, find_root, locate_project
from .toolchains import TOOLCHAINS, Toolchain, ToolchainSpec, get_spec, root_markers

__all__ = [
    "BuildOutput",
    "build_project",
    "find_artifact",
    "run_build",
    "ProjectLocation",
    "classify_toolchain",
    "find_root",
    "locate_project",
    "TOOLCHAINS",
    "Toolchain",
    "ToolchainSpec",
    "get_spec",
    "root_markers",
]
