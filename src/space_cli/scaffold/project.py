"""
Project scaffolding - create a new node project for a toolchain.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from string import Template
from typing import Dict, List

from space_cli.errors import ScaffoldError
from space_cli.project import Toolchain

from .templates import (
    BUILD_ZIG_TEMPLATE,
    CARGO_CONFIG_TEMPLATE,
    CARGO_TOML_TEMPLATE,
    LIB_RS_TEMPLATE,
    MAIN_ZIG_TEMPLATE,
)


logger = logging.getLogger(__name__)

# Relative path -> template, per toolchain
PROJECT_FILES: Dict[Toolchain, Dict[str, Template]] = {
    Toolchain.RUST: {
        "Cargo.toml": CARGO_TOML_TEMPLATE,
        "src/lib.rs": LIB_RS_TEMPLATE,
        ".cargo/config.toml": CARGO_CONFIG_TEMPLATE,
    },
    Toolchain.ZIG: {
        "build.zig": BUILD_ZIG_TEMPLATE,
        "src/main.zig": MAIN_ZIG_TEMPLATE,
    },
}

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


def create_project(name: str, toolchain: Toolchain, parent: Path | None = None) -> List[Path]:
    """
    Create project ``name`` under ``parent`` (default: cwd).

    Returns:
        Paths of the files written

    Raises:
        ScaffoldError: If the name is invalid or the directory already exists
    """
    if not _NAME_RE.match(name):
        raise ScaffoldError(f"Invalid project name: {name!r}")

    root = (parent or Path.cwd()) / name
    if root.exists():
        raise ScaffoldError(f"{root} already exists")

    written = []
    try:
        for relative, template in PROJECT_FILES[toolchain].items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(template.substitute(name=name))
            written.append(path)
    except OSError as e:
        raise ScaffoldError(f"Cannot create project {root}: {e}") from e

    logger.info(f"Created {toolchain.value} project at {root}")
    return written
