"""
Project Locator - find the enclosing project root and its toolchain.

The search walks upward from the working directory and stops at the first
directory holding any toolchain marker file. It does not resolve workspace
membership: the nearest enclosing marker wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from space_cli.errors import ProjectNotFoundError, UnknownToolchainError

from .toolchains import Toolchain, root_markers, toolchain_for_marker


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectLocation:
    """A located project root."""
    root: Path
    toolchain: Toolchain
    steps: int


def _has_marker(directory: Path) -> bool:
    markers = root_markers()
    return any((directory / marker).is_file() for marker in markers)


def find_root(start: Path) -> Tuple[Path, int]:
    """
    Walk upward from ``start`` to the nearest directory with a root marker.

    Args:
        start: Directory to begin the search in

    Returns:
        (root directory, number of upward steps taken)

    Raises:
        ProjectNotFoundError: If the filesystem root is reached without a match
    """
    current = start.resolve()
    steps = 0

    while True:
        if _has_marker(current):
            logger.debug(f"Found project root {current} after {steps} step(s)")
            return current, steps

        parent = current.parent
        if parent == current:
            raise ProjectNotFoundError(start)

        current = parent
        steps += 1


def classify_toolchain(root: Path) -> Toolchain:
    """
    Determine which toolchain owns a project root.

    Scans the root's immediate entries. When several markers are present
    the first toolchain in declaration order wins.

    Raises:
        UnknownToolchainError: If no entry is a known marker
    """
    found = set()
    for entry in root.iterdir():
        if not entry.is_file():
            continue
        toolchain = toolchain_for_marker(entry.name)
        if toolchain is not None:
            found.add(toolchain)

    for toolchain in Toolchain:
        if toolchain in found:
            if len(found) > 1:
                logger.warning(
                    f"Multiple toolchain markers in {root}, using {toolchain.value}"
                )
            return toolchain

    raise UnknownToolchainError(root)


def locate_project(start: Optional[Path] = None) -> ProjectLocation:
    """Find the project root above ``start`` (default: cwd) and classify it."""
    start = start or Path.cwd()
    root, steps = find_root(start)
    toolchain = classify_toolchain(root)
    logger.info(f"Using {toolchain.value} project at {root}")
    return ProjectLocation(root=root, toolchain=toolchain, steps=steps)
