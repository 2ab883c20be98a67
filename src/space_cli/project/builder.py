"""
Build Invoker - run a toolchain's release build and find its artifact.

Builds run once in a child process with the project root as working
directory. A failed build is never retried.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from space_cli.errors import ArtifactNotFoundError, BuildError

from .locator import ProjectLocation
from .toolchains import ToolchainSpec, get_spec


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOutput:
    """Files produced by a build and ready for upload."""
    artifact: Path
    source: Path


def run_build(spec: ToolchainSpec, root: Path, timeout: Optional[int] = None) -> str:
    """
    Run the release-build command for ``spec`` in ``root``.

    Returns:
        Combined stdout/stderr of the build

    Raises:
        BuildError: On spawn failure, timeout or non-zero exit
    """
    command = list(spec.build_command)
    logger.info(f"Building: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            cwd=root,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise BuildError(spec.toolchain.value, f"Timeout after {timeout}s")
    except OSError as e:
        raise BuildError(spec.toolchain.value, str(e))

    output = "\n".join(part for part in (result.stdout, result.stderr) if part).strip()

    if result.returncode != 0:
        raise BuildError(spec.toolchain.value, output, returncode=result.returncode)

    logger.debug(f"Build output:\n{output}")
    return output


def find_artifact(spec: ToolchainSpec, root: Path) -> Path:
    """
    Find the built artifact under ``root``.

    When several files match, the first in sorted order is used.

    Raises:
        ArtifactNotFoundError: If nothing matches the toolchain's glob
    """
    matches = sorted(root.glob(spec.artifact_glob))
    if not matches:
        raise ArtifactNotFoundError(spec.artifact_glob)

    if len(matches) > 1:
        names = ", ".join(m.name for m in matches)
        logger.warning(f"Multiple artifacts found ({names}), using {matches[0].name}")

    return matches[0]


def build_project(location: ProjectLocation, timeout: Optional[int] = None) -> BuildOutput:
    """Build a located project and return its artifact and source paths."""
    spec = get_spec(location.toolchain)
    run_build(spec, location.root, timeout=timeout)
    artifact = find_artifact(spec, location.root)
    source = location.root / spec.source_path
    logger.info(f"Built {artifact.name}")
    return BuildOutput(artifact=artifact, source=source)
