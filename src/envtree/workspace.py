"""
Workspace root detection by walking up from a starting directory.

Two strategies are available. The lock file strategy stops at the first
directory holding a dependency lock file. The indicator strategy stops at the
first directory holding a workspace marker (``.git``, monorepo tool configs,
workspace manifests), some of which only count when their content declares a
workspace. :func:`find_workspace_root` runs the lock file ascent in full and
only falls back to indicators when it finds nothing.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Tuple

from .constants import (
    ENV_FILE_PREFIX,
    LOCK_FILES,
    METHOD_INDICATOR,
    METHOD_LOCKFILE,
    PACKAGE_MANIFEST,
    WORKSPACE_INDICATORS,
)

logger = logging.getLogger(__name__)

_CARGO_WORKSPACE_SECTION = re.compile(r"^\s*\[workspace\]", re.MULTILINE)


@dataclass(frozen=True)
class WorkspaceDetectionResult:
    """Workspace root found by one detection strategy."""

    workspace_root: Path
    method: str
    env_files: Tuple[Path, ...] = field(default_factory=tuple)


@dataclass
class WorkspaceComparison:
    """Outcome of running both strategies side by side."""

    lockfile_result: Optional[WorkspaceDetectionResult]
    indicator_result: Optional[WorkspaceDetectionResult]
    recommendation: str


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _is_valid_indicator(path: Path, name: str) -> bool:
    """Return True when an existing indicator file really marks a workspace."""

    try:
        if name in ("Cargo.toml", "cargo.toml"):
            return bool(_CARGO_WORKSPACE_SECTION.search(path.read_text(encoding="utf-8")))
        if name in ("deno.json", "deno.jsonc"):
            config = _read_json(path)
            return isinstance(config, dict) and bool(config.get("workspace") or config.get("workspaces"))
        if name == ".vscode/settings.json":
            settings = _read_json(path)
            return isinstance(settings, dict) and bool(
                settings.get("folders") or settings.get("workspace.folders")
            )
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable workspace indicator %s: %s", path, exc)
        return False
    return True


def contains_lock_file(directory: Path) -> bool:
    return any((directory / name).exists() for name in LOCK_FILES)


def contains_valid_indicator(directory: Path) -> bool:
    for name in WORKSPACE_INDICATORS:
        candidate = directory / name
        if candidate.exists() and _is_valid_indicator(candidate, name):
            return True
    return False


def is_workspace_package_json(directory: Path) -> bool:
    """
    A ``package.json`` marks a workspace root when it declares ``workspaces``
    or when another indicator in the same directory validates.
    """

    manifest = directory / PACKAGE_MANIFEST
    if not manifest.is_file():
        return False
    try:
        package = _read_json(manifest)
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable %s: %s", manifest, exc)
        return False
    if isinstance(package, dict) and package.get("workspaces"):
        return True
    return contains_valid_indicator(directory)


def is_indicator_root(directory: Path) -> bool:
    return contains_valid_indicator(directory) or is_workspace_package_json(directory)


def list_env_files(directory: Path) -> List[Path]:
    """Return every regular ``.env*`` file directly inside ``directory``."""

    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return []
    return [entry for entry in entries if entry.name.startswith(ENV_FILE_PREFIX) and entry.is_file()]


def iter_ancestors(start_dir: str | Path, ceiling: str | Path | None = None) -> Iterator[Path]:
    """
    Yield ``start_dir`` and its parents, nearest first.

    The filesystem root is never yielded. When ``ceiling`` is given the walk
    stops after yielding it.
    """

    current = Path(start_dir).resolve()
    limit = Path(ceiling).resolve() if ceiling is not None else None
    while current.parent != current:
        yield current
        if limit is not None and current == limit:
            return
        current = current.parent


def _ascend(
    start_dir: str | Path,
    ceiling: str | Path | None,
    is_root: Callable[[Path], bool],
    method: str,
) -> Optional[WorkspaceDetectionResult]:
    seen: List[List[Path]] = []
    for directory in iter_ancestors(start_dir, ceiling):
        seen.append(list_env_files(directory))
        if is_root(directory):
            env_files = tuple(path for files in reversed(seen) for path in files)
            return WorkspaceDetectionResult(workspace_root=directory, method=method, env_files=env_files)
    return None


def find_workspace_root_by_lockfile(
    start_dir: str | Path, ceiling: str | Path | None = None
) -> Optional[WorkspaceDetectionResult]:
    """Walk upward until a directory with a dependency lock file is found."""

    return _ascend(start_dir, ceiling, contains_lock_file, METHOD_LOCKFILE)


def find_workspace_root_by_indicators(
    start_dir: str | Path, ceiling: str | Path | None = None
) -> Optional[WorkspaceDetectionResult]:
    """Walk upward until a directory with a valid workspace indicator is found."""

    return _ascend(start_dir, ceiling, is_indicator_root, METHOD_INDICATOR)


def find_workspace_root(
    start_dir: str | Path, ceiling: str | Path | None = None
) -> Optional[WorkspaceDetectionResult]:
    """
    Locate the workspace root for ``start_dir``.

    Lock files are more reliable for dependency managed projects, so that
    ascent runs first in full. Returns ``None`` when neither strategy finds a
    root.
    """

    result = find_workspace_root_by_lockfile(start_dir, ceiling)
    if result is not None:
        return result
    return find_workspace_root_by_indicators(start_dir, ceiling)


def _recommend(
    lockfile_result: Optional[WorkspaceDetectionResult],
    indicator_result: Optional[WorkspaceDetectionResult],
) -> str:
    if lockfile_result and indicator_result:
        if lockfile_result.workspace_root == indicator_result.workspace_root:
            return (
                "Both methods found the same workspace root. "
                "Lock file method is recommended for dependency-based projects."
            )
        return (
            "Methods found different workspace roots. "
            "Lock file method is generally more reliable for Node.js projects."
        )
    if lockfile_result:
        return (
            "Only lock file method found a workspace root. "
            "This is typical for projects with dependency management."
        )
    if indicator_result:
        return (
            "Only workspace indicator method found a workspace root. "
            "This might be a non-Node.js project or missing lock files."
        )
    return (
        "No workspace root found with either method. "
        "You might be in a standalone project or need to initialize a workspace."
    )


def compare_workspace_detection_methods(
    start_dir: str | Path, ceiling: str | Path | None = None
) -> WorkspaceComparison:
    """Run both strategies independently and explain how they differ."""

    lockfile_result = find_workspace_root_by_lockfile(start_dir, ceiling)
    indicator_result = find_workspace_root_by_indicators(start_dir, ceiling)
    return WorkspaceComparison(
        lockfile_result=lockfile_result,
        indicator_result=indicator_result,
        recommendation=_recommend(lockfile_result, indicator_result),
    )


__all__ = [
    "WorkspaceComparison",
    "WorkspaceDetectionResult",
    "compare_workspace_detection_methods",
    "contains_lock_file",
    "contains_valid_indicator",
    "find_workspace_root",
    "find_workspace_root_by_indicators",
    "find_workspace_root_by_lockfile",
    "is_indicator_root",
    "is_workspace_package_json",
    "iter_ancestors",
    "list_env_files",
]
