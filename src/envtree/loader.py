"""
High level orchestration: locate the workspace, resolve env files, merge and export them.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, MutableMapping, Optional, Sequence

from .config import EnvTreeOptions
from .constants import DEFAULT_ENV_NAME, ENV_NAME_VARIABLE
from .env import export_environment, read_env_file
from .resolver import collect_candidates, merge_order
from .workspace import WorkspaceDetectionResult, find_workspace_root

logger = logging.getLogger(__name__)

ParsedFile = Optional[Dict[str, str]]


@dataclass
class EnvTreeResult:
    """Merged variables plus where they came from."""

    env_vars: Dict[str, str]
    files_loaded: List[Path]
    workspace_root: Path
    method: str


@dataclass
class _LoadPlan:
    options: EnvTreeOptions
    environ: MutableMapping[str, str]
    detection: WorkspaceDetectionResult
    env_name: str
    files: List[Path] = field(default_factory=list)

    def trace(self, message: str, *args: object) -> None:
        if self.options.verbose:
            logger.info(message, *args)
        else:
            logger.debug(message, *args)


def _read_candidate(path: Path) -> ParsedFile:
    """
    Parse one env file. ``None`` means the file disappeared and is skipped;
    an unreadable file contributes no keys but still counts as loaded.
    """

    if not path.is_file():
        return None
    try:
        return read_env_file(path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not parse %s: %s", path, exc)
        return {}


def _plan(options: Optional[EnvTreeOptions], environ: Optional[MutableMapping[str, str]]) -> Optional[_LoadPlan]:
    options = options or EnvTreeOptions()
    target = os.environ if environ is None else environ
    start_dir = Path(options.start_dir) if options.start_dir is not None else Path.cwd()
    env_name = options.env_name or target.get(ENV_NAME_VARIABLE) or DEFAULT_ENV_NAME

    detection = find_workspace_root(start_dir, options.ceiling_dir)
    if detection is None:
        logger.debug("No workspace root found above %s", start_dir)
        return None

    plan = _LoadPlan(options=options, environ=target, detection=detection, env_name=env_name)
    plan.trace("Workspace root: %s (%s)", detection.workspace_root, detection.method)
    plan.trace("Environment: %s", env_name)

    candidates = collect_candidates(detection.workspace_root, start_dir, env_name)
    plan.files = [candidate.path for candidate in merge_order(candidates)]
    plan.trace("Found %d env files", len(plan.files))
    return plan


def _finish(plan: _LoadPlan, parsed: Sequence[ParsedFile]) -> EnvTreeResult:
    env_vars: Dict[str, str] = {}
    files_loaded: List[Path] = []
    for path, values in zip(plan.files, parsed):
        if values is None:
            continue
        env_vars.update(values)
        files_loaded.append(path)
        plan.trace("Loaded %s (%d keys)", path, len(values))

    prefix = plan.options.prefix
    if prefix:
        env_vars = {key: value for key, value in env_vars.items() if key.startswith(prefix)}
        plan.trace("Kept %d keys with prefix %s", len(env_vars), prefix)

    if plan.options.set_env:
        written = export_environment(env_vars, plan.environ)
        plan.trace("Exported %d of %d keys to the environment", len(written), len(env_vars))

    return EnvTreeResult(
        env_vars=env_vars,
        files_loaded=files_loaded,
        workspace_root=plan.detection.workspace_root,
        method=plan.detection.method,
    )


def load_env_tree(
    options: Optional[EnvTreeOptions] = None,
    environ: Optional[MutableMapping[str, str]] = None,
    reader: Callable[[Path], ParsedFile] = _read_candidate,
) -> Optional[EnvTreeResult]:
    """
    Load and merge env files from the workspace root down to the start directory.

    Returns ``None`` when no workspace root can be found. Files closer to the
    start directory override their parents, while variables already present in
    ``environ`` are never overwritten when ``options.set_env`` is enabled.
    """

    plan = _plan(options, environ)
    if plan is None:
        return None
    return _finish(plan, [reader(path) for path in plan.files])


async def load_env_tree_async(
    options: Optional[EnvTreeOptions] = None,
    environ: Optional[MutableMapping[str, str]] = None,
    reader: Callable[[Path], ParsedFile] = _read_candidate,
) -> Optional[EnvTreeResult]:
    """Same as :func:`load_env_tree`, with the ascent and file reads run in worker threads."""

    plan = await asyncio.to_thread(_plan, options, environ)
    if plan is None:
        return None
    parsed = await asyncio.gather(*(asyncio.to_thread(reader, path) for path in plan.files))
    return _finish(plan, parsed)


__all__ = ["EnvTreeResult", "load_env_tree", "load_env_tree_async"]
