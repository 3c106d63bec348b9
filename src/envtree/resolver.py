"""
Candidate ``.env`` file resolution between a workspace root and a start directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Tuple

from .constants import ENV_FILE_PREFIX, TEST_ENV_NAME

DirectoryChain = Tuple[Path, ...]


class EnvFileKind(str, Enum):
    BASE = "base"
    LOCAL = "local"
    ENV_SCOPED = "env_scoped"
    ENV_SCOPED_LOCAL = "env_scoped_local"


@dataclass(frozen=True)
class CandidateFile:
    """An existing env file and where it sits in the directory chain."""

    path: Path
    directory_depth: int
    kind: EnvFileKind


def build_directory_chain(workspace_root: str | Path, start_dir: str | Path) -> DirectoryChain:
    """
    Return the directories from ``workspace_root`` down to ``start_dir`` inclusive.

    Raises ``ValueError`` when the root is not ``start_dir`` or one of its parents.
    """

    root = Path(workspace_root).resolve()
    start = Path(start_dir).resolve()
    if root != start and root not in start.parents:
        raise ValueError(f"{root} is not an ancestor of {start}")

    chain: List[Path] = [start]
    while chain[-1] != root:
        chain.append(chain[-1].parent)
    chain.reverse()
    return tuple(chain)


def directory_file_names(env_name: str) -> List[Tuple[str, EnvFileKind]]:
    """File names checked in every directory, highest priority first."""

    names: List[Tuple[str, EnvFileKind]] = []
    # local overrides never apply to test runs
    if env_name != TEST_ENV_NAME:
        names.append((f"{ENV_FILE_PREFIX}.{env_name}.local", EnvFileKind.ENV_SCOPED_LOCAL))
        names.append((f"{ENV_FILE_PREFIX}.local", EnvFileKind.LOCAL))
    names.append((f"{ENV_FILE_PREFIX}.{env_name}", EnvFileKind.ENV_SCOPED))
    names.append((ENV_FILE_PREFIX, EnvFileKind.BASE))

    unique: List[Tuple[str, EnvFileKind]] = []
    seen = set()
    for name, kind in names:
        if name not in seen:
            seen.add(name)
            unique.append((name, kind))
    return unique


def collect_candidates(
    workspace_root: str | Path, start_dir: str | Path, env_name: str
) -> List[CandidateFile]:
    """
    Return the env files that exist along the chain, highest priority first.

    Directories closer to ``start_dir`` outrank their parents; inside one
    directory ``.env.<env>.local`` outranks ``.env.local``, then ``.env.<env>``
    and finally ``.env``.
    """

    chain = build_directory_chain(workspace_root, start_dir)
    names = directory_file_names(env_name)
    candidates: List[CandidateFile] = []
    for depth in range(len(chain) - 1, -1, -1):
        directory = chain[depth]
        for name, kind in names:
            path = directory / name
            if path.is_file():
                candidates.append(CandidateFile(path=path, directory_depth=depth, kind=kind))
    return candidates


def resolve_env_files(workspace_root: str | Path, start_dir: str | Path, env_name: str) -> List[Path]:
    return [candidate.path for candidate in collect_candidates(workspace_root, start_dir, env_name)]


def merge_order(candidates: Iterable[CandidateFile]) -> List[CandidateFile]:
    """Lowest priority first, so later entries override earlier ones when folded."""

    return list(reversed(list(candidates)))


__all__ = [
    "CandidateFile",
    "DirectoryChain",
    "EnvFileKind",
    "build_directory_chain",
    "collect_candidates",
    "directory_file_names",
    "merge_order",
    "resolve_env_files",
]
