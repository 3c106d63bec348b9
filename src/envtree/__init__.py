"""
Hierarchical ``.env`` loading from the workspace root down to the current directory.
"""

from .config import ConfigError, EnvTreeOptions, load_options
from .loader import EnvTreeResult, load_env_tree, load_env_tree_async
from .resolver import resolve_env_files
from .workspace import (
    compare_workspace_detection_methods,
    find_workspace_root,
    find_workspace_root_by_indicators,
    find_workspace_root_by_lockfile,
)

__all__ = [
    "ConfigError",
    "EnvTreeOptions",
    "EnvTreeResult",
    "compare_workspace_detection_methods",
    "find_workspace_root",
    "find_workspace_root_by_indicators",
    "find_workspace_root_by_lockfile",
    "load_env_tree",
    "load_env_tree_async",
    "load_options",
    "resolve_env_files",
]
