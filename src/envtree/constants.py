"""
File names and defaults shared by workspace detection and env file loading.
"""

from __future__ import annotations

from typing import Tuple

LOCK_FILES: Tuple[str, ...] = (
    "package-lock.json",  # npm
    "yarn.lock",  # yarn v1/v2+
    "pnpm-lock.yaml",  # pnpm
    "bun.lockb",  # bun (binary)
    "bun.lock",  # bun (text)
)

WORKSPACE_INDICATORS: Tuple[str, ...] = (
    ".git",
    "lerna.json",
    "nx.json",
    "rush.json",
    "workspace.json",
    "pnpm-workspace.yaml",
    "turbo.json",
    "bazel.build",
    "WORKSPACE",
    "deno.json",
    "deno.jsonc",
    "Cargo.toml",
    "cargo.toml",
    "go.work",
    ".vscode/settings.json",
)

PACKAGE_MANIFEST = "package.json"

METHOD_LOCKFILE = "lockfile"
METHOD_INDICATOR = "indicator"

CONVENTION_NEXTJS = "nextjs"
SUPPORTED_CONVENTIONS: Tuple[str, ...] = (CONVENTION_NEXTJS,)

ENV_NAME_VARIABLE = "NODE_ENV"
DEFAULT_ENV_NAME = "development"
TEST_ENV_NAME = "test"

ENV_FILE_PREFIX = ".env"


__all__ = [
    "CONVENTION_NEXTJS",
    "DEFAULT_ENV_NAME",
    "ENV_FILE_PREFIX",
    "ENV_NAME_VARIABLE",
    "LOCK_FILES",
    "METHOD_INDICATOR",
    "METHOD_LOCKFILE",
    "PACKAGE_MANIFEST",
    "SUPPORTED_CONVENTIONS",
    "TEST_ENV_NAME",
    "WORKSPACE_INDICATORS",
]
