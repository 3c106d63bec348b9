"""
Run a child command with the merged environment.
"""

from __future__ import annotations

import os
import subprocess
from typing import Dict, Mapping, Optional, Sequence


class CommandError(RuntimeError):
    """Raised when the child command cannot be started."""


def build_child_environment(
    env_vars: Mapping[str, str], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """The ambient environment with ``env_vars`` laid over it."""

    child_env = dict(os.environ if environ is None else environ)
    child_env.update(env_vars)
    return child_env


def run_command(
    command: Sequence[str],
    env_vars: Mapping[str, str],
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Run ``command`` with inherited stdio and return its exit code."""

    if not command:
        raise CommandError("No command specified")
    try:
        completed = subprocess.run(  # noqa: S603
            list(command),
            env=build_child_environment(env_vars, environ),
            check=False,
        )
    except OSError as exc:
        raise CommandError(f"Failed to execute command: {exc}") from exc
    return completed.returncode


__all__ = ["CommandError", "build_child_environment", "run_command"]
