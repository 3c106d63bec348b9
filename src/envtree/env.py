"""
Helpers to parse ``.env`` files and export their values into an environment mapping.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Dict, List, Mapping, MutableMapping, Optional

from dotenv import dotenv_values


def parse_env_text(text: str) -> Dict[str, str]:
    """
    Parse dotenv formatted ``text`` into a plain string mapping.

    Values are passed through untouched (no ``${VAR}`` expansion) and bare keys
    without an ``=`` are skipped.
    """

    parsed = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return {key: value for key, value in parsed.items() if value is not None}


def read_env_file(path: str | Path) -> Dict[str, str]:
    """Read and parse one env file. ``OSError`` and decoding errors propagate."""

    return parse_env_text(Path(path).read_text(encoding="utf-8"))


def export_environment(
    values: Mapping[str, str], environ: Optional[MutableMapping[str, str]] = None
) -> List[str]:
    """
    Copy ``values`` into ``environ`` (``os.environ`` by default) and return the keys written.

    Existing environment variables always win so shell exports or CI secrets are never
    overwritten by entries in the files.
    """

    target = os.environ if environ is None else environ
    written: List[str] = []
    for key, value in values.items():
        if key in target:
            continue
        target[key] = value
        written.append(key)
    return written


__all__ = ["export_environment", "parse_env_text", "read_env_file"]
