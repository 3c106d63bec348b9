"""
Command line interface for envtree.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import ConfigError, EnvTreeOptions, load_options
from .constants import SUPPORTED_CONVENTIONS
from .loader import EnvTreeResult, load_env_tree
from .runner import CommandError, run_command
from .workspace import WorkspaceDetectionResult, compare_workspace_detection_methods


def _split_command(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Everything after the first ``--`` is the command to run."""

    args = list(argv)
    if "--" not in args:
        return args, []
    index = args.index("--")
    return args[:index], args[index + 1 :]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="envtree",
        description="Load layered .env files from the workspace root down to a directory.",
        epilog="Use 'envtree [options] -- COMMAND ...' to run a command with the merged variables, "
        "or 'envtree info [DIR]' to compare workspace detection methods.",
    )
    parser.add_argument("dir", nargs="?", help="Starting directory to search from (default: cwd)")
    parser.add_argument(
        "-c",
        "--convention",
        choices=list(SUPPORTED_CONVENTIONS),
        help="Environment loading convention",
    )
    parser.add_argument(
        "--env",
        "--node-env",
        dest="env_name",
        help="Environment name used for .env.<name> files (default: $NODE_ENV or development)",
    )
    parser.add_argument("--prefix", help="Only keep variables whose name starts with this prefix")
    parser.add_argument("--config", help="Optional YAML file with loader options")
    parser.add_argument("--verbose", action="store_true", help="Show detailed information about loaded files")
    parser.add_argument(
        "--export",
        action="store_true",
        help="Print shell 'export' statements instead of a summary",
    )
    return parser.parse_args(argv)


def _parse_info_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="envtree info",
        description="Show information about workspace detection",
    )
    parser.add_argument("dir", nargs="?", help="Starting directory to search from (default: cwd)")
    return parser.parse_args(argv)


def _build_options(args: argparse.Namespace) -> EnvTreeOptions:
    options = load_options(args.config) if args.config else EnvTreeOptions()
    overrides = {
        "start_dir": args.dir,
        "convention": args.convention,
        "env_name": args.env_name,
        "prefix": args.prefix,
    }
    return replace(
        options,
        set_env=False,
        verbose=args.verbose or options.verbose,
        **{key: value for key, value in overrides.items() if value is not None},
    )


def _print_summary(result: EnvTreeResult, options: EnvTreeOptions) -> None:
    print(f"Loaded {len(result.env_vars)} environment variables from {len(result.files_loaded)} files")
    if options.verbose:
        print("\nEnvironment variables\n---------------------")
        for key in sorted(result.env_vars):
            print(f"  {key}={result.env_vars[key]}")


def _print_exports(result: EnvTreeResult) -> None:
    for key in sorted(result.env_vars):
        print(f"export {key}={shlex.quote(result.env_vars[key])}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(message)s")
    logging.getLogger("envtree").setLevel(logging.INFO if verbose else logging.WARNING)


def _run_load(args: argparse.Namespace, command: List[str]) -> int:
    options = _build_options(args)
    _configure_logging(options.verbose)
    result = load_env_tree(options)
    if result is None:
        print("No workspace root found. Could not locate .env files.", file=sys.stderr)
        return 1

    if options.verbose:
        print("EnvTree\n-------")
        print(f"Workspace root:     {result.workspace_root}")
        print(f"Detection method:   {result.method}")
        print(f"Convention:         {options.convention}")
        print(f"Starting directory: {options.start_dir or '.'}")
        if result.files_loaded:
            print("\nFiles loaded (in order)")
            for index, path in enumerate(result.files_loaded, start=1):
                print(f"  {index}. {path}")
        print("")

    if command:
        if options.verbose:
            print(f"Executing with {len(result.env_vars)} environment variables: {' '.join(command)}\n")
        return run_command(command, result.env_vars)

    if not result.files_loaded:
        print("No .env files found in the workspace tree.")
    elif args.export:
        _print_exports(result)
    else:
        _print_summary(result, options)
    return 0


def _print_method(title: str, detection: Optional[WorkspaceDetectionResult]) -> None:
    if detection is None:
        print(f"\n{title}: no workspace root found")
        return
    print(f"\n{title}:")
    print(f"  workspace root: {detection.workspace_root}")
    print(f"  .env files found: {len(detection.env_files)}")
    for index, path in enumerate(detection.env_files, start=1):
        print(f"    {index}. {path}")


def _run_info(args: argparse.Namespace) -> int:
    comparison = compare_workspace_detection_methods(args.dir or ".")
    print("Workspace Detection Analysis\n----------------------------")
    _print_method("Lock file method", comparison.lockfile_result)
    _print_method("Workspace indicator method", comparison.indicator_result)
    print(f"\nRecommendation: {comparison.recommendation}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    own_args, command = _split_command(sys.argv[1:] if argv is None else argv)
    try:
        if own_args and own_args[0] == "info":
            return _run_info(_parse_info_args(own_args[1:]))
        args = _parse_args(own_args)
        if args.dir == "info" and not Path("info").is_dir():
            print("envtree: 'info' must be the first argument, e.g. 'envtree info [DIR]'", file=sys.stderr)
            return 2
        return _run_load(args, command)
    except (ConfigError, CommandError) as exc:
        print(f"envtree: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
