#!/usr/bin/env python3
"""
Run every project test suite under a directory.

Each immediate child directory holding the manifest file (Cargo.toml by
default) gets the test command (``cargo test`` by default) run inside it.
The run stops at the first failing suite and exits with its return code.

Usage:
    python run_all_suites.py
    python run_all_suites.py --root projects --keep-going --log-dir logs
    python run_all_suites.py --manifest pyproject.toml -- python -m pytest -q

Exit codes:
    0 - every suite passed (or none was found)
    N - return code of the first failing suite
    2 - configuration or discovery error
"""

import argparse
import sys
from typing import List, Optional, Tuple

from core.errors import SuiteRunnerError
from core.runner import run_directory
from utils.config_loader import Config

EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Run the test suite of every project directory",
        epilog="Arguments after -- replace the configured test command."
    )
    p.add_argument("--root", help="directory whose children are scanned (default: cwd)")
    p.add_argument("--config", help="YAML config file (default: config/runner.yaml if present)")
    p.add_argument("--manifest", help="manifest filename marking a testable directory")
    p.add_argument("--pattern", dest="name_pattern", help="regex the directory name must match")
    p.add_argument("--keep-going", action="store_true", help="run every suite even after a failure")
    p.add_argument("--log-dir", help="write a CSV run log under this directory")
    p.add_argument("--no-log", action="store_true", help="do not write the CSV run log")
    return p


def split_command(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split ``argv`` at the first ``--`` into (options, command)."""
    if "--" not in argv:
        return argv, []
    index = argv.index("--")
    return argv[:index], argv[index + 1:]


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    options, command = split_command(list(argv))
    args = build_parser().parse_args(options)

    try:
        config = Config.initialize(args.config)
        config.update(
            manifest=args.manifest,
            name_pattern=args.name_pattern,
            command=command or None,
            fail_fast=False if args.keep_going else None,
            log_dir=args.log_dir
        )
        summary = run_directory(args.root, config=config, log=not args.no_log)
    except SuiteRunnerError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_USAGE
    finally:
        Config.reset()

    return summary.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
