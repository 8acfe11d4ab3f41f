"""
Command-line interface for the module manager.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import commands
from .config import Settings
from .errors import ModuleManagerError
from .reporting import check_lines, export_report, info_lines, update_lines


MANIFEST_SUFFIXES = (".ts", ".js")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--manifest",
        default=None,
        help="Path to the dependency file. Default: deps.ts"
    )
    common.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each network request. Default: 10"
    )
    common.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of modules resolved in parallel. Default: 8"
    )
    common.add_argument(
        "--std-version",
        default=None,
        help="Treat this as the latest std version instead of looking it up"
    )
    common.add_argument(
        "--report",
        default=None,
        help="Write a per-module summary to this CSV (or .json) file"
    )
    common.add_argument(
        "--strict",
        action="store_true",
        help="Fail on deno.land imports that cannot be parsed or updated instead of skipping them"
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    parser = argparse.ArgumentParser(
        prog="dmm",
        description="A module manager for Deno. Checks and updates the versions in deps.ts"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Check the given modules for newer versions. Checks all if omitted."
    )
    check_parser.add_argument("modules", nargs="*", help="Module names to check")

    update_parser = subparsers.add_parser(
        "update",
        parents=[common],
        help="Update the given modules to their newest version. Updates all if omitted."
    )
    update_parser.add_argument(
        "modules",
        nargs="*",
        help="Optional dependency file location followed by module names to update"
    )

    info_parser = subparsers.add_parser(
        "info",
        parents=[common],
        help="Show information about a module"
    )
    info_parser.add_argument("module", help="Module name")

    return parser


def split_manifest_argument(values: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    """Separate a dependency file path from module names."""
    manifest = None
    names = []
    for value in values:
        if manifest is None and value.endswith(MANIFEST_SUFFIXES):
            manifest = value
        else:
            names.append(value)
    return manifest, names


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    names = getattr(args, "modules", [])
    manifest = args.manifest
    if args.command == "update":
        positional_manifest, names = split_manifest_argument(names)
        manifest = manifest or positional_manifest

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    settings = Settings().override(
        manifest_path=manifest,
        timeout=args.timeout,
        max_workers=args.workers,
        std_version=args.std_version,
        strict=args.strict or None,
    )

    try:
        if args.command == "info":
            for line in info_lines(commands.info(args.module, settings)):
                print(line)
            return

        if args.command == "check":
            result = commands.check(names, settings)
            lines = check_lines(result)
        else:
            result = commands.update(names, settings)
            lines = update_lines(result)

        for line in lines:
            print(line)

        if args.report:
            report_file = export_report(result, Path(args.report))
            print(f"Report saved to: {report_file}")

    except ModuleManagerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
