"""
fabassemble - command line entry point

Usage:
    # defaults (./src → ./dist)
    fabassemble

    # config file; its directory becomes the base directory
    fabassemble --config site/fabassemble.yaml

    # overrides
    fabassemble --base-dir site --dest public --strict-ids --save-run-log
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from fabassemble.assembly.runner import assemble
from fabassemble.config import AssemblyOptions, load_options
from fabassemble.domain.errors import AssemblyError

logger = logging.getLogger("fabassemble")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fabassemble",
        description="Assemble materials, views, layouts, data and docs into HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        help="Directory globs resolve against (default: config dir or .)",
    )
    parser.add_argument(
        "--dest",
        type=Path,
        help="Output directory (default: dist)",
    )
    parser.add_argument(
        "--layout",
        type=str,
        help="Default layout name (default: default)",
    )
    parser.add_argument(
        "--no-dna",
        action="store_true",
        help="Skip the cross-reference scan",
    )
    parser.add_argument(
        "--strict-ids",
        action="store_true",
        help="Fail on duplicate material ids",
    )
    parser.add_argument(
        "--save-run-log",
        action="store_true",
        help="Write the run log to <dest>/.assembly/",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Options given on the command line (unset flags are left out)."""
    overrides: dict[str, Any] = {}
    if args.base_dir is not None:
        overrides["base_dir"] = args.base_dir
    if args.dest is not None:
        overrides["dest"] = args.dest
    if args.layout is not None:
        overrides["layout"] = args.layout
    if args.no_dna:
        overrides["dna"] = False
    if args.strict_ids:
        overrides["strict_ids"] = True
    if args.save_run_log:
        overrides["save_run_log"] = True
    return overrides


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        overrides = overrides_from_args(args)
        if args.config is not None:
            options = load_options(args.config, **overrides)
        else:
            options = AssemblyOptions.from_dict(overrides)

        result = assemble(options)
    except AssemblyError as e:
        logger.error(f"Assembly failed: {e.code} {e.context}")
        return 1
    except OSError as e:
        logger.error(f"Assembly failed: {e}")
        return 1

    logger.info(f"Done: {len(result.outputs)} files written to {options.dest_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
