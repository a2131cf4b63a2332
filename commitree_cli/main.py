"""
CLI Main Entry Point

Builds the argument parser and dispatches to subcommands.

Usage:
    commitree build a b c [--file PATH] [--hex] [--hash NAME] [--tree] [--json]
    commitree prove b --leaves a b c [--out proof.json]
    commitree verify proof.json [--leaf DATA] [--root 0x...] [--json]
    commitree render a b c
    commitree config --init | --show

Environment Variables:
    COMMITREE_HASH_FUNCTION     Default hash function (keccak256, sha256)
    COMMITREE_LOG_LEVEL         Log level (default: WARNING)
    COMMITREE_LOG_FILE          Also log to this file
    COMMITREE_OUTPUT_FORMAT     human or json

Exit codes: 0 success, 1 runtime error, 2 proof did not verify.
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from commitree import __version__
from commitree.crypto.hash_functions import available_hash_functions
from commitree.schemas.errors import CommitreeException
from commitree_cli.commands import build, config, prove, verify
from commitree_cli.config import load_config


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Log to stderr, and to ``log_file`` as well when given."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_leaf_arguments(parser: argparse.ArgumentParser, positional: bool = True) -> None:
    """Leaf inputs shared by build, prove and render."""
    if positional:
        parser.add_argument("leaves", nargs="*", help="Leaf values (UTF-8 text, or 0x hex with --hex)")
    else:
        parser.add_argument("--leaves", nargs="+", default=[], help="Leaf values of the set")
    parser.add_argument(
        "--file",
        "-f",
        help="Read more leaves from a file, one per line. Blank lines are skipped; "
        "pass an empty leaf as a \"\" argument",
    )
    parser.add_argument("--hex", action="store_true", help="Leaves are 0x-prefixed hex bytes")
    parser.add_argument(
        "--hash",
        choices=available_hash_functions(),
        help="Hash function (default: from config, else keccak256)",
    )


def _add_json_flag(parser: argparse.ArgumentParser, help_text: str) -> None:
    # None means "not given": main() falls back to default_output_format
    parser.add_argument("--json", action="store_true", default=None, help=help_text)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commitree",
        description="Build sorted Merkle trees, generate and verify membership proofs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Config file (default: ./commitree.json or ~/.config/commitree/config.json)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument("--debug", action="store_true", help="Print tracebacks on errors")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser = subparsers.add_parser("build", help="Build a tree and print its root")
    _add_leaf_arguments(build_parser)
    build_parser.add_argument("--tree", action="store_true", help="Also print the tree diagram")
    _add_json_flag(build_parser, "Print a JSON summary")
    build_parser.set_defaults(func=build.build_cmd)

    prove_parser = subparsers.add_parser("prove", help="Generate a membership proof for one leaf")
    prove_parser.add_argument("leaf", help="The leaf to prove (UTF-8 text, or 0x hex with --hex)")
    _add_leaf_arguments(prove_parser, positional=False)
    prove_parser.add_argument("--out", "-o", help="Write the proof document here instead of stdout")
    _add_json_flag(prove_parser, "No human summary when writing to --out")
    prove_parser.set_defaults(func=prove.prove_cmd)

    verify_parser = subparsers.add_parser("verify", help="Verify a proof document offline")
    verify_parser.add_argument("proof_path", help="Proof document JSON ('-' for stdin)")
    verify_parser.add_argument("--leaf", help="Raw leaf data that must be the proven leaf")
    verify_parser.add_argument("--hex", action="store_true", help="--leaf is 0x-prefixed hex bytes")
    verify_parser.add_argument("--root", help="Trusted root (0x hex) to check instead of the document's")
    _add_json_flag(verify_parser, "Print a JSON report")
    verify_parser.set_defaults(func=verify.verify_cmd)

    render_parser = subparsers.add_parser("render", help="Print the tree diagram")
    _add_leaf_arguments(render_parser)
    render_parser.set_defaults(func=build.render_cmd)

    config_parser = subparsers.add_parser("config", help="Create or show the CLI config file")
    config_parser.add_argument("--init", action="store_true", help="Write a template config file")
    config_parser.add_argument("--show", action="store_true", help="Print the effective config")
    config_parser.add_argument("--path", default="commitree.json", help="Where --init writes")
    config_parser.set_defaults(func=config.config_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Parse ``argv`` (default sys.argv[1:]), load config, run the command.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        cli_config = load_config(args.config)
    except (OSError, CommitreeException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or cli_config.log_level, log_file=cli_config.log_file)

    args.cli_config = cli_config
    if getattr(args, "json", False) is None:
        args.json = cli_config.default_output_format == "json"

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
