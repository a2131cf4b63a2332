"""
CLI Config Command

Usage:
    commitree config --init [--path commitree.json]
    commitree config --show
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict
from pathlib import Path

from commitree_cli.config import get_default_config_template


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def config_cmd(args: Namespace) -> int:
    if args.init:
        path = Path(args.path)
        if path.exists():
            print(f"Error: Config file already exists: {path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        path.write_text(get_default_config_template())
        print(f"Created configuration file: {path}")
        print("Environment variables (COMMITREE_*) override it.")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(asdict(args.cli_config), indent=2))
        return EXIT_SUCCESS

    print("Usage: commitree config [--init|--show]")
    return EXIT_SUCCESS
