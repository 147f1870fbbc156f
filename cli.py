"""
Offline transaction toolkit canonical entrypoint.

This is the single source of truth for:
- the CLI program name
- subcommand registration order
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from app.core.settings import settings
from app.tools.broadcaster import register_broadcast_command
from app.tools.builder import register_build_command
from app.tools.inspector import register_inspect_command
from app.tools.signer import register_sign_command
from observability import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="offline-tx",
        description="Build, sign, inspect and broadcast EVM transactions across an air gap.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Register Tools
    register_build_command(subparsers)
    register_sign_command(subparsers)
    register_inspect_command(subparsers)
    register_broadcast_command(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging(settings.TXTOOL_LOG_LEVEL)
    args = build_parser().parse_args(argv)
    out = args.func(args)
    print(out)
    return 0 if json.loads(out).get("ok") else 1


if __name__ == "__main__":
    sys.exit(main())
