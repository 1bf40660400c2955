"""Command line reads against a factomd node.

Usage:
    chain-reader head <chain_id>
    chain-reader history <chain_id>
    chain-reader first <chain_id>
    chain-reader entry <entry_hash>

Results are printed as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .config import FactomdConfig, ReaderConfig
from .exceptions import ChainPendingError, ChainReaderError
from .logging_utils import configure_structured_logging
from .source.factomd import FactomdSource
from .traversal.history import ChainReader

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_PENDING = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chain-reader",
        description="Read chain history from a factomd node",
    )
    parser.add_argument("--url", help="factomd v2 API URL (default: $FACTOMD_URL)")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "command",
        choices=["head", "history", "first", "entry"],
        help="What to read",
    )
    parser.add_argument("identifier", help="Chain id, or entry hash for 'entry'")
    return parser


async def run(args: argparse.Namespace, reader: ChainReader) -> Any:
    async with reader:
        if args.command == "head":
            head = await reader.get_chain_head(args.identifier)
            return head.to_dict()
        if args.command == "history":
            entries = await reader.get_full_history(args.identifier)
            return [entry.to_dict() for entry in entries]
        if args.command == "first":
            entry = await reader.get_first_record(args.identifier)
            return entry.to_dict()
        entry = await reader.get_entry(args.identifier)
        return entry.to_dict()


def make_reader(args: argparse.Namespace) -> ChainReader:
    config = FactomdConfig.from_env()
    if args.url:
        config.url = args.url
    return ChainReader(FactomdSource(config), ReaderConfig.from_env())


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING
    if args.json_logs:
        configure_structured_logging(level=level)
    else:
        logging.basicConfig(level=level, format="%(levelname)s  %(name)s  %(message)s")

    try:
        result = asyncio.run(run(args, make_reader(args)))
    except ChainPendingError as e:
        print(f"pending: {e}", file=sys.stderr)
        return EXIT_PENDING
    except ChainReaderError as e:
        logger.debug("Read failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
