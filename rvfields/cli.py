#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Command line front end.

Usage:
    rvfields decode 0x00a00513
    rvfields decode 0x4501 --json
    rvfields decode 0x8000000000000007 --category csr --mode mcause
    rvfields list
    rvfields csr 0x300
"""

import argparse
import logging
import os
import sys

from rvfields._version import __version__
from rvfields.config import (
    CSR_ADDRESS_COUNT,
    DEFAULT_CATEGORY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODE,
    LOG_LEVEL_ENV_VAR,
    MASK64,
)
from rvfields.csr import classify_csr, csr_name
from rvfields.errors import UnknownModeError
from rvfields.registry import default_registry
from rvfields.render import format_table, records_to_json

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def parse_value(text: str) -> int:
    """Parse a hex (0x), binary (0b), octal (0o) or decimal integer, allowing ``_``."""
    try:
        value = int(text.replace("_", ""), 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if not 0 <= value <= MASK64:
        raise argparse.ArgumentTypeError(f"value does not fit in 64 bits: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rvfields",
        description="Break RISC-V instruction words and CSR values into annotated bit fields",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL),
        help=f"Logging level (default: ${LOG_LEVEL_ENV_VAR} or {DEFAULT_LOG_LEVEL})",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    decode_parser = commands.add_parser("decode", help="Decode a value")
    decode_parser.add_argument("value", type=parse_value, help="Value to decode (hex, binary or decimal)")
    decode_parser.add_argument(
        "--category", default=DEFAULT_CATEGORY, help=f"Decode category (default: {DEFAULT_CATEGORY})"
    )
    decode_parser.add_argument(
        "--mode", default=DEFAULT_MODE, help=f"Decode mode (default: {DEFAULT_MODE})"
    )
    decode_parser.add_argument("--json", action="store_true", help="Print records as JSON")

    commands.add_parser("list", help="List categories and modes")

    csr_parser = commands.add_parser("csr", help="Name and classify a CSR address")
    csr_parser.add_argument("address", type=parse_value, help="12-bit CSR address")
    return parser


def _cmd_decode(args: argparse.Namespace) -> int:
    logger.info("Decoding %#x as %s/%s", args.value, args.category, args.mode)
    try:
        records = default_registry().decode(args.value, args.category, args.mode)
    except UnknownModeError as err:
        print(f"Error: {err}", file=sys.stderr)
        return EXIT_USAGE
    print(records_to_json(records) if args.json else format_table(records))
    return EXIT_OK


def _cmd_list(args: argparse.Namespace) -> int:
    registry = default_registry()
    for name in registry.categories():
        category = registry.category(name)
        print(f"{name}: {category.description}")
        for mode in category.modes:
            print(f"  {mode.name}: {mode.description}" if mode.description else f"  {mode.name}")
    return EXIT_OK


def _cmd_csr(args: argparse.Namespace) -> int:
    if args.address >= CSR_ADDRESS_COUNT:
        print(f"Error: CSR address out of range: {args.address:#x}", file=sys.stderr)
        return EXIT_USAGE
    name = csr_name(args.address) or "(unnamed)"
    print(f"{args.address:#05x} {name}: {classify_csr(args.address).describe()}")
    return EXIT_OK


COMMANDS = {"decode": _cmd_decode, "list": _cmd_list, "csr": _cmd_csr}


def main(argv: list[str] | None = None) -> int:
    """Run the command line front end and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, str(args.log_level).upper(), None)
    if not isinstance(level, int):
        parser.error(f"unknown log level: {args.log_level}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
