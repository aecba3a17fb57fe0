# Copyright 2026 bracketqs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the bracketqs command-line interface."""

import argparse
import json
import logging
import sys

import yaml

from bracketqs.codec.dynamic import to_dynamic
from bracketqs.codec.serializer import serialize
from bracketqs.errors import QueryError
from bracketqs.model.values import Values
from bracketqs.query import parse_query, parse_url

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the bracketqs CLI."""
    parser = argparse.ArgumentParser(
        prog="bracketqs",
        description="bracketqs - Rails style bracket-notation query string codec",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log codec decisions to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Show the nested structure of a query string",
        description="Parse a bracket-notation query string into nested lists and objects.",
    )
    parse_parser.add_argument("query", help="Query string, or a URL with --url")
    parse_parser.add_argument(
        "--url",
        action="store_true",
        help="Treat QUERY as a URL and parse its query component",
    )
    parse_parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format (default: json)",
    )

    # canonicalize subcommand
    canonicalize_parser = subparsers.add_parser(
        "canonicalize",
        help="Rewrite a query string in canonical order",
        description=(
            "Re-serialize a query string with sorted keys, percent-encoded brackets "
            "and arrays of objects grouped element by element."
        ),
    )
    canonicalize_parser.add_argument("query", help="Query string, or a URL with --url")
    canonicalize_parser.add_argument(
        "--url",
        action="store_true",
        help="Treat QUERY as a URL and parse its query component",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "canonicalize":
        return _cmd_canonicalize(args)
    return 0


def _read_values(args: argparse.Namespace) -> Values:
    if args.url:
        return parse_url(args.query)
    return parse_query(args.query)


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    try:
        document = to_dynamic(_read_values(args))
    except QueryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.format == "yaml":
        print(yaml.safe_dump(document, sort_keys=False, allow_unicode=True), end="")
    else:
        print(json.dumps(document, indent=2, ensure_ascii=False))
    return 0


def _cmd_canonicalize(args: argparse.Namespace) -> int:
    """Handle the canonicalize subcommand."""
    try:
        values = _read_values(args)
    except QueryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(serialize(values))
    return 0
