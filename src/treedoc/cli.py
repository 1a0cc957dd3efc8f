#!/usr/bin/env python3
"""Tree document validator and viewer.

Usage:
    tree-doc validate story.tree.json [--json] [--strict-tier] [--report out.json]
    tree-doc view story.tree.json [--json]
    tree-doc info story.tree.json [--json]

Exit codes: 0 valid / success, 1 document has errors, 2 unreadable or
malformed input.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from treedoc.diagnostics import info_to_dict, validation_result_to_dict
from treedoc.errors import InternalConsistencyError, ParseError, ViewError
from treedoc.io_utils import dump_json, read_document_text, save_json
from treedoc.output import print_info, print_trunk_view, print_validation_result
from treedoc.parse import parse
from treedoc.validate import validate_document
from treedoc.viewer import build_trunk_view, trunk_view_to_dict

log = logging.getLogger("treedoc.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tree-doc",
        description="Tree Document Format validator and viewer",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a .tree.json file")
    validate.add_argument("file", type=Path, help="Path to the .tree.json file")
    validate.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    validate.add_argument(
        "--strict-tier",
        action="store_true",
        help="Also apply the tier-1 schema to tier 1/2 documents",
    )
    validate.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write the JSON validation report",
    )

    view = sub.add_parser("view", help="View the trunk path of a .tree.json file")
    view.add_argument("file", type=Path, help="Path to the .tree.json file")
    view.add_argument("--json", action="store_true", help="Emit JSON instead of text")

    info = sub.add_parser("info", help="Show summary information about a .tree.json file")
    info.add_argument("file", type=Path, help="Path to the .tree.json file")
    info.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    return parser


def _fail(args: argparse.Namespace, message: str, exc: BaseException) -> int:
    """Report a hard failure on stderr and, under --json, as an error payload."""
    print(message, file=sys.stderr)
    if args.json:
        payload: dict[str, object] = {"error": str(exc)}
        if args.command == "validate":
            payload["isValid"] = False
        dump_json(payload)
    return EXIT_FAILURE


def _read(args: argparse.Namespace) -> bytes | None:
    try:
        return read_document_text(args.file)
    except OSError as exc:
        _fail(args, f"Error reading file '{args.file}': {exc}", exc)
        return None


def cmd_validate(args: argparse.Namespace, console: Console) -> int:
    text = _read(args)
    if text is None:
        return EXIT_FAILURE
    try:
        result = validate_document(text, strict_tier=args.strict_tier)
    except (ParseError, InternalConsistencyError) as exc:
        return _fail(args, f"Error parsing '{args.file}': {exc}", exc)

    payload = validation_result_to_dict(result)
    if args.report is not None:
        save_json(payload, args.report)
        log.info("wrote validation report to %s", args.report)
    if args.json:
        dump_json(payload)
    else:
        print_validation_result(result, args.file, console=console)
    return EXIT_OK if result.is_valid else EXIT_INVALID


def cmd_view(args: argparse.Namespace, console: Console) -> int:
    text = _read(args)
    if text is None:
        return EXIT_FAILURE
    try:
        result = validate_document(text)
    except (ParseError, InternalConsistencyError) as exc:
        return _fail(args, f"Error parsing '{args.file}': {exc}", exc)

    if not result.is_valid:
        if args.json:
            dump_json(validation_result_to_dict(result))
        else:
            print_validation_result(result, args.file, console=console)
        print("\nDocument has errors. Fix them before viewing.", file=sys.stderr)
        return EXIT_INVALID

    try:
        view = build_trunk_view(parse(text))
    except ParseError as exc:
        return _fail(args, f"Error parsing '{args.file}': {exc}", exc)
    except ViewError as exc:
        return _fail(args, f"Error building trunk view: {exc}", exc)

    if args.json:
        dump_json(trunk_view_to_dict(view))
    else:
        print_trunk_view(view, console=console)
    return EXIT_OK


def cmd_info(args: argparse.Namespace, console: Console) -> int:
    text = _read(args)
    if text is None:
        return EXIT_FAILURE
    try:
        result = validate_document(text)
    except (ParseError, InternalConsistencyError) as exc:
        return _fail(args, f"Error parsing '{args.file}': {exc}", exc)

    if args.json:
        dump_json(info_to_dict(result))
    else:
        print_info(result, args.file, console=console)
    return EXIT_OK


_COMMANDS = {
    "validate": cmd_validate,
    "view": cmd_view,
    "info": cmd_info,
}


def main(argv: list[str] | None = None, *, console: Console | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    log.debug("running %s on %s", args.command, args.file)
    return _COMMANDS[args.command](args, console or Console())


if __name__ == "__main__":
    raise SystemExit(main())
