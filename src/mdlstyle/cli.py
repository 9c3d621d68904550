"""CLI entry point for mdlstyle."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from mdlstyle import __version__
from mdlstyle.catalog import RuleCatalog
from mdlstyle.config import load_settings
from mdlstyle.errors import NotFoundError, ParseError
from mdlstyle.loader import discover_style, dumps, load, save
from mdlstyle.models import StyleDocument
from mdlstyle.resolve import resolve_rules
from mdlstyle.serializer import format_value

logger = logging.getLogger(__name__)


def _style_path(args: argparse.Namespace) -> Path:
    path = cast(Path | None, args.path)
    if path is not None:
        return path
    settings = load_settings()
    discovered = discover_style(Path.cwd(), filename=settings.filename)
    if discovered is None:
        print(f"Error: no {settings.filename} or .mdlrc found in {Path.cwd()}", file=sys.stderr)
        sys.exit(2)
    return discovered


def _load_or_exit(args: argparse.Namespace) -> tuple[Path, StyleDocument]:
    path = _style_path(args)
    strict = load_settings().strict and not cast(bool, args.no_strict)
    try:
        return path, load(path, strict=strict)
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _cmd_check(args: argparse.Namespace) -> None:
    path, document = _load_or_exit(args)
    active = resolve_rules(document)

    print(f"Style: {path}")
    print(f"Rule set:   {document.rule_set or '(none)'}")
    if document.tags:
        print(f"Tags:       {', '.join(document.tags)}")
    print(f"Overrides:  {len(document.overrides)}")
    print(f"Exclusions: {len(document.exclusions)}")
    if document.excluded_tags:
        print(f"Excluded tags: {', '.join(document.excluded_tags)}")
    print(f"Active rules: {len(active)}")


def _cmd_show(args: argparse.Namespace) -> None:
    _, document = _load_or_exit(args)
    rule = cast(str | None, args.rule)

    if rule is None:
        for resolved in resolve_rules(document):
            params = ", ".join(f"{k}={format_value(v)}" for k, v in resolved.params.items())
            line = f"{resolved.id} {resolved.alias}"
            if params:
                line += f" ({params})"
            print(line)
        return

    catalog = RuleCatalog.load()
    rule_id = catalog.canonical_id(rule) or rule
    if document.is_excluded(rule_id):
        print(f"{rule_id}: excluded")
        comment = document.exclusion_comment(rule_id)
        if comment:
            for line in comment.splitlines():
                print(f"  {line}")
        return

    active = {r.id: r for r in resolve_rules(document, catalog)}
    if rule_id not in active:
        print(f"{rule_id}: not enabled")
        return
    print(f"{rule_id}: enabled ({active[rule_id].enabled_by})")
    for name, value in document.overrides_for(rule_id).items():
        print(f"  {name} => {format_value(value)}")


def _cmd_format(args: argparse.Namespace) -> None:
    path, document = _load_or_exit(args)
    if cast(bool, args.write):
        save(document, path)
        print(f"Formatted {path}")
    else:
        sys.stdout.write(dumps(document))


def _cmd_rules(args: argparse.Namespace) -> None:
    catalog = RuleCatalog.load()
    tag = cast(str | None, args.tag)
    entries = catalog.rules_with_tag(tag) if tag else catalog.all_rules()
    if not entries:
        print(
            f"Error: no rules tagged '{tag}' (known: {', '.join(catalog.all_tags())})",
            file=sys.stderr,
        )
        sys.exit(1)
    for entry in entries:
        print(f"{entry.id}  {entry.alias:<30} {entry.description} [{', '.join(entry.tags)}]")


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    _ = parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Style file (default: discovered from the current directory)",
    )
    _ = parser.add_argument(
        "--no-strict",
        action="store_true",
        dest="no_strict",
        help="Do not validate rules and options against the catalog",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="mdlstyle",
        description="Load, validate and query markdownlint style files",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"mdlstyle {__version__}"
    )
    _ = parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # check subcommand
    check_p = subparsers.add_parser("check", help="Validate a style file and summarize it")
    _add_path_argument(check_p)

    # show subcommand
    show_p = subparsers.add_parser("show", help="Show active rules or one rule's status")
    _add_path_argument(show_p)
    _ = show_p.add_argument("--rule", default=None, help="Rule id or alias (e.g. MD013)")

    # format subcommand
    format_p = subparsers.add_parser("format", help="Print the style file in canonical form")
    _add_path_argument(format_p)
    _ = format_p.add_argument(
        "--write", action="store_true", help="Rewrite the file in place instead of printing"
    )

    # rules subcommand
    rules_p = subparsers.add_parser("rules", help="List known rules")
    _ = rules_p.add_argument("--tag", default=None, help="Only rules carrying this tag")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if cast(bool, args.verbose) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    dispatch = {
        "check": _cmd_check,
        "show": _cmd_show,
        "format": _cmd_format,
        "rules": _cmd_rules,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        logger.debug("Running %s", command)
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)
