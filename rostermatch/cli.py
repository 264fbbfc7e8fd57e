#!/usr/bin/env python3
"""
Roster Match CLI: match a student roster against hardship category lists.

USAGE:
  python -m rostermatch.cli categories                                 # List category layouts

  python -m rostermatch.cli match roster.xlsx \\
      --source 农村低保=rural.xlsx --source DISABLED_WITH_CERTIFICATE=disabled.xls
  python -m rostermatch.cli match roster.xlsx --source ... --output matches.xlsx
  python -m rostermatch.cli match roster.xlsx --source ... --json --mask
  python -m rostermatch.cli match roster.xlsx --source ... --category ORPHAN_OR_UNSUPPORTED_CHILD --name 张

  python -m rostermatch.cli serve                                      # Start API server
  python -m rostermatch.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Optional, Sequence

from rostermatch.analytics.matcher import DuplicatePolicy
from rostermatch.config import setup_logging
from rostermatch.data.normalize import mask_identifier
from rostermatch.data.registry import CATEGORY_SCHEMAS
from rostermatch.data.store import MatchStore, resolve_workers
from rostermatch.errors import InvalidSetting, RosterMatchError

LIST_LIMIT = 50


def _parse_source(value: str) -> tuple[str, str]:
    """``TAG=PATH`` -> (tag, path)."""
    tag, sep, path = value.partition("=")
    if not sep or not tag.strip() or not path.strip():
        raise argparse.ArgumentTypeError(f"expected TAG=PATH, got '{value}'")
    return tag.strip(), path.strip()


def _parse_workers(value: str) -> int:
    try:
        return resolve_workers(value)
    except InvalidSetting as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc


def cmd_categories(args) -> int:
    """List every category and its source layout."""
    print("\n" + "=" * 70)
    print("  ROSTER MATCH: CATEGORIES")
    print("=" * 70 + "\n")
    for tag, schema in CATEGORY_SCHEMAS.items():
        layout = schema.describe()
        sheets = ",".join(str(s) for s in layout["sheets"])
        cols = ", ".join(str(c) for c in layout["id_columns"])
        print(f"  {tag.value:<16}{tag.name:<36}sheet {sheets}  skip {layout['skip_rows']}  id cols [{cols}]")
    print()
    return 0


def cmd_match(args) -> int:
    """Run a match and print, export, or dump the results."""
    setup_logging(debug=args.debug)

    if not args.json:
        print("\n" + "=" * 70)
        print("  ROSTER MATCH: HARDSHIP CATEGORY MATCHING")
        print("=" * 70 + "\n")

    store = MatchStore()
    try:
        store.load(args.roster, args.sources, policy=args.duplicates, max_workers=args.workers)
        results = store.matches(category=args.category, name=args.name)
    except RosterMatchError as exc:
        print(f"\n  ERROR: {exc.message}", file=sys.stderr)
        if exc.recommendation:
            print(f"  {exc.recommendation}", file=sys.stderr)
        return 1

    if args.output:
        from rostermatch.reports.match_report import generate_excel
        out = generate_excel(store, args.output, category=args.category, name=args.name, mask=args.mask)
        if not args.json:
            print(f"  Saved: {out}")

    if args.json:
        from rostermatch.reports.match_report import generate_json
        data = generate_json(store, category=args.category, name=args.name, mask=args.mask)
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return 0

    stats = store.statistics()
    print(f"\n  Students on roster:  {stats['total_students']:,}")
    print(f"  Matches:             {stats['total_matches']:,}")
    print(f"  Matched students:    {stats['matched_students']:,}\n")
    for label, n in stats["category_counts"].items():
        print(f"    {label:<16}{n:>6,}")

    if store.failures:
        print(f"\n  CATEGORIES NOT READ ({len(store.failures)}):")
        for f in store.failures:
            print(f"    {f.category.value:<16}{f.error}")

    if args.category or args.name:
        print(f"\n  SELECTED ({len(results):,}):\n")
        for r in results[:LIST_LIMIT]:
            ident = mask_identifier(r.identifier) if args.mask else r.identifier
            print(f"    {r.roster.name:<12}{ident:<22}{r.roster.organization or '':<20}{r.category.value}")
        if len(results) > LIST_LIMIT:
            print(f"    ... {len(results) - LIST_LIMIT:,} more")

    print()
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Roster Match API on port {args.port}...")
    uvicorn.run("rostermatch.main:app", host=args.host, port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rostermatch",
        description="Roster Match: identity-number matching of a student roster against category lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # categories subcommand
    cat_parser = subparsers.add_parser("categories", help="List categories and their layouts")
    cat_parser.set_defaults(func=cmd_categories)

    # match subcommand
    match_parser = subparsers.add_parser("match", help="Match a roster against category sources")
    match_parser.add_argument("roster", help="Master roster workbook (.xlsx/.xls)")
    match_parser.add_argument("--source", dest="sources", action="append", default=[], type=_parse_source,
                              metavar="TAG=PATH", help="Category source (repeatable); TAG is a label or name")
    match_parser.add_argument("--output", help="Write the matches workbook to this path")
    match_parser.add_argument("--json", action="store_true", help="Print results as JSON")
    match_parser.add_argument("--category", help="Only show matches for this category")
    match_parser.add_argument("--name", help="Only show matches whose name contains this text")
    match_parser.add_argument("--duplicates", choices=[p.value for p in DuplicatePolicy],
                              help="Duplicate roster identifiers (default: $ROSTERMATCH_DUPLICATES or last)")
    match_parser.add_argument("--workers", type=_parse_workers,
                              help="Parallel source readers (default: $ROSTERMATCH_WORKERS or 1)")
    match_parser.add_argument("--mask", action="store_true", help="Mask identity numbers in output")
    match_parser.add_argument("--debug", action="store_true", help="Debug logging")
    match_parser.set_defaults(func=cmd_match)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
