"""
1) Load a family tree: parse a GEDCOM file, or fall back to the sample family.
2) Store members, relationships and family events with SQLite.
3) Read the snapshot back and validate it for cycles, impossible ages and bad references.
4) Compute generations, statistics, the family timeline and an auto-aligned layout.
5) Persist the changed member positions.
6) Plot the laid-out tree, and optionally export it as Graphviz DOT.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from database import create_database, load_snapshot, persist_positions, store_data
from graph import family_stats
from layout import LayoutConfig, auto_layout, changed_positions
from parsing import normalize_data, parse_gedcom
from plotting import build_dot, plot_tree, write_dot
from sample_data import sample_family
from timeline import timeline
from validation import validate_tree

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lay out and draw a family tree")
    parser.add_argument("--gedcom", type=Path, help="GEDCOM file to import (default: sample family)")
    parser.add_argument("--db", type=Path, default=Path("family_tree.db"), help="SQLite database path")
    parser.add_argument("--plot", type=Path, default=Path("family_tree.png"), help="Image output path")
    parser.add_argument("--dot", type=Path, help="Also export Graphviz output (.dot, .png, .svg, .pdf)")
    parser.add_argument("--keep-db", action="store_true", help="Reuse an existing database instead of rebuilding it")
    parser.add_argument("--card-width", type=float, default=LayoutConfig.card_width)
    parser.add_argument("--card-height", type=float, default=LayoutConfig.card_height)
    parser.add_argument("--h-gap", type=float, default=LayoutConfig.horizontal_gap)
    parser.add_argument("--v-gap", type=float, default=LayoutConfig.vertical_gap)
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    config = LayoutConfig(
        card_width=args.card_width,
        card_height=args.card_height,
        horizontal_gap=args.h_gap,
        vertical_gap=args.v_gap,
    )
    db_path: Path = args.db

    if db_path.exists() and not args.keep_db:
        db_path.unlink()
        print(f"Deleted existing database: {db_path}")

    fresh = not db_path.exists()
    conn = create_database(db_path)

    if fresh:
        if args.gedcom:
            print(f"Parsing GEDCOM file: {args.gedcom}")
            members, relationships = normalize_data(parse_gedcom(args.gedcom))
            events = []
        else:
            print("Loading sample family...")
            sample = sample_family()
            members, relationships, events = sample.members, sample.relationships, sample.events
        print(f"  Found {len(members)} members and {len(relationships)} relationships")

        print(f"Storing data in SQLite: {db_path}")
        store_data(conn, members, relationships, events)

    tree = load_snapshot(conn)
    conn.close()

    print("Validating family tree...")
    warnings = validate_tree(tree)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No validation issues found")

    stats = family_stats(tree)
    print(f"  {stats.total_members} members, {stats.generations} generations, {stats.couples} couples")

    print("Building timeline...")
    entries = timeline(tree)
    print(f"  {len(entries)} timeline entries")
    for entry in entries[:10]:
        print(f"    {entry.date or 'undated':<10}  {entry.description}")
    if len(entries) > 10:
        print(f"    ... and {len(entries) - 10} more")

    print("Computing layout...")
    positions = auto_layout(tree, config)
    changed = changed_positions(tree, positions)
    print(f"  {len(changed)} of {len(positions)} positions changed")

    report = persist_positions(db_path, changed)
    if not report.ok:
        print(f"  Failed to store {len(report.failed)} positions:")
        for member_id, error in sorted(report.failed.items()):
            print(f"    - member {member_id}: {error}")

    print(f"Plotting tree to: {args.plot}")
    plot_tree(tree, positions, args.plot, config)

    if args.dot:
        write_dot(build_dot(tree, positions, config), args.dot)

    print("Done!")
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
