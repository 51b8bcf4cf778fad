#!/usr/bin/env python3
"""
Export the NCTH weapon stats table as CSV.

Reads Weapons.xml, Items.xml and AmmoStrings.xml from the given table
directory, joins them by index and writes one row per exportable firearm,
grouped by weapon type and sorted by name. Without an output path the CSV
goes to stdout.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
HELPERS_DIR = ROOT / "scripts"
if str(HELPERS_DIR) not in sys.path:
    sys.path.append(str(HELPERS_DIR))

from helpers.diff import load_rows_by_key, report_row_deltas  # noqa: E402
from helpers.ncth import build_ncth_rows  # noqa: E402
from helpers.output import (  # noqa: E402
    FIELDNAMES,
    OutputError,
    format_path_for_console,
    write_csv,
)
from helpers.settings import SettingsError, load_settings  # noqa: E402
from helpers.xml_tables import (  # noqa: E402
    AMMO_XML,
    ITEMS_XML,
    WEAPONS_XML,
    TableError,
    TableReadError,
    load_ammo,
    load_items,
    load_weapons,
)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="parse_weapons",
        description="Build the NCTH weapon stats CSV from the game's XML tables.",
    )
    parser.add_argument("input", type=Path, help="Directory holding the XML tables.")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Where to write the CSV (default: stdout).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (table file names, default output path).",
    )
    parser.add_argument(
        "--no-diff",
        action="store_true",
        help="Skip the row delta report against the previous output file.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        settings = load_settings(args.config)
    except SettingsError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    output: Optional[Path] = args.output
    if output is None and settings.get("output"):
        output = Path(settings["output"])

    try:
        weapons = load_weapons(args.input, settings.get("weapons", WEAPONS_XML))
        items = load_items(args.input, settings.get("items", ITEMS_XML))
        ammo_types = load_ammo(args.input, settings.get("ammo", AMMO_XML))
    except TableError as e:
        kind = "read" if isinstance(e, TableReadError) else "parse"
        print(f"error: failed to {kind} {e}", file=sys.stderr)
        return 1

    rows = build_ncth_rows(weapons, items, ammo_types)

    try:
        if output is None:
            write_csv(rows, None)
            print(f"Wrote {len(rows)} rows to stdout", file=sys.stderr)
            return 0
        before_rows = {} if args.no_diff else load_rows_by_key(output, "Index")
        rendered = write_csv(rows, output)
    except OutputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {len(rows)} rows to {format_path_for_console(output, Path.cwd())}")
    report_row_deltas(
        before_rows=before_rows,
        after_rows=rendered,
        fieldnames=FIELDNAMES,
        key_field="Index",
        label="Weapon",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
