import csv
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TextIO

from helpers.records import OUTPUT_COLUMNS, NcthRow, WeaponType


class OutputError(Exception):
    """The CSV could not be written, or the previous one could not be read."""


LIGHT_BLUE = "\033[94m"
RESET = "\033[0m"

FIELDNAMES = [header for header, _ in OUTPUT_COLUMNS]


def format_path_for_console(path: Path, root: Path | None = None) -> str:
    """
    Render a path with the repo root stripped (if provided) and
    wrapped in a light-blue ANSI color for console output.
    """
    resolved = path.resolve()
    display = resolved.as_posix()
    if root:
        try:
            rel = resolved.relative_to(root.resolve())
            display = "/" + rel.as_posix()
        except ValueError:
            display = resolved.as_posix()
    return f"{LIGHT_BLUE}{display}{RESET}"


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, WeaponType):
        return value.label
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def format_float(value: float) -> str:
    """Shortest round-trip decimal, never in exponent form (1e-05 -> 0.00001)."""
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
        if "." not in text:
            text += ".0"
    return text


def row_to_cells(row: NcthRow) -> Dict[str, str]:
    return {header: format_cell(getattr(row, attr)) for header, attr in OUTPUT_COLUMNS}


def write_rows(rows: Iterable[NcthRow], stream: TextIO) -> List[Dict[str, str]]:
    """Write header + rows to an open text stream; returns the rendered cells."""
    rendered = [row_to_cells(row) for row in rows]
    writer = csv.DictWriter(stream, fieldnames=FIELDNAMES, lineterminator="\n")
    writer.writeheader()
    for cells in rendered:
        writer.writerow(cells)
    return rendered


def write_csv(rows: Iterable[NcthRow], output_path: Optional[Path]) -> List[Dict[str, str]]:
    if output_path is None:
        try:
            rendered = write_rows(rows, sys.stdout)
            sys.stdout.flush()
        except (OSError, csv.Error) as e:
            raise OutputError(f"cannot write to stdout: {e}") from e
        return rendered
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", newline="", encoding="utf-8") as f:
            return write_rows(rows, f)
    except (OSError, csv.Error) as e:
        reason = getattr(e, "strerror", None) or e
        raise OutputError(f"cannot write {output_path}: {reason}") from e
