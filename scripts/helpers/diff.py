import csv
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

from helpers.output import OutputError


def load_rows_by_key(path: Path, key_field: str) -> Dict[str, Dict[str, str]]:
    """Rows of a previously written CSV keyed on key_field; {} if there is none."""
    if not path.exists():
        return {}
    rows: Dict[str, Dict[str, str]] = {}
    try:
        with path.open(newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                rows[row.get(key_field, "")] = row
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        reason = getattr(e, "strerror", None) or e
        raise OutputError(f"cannot read previous output {path}: {reason}") from e
    return rows


def _describe(row: Mapping[str, str], key: str, key_field: str, name_field: str) -> str:
    name = row.get(name_field) or "<unnamed>"
    return f"{name} ({key_field} {key})"


def report_row_deltas(
    before_rows: Mapping[str, Mapping[str, str]],
    after_rows: Iterable[Mapping[str, str]],
    fieldnames: Sequence[str],
    key_field: str,
    *,
    name_field: str = "Name",
    label: str = "Row",
    max_list: int = 50,
    printer=print,
) -> None:
    """
    Compare the rows of the previous export with the new one, printing a
    delta summary (Row deltas: added=.., removed=.., changed=..). Silent
    when there was no previous export.
    """
    if not before_rows:
        return

    after_map = {row.get(key_field, ""): row for row in after_rows}

    added: List[str] = []
    removed: List[str] = []
    changed: List[str] = []
    for key, row in after_map.items():
        old = before_rows.get(key)
        if old is None:
            added.append(_describe(row, key, key_field, name_field))
        elif any(str(old.get(col, "")) != str(row.get(col, "")) for col in fieldnames):
            changed.append(_describe(row, key, key_field, name_field))
    for key, row in before_rows.items():
        if key not in after_map:
            removed.append(_describe(row, key, key_field, name_field))

    total_diff = len(added) + len(removed) + len(changed)
    if not total_diff:
        printer("No row content changes detected.")
        return
    printer(
        f"{label} deltas: added="
        f"{len(added)}, removed={len(removed)}, changed={len(changed)}"
    )
    if total_diff > max_list:
        return
    for title, names in (("Added", added), ("Removed", removed), ("Changed", changed)):
        if names:
            printer(f"  {title}:")
            for n in sorted(names):
                printer(f"    - {n}")
