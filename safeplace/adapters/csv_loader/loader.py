"""CSV loader — reads professional directory exports."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from safeplace.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_active,
    parse_category,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect delimiter (comma/semicolon/tab) from the header line."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Raises:
        ValueError: if the file has no header row.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = [
            {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            for raw_row in reader
        ]

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def _first(row: dict[str, str | None], *keys: str) -> str | None:
    for key in keys:
        if row.get(key):
            return row[key]
    return None


def load_professionals(file_path: Path) -> list[dict]:
    """Load counsellors and legal advisors from a user-management export.

    Expected columns (after normalization, first match wins):
        id | user_id | _id, name | display_name | full_name, role | category,
        email, phone, active | is_active

    Rows without an id, a name, or a counsellor/legal role are skipped.
    """
    rows = _read_csv(file_path)
    professionals = []
    skipped = 0
    for row in rows:
        pid = _first(row, "id", "user_id", "_id")
        name = _first(row, "name", "display_name", "full_name")
        category = parse_category(_first(row, "role", "category", "professional_type"))
        if not pid or not name or category is None:
            skipped += 1
            continue

        professionals.append({
            "id": pid,
            "display_name": name,
            "category": category,
            "email": _first(row, "email", "e_mail"),
            "phone": _first(row, "phone", "phone_number"),
            "is_active": parse_active(_first(row, "active", "is_active")),
        })

    if skipped:
        logger.warning("Skipped %d row(s) without id, name or professional role", skipped)
    logger.info("Parsed %d professionals", len(professionals))
    return professionals
