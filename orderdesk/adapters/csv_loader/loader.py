"""CSV loader — reads and normalizes roster and catalog exports."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from orderdesk.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_bool,
    parse_id_list,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect] | csv.Dialect:
    """Try to detect delimiter (comma/semicolon/tab) to support Excel FR exports."""
    # Excel FR exports use ';'
    if not sample:
        return csv.get_dialect("excel")

    first_line = sample.splitlines()[0]
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect

    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        return csv.get_dialect("excel")


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        dialect = _sniff_dialect(sample)
        reader = csv.DictReader(f, dialect=dialect)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_agents(file_path: Path) -> list[dict]:
    """Load and normalize the agents CSV.

    Expected columns (after normalization):
        name/nom, phone/téléphone, role/rôle, active/actif, can_view_orders
    """
    rows = _read_csv(file_path)
    agents = []
    for row in rows:
        name = row.get("name") or row.get("nom") or ""
        if not name:
            logger.warning("Skipping agent row without a name: %s", row)
            continue
        agents.append({
            "name": name,
            "phone": row.get("phone") or row.get("téléphone") or row.get("telephone"),
            "role": (row.get("role") or row.get("rôle") or "AGENT").upper(),
            "is_active": parse_bool(row.get("active") or row.get("actif")),
            "can_view_orders": parse_bool(row.get("can_view_orders")),
        })
    logger.info("Parsed %d agents", len(agents))
    return agents


def load_statuses(file_path: Path) -> list[dict]:
    """Load and normalize the statuses CSV.

    Expected columns (after normalization):
        name/nom, recall_after_h/rappel_h, color/couleur
    """
    rows = _read_csv(file_path)
    statuses = []
    for row in rows:
        name = row.get("name") or row.get("nom") or ""
        if not name:
            continue
        statuses.append({
            "name": name,
            "recall_after_h": _parse_positive_int(row.get("recall_after_h") or row.get("rappel_h")),
            "color": row.get("color") or row.get("couleur") or "#6366f1",
        })
    logger.info("Parsed %d statuses", len(statuses))
    return statuses


def load_products(file_path: Path) -> list[dict]:
    """Load and normalize the products CSV.

    Expected columns (after normalization):
        external_id/shopify_id, title/titre, price/prix,
        assigned_agent_ids, hidden_for_agent_ids
    """
    rows = _read_csv(file_path)
    products = []
    for row in rows:
        external_id = row.get("external_id") or row.get("shopify_id") or row.get("id")
        if not external_id:
            logger.warning("Skipping product row without an id: %s", row)
            continue
        products.append({
            "external_id": _normalize_external_id(external_id),
            "title": row.get("title") or row.get("titre") or "",
            "price": _parse_float(row.get("price") or row.get("prix")) or 0.0,
            "assigned_agent_ids": parse_id_list(row.get("assigned_agent_ids")),
            "hidden_for_agent_ids": parse_id_list(row.get("hidden_for_agent_ids")),
        })
    logger.info("Parsed %d products", len(products))
    return products


def _parse_float(value: str | None) -> float | None:
    """Safely parse a float from a string."""
    if not value:
        return None
    try:
        return float(value.replace(",", ".").strip())
    except (ValueError, AttributeError):
        return None


def _parse_positive_int(value: str | None) -> int | None:
    parsed = _parse_float(value)
    if parsed is None or parsed <= 0:
        return None
    return int(parsed)


def _normalize_external_id(value: str) -> str:
    v = value.strip()
    # Excel turns big ids into "8123456789.0"
    try:
        f = float(v.replace(",", "."))
        if f.is_integer():
            return str(int(f))
    except ValueError:
        pass
    return v
