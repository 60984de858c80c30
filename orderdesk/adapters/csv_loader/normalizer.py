"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import re


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Strips leading/trailing whitespace
    - Removes BOM characters (\\ufeff)
    - Replaces multiple spaces / non-breaking spaces with single underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "")
    name = name.strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    # Keeps accented letters (French exports: "rôle", "téléphone")
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_id_list(raw: str | None) -> set[int]:
    """Parse agent id lists like '3, 7;12' into a set of ints.

    Handles comma, semicolon, pipe and whitespace separators; non-numeric
    tokens are ignored.
    """
    if not raw:
        return set()
    parts = re.split(r"[,;|\s]+", raw.strip())
    return {int(p) for p in parts if p.strip().isdigit()}


def parse_bool(raw: str | None, default: bool = True) -> bool:
    """Parse yes/no style flags ("1", "true", "oui", "yes", ...)."""
    value = clean_string(raw)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "oui", "o", "x"}
