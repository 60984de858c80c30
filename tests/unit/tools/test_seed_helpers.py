"""Tests for the pure helpers of the seed script."""

import tempfile
from pathlib import Path

from orderdesk.tools.seed_db import _find_csv, _normalize_role


def test_normalize_role_variants():
    assert _normalize_role("agent") == "AGENT"
    assert _normalize_role("Agent test") == "AGENT_TEST"
    assert _normalize_role("agent-test") == "AGENT_TEST"
    assert _normalize_role(" supervisor ") == "SUPERVISOR"


def test_unknown_role_defaults_to_agent():
    assert _normalize_role("intern") == "AGENT"


def test_find_csv_by_hint():
    with tempfile.TemporaryDirectory() as tmpdir:
        data = Path(tmpdir)
        (data / "export_produits_2026.csv").write_text("id\n1\n", encoding="utf-8")
        (data / "agents.csv").write_text("name\nA\n", encoding="utf-8")

        assert _find_csv(data, ["products", "produits"]).name == "export_produits_2026.csv"
        assert _find_csv(data, ["agents"]).name == "agents.csv"
        assert _find_csv(data, ["statuses"]) is None
