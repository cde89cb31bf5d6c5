import json
from pathlib import Path

import pytest

from data_loader import load_datasets, parse_scam_patterns, parse_verification_rules


@pytest.fixture(scope="module")
def datasets():
    data_dir = Path(__file__).resolve().parents[1] / "data"
    return load_datasets(data_dir)


def test_bundled_catalog_loads(datasets):
    ids = [pattern.id for pattern in datasets["scam_patterns"]]
    assert "psychic-vision" in ids
    assert any(not pattern.is_active for pattern in datasets["scam_patterns"])
    assert datasets["verification_rules"]


def test_bundled_rules_parse_nested_conditions(datasets):
    rule = next(r for r in datasets["verification_rules"] if r.id == "anonymous-critical-review")
    assert rule.conditions.all_of is not None
    assert len(rule.conditions.all_of) == 2


def test_missing_directory_yields_empty(tmp_path):
    datasets = load_datasets(tmp_path / "nope")
    assert datasets == {"scam_patterns": [], "verification_rules": []}


def test_broken_json_is_skipped(tmp_path, caplog):
    (tmp_path / "scam_patterns.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "verification_rules.json").write_text(
        json.dumps([{"id": "r1", "name": "Rule", "conditions": {"field": "spam_score", "operator": ">", "value": 50}}]),
        encoding="utf-8",
    )
    datasets = load_datasets(tmp_path)
    assert datasets["scam_patterns"] == []
    assert [rule.id for rule in datasets["verification_rules"]] == ["r1"]
    assert "Failed to load dataset" in caplog.text


def test_invalid_entries_are_dropped(caplog):
    patterns = parse_scam_patterns(
        [
            {"id": "ok", "name": "Fine", "pattern_data": {"keywords": ["psychic"]}},
            {"id": "bad", "name": "Bad", "confidence_threshold": 4},
            "not an object",
        ]
    )
    assert [p.id for p in patterns] == ["ok"]
    assert "Skip invalid scam pattern bad" in caplog.text

    rules = parse_verification_rules({"verification_rules": [{"id": "missing-conditions", "name": "x"}]})
    assert rules == []
