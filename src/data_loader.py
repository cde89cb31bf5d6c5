"""
Fixture loader for the scam-pattern catalog and verification rules.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from tiptriage.models import ScamPattern, VerificationRule
from tiptriage.spam_detector import compile_patterns

logger = logging.getLogger(__name__)


def load_json(path: Path) -> Any:
    """Load a JSON file with UTF-8 encoding."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _entries(value: Any, key: str) -> List[Dict[str, Any]]:
    """Accept either a bare list or an object wrapping the list under key."""
    if isinstance(value, dict):
        value = value.get(key, [])
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_scam_patterns(raw: Any) -> List[ScamPattern]:
    patterns: List[ScamPattern] = []
    for item in _entries(raw, "scam_patterns"):
        try:
            pattern = ScamPattern.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skip invalid scam pattern %s: %s", item.get("id"), exc)
            continue
        # report bad regexes when the catalog is loaded
        compile_patterns(pattern.pattern_data.patterns)
        patterns.append(pattern)
    return patterns


def parse_verification_rules(raw: Any) -> List[VerificationRule]:
    rules: List[VerificationRule] = []
    for item in _entries(raw, "verification_rules"):
        try:
            rules.append(VerificationRule.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skip invalid verification rule %s: %s", item.get("id"), exc)
    return rules


def load_datasets(data_dir: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load scam_patterns.json and verification_rules.json from data_dir.
    Missing files yield empty lists.
    """
    data_path = Path(data_dir)
    datasets: Dict[str, Any] = {"scam_patterns": [], "verification_rules": []}

    if not data_path.exists():
        logger.warning("Data directory %s does not exist; using empty datasets", data_path)
        return datasets

    loaders = {
        "scam_patterns": parse_scam_patterns,
        "verification_rules": parse_verification_rules,
    }
    for key, parse in loaders.items():
        path = data_path / f"{key}.json"
        if not path.exists():
            continue
        try:
            datasets[key] = parse(load_json(path))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load dataset %s: %s", path, exc)

    active = sum(1 for pattern in datasets["scam_patterns"] if pattern.is_active)
    logger.info(
        "Loaded datasets from %s (scam patterns: %d, active: %d, rules: %d)",
        data_path,
        len(datasets["scam_patterns"]),
        active,
        len(datasets["verification_rules"]),
    )
    return datasets
