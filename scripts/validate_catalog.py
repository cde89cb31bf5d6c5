#!/usr/bin/env python3
"""
Validate the scam-pattern catalog and verification rules before deploying them.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from data_loader import load_datasets  # noqa: E402
from tiptriage.spam_detector import compile_patterns  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate tip triage catalog files.")
    parser.add_argument(
        "--data-dir",
        default=str(ROOT / "data"),
        help="Path to catalog directory (default: ./data)",
    )
    parser.add_argument(
        "--manifest",
        action="store_true",
        help="Write catalog_manifest.json next to the catalog files",
    )
    args = parser.parse_args()

    datasets = load_datasets(args.data_dir)
    patterns = datasets["scam_patterns"]
    rules = datasets["verification_rules"]

    print(f"Loaded catalog from {args.data_dir}")
    print(f" - scam_patterns: {len(patterns)} entries ({sum(p.is_active for p in patterns)} active)")
    for pattern in patterns:
        regexes = pattern.pattern_data.patterns
        compiled = compile_patterns(regexes)
        state = "active" if pattern.is_active else "inactive"
        print(
            f"   {pattern.id}: {len(pattern.pattern_data.keywords)} keywords, "
            f"{len(compiled)}/{len(regexes)} regexes compiled, {state}"
        )
    print(f" - verification_rules: {len(rules)} entries ({sum(r.is_active for r in rules)} active)")

    if args.manifest:
        manifest_path = Path(args.data_dir) / "catalog_manifest.json"
        manifest = {
            "scam_patterns": [p.id for p in patterns if p.is_active],
            "verification_rules": [r.id for r in rules if r.is_active],
        }
        manifest_path.write_text(json.dumps(manifest, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"\nManifest written to {manifest_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
