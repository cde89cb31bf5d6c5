import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


# Ensure project src is on path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from tiptriage.config import Settings  # noqa: E402
from tiptriage.models import CaseContext, TipsterProfile, TipVerificationInput  # noqa: E402

LAST_SEEN = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)
MONTREAL = (45.5017, -73.5673)
NEAR_MONTREAL = (45.5020, -73.5670)
PARIS = (48.8566, 2.3522)

DETAILED_CONTENT = (
    "I saw a girl matching the poster near the Berri-UQAM metro station around 3pm yesterday. "
    "She was wearing a red jacket and blue jeans, with her hair in a ponytail. "
    "She walked toward the bus stop on Saint-Denis street with an older man in a black cap."
)

SCAM_TEXT = (
    "I know where she is. Wire money by gift card or bitcoin first, "
    "it is about my lottery inheritance."
)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def case():
    return CaseContext(
        id="case-1",
        priority_level="p2_medium",
        last_seen_latitude=MONTREAL[0],
        last_seen_longitude=MONTREAL[1],
        last_seen_date=LAST_SEEN,
        first_name="Emma",
        last_name="Tremblay",
    )


@pytest.fixture
def make_tip():
    def _make(**overrides):
        fields = {"tip_id": "tip-1", "case_id": "case-1", "content": DETAILED_CONTENT}
        fields.update(overrides)
        return TipVerificationInput(**fields)

    return _make


@pytest.fixture
def profile():
    return TipsterProfile(
        id="tipster-1",
        reliability_tier="moderate",
        reliability_score=60.0,
        total_tips=4,
        verified_tips=2,
    )
