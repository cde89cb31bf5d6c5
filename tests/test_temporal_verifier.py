from datetime import timedelta

import pytest

from conftest import LAST_SEEN, NEAR_MONTREAL, PARIS
from tiptriage.temporal_verifier import TimePlausibilityChecker, check_time_plausibility


def test_missing_sighting_date_is_neutral(case, make_tip):
    result = check_time_plausibility(make_tip(), case, now=LAST_SEEN + timedelta(days=1))
    assert result.score == 40
    assert result.travel_feasible
    assert result.hoax_indicators == []


def test_sighting_before_disappearance(case, make_tip):
    tip = make_tip(sighting_date=LAST_SEEN - timedelta(hours=1))
    result = check_time_plausibility(tip, case, now=LAST_SEEN + timedelta(days=1))
    assert result.score == 10
    assert "impossible_timeline" in result.hoax_indicators
    assert "before disappearance" in result.description


def test_sighting_in_the_future(case, make_tip):
    now = LAST_SEEN + timedelta(days=1)
    result = check_time_plausibility(make_tip(sighting_date=now + timedelta(hours=2)), case, now=now)
    assert result.score == 10
    assert "impossible_timeline" in result.hoax_indicators


def test_sighting_twelve_hours_ago_scores_above_60(case, make_tip):
    sighting = LAST_SEEN + timedelta(hours=6)
    result = check_time_plausibility(make_tip(sighting_date=sighting), case, now=sighting + timedelta(hours=12))
    assert result.score > 60
    assert result.description == "Recent sighting within last 24 hours"


def test_feasible_travel_adds_bonus(case, make_tip, settings):
    checker = TimePlausibilityChecker(settings)
    sighting = LAST_SEEN + timedelta(hours=6)
    now = sighting + timedelta(hours=12)
    without_gps = checker.check(make_tip(sighting_date=sighting), case, now=now)
    with_gps = checker.check(
        make_tip(sighting_date=sighting, latitude=NEAR_MONTREAL[0], longitude=NEAR_MONTREAL[1]),
        case,
        now=now,
    )
    assert with_gps.score == pytest.approx(without_gps.score + 10)


def test_infeasible_travel(case, make_tip, settings):
    sighting = LAST_SEEN + timedelta(hours=2)
    tip = make_tip(sighting_date=sighting, latitude=PARIS[0], longitude=PARIS[1])
    result = TimePlausibilityChecker(settings).check(tip, case, now=sighting + timedelta(hours=1))
    assert not result.travel_feasible
    assert result.hoax_indicators == ["impossible_timeline"]


def test_older_sightings_score_lower(case, make_tip, settings):
    checker = TimePlausibilityChecker(settings)
    sighting = LAST_SEEN + timedelta(hours=6)
    recent = checker.check(make_tip(sighting_date=sighting), case, now=sighting + timedelta(hours=12))
    stale = checker.check(make_tip(sighting_date=sighting), case, now=sighting + timedelta(days=20))
    assert stale.score < recent.score
