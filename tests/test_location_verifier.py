from datetime import timedelta

import pytest

from conftest import LAST_SEEN, MONTREAL, NEAR_MONTREAL, PARIS
from tiptriage.location_verifier import LocationVerifier, verify_location


def test_no_location_scores_30(case, make_tip):
    result = verify_location(make_tip(), case)
    assert result.score == 30
    assert "No location" in result.description
    assert result.distance_km is None


def test_text_only_location_scores_40(case, make_tip):
    result = verify_location(make_tip(location="Berri-UQAM metro"), case)
    assert result.score == 40


def test_gps_near_last_seen_scores_above_60(case, make_tip, settings):
    tip = make_tip(latitude=45.5044, longitude=MONTREAL[1], sighting_date=LAST_SEEN + timedelta(hours=3))
    result = LocationVerifier(settings).verify(tip, case)
    assert result.score > 60
    assert result.distance_km is not None
    assert result.distance_km < 1
    assert result.hoax_indicators == []


def test_distance_score_never_increases(settings):
    verifier = LocationVerifier(settings)
    distances = [0, 1, 5, 10, 30, 50, 100, 250, 500, 1000, 2000, 5000, 20000, 40000]
    scores = [verifier.distance_score(d) for d in distances]
    assert scores == sorted(scores, reverse=True)


def test_long_text_location_adds_bonus(case, make_tip, settings):
    verifier = LocationVerifier(settings)
    sighting = LAST_SEEN + timedelta(hours=3)
    plain = verifier.verify(make_tip(latitude=NEAR_MONTREAL[0], longitude=NEAR_MONTREAL[1], sighting_date=sighting), case)
    described = verifier.verify(
        make_tip(
            latitude=NEAR_MONTREAL[0],
            longitude=NEAR_MONTREAL[1],
            sighting_date=sighting,
            location="Corner of Saint-Denis and Sainte-Catherine",
        ),
        case,
    )
    assert described.score == pytest.approx(plain.score + 5)


def test_unreachable_distance_flags_impossible_timeline(case, make_tip, settings):
    tip = make_tip(latitude=PARIS[0], longitude=PARIS[1], sighting_date=LAST_SEEN + timedelta(hours=2))
    result = LocationVerifier(settings).verify(tip, case)
    assert "impossible_timeline" in result.hoax_indicators
    assert result.score == pytest.approx(LocationVerifier(settings).distance_score(result.distance_km) - 20, abs=0.01)


def test_far_sighting_after_window_is_not_flagged(case, make_tip, settings):
    tip = make_tip(latitude=PARIS[0], longitude=PARIS[1], sighting_date=LAST_SEEN + timedelta(days=5))
    result = LocationVerifier(settings).verify(tip, case)
    assert result.hoax_indicators == []


def test_case_without_coordinates_scores_60(case, make_tip, settings):
    case = case.model_copy(update={"last_seen_latitude": None, "last_seen_longitude": None})
    result = LocationVerifier(settings).verify(make_tip(latitude=PARIS[0], longitude=PARIS[1]), case)
    assert result.score == 60
    assert result.distance_km is None
