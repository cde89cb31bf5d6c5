import pytest
from pydantic import ValidationError

from tiptriage.config import Settings
from tiptriage.location_verifier import LocationVerifier


def test_defaults(settings):
    assert settings.max_plausible_distance_km == 500
    assert settings.sla_hours["critical"] == 1


@pytest.mark.parametrize("distance", [100.0, 50.0, 0.0])
def test_plausible_distance_must_exceed_curve_anchors(distance):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_plausible_distance_km=distance)


def test_custom_plausible_distance_keeps_curve_monotonic():
    verifier = LocationVerifier(Settings(_env_file=None, max_plausible_distance_km=150.0))
    scores = [verifier.distance_score(d) for d in (0, 50, 100, 150, 600, 5000, 20000)]
    assert scores == sorted(scores, reverse=True)
