from __future__ import annotations

import logging
from datetime import datetime

import numpy as np

from .config import Settings, get_settings
from .geo import haversine_km, hours_between, is_travel_feasible, utc_now
from .models import CaseContext, HoaxIndicator, LocationAnalysis, TipVerificationInput

logger = logging.getLogger(__name__)


class LocationVerifier:
    """Score how plausible a reported sighting location is for the case."""

    NO_LOCATION_SCORE = 30.0
    TEXT_ONLY_SCORE = 40.0
    COORDINATES_ONLY_SCORE = 60.0
    SPECIFIC_TEXT_BONUS = 5.0
    IMPOSSIBLE_PENALTY = 20.0

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        plausible = self._settings.max_plausible_distance_km
        self._distance_anchors = np.array([0.0, 10.0, 50.0, 100.0, plausible, plausible * 4, 20000.0])
        self._score_anchors = np.array([80.0, 77.0, 72.0, 68.0, 62.0, 50.0, 40.0])

    def verify(
        self,
        tip: TipVerificationInput,
        case: CaseContext,
        *,
        now: datetime | None = None,
    ) -> LocationAnalysis:
        if not tip.has_coordinates:
            if tip.location and tip.location.strip():
                return LocationAnalysis(
                    score=self.TEXT_ONLY_SCORE,
                    description="Text-based location provided, no GPS coordinates",
                )
            return LocationAnalysis(
                score=self.NO_LOCATION_SCORE,
                description="No location information provided",
            )

        hoax_indicators: list[HoaxIndicator] = []
        distance: float | None = None
        score = self.COORDINATES_ONLY_SCORE

        if case.has_last_seen_coordinates:
            distance = haversine_km(
                tip.latitude,
                tip.longitude,
                case.last_seen_latitude,
                case.last_seen_longitude,
            )
            score = self.distance_score(distance)
            if self._distance_unreachable(distance, tip, case, now):
                score -= self.IMPOSSIBLE_PENALTY
                hoax_indicators.append("impossible_timeline")

        if tip.location and len(tip.location.strip()) > 20:
            score += self.SPECIFIC_TEXT_BONUS

        score = round(min(100.0, max(0.0, score)), 2)
        logger.debug("Location score %.2f for tip %s (distance=%s)", score, tip.tip_id, distance)
        return LocationAnalysis(
            score=score,
            description=self._describe(distance, hoax_indicators),
            distance_km=round(distance, 3) if distance is not None else None,
            hoax_indicators=hoax_indicators,
        )

    def distance_score(self, distance_km: float) -> float:
        """Monotonic non-increasing mapping from distance to score."""
        return float(np.interp(distance_km, self._distance_anchors, self._score_anchors))

    def _distance_unreachable(
        self,
        distance: float,
        tip: TipVerificationInput,
        case: CaseContext,
        now: datetime | None,
    ) -> bool:
        reference = tip.sighting_date or now or utc_now()
        hours = hours_between(case.last_seen_date, reference)
        if hours >= self._settings.impossible_timeline_window_hours:
            return False
        return not is_travel_feasible(distance, hours, self._settings.max_travel_speed_kmh)

    @staticmethod
    def _describe(distance: float | None, hoax_indicators: list[HoaxIndicator]) -> str:
        if "impossible_timeline" in hoax_indicators:
            return "WARNING: Location impossible given timeline"
        if distance is None:
            return "Location provided with GPS coordinates"
        return f"GPS location {distance:.1f}km from last seen location"


def verify_location(
    tip: TipVerificationInput,
    case: CaseContext,
    *,
    now: datetime | None = None,
) -> LocationAnalysis:
    return LocationVerifier().verify(tip, case, now=now)
