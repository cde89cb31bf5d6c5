"""
Time plausibility - check a claimed sighting time against the disappearance
"""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np

from .config import Settings, get_settings
from .geo import as_utc, haversine_km, hours_between, is_travel_feasible, utc_now
from .models import CaseContext, HoaxIndicator, TimeAnalysis, TipVerificationInput

logger = logging.getLogger(__name__)


class TimePlausibilityChecker:
    """Verify the claimed sighting timeline"""

    NO_DATE_SCORE = 40.0
    IMPOSSIBLE_SCORE = 10.0
    BASE_SCORE = 60.0
    FEASIBLE_BONUS = 10.0
    INFEASIBLE_PENALTY = 20.0

    # hours since the sighting -> recency adjustment
    RECENCY_HOURS = np.array([0.0, 24.0, 72.0, 168.0, 720.0])
    RECENCY_ADJUSTMENT = np.array([15.0, 15.0, 10.0, 0.0, -10.0])
    # hours between disappearance and sighting -> adjustment
    ELAPSED_HOURS = np.array([0.0, 72.0, 720.0])
    ELAPSED_ADJUSTMENT = np.array([5.0, 0.0, -5.0])

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def check(
        self,
        tip: TipVerificationInput,
        case: CaseContext,
        *,
        now: datetime | None = None,
    ) -> TimeAnalysis:
        if tip.sighting_date is None:
            return TimeAnalysis(
                score=self.NO_DATE_SCORE,
                description="No sighting date/time provided",
                travel_feasible=True,
            )

        now = as_utc(now or utc_now())
        sighting = as_utc(tip.sighting_date)
        last_seen = as_utc(case.last_seen_date)

        if sighting < last_seen:
            return TimeAnalysis(
                score=self.IMPOSSIBLE_SCORE,
                description="WARNING: Claimed sighting is before disappearance",
                travel_feasible=False,
                hoax_indicators=["impossible_timeline"],
            )
        if sighting > now:
            return TimeAnalysis(
                score=self.IMPOSSIBLE_SCORE,
                description="WARNING: Claimed sighting is in the future",
                travel_feasible=False,
                hoax_indicators=["impossible_timeline"],
            )

        hoax_indicators: list[HoaxIndicator] = []
        score = self.BASE_SCORE
        travel_feasible = True
        elapsed_hours = hours_between(last_seen, sighting)

        if tip.has_coordinates and case.has_last_seen_coordinates:
            distance = haversine_km(
                case.last_seen_latitude,
                case.last_seen_longitude,
                tip.latitude,
                tip.longitude,
            )
            travel_feasible = is_travel_feasible(distance, elapsed_hours, self._settings.max_travel_speed_kmh)
            if travel_feasible:
                score += self.FEASIBLE_BONUS
            else:
                score -= self.INFEASIBLE_PENALTY
                hoax_indicators.append("impossible_timeline")

        hours_since_sighting = hours_between(sighting, now)
        score += float(np.interp(hours_since_sighting, self.RECENCY_HOURS, self.RECENCY_ADJUSTMENT))
        score += float(np.interp(elapsed_hours, self.ELAPSED_HOURS, self.ELAPSED_ADJUSTMENT))
        score = round(min(100.0, max(0.0, score)), 2)

        logger.debug(
            "Time score %.2f for tip %s (since sighting=%.1fh, since last seen=%.1fh)",
            score,
            tip.tip_id,
            hours_since_sighting,
            elapsed_hours,
        )
        return TimeAnalysis(
            score=score,
            description=self._describe(hours_since_sighting, travel_feasible),
            travel_feasible=travel_feasible,
            hoax_indicators=hoax_indicators,
        )

    @staticmethod
    def _describe(hours_since_sighting: float, travel_feasible: bool) -> str:
        if not travel_feasible:
            return "Travel time/distance inconsistent with claimed sighting"
        if hours_since_sighting < 24:
            return "Recent sighting within last 24 hours"
        if hours_since_sighting < 72:
            return "Sighting within last 3 days"
        return f"Sighting {int(hours_since_sighting // 24)} days ago"


def check_time_plausibility(
    tip: TipVerificationInput,
    case: CaseContext,
    *,
    now: datetime | None = None,
) -> TimeAnalysis:
    return TimePlausibilityChecker().check(tip, case, now=now)
