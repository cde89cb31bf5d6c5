"""
Photo evidence scoring from caller-supplied attachment metadata.

No image processing happens here: EXIF presence, GPS tags, capture time and the
stock/AI/manipulation flags are produced upstream and only weighed here.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from .geo import hours_between, haversine_km
from .models import HoaxIndicator, PhotoAnalysis, TipAttachment


class PhotoEvidenceAnalyzer:
    BASE_SCORE = 60.0
    NO_PHOTO_SCORE = 50.0

    def analyze(
        self,
        attachments: Sequence[TipAttachment],
        claimed_date: datetime | None = None,
        claimed_latitude: float | None = None,
        claimed_longitude: float | None = None,
    ) -> PhotoAnalysis:
        if not attachments:
            return PhotoAnalysis(score=self.NO_PHOTO_SCORE, description="No photo provided")

        # the first attachment is treated as the primary photo
        primary = attachments[0]
        hoax_indicators: list[HoaxIndicator] = []
        has_gps = primary.gps_latitude is not None and primary.gps_longitude is not None
        score = self.BASE_SCORE

        score += 10 if primary.has_exif else -5

        if has_gps:
            score += 15
            if claimed_latitude is not None and claimed_longitude is not None:
                distance = haversine_km(
                    primary.gps_latitude,
                    primary.gps_longitude,
                    claimed_latitude,
                    claimed_longitude,
                )
                if distance < 1:
                    score += 10
                elif distance < 5:
                    score += 5
                elif distance > 50:
                    score -= 10
                    hoax_indicators.append("conflicting_location")

        if primary.photo_taken_at is not None:
            score += 5
            if claimed_date is not None:
                days_apart = hours_between(primary.photo_taken_at, claimed_date) / 24
                if days_apart < 1:
                    score += 10
                elif days_apart > 7:
                    score -= 10
                    hoax_indicators.append("suspicious_metadata")

        if primary.is_stock_photo:
            score -= 30
            hoax_indicators.append("stock_photo_detected")

        if primary.is_ai_generated:
            score -= 40
            hoax_indicators.append("ai_generated_content")

        if primary.is_manipulated and (primary.manipulation_confidence or 0.0) > 0.7:
            score -= 20
            if "suspicious_metadata" not in hoax_indicators:
                hoax_indicators.append("suspicious_metadata")

        if primary.matches_missing_person:
            score += 25

        score = max(0.0, min(100.0, score))
        return PhotoAnalysis(
            score=score,
            description=self._describe(score, has_gps, hoax_indicators),
            has_exif=primary.has_exif,
            has_gps=has_gps,
            hoax_indicators=hoax_indicators,
        )

    @staticmethod
    def _describe(score: float, has_gps: bool, hoax_indicators: list[HoaxIndicator]) -> str:
        if "stock_photo_detected" in hoax_indicators:
            return "WARNING: Photo appears to be a stock image"
        if "ai_generated_content" in hoax_indicators:
            return "WARNING: Photo appears to be AI-generated"
        if score >= 80:
            return "Photo with verified metadata and matching location/time"
        if score >= 60:
            return "Photo with GPS data provided" if has_gps else "Photo provided with some metadata"
        return "Photo quality or authenticity concerns detected"


def analyze_photo_evidence(
    attachments: Sequence[TipAttachment],
    claimed_date: datetime | None = None,
    claimed_latitude: float | None = None,
    claimed_longitude: float | None = None,
) -> PhotoAnalysis:
    return PhotoEvidenceAnalyzer().analyze(attachments, claimed_date, claimed_latitude, claimed_longitude)
