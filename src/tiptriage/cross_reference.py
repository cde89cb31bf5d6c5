from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import Settings, get_settings
from .geo import haversine_km
from .models import CrossReferenceResult, ExistingLead, TipVerificationInput
from .similarity import jaccard_similarity

logger = logging.getLogger(__name__)


class CrossReferenceMatcher:
    """Compare a tip against the investigator-curated leads of the same case."""

    BASE_SCORE = 50.0
    MATCH_BONUS = 20.0
    MAX_CLOSENESS_BONUS = 20.0
    KNOWN_LOCATION_BONUS = 10.0

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def match(self, tip: TipVerificationInput, leads: Sequence[ExistingLead]) -> CrossReferenceResult:
        radius = self._settings.lead_proximity_km
        threshold = self._settings.location_similarity_threshold
        matching_lead_ids: list[str] = []
        matches_known_locations = False
        closeness_bonus = 0.0

        for lead in leads:
            matched = False
            if tip.has_coordinates and lead.has_coordinates:
                distance = haversine_km(tip.latitude, tip.longitude, lead.latitude, lead.longitude)
                if distance <= radius:
                    matched = True
                    matches_known_locations = True
                    # 5 for being inside the radius, up to 5 more for sitting on top of it
                    closeness_bonus += 5.0 + 5.0 * (1 - distance / radius)

            if tip.location and lead.location:
                similarity = jaccard_similarity(tip.location, lead.location)
                if similarity >= threshold:
                    matched = True
                    matches_known_locations = True
                    closeness_bonus += 5.0 * similarity

            if matched and lead.id not in matching_lead_ids:
                matching_lead_ids.append(lead.id)

        score = self.BASE_SCORE
        if matching_lead_ids:
            score += self.MATCH_BONUS + min(self.MAX_CLOSENESS_BONUS, closeness_bonus)
        if matches_known_locations:
            score += self.KNOWN_LOCATION_BONUS
        score = round(min(100.0, max(0.0, score)), 2)

        if matching_lead_ids:
            description = f"Corroborates {len(matching_lead_ids)} existing lead(s)"
        else:
            description = "No direct correlation with existing leads"

        logger.debug("Tip %s matched leads %s", tip.tip_id, matching_lead_ids)
        return CrossReferenceResult(
            score=score,
            description=description,
            matching_lead_ids=matching_lead_ids,
            matches_known_locations=matches_known_locations,
        )


def cross_reference_leads(tip: TipVerificationInput, leads: Sequence[ExistingLead]) -> CrossReferenceResult:
    return CrossReferenceMatcher().match(tip, leads)
