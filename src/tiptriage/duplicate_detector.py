from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import Settings, get_settings
from .models import DuplicateResult, ExistingTip, TipVerificationInput
from .similarity import jaccard_similarity

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Flag tips that are near-copies of other recent tips for the same case."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def detect(self, tip: TipVerificationInput, recent_tips: Sequence[ExistingTip]) -> DuplicateResult:
        threshold = self._settings.duplicate_similarity_threshold
        similarity_scores: dict[str, float] = {}
        duplicate_ids: list[str] = []

        for existing in recent_tips:
            if existing.id == tip.tip_id:
                continue
            similarity = round(jaccard_similarity(tip.content, existing.content), 4)
            similarity_scores[existing.id] = similarity
            if similarity >= threshold and existing.id not in duplicate_ids:
                duplicate_ids.append(existing.id)

        if duplicate_ids:
            logger.info("Tip %s duplicates %s", tip.tip_id, duplicate_ids)
        return DuplicateResult(
            is_duplicate=bool(duplicate_ids),
            duplicate_ids=duplicate_ids,
            similarity_scores=similarity_scores,
        )


def detect_duplicates(tip: TipVerificationInput, recent_tips: Sequence[ExistingTip]) -> DuplicateResult:
    return DuplicateDetector().detect(tip, recent_tips)
