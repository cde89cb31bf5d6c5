"""
Spam/Hoax Detector
Detect advance-fee scams, known hoax patterns and low-value spam tips
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from functools import lru_cache

from .models import HoaxIndicator, ScamPattern, SpamAnalysis, TipVerificationInput

logger = logging.getLogger(__name__)


def compile_patterns(values: Sequence[str]) -> list[re.Pattern]:
    """Compile case-insensitive regexes, skipping the invalid ones."""
    compiled: list[re.Pattern] = []
    for item in values:
        try:
            compiled.append(re.compile(item, re.I | re.U))
        except re.error as exc:
            logger.warning("Skip invalid pattern %s: %s", item, exc)
    return compiled


@lru_cache(maxsize=256)
def _cached_patterns(values: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    return tuple(compile_patterns(values))


class SpamHoaxDetector:
    """Match tip text against universal spam phrases and the scam-pattern catalog"""

    # Advance-fee / payment scam language
    SPAM_PHRASES = (
        "wire money",
        "gift card",
        "western union",
        "bitcoin",
        "crypto",
        "payment required",
        "reward claim",
        "lottery",
        "inheritance",
        "nigerian prince",
        "urgent transfer",
    )

    PHRASE_WEIGHT = 30.0
    CATALOG_WEIGHT = 30.0
    SHORT_CONTENT_LENGTH = 20
    SHORT_CONTENT_FLOOR = 10.0
    SHOUTING_PENALTY = 5.0

    def detect(self, tip: TipVerificationInput, patterns: Sequence[ScamPattern]) -> SpamAnalysis:
        content = tip.content or ""
        content_lower = content.lower()
        spam_score = 0.0
        hoax_indicators: list[HoaxIndicator] = []
        matched_pattern_ids: list[str] = []

        for pattern in patterns:
            if not pattern.is_active or pattern.pattern_type != "text":
                continue
            if self._pattern_matches(pattern, content_lower):
                matched_pattern_ids.append(pattern.id)
                spam_score += round(self.CATALOG_WEIGHT * pattern.confidence_threshold)
                if "known_scam_pattern" not in hoax_indicators:
                    hoax_indicators.append("known_scam_pattern")

        matched_phrases = [phrase for phrase in self.SPAM_PHRASES if phrase in content_lower]
        if matched_phrases:
            spam_score += self.PHRASE_WEIGHT * len(matched_phrases)
            hoax_indicators.append("spam_signature")

        stripped = content.strip()
        if len(stripped) < self.SHORT_CONTENT_LENGTH:
            spam_score += self.SHORT_CONTENT_FLOOR
        elif stripped == stripped.upper() and any(ch.isalpha() for ch in stripped):
            spam_score += self.SHOUTING_PENALTY

        spam_score = min(100.0, max(0.0, spam_score))
        if spam_score > 0:
            logger.debug(
                "Tip %s spam score %.1f (phrases=%s, patterns=%s)",
                tip.tip_id,
                spam_score,
                matched_phrases,
                matched_pattern_ids,
            )
        return SpamAnalysis(
            spam_score=spam_score,
            hoax_indicators=hoax_indicators,
            matched_phrases=matched_phrases,
            matched_pattern_ids=matched_pattern_ids,
        )

    @staticmethod
    def _pattern_matches(pattern: ScamPattern, content_lower: str) -> bool:
        for keyword in pattern.pattern_data.keywords:
            if keyword and keyword.lower() in content_lower:
                return True
        regexes = _cached_patterns(tuple(pattern.pattern_data.patterns))
        return any(regex.search(content_lower) for regex in regexes)


def detect_spam_and_hoax(tip: TipVerificationInput, patterns: Sequence[ScamPattern]) -> SpamAnalysis:
    return SpamHoaxDetector().detect(tip, patterns)
