from __future__ import annotations

from .models import TipsterProfile


class TipsterReliabilityScorer:
    """Turn a tipster's track record into a 0-100 working reliability score."""

    UNKNOWN_SCORE = 50.0
    BLOCKED_SCORE = 0.0
    QUALITY_BONUS = 5.0
    SPAM_PENALTY = 5.0

    TIER_DESCRIPTIONS = {
        "verified_source": "Verified source with excellent track record",
        "high": "High reliability tipster with good history",
        "moderate": "Moderate reliability based on past tips",
        "low": "Low reliability - past tips had issues",
        "unrated": "Insufficient history to rate reliability",
        "new": "New tipster - first tip submission",
    }

    def score(self, profile: TipsterProfile | None) -> float:
        if profile is None:
            return self.UNKNOWN_SCORE
        if profile.is_blocked:
            return self.BLOCKED_SCORE

        score = profile.reliability_score
        for flag in (
            profile.provides_photos,
            profile.provides_detailed_info,
            profile.consistent_location_reporting,
        ):
            if flag:
                score += self.QUALITY_BONUS
        score -= profile.spam_tips * self.SPAM_PENALTY
        return max(0.0, min(100.0, score))

    def describe(self, profile: TipsterProfile | None) -> str:
        if profile is None:
            return "New or anonymous tipster - no reliability history"
        if profile.is_blocked:
            return "Tipster is blocked"
        return self.TIER_DESCRIPTIONS.get(profile.reliability_tier, "Unknown reliability")


def calculate_tipster_reliability(profile: TipsterProfile | None) -> float:
    return TipsterReliabilityScorer().score(profile)
