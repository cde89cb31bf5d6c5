from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .config import Settings, get_settings
from .cross_reference import CrossReferenceMatcher
from .duplicate_detector import DuplicateDetector
from .geo import as_utc, utc_now
from .location_verifier import LocationVerifier
from .models import (
    AutomatedAction,
    CaseContext,
    CredibilityFactor,
    ExistingLead,
    ExistingTip,
    HoaxIndicator,
    PriorityBucket,
    ScamPattern,
    TipsterProfile,
    TipValidationError,
    TipVerificationInput,
    VerificationResult,
    VerificationRule,
    VerificationStatus,
    VerificationWarning,
)
from .photo_verifier import PhotoEvidenceAnalyzer
from .reputation import TipsterReliabilityScorer
from .rules import RuleContext, apply_verification_rules
from .spam_detector import SpamHoaxDetector
from .temporal_verifier import TimePlausibilityChecker
from .text_analyzer import TextAnalyzer

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0
SPAM_PENALTY_MIDPOINT = 50.0
SPAM_PENALTY_RATE = 0.5
HOAX_PENALTY = 10.0
DUPLICATE_PENALTY = 20.0


@dataclass
class CredibilityWeights:
    photo: float = 0.20
    location: float = 0.20
    time: float = 0.15
    text: float = 0.15
    cross_reference: float = 0.15
    tipster_reliability: float = 0.15

    def as_dict(self) -> dict[str, float]:
        weights = {
            "photo": self.photo,
            "location": self.location,
            "time": self.time,
            "text": self.text,
            "cross_reference": self.cross_reference,
            "tipster_reliability": self.tipster_reliability,
        }
        if any(value < 0 for value in weights.values()):
            raise ValueError("CredibilityWeights must not be negative")
        return weights


def calculate_overall_credibility(
    factors: Sequence[CredibilityFactor],
    spam_score: float,
    hoax_count: int,
    is_duplicate: bool,
) -> float:
    weighted_sum = sum(factor.score * factor.weight for factor in factors)
    total_weight = sum(factor.weight for factor in factors)
    score = weighted_sum / total_weight if total_weight > 0 else NEUTRAL_SCORE

    if spam_score > SPAM_PENALTY_MIDPOINT:
        score -= (spam_score - SPAM_PENALTY_MIDPOINT) * SPAM_PENALTY_RATE
    score -= max(0, hoax_count) * HOAX_PENALTY
    if is_duplicate:
        score -= DUPLICATE_PENALTY

    return round(min(100.0, max(0.0, score)), 2)


@dataclass(frozen=True)
class BucketSignals:
    score: float
    case_priority: str
    has_photo: bool
    has_location: bool
    tipster_tier: str | None


# Evaluated top to bottom, first match wins.
PRIORITY_RULES: tuple[tuple[str, Callable[[BucketSignals], bool], PriorityBucket], ...] = (
    ("very_low_credibility", lambda s: s.score < 20, "spam"),
    ("credible_on_most_urgent_case", lambda s: s.score >= 70 and s.case_priority == "p0_critical", "critical"),
    ("verified_source", lambda s: s.tipster_tier == "verified_source" and s.score >= 60, "high"),
    ("gps_with_photo", lambda s: s.has_location and s.has_photo and s.score >= 60, "high"),
    ("moderate_credibility", lambda s: s.score >= 45, "medium"),
    ("fallback", lambda s: True, "low"),
)


def determine_priority_bucket(
    score: float,
    case_priority: str,
    has_photo: bool,
    has_location: bool,
    tipster_tier: str | None = None,
) -> PriorityBucket:
    signals = BucketSignals(score, case_priority, has_photo, has_location, tipster_tier)
    for _name, predicate, bucket in PRIORITY_RULES:
        if predicate(signals):
            return bucket
    return "low"


def validate_tip_input(tip: TipVerificationInput, case: CaseContext) -> None:
    if (tip.latitude is None) != (tip.longitude is None):
        raise TipValidationError("latitude and longitude must be provided together")
    if tip.case_id != case.id:
        raise TipValidationError(f"tip case_id {tip.case_id!r} does not match case context {case.id!r}")


@dataclass
class TriageEngine:
    settings: Settings = field(default_factory=get_settings)
    weights: CredibilityWeights = field(default_factory=CredibilityWeights)
    text_analyzer: TextAnalyzer = field(default_factory=TextAnalyzer)
    reliability_scorer: TipsterReliabilityScorer = field(default_factory=TipsterReliabilityScorer)
    photo_analyzer: PhotoEvidenceAnalyzer = field(default_factory=PhotoEvidenceAnalyzer)
    spam_detector: SpamHoaxDetector = field(default_factory=SpamHoaxDetector)

    def __post_init__(self) -> None:
        self._weight_map = self.weights.as_dict()
        self._location_verifier = LocationVerifier(self.settings)
        self._time_checker = TimePlausibilityChecker(self.settings)
        self._cross_reference = CrossReferenceMatcher(self.settings)
        self._duplicates = DuplicateDetector(self.settings)

    def verify_tip(
        self,
        tip: TipVerificationInput,
        case: CaseContext,
        tipster_profile: TipsterProfile | None,
        existing_leads: Sequence[ExistingLead],
        recent_tips: Sequence[ExistingTip],
        scam_patterns: Sequence[ScamPattern],
        verification_rules: Sequence[VerificationRule] = (),
        *,
        now: datetime | None = None,
    ) -> VerificationResult:
        now = as_utc(now or utc_now())
        factors: list[CredibilityFactor] = []
        hoax_indicators: list[HoaxIndicator] = []
        warnings: list[VerificationWarning] = []

        if tipster_profile is not None and tipster_profile.is_blocked:
            warnings.append(
                VerificationWarning(
                    type="blocked_tipster",
                    severity="critical",
                    message="Tip submitted by a blocked tipster",
                    details={"reason": tipster_profile.blocked_reason},
                )
            )

        reliability = self.reliability_scorer.score(tipster_profile)
        factors.append(
            CredibilityFactor(
                factor="tipster_reliability",
                score=reliability,
                weight=self._weight_map["tipster_reliability"],
                description=self.reliability_scorer.describe(tipster_profile),
                source="pattern_matching",
            )
        )

        text = self.text_analyzer.analyze(tip.content)
        factors.append(
            CredibilityFactor(
                factor="text_analysis",
                score=text.score,
                weight=self._weight_map["text"],
                description=text.description,
                source="text_sentiment",
            )
        )

        if tip.has_photo:
            photo = self.photo_analyzer.analyze(tip.attachments, tip.sighting_date, tip.latitude, tip.longitude)
            factors.append(
                CredibilityFactor(
                    factor="photo_verification",
                    score=photo.score,
                    weight=self._weight_map["photo"],
                    description=photo.description,
                    source="photo_metadata",
                )
            )
            hoax_indicators.extend(photo.hoax_indicators)

        location = self._location_verifier.verify(tip, case, now=now)
        factors.append(
            CredibilityFactor(
                factor="location_verification",
                score=location.score,
                weight=self._weight_map["location"],
                description=location.description,
                source="geolocation",
            )
        )
        hoax_indicators.extend(location.hoax_indicators)

        timing = self._time_checker.check(tip, case, now=now)
        factors.append(
            CredibilityFactor(
                factor="time_plausibility",
                score=timing.score,
                weight=self._weight_map["time"],
                description=timing.description,
                source="time_plausibility",
            )
        )
        hoax_indicators.extend(timing.hoax_indicators)

        cross_ref = self._cross_reference.match(tip, existing_leads)
        factors.append(
            CredibilityFactor(
                factor="cross_reference",
                score=cross_ref.score,
                weight=self._weight_map["cross_reference"],
                description=cross_ref.description,
                source="cross_reference",
            )
        )

        duplicates = self._duplicates.detect(tip, recent_tips)
        if duplicates.is_duplicate:
            warnings.append(
                VerificationWarning(
                    type="duplicate",
                    severity="medium",
                    message="This tip appears to be a duplicate of an existing tip",
                    details={"duplicate_ids": duplicates.duplicate_ids},
                )
            )

        spam = self.spam_detector.detect(tip, scam_patterns)
        hoax_indicators.extend(spam.hoax_indicators)
        if spam.spam_score > 50:
            warnings.append(
                VerificationWarning(
                    type="spam",
                    severity="high" if spam.spam_score > 70 else "medium",
                    message="This tip has characteristics of spam",
                    details={"spam_score": spam.spam_score},
                )
            )

        # location and time checks may both report impossible_timeline; count it once
        distinct_indicators: list[HoaxIndicator] = list(dict.fromkeys(hoax_indicators))
        overall = calculate_overall_credibility(
            factors,
            spam.spam_score,
            len(distinct_indicators),
            duplicates.is_duplicate,
        )
        if overall < 30:
            warnings.append(
                VerificationWarning(
                    type="low_credibility",
                    severity="high",
                    message="This tip has a low credibility score",
                    details={"score": overall},
                )
            )

        tier = tipster_profile.reliability_tier if tipster_profile is not None else None
        bucket = determine_priority_bucket(overall, case.priority_level, tip.has_photo, tip.has_coordinates, tier)

        rule_outcome = apply_verification_rules(
            verification_rules,
            RuleContext(
                credibility_score=overall,
                spam_score=spam.spam_score,
                is_anonymous=tip.is_anonymous,
                case_priority=case.priority_level,
                has_photo=tip.has_photo,
                has_location=tip.has_coordinates,
                tipster_reliability_tier=tier,
                hoax_indicator_count=len(distinct_indicators),
            ),
            executed_at=now,
        )
        if rule_outcome.priority_override is not None:
            bucket = rule_outcome.priority_override

        auto_actions: list[AutomatedAction] = []
        status: VerificationStatus
        if spam.spam_score >= self.settings.spam_threshold:
            status = "rejected"
            bucket = "spam"
            requires_review = rule_outcome.force_review
            auto_actions.append(
                AutomatedAction(
                    action="auto_reject_spam",
                    description="Tip automatically rejected due to high spam score",
                    executed_at=now,
                )
            )
        elif overall >= self.settings.auto_verify_threshold and not distinct_indicators:
            status = "auto_verified"
            requires_review = case.is_most_urgent or rule_outcome.force_review
        elif overall >= self.settings.review_threshold:
            status = "pending_review"
            requires_review = True
        else:
            status = "unverified"
            requires_review = rule_outcome.force_review
        auto_actions.extend(rule_outcome.actions)

        review_priority = self._review_priority(case, overall)
        if rule_outcome.review_priority_override is not None:
            review_priority = rule_outcome.review_priority_override

        review_deadline = None
        if requires_review:
            sla_key = "low" if bucket == "spam" else bucket
            review_deadline = now + timedelta(hours=self.settings.sla_hours.get(sla_key, 72))

        result = VerificationResult(
            tip_id=tip.tip_id,
            overall_score=overall,
            factors=factors,
            hoax_indicators=distinct_indicators,
            is_duplicate=duplicates.is_duplicate,
            duplicate_ids=duplicates.duplicate_ids,
            matching_lead_ids=cross_ref.matching_lead_ids,
            priority_bucket=bucket,
            spam_score=spam.spam_score,
            tipster_reliability_score=reliability,
            distance_from_last_seen_km=location.distance_km,
            travel_feasible=timing.travel_feasible,
            matches_known_locations=cross_ref.matches_known_locations,
            similarity_scores=duplicates.similarity_scores,
            verification_status=status,
            requires_human_review=requires_review,
            review_priority=review_priority,
            review_deadline=review_deadline,
            warnings=warnings,
            suggestions=self._suggestions(tip, overall, cross_ref.matching_lead_ids),
            auto_actions=auto_actions,
            summary=self._summary(tip, overall, bucket),
            evaluated_at=now,
        )
        logger.info(
            "Tip %s scored %.2f -> %s (%s, indicators=%s)",
            tip.tip_id,
            overall,
            bucket,
            status,
            distinct_indicators,
        )
        return result

    @staticmethod
    def _review_priority(case: CaseContext, score: float) -> int:
        if case.priority_level == "p0_critical":
            return 1
        if case.priority_level == "p1_high" or score >= 70:
            return 2
        if score >= 50:
            return 5
        return 8

    @staticmethod
    def _suggestions(tip: TipVerificationInput, score: float, matching_lead_ids: list[str]) -> list[str]:
        suggestions = []
        if not tip.has_coordinates:
            suggestions.append("Request specific location details from tipster")
        if not tip.has_photo:
            suggestions.append("Request photos or visual evidence from tipster")
        if len(tip.content) < 100:
            suggestions.append("Request additional details about the sighting")
        if score >= 60 and not matching_lead_ids:
            suggestions.append("Consider creating a new lead from this tip")
        return suggestions

    @staticmethod
    def _summary(tip: TipVerificationInput, score: float, bucket: PriorityBucket) -> str:
        if score >= 70:
            credibility = "high"
        elif score >= 40:
            credibility = "moderate"
        else:
            credibility = "low"
        parts = [f"{bucket.capitalize()} priority tip with {credibility} credibility (score: {score:g})."]
        if tip.location:
            parts.append(f"Location: {tip.location}.")
        if tip.sighting_date is not None:
            parts.append(f"Sighting reported for {as_utc(tip.sighting_date).date().isoformat()}.")
        if tip.attachments:
            parts.append(f"{len(tip.attachments)} photo(s) attached.")
        if tip.is_anonymous:
            parts.append("Submitted anonymously.")
        return " ".join(parts)


def verify_tip(
    tip: TipVerificationInput,
    case_context: CaseContext,
    tipster_profile: TipsterProfile | None,
    existing_leads: Sequence[ExistingLead],
    recent_tips: Sequence[ExistingTip],
    scam_patterns: Sequence[ScamPattern],
    verification_rules: Sequence[VerificationRule] = (),
    *,
    now: datetime | None = None,
) -> VerificationResult:
    return TriageEngine().verify_tip(
        tip,
        case_context,
        tipster_profile,
        existing_leads,
        recent_tips,
        scam_patterns,
        verification_rules,
        now=now,
    )
