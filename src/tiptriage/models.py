from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CasePriority = Literal["p0_critical", "p1_high", "p2_medium", "p3_low"]
ReliabilityTier = Literal["new", "unrated", "low", "moderate", "high", "verified_source"]
PriorityBucket = Literal["spam", "low", "medium", "high", "critical"]
VerificationStatus = Literal["unverified", "pending_review", "auto_verified", "rejected"]
VerificationSource = Literal[
    "photo_metadata",
    "geolocation",
    "text_sentiment",
    "pattern_matching",
    "cross_reference",
    "time_plausibility",
    "duplicate_detection",
    "manual_review",
]
HoaxIndicator = Literal[
    "known_scam_pattern",
    "suspicious_metadata",
    "impossible_timeline",
    "conflicting_location",
    "repeated_false_reports",
    "spam_signature",
    "ai_generated_content",
    "stock_photo_detected",
]

# Most urgent first.
CASE_PRIORITY_ORDER: tuple[str, ...] = ("p0_critical", "p1_high", "p2_medium", "p3_low")


class Snapshot(BaseModel):
    """Immutable record passed by value into the engine."""

    model_config = ConfigDict(frozen=True)


class TipAttachment(Snapshot):
    id: str | None = None
    has_exif: bool = False
    gps_latitude: float | None = None
    gps_longitude: float | None = None
    photo_taken_at: datetime | None = None
    device_info: str | None = None
    is_stock_photo: bool = False
    is_ai_generated: bool = False
    is_manipulated: bool = False
    manipulation_confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    matches_missing_person: bool = False


class TipVerificationInput(Snapshot):
    tip_id: str
    content: str = ""
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    sighting_date: datetime | None = None
    is_anonymous: bool = False
    case_id: str
    tipster_id: str | None = None
    attachments: list[TipAttachment] = Field(default_factory=list)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def has_photo(self) -> bool:
        return len(self.attachments) > 0


class CaseContext(Snapshot):
    id: str
    priority_level: CasePriority = "p2_medium"
    status: str = "active"
    last_seen_latitude: float | None = None
    last_seen_longitude: float | None = None
    last_seen_date: datetime
    first_name: str = ""
    last_name: str = ""
    description: str | None = None

    @property
    def has_last_seen_coordinates(self) -> bool:
        return self.last_seen_latitude is not None and self.last_seen_longitude is not None

    @property
    def is_most_urgent(self) -> bool:
        return self.priority_level == CASE_PRIORITY_ORDER[0]


class TipsterProfile(Snapshot):
    id: str = ""
    version: int = 0
    is_blocked: bool = False
    blocked_reason: str | None = None
    reliability_tier: ReliabilityTier = "unrated"
    reliability_score: float = 50.0
    total_tips: int = Field(0, ge=0)
    verified_tips: int = Field(0, ge=0)
    partially_verified_tips: int = Field(0, ge=0)
    false_tips: int = Field(0, ge=0)
    spam_tips: int = Field(0, ge=0)
    tips_leading_to_resolution: int = Field(0, ge=0)
    provides_photos: bool = False
    provides_detailed_info: bool = False
    consistent_location_reporting: bool = False


class ExistingLead(Snapshot):
    id: str
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    sighting_date: datetime | None = None
    description: str | None = None
    status: str = "active"
    created_at: datetime | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class ExistingTip(Snapshot):
    id: str
    content: str = ""
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    status: str = "new"
    created_at: datetime | None = None
    credibility_score: float | None = None


class ScamPatternData(Snapshot):
    keywords: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)


class ScamPattern(Snapshot):
    id: str
    name: str
    pattern_type: str = "text"
    pattern_data: ScamPatternData = Field(default_factory=ScamPatternData)
    confidence_threshold: float = Field(0.5, ge=0.0, le=1.0)
    times_detected: int = Field(0, ge=0)
    is_active: bool = True


class RuleCondition(Snapshot):
    field: str | None = None
    operator: Literal["=", "!=", ">", "<", ">=", "<=", "in", "not_in"] | None = None
    value: Any = None
    all_of: list["RuleCondition"] | None = Field(default=None, alias="and")
    any_of: list["RuleCondition"] | None = Field(default=None, alias="or")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RuleAction(Snapshot):
    set_priority: PriorityBucket | None = None
    require_review: bool | None = None
    review_priority: int | None = Field(default=None, ge=1, le=10)


class VerificationRule(Snapshot):
    id: str
    name: str
    rule_type: str = "routing"
    conditions: RuleCondition
    actions: RuleAction = Field(default_factory=RuleAction)
    is_active: bool = True


class CredibilityFactor(Snapshot):
    factor: str
    score: float = Field(..., ge=0.0, le=100.0)
    weight: float = Field(..., ge=0.0)
    description: str = ""
    source: VerificationSource


class VerificationWarning(Snapshot):
    type: str
    severity: Literal["low", "medium", "high", "critical"]
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class AutomatedAction(Snapshot):
    action: str
    description: str
    executed_at: datetime
    triggered_by_rule: str | None = None


class TextAnalysis(Snapshot):
    score: float
    detail_richness: float
    coherence: float
    sentiment: float
    description: str


class LocationAnalysis(Snapshot):
    score: float
    description: str
    distance_km: float | None = None
    hoax_indicators: list[HoaxIndicator] = Field(default_factory=list)


class TimeAnalysis(Snapshot):
    score: float
    description: str
    travel_feasible: bool = True
    hoax_indicators: list[HoaxIndicator] = Field(default_factory=list)


class CrossReferenceResult(Snapshot):
    score: float
    description: str
    matching_lead_ids: list[str] = Field(default_factory=list)
    matches_known_locations: bool = False


class DuplicateResult(Snapshot):
    is_duplicate: bool
    duplicate_ids: list[str] = Field(default_factory=list)
    similarity_scores: dict[str, float] = Field(default_factory=dict)


class SpamAnalysis(Snapshot):
    spam_score: float
    hoax_indicators: list[HoaxIndicator] = Field(default_factory=list)
    matched_phrases: list[str] = Field(default_factory=list)
    matched_pattern_ids: list[str] = Field(default_factory=list)


class PhotoAnalysis(Snapshot):
    score: float
    description: str
    has_exif: bool = False
    has_gps: bool = False
    hoax_indicators: list[HoaxIndicator] = Field(default_factory=list)


class VerificationResult(Snapshot):
    tip_id: str
    overall_score: float = Field(..., ge=0.0, le=100.0)
    factors: list[CredibilityFactor]
    hoax_indicators: list[HoaxIndicator] = Field(default_factory=list)
    is_duplicate: bool = False
    duplicate_ids: list[str] = Field(default_factory=list)
    matching_lead_ids: list[str] = Field(default_factory=list)
    priority_bucket: PriorityBucket
    spam_score: float = 0.0
    tipster_reliability_score: float = 50.0
    distance_from_last_seen_km: float | None = None
    travel_feasible: bool = True
    matches_known_locations: bool = False
    similarity_scores: dict[str, float] = Field(default_factory=dict)
    verification_status: VerificationStatus = "unverified"
    requires_human_review: bool = True
    review_priority: int = Field(5, ge=1, le=10)
    review_deadline: datetime | None = None
    warnings: list[VerificationWarning] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    auto_actions: list[AutomatedAction] = Field(default_factory=list)
    summary: str = ""
    evaluated_at: datetime


class TipValidationError(ValueError):
    """Structural problem the caller must fix before scoring a tip."""


class VerifyTipRequest(BaseModel):
    tip: TipVerificationInput
    case_context: CaseContext
    tipster_profile: TipsterProfile | None = None
    existing_leads: list[ExistingLead] = Field(default_factory=list)
    recent_tips: list[ExistingTip] = Field(default_factory=list)
    scam_patterns: list[ScamPattern] | None = None
    verification_rules: list[VerificationRule] | None = None
