"""
Scorecard Engine - Rule-Based Tenant Risk Scoring

Scoring runs in two stages:

Stage A scores five components on fixed scales using rule tables
(personal 0-10, employment 0-25, financial 0-20, housing 0-25, other 0-20).

Stage B rescales each component to the insurer's configured weight, aggregates
the weighted points into a 0-100 safety score, maps the safety score linearly
to a 12-month probability of default (PD), classifies the PD against the
decision thresholds and explains weak components.

Both stages are pure functions of their inputs.
"""

import enum
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from underwriting.scorecard.profile import (
    ApplicantProfile,
    EmploymentType,
    GuarantorLocation,
    HealthStatus,
    MaritalStatus,
    ReferenceRating,
    UtilityPaymentHistory,
    parse_profile,
)
from underwriting.scorecard.scorecard_config import (
    COMPONENTS,
    COMPONENT_MAX_POINTS,
    DecisionThresholds,
    ScoringConfig,
    ScoringWeights,
    resolve_config,
)


class Decision(str, enum.Enum):
    ACCEPT = "accept"
    CONDITIONAL_ACCEPT = "conditional_accept"
    DECLINE = "decline"

    @property
    def severity(self) -> int:
        return _DECISION_SEVERITY[self]


_DECISION_SEVERITY = {
    Decision.ACCEPT: 0,
    Decision.CONDITIONAL_ACCEPT: 1,
    Decision.DECLINE: 2,
}


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

MARITAL_STATUS_POINTS = {
    MaritalStatus.MARRIED: 3,
    MaritalStatus.SINGLE: 2,
    MaritalStatus.DIVORCED: 1,
    MaritalStatus.WIDOWED: 1,
}

EMPLOYMENT_TYPE_POINTS = {
    EmploymentType.PERMANENT: 10,
    EmploymentType.CONTRACT: 7,
    EmploymentType.SELF_EMPLOYED: 5,
    EmploymentType.RETIRED: 4,
    EmploymentType.STUDENT: 2,
    EmploymentType.UNEMPLOYED: 0,
}

GUARANTOR_LOCATION_POINTS = {
    GuarantorLocation.TUNISIA: 3,
    GuarantorLocation.OUTSIDE: 1,
    GuarantorLocation.UNKNOWN: 0,
}

REFERENCE_RATING_POINTS = {
    ReferenceRating.POSITIVE: 5,
    ReferenceRating.NEUTRAL: 2,
    ReferenceRating.NEGATIVE: 0,
}

UTILITY_PAYMENT_POINTS = {
    UtilityPaymentHistory.ALWAYS: 10,
    UtilityPaymentHistory.SOMETIMES: 5,
    UtilityPaymentHistory.FREQUENTLY: 0,
}

HEALTH_STATUS_POINTS = {
    HealthStatus.GOOD: 5,
    HealthStatus.AVERAGE: 3,
    HealthStatus.POOR: 0,
}

# Share of a component's weight below which it is reported as weak
EXPLANATION_RULES = (
    ("housing", 40.0, "Weak housing history or missing guarantor."),
    ("employment", 40.0, "Employment not stable or low income."),
    ("financial", 40.0, "High debt or low savings."),
    ("other", 30.0, "Utility payments or verification missing."),
)
NO_CONCERNS_EXPLANATION = "Applicant meets primary underwriting criteria."


@dataclass(frozen=True)
class ComponentScores:
    """Stage A output: points per component on the fixed rule-table scales."""

    personal: float = 0.0
    employment: float = 0.0
    financial: float = 0.0
    housing: float = 0.0
    other: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class ScoreResult(BaseModel):
    """Outcome of scoring one applicant against one configuration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    safety_score: float = Field(alias="safetyScore", ge=0, le=100)
    pd_12m: float = Field(alias="PD_12m", ge=0)
    decision: Decision
    components: Dict[str, float]
    explanations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _clamp(points: float, component: str) -> float:
    return float(max(0.0, min(COMPONENT_MAX_POINTS[component], points)))


# ---------------------------------------------------------------------------
# Stage A - fixed-scale component scoring
# ---------------------------------------------------------------------------

def score_personal(profile: ApplicantProfile) -> float:
    points = 0
    age = profile.age or 0
    if 21 <= age <= 60:
        points += 5
    elif age > 60 or 0 < age < 21:
        points += 2

    points += MARITAL_STATUS_POINTS.get(profile.marital_status, 0)

    dependents = profile.number_of_dependents or 0
    if dependents <= 2:
        points += 2
    elif dependents <= 4:
        points += 1

    return _clamp(points, "personal")


def score_employment(profile: ApplicantProfile) -> float:
    points = EMPLOYMENT_TYPE_POINTS.get(profile.employment_type, 0)

    salary = profile.monthly_net_salary or 0
    rent = profile.rent_amount or 0
    if salary > 0 and rent > 0:
        rent_to_salary = rent / salary
        if rent_to_salary <= 0.30:
            points += 10
        elif rent_to_salary <= 0.50:
            points += 5
    else:
        # Ratio unknown: neutral partial credit
        points += 5

    years = profile.employment_years or 0
    if years >= 5:
        points += 5
    elif years >= 2:
        points += 3
    else:
        points += 1

    return _clamp(points, "employment")


def score_financial(profile: ApplicantProfile) -> float:
    points = 0
    salary = profile.monthly_net_salary or 0
    rent = profile.rent_amount or 0
    debt = profile.monthly_debt_payments
    obligations = profile.other_obligations

    debt_to_income = (debt + obligations) / salary if salary > 0 else 1.0
    if debt_to_income < 0.20:
        points += 7
    elif debt_to_income <= 0.40:
        points += 4

    months_of_rent = profile.savings_balance / rent if rent > 0 else 0
    if months_of_rent >= 6:
        points += 8
    elif months_of_rent >= 3:
        points += 4

    obligations_ratio = obligations / salary if salary > 0 else 1.0
    if obligations_ratio < 0.10:
        points += 5
    elif obligations_ratio <= 0.20:
        points += 3

    return _clamp(points, "financial")


def best_reference_points(references: Iterable[Any]) -> int:
    """Points for the single best landlord reference (0 when there are none)."""
    return max(
        (REFERENCE_RATING_POINTS.get(ref.rating, 0) for ref in references),
        default=0,
    )


def score_housing(profile: ApplicantProfile) -> float:
    points = 0
    months = profile.months_at_residence
    if months >= 36:
        points += 5
    elif months >= 12:
        points += 3
    else:
        points += 1

    if profile.has_guarantor:
        points += 5
        points += GUARANTOR_LOCATION_POINTS.get(profile.guarantor_location, 0)

    defaults = profile.number_of_past_defaults
    if defaults == 0:
        points += 7
    elif defaults <= 2:
        points += 3

    points += best_reference_points(profile.landlord_references)

    return _clamp(points, "housing")


def score_other(profile: ApplicantProfile) -> float:
    points = UTILITY_PAYMENT_POINTS.get(profile.utility_payment_history, 0)
    points += HEALTH_STATUS_POINTS.get(profile.health_status, 0)
    if profile.verified_id:
        points += 5
    return _clamp(points, "other")


def compute_component_scores(profile: ApplicantProfile) -> ComponentScores:
    """Stage A: score every component on its fixed scale."""
    return ComponentScores(
        personal=score_personal(profile),
        employment=score_employment(profile),
        financial=score_financial(profile),
        housing=score_housing(profile),
        other=score_other(profile),
    )


# ---------------------------------------------------------------------------
# Stage B - rescaling, aggregation and decision
# ---------------------------------------------------------------------------

def rescale_components(components: ComponentScores, weights: ScoringWeights) -> Dict[str, float]:
    """Map each fixed-scale component onto its configured weight (2 decimals)."""
    raw = components.as_dict()
    configured = weights.as_dict()
    return {
        name: round(raw[name] / COMPONENT_MAX_POINTS[name] * configured[name], 2)
        for name in COMPONENTS
    }


def compute_safety_score(scaled: Dict[str, float], weights: ScoringWeights) -> float:
    """Percentage of attainable weighted points, 0 when no weight is configured."""
    total_weight = weights.total
    if total_weight <= 0:
        return 0.0
    raw_sum = sum(scaled[name] for name in COMPONENTS)
    # Rounding of the scaled points can push the ratio a hair above 100
    return round(min(100.0, max(0.0, raw_sum / total_weight * 100)), 2)


def compute_pd(safety_score: float, pd_max: float) -> float:
    return round(pd_max * (1 - safety_score / 100), 4)


def classify_decision(pd_12m: float, thresholds: DecisionThresholds) -> Decision:
    if pd_12m <= thresholds.accept_pd:
        return Decision.ACCEPT
    if pd_12m <= thresholds.conditional_pd:
        return Decision.CONDITIONAL_ACCEPT
    return Decision.DECLINE


def build_explanations(scaled: Dict[str, float], weights: ScoringWeights) -> List[str]:
    """List a diagnostic for every weak component, or a single all-clear line."""
    configured = weights.as_dict()
    explanations = []
    for component, cutoff, message in EXPLANATION_RULES:
        weight = configured[component]
        if weight <= 0:
            continue
        if scaled[component] / weight * 100 < cutoff:
            explanations.append(message)
    if not explanations:
        explanations.append(NO_CONCERNS_EXPLANATION)
    return explanations


def score_components(components: ComponentScores, config: ScoringConfig) -> ScoreResult:
    """Stage B on precomputed Stage A scores."""
    scaled = rescale_components(components, config.weights)
    safety_score = compute_safety_score(scaled, config.weights)
    pd_12m = compute_pd(safety_score, config.pd_max)
    return ScoreResult(
        safety_score=safety_score,
        pd_12m=pd_12m,
        decision=classify_decision(pd_12m, config.decision_thresholds),
        components=scaled,
        explanations=build_explanations(scaled, config.weights),
    )


def score(profile: Any, config: Any = None) -> ScoreResult:
    """Score an applicant.

    Args:
        profile: ApplicantProfile, or a mapping accepted by parse_profile()
        config: ScoringConfig, a raw (possibly partial) mapping, or None for defaults

    Returns:
        ScoreResult with safetyScore, PD_12m, decision, components, explanations

    Raises:
        ConfigValidationError: If a raw config is invalid
        ProfileValidationError: If a raw profile is invalid

    Example:
        >>> result = score({"age": 30, "employmentType": "Permanent"})
        >>> result.decision
        <Decision.DECLINE: 'decline'>
    """
    resolved_profile = parse_profile(profile)
    resolved_config = resolve_config(config)
    return score_components(compute_component_scores(resolved_profile), resolved_config)


class ScorecardEngine:
    """
    Scoring engine bound to one resolved configuration.

    Holds no mutable state, so a single instance can serve concurrent
    requests.

    Example:
        >>> engine = ScorecardEngine({"weights": {"housing": 40}})
        >>> engine.score(profile).safety_score
    """

    def __init__(self, config: Optional[Any] = None):
        """Initialize the engine.

        Args:
            config: ScoringConfig, raw mapping, or None for the defaults
        """
        self.config = resolve_config(config)

    def score(self, profile: Any) -> ScoreResult:
        return score(profile, self.config)

    def score_batch(self, profiles: Iterable[Any]) -> List[ScoreResult]:
        """Score several applicants with the same configuration."""
        return [self.score(p) for p in profiles]

    def get_weights(self) -> Dict[str, float]:
        return self.config.weights.as_dict()
