"""
Risk Report Service

Builds the tenant risk assessment report: tenant and property details as
submitted, the score, a per-component breakdown and a written conclusion.
The report is a JSON document; rendering it is left to the client.
"""

import random
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from underwriting.schemas.schemas import RiskReportRequest
from underwriting.scorecard import (
    COMPONENTS,
    COMPONENT_MAX_POINTS,
    Decision,
    ScoreResult,
    ScoringConfig,
    compute_component_scores,
    score_components,
)

COMPONENT_LABELS: Dict[str, str] = {
    "personal": "Personal Information",
    "employment": "Employment & Income",
    "financial": "Financial Obligations",
    "housing": "Housing & Rental History",
    "other": "Other Factors",
}

DECISION_LABELS: Dict[Decision, str] = {
    Decision.ACCEPT: "Approved",
    Decision.CONDITIONAL_ACCEPT: "Approved (Conditional)",
    Decision.DECLINE: "Declined",
}

DECISION_CONCLUSIONS: Dict[Decision, str] = {
    Decision.ACCEPT: "Approved, subject to standard coverage conditions.",
    Decision.CONDITIONAL_ACCEPT: "Approved, subject to additional checks or a higher premium.",
    Decision.DECLINE: "Declined, as the risk profile does not meet our underwriting criteria.",
}


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TenantDetails(_ReportModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    employment_type: Optional[str] = None
    monthly_net_salary: Optional[float] = None


class PropertyDetails(_ReportModel):
    address: Optional[str] = None
    city: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    monthly_rent: Optional[float] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None


class ComponentBreakdown(_ReportModel):
    component: str
    category: str
    score: float       # points on the configured weight
    max_score: float   # configured weight
    raw_score: float   # points on the fixed rule-table scale
    raw_max_score: float


class RiskReport(_ReportModel):
    report_id: str
    generated_at: datetime
    tenant: TenantDetails
    property: PropertyDetails
    risk: ScoreResult
    risk_level: str
    decision_label: str
    breakdown: List[ComponentBreakdown]
    conclusion: str
    config_name: Optional[str] = None


def risk_level(safety_score: float) -> str:
    """Low above 75, Medium above 50, High otherwise."""
    if safety_score > 75:
        return "Low"
    if safety_score > 50:
        return "Medium"
    return "High"


def generate_report_id(year: int) -> str:
    return f"RISK-{year}-{random.randint(10000, 99999)}"


def build_conclusion(result: ScoreResult) -> str:
    explanations = " ".join(result.explanations)
    return (
        f"Based on the risk assessment, the tenant is evaluated with a score of "
        f"{result.safety_score:.0f}. {explanations} "
        f"The application is {DECISION_CONCLUSIONS[result.decision]}"
    )


def build_risk_report(
    request: RiskReportRequest,
    config: ScoringConfig,
    generated_at: Optional[datetime] = None,
) -> RiskReport:
    """Score the applicant in `request` and assemble the report around the result.

    Args:
        request: Applicant profile with tenancy details
        config: Resolved configuration of the requesting insurer
        generated_at: Report timestamp (defaults to now, UTC)

    Returns:
        RiskReport
    """
    generated_at = generated_at or datetime.utcnow()
    components = compute_component_scores(request)
    result = score_components(components, config)
    raw = components.as_dict()
    weights = config.weights.as_dict()

    breakdown = [
        ComponentBreakdown(
            component=name,
            category=COMPONENT_LABELS[name],
            score=result.components[name],
            max_score=weights[name],
            raw_score=raw[name],
            raw_max_score=COMPONENT_MAX_POINTS[name],
        )
        for name in COMPONENTS
    ]

    return RiskReport(
        report_id=generate_report_id(generated_at.year),
        generated_at=generated_at,
        tenant=TenantDetails(
            full_name=request.full_name,
            email=request.tenant_email,
            phone=request.tenant_phone,
            employment_type=request.employment_type.value if request.employment_type else None,
            monthly_net_salary=request.monthly_net_salary,
        ),
        property=PropertyDetails(
            address=request.property_address,
            city=request.property_city,
            type=request.property_type,
            status=request.property_status,
            monthly_rent=request.rent_amount,
            lease_start_date=request.lease_start_date,
            lease_end_date=request.lease_end_date,
        ),
        risk=result,
        risk_level=risk_level(result.safety_score),
        decision_label=DECISION_LABELS[result.decision],
        breakdown=breakdown,
        conclusion=build_conclusion(result),
        config_name=config.name,
    )
