from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import Optional, List, Dict, Any
from underwriting.scorecard import ApplicantProfile, ScoreResult


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =========================
# RISK SCHEMAS
# =========================
class RiskResponse(BaseModel):
    success: bool = True
    risk: ScoreResult


class RiskReportRequest(ApplicantProfile):
    """Applicant profile plus the tenancy details printed on a report."""
    tenant_email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    tenant_phone: Optional[str] = None
    property_address: Optional[str] = None
    property_city: Optional[str] = None
    property_type: Optional[str] = None
    property_status: Optional[str] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None


class ScoreHistoryResponse(BaseModel):
    success: bool = True
    insurer_id: str = Field(alias="insurerId")
    history: List[Dict[str, Any]]

    model_config = ConfigDict(populate_by_name=True)


# =========================
# CONFIG SCHEMAS
# =========================
class ConfigResponse(CamelModel):
    success: bool = True
    insurer_id: str
    is_default: bool
    config: Dict[str, Any]
    updated_at: Optional[datetime] = None


# =========================
# QUOTE SCHEMAS
# =========================
class QuoteCreate(CamelModel):
    rent_amount: float = Field(gt=0, allow_inf_nan=False)
    risk_factor: str = "medium"
    coverage_level: str = "standard"


class QuoteResponse(CamelModel):
    id: str
    insurer_id: str
    rent_amount: float
    risk_factor: str
    coverage_level: str
    monthly_premium: int
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
