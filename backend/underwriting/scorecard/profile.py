"""Applicant profile: the immutable input to the scoring engine."""

import enum
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class MaritalStatus(str, enum.Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    DIVORCED = "Divorced"
    WIDOWED = "Widowed"


class EmploymentType(str, enum.Enum):
    PERMANENT = "Permanent"
    CONTRACT = "Contract"
    SELF_EMPLOYED = "Self_employed"
    STUDENT = "Student"
    UNEMPLOYED = "Unemployed"
    RETIRED = "Retired"


class GuarantorLocation(str, enum.Enum):
    TUNISIA = "Tunisia"
    OUTSIDE = "Outside"
    UNKNOWN = "Unknown"


class ReferenceRating(str, enum.Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class UtilityPaymentHistory(str, enum.Enum):
    ALWAYS = "Always"
    SOMETIMES = "Sometimes"
    FREQUENTLY = "Frequently"


class HealthStatus(str, enum.Enum):
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"


class ProfileValidationError(ValueError):
    """Raised by parse_profile() when an applicant payload is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid applicant profile at '{field}': {message}")


class _ProfileModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LandlordReference(_ProfileModel):
    """A previous landlord's reference. Only the rating is scored."""

    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    relation: Optional[str] = None
    rating: ReferenceRating = ReferenceRating.NEUTRAL


class ApplicantProfile(_ProfileModel):
    """Structured tenant application.

    Fields without a default are genuinely optional: the rule tables define
    what an absent value scores. Fields with a default always resolve to it
    when omitted.
    """

    # Personal
    full_name: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=18, le=120)
    marital_status: Optional[MaritalStatus] = None
    number_of_dependents: Optional[int] = Field(default=None, ge=0)

    # Employment & income
    employment_type: Optional[EmploymentType] = None
    monthly_net_salary: Optional[float] = Field(default=None, ge=0)
    employment_years: Optional[int] = Field(default=None, ge=0)

    # Financial obligations
    monthly_debt_payments: float = Field(default=0.0, ge=0)
    savings_balance: float = Field(default=0.0, ge=0)
    other_obligations: float = Field(default=0.0, ge=0)

    # Housing & rental history
    rent_amount: Optional[float] = Field(default=None, ge=0)
    has_guarantor: bool = False
    guarantor_income: Optional[float] = Field(default=None, ge=0)
    guarantor_location: GuarantorLocation = GuarantorLocation.UNKNOWN
    months_at_residence: int = Field(default=0, ge=0)
    number_of_past_defaults: int = Field(default=0, ge=0)
    landlord_references: Tuple[LandlordReference, ...] = ()

    # Other
    utility_payment_history: UtilityPaymentHistory = UtilityPaymentHistory.SOMETIMES
    health_status: HealthStatus = HealthStatus.GOOD
    verified_id: bool = False


def parse_profile(raw: Any) -> ApplicantProfile:
    """Build an ApplicantProfile from an untyped payload.

    HTTP handlers get this for free from FastAPI; report generators and
    scripts that receive plain dicts use this instead.

    Raises:
        ProfileValidationError: With the dotted path of the first bad field
    """
    if isinstance(raw, ApplicantProfile):
        return raw
    if not isinstance(raw, Mapping):
        raise ProfileValidationError("profile", f"expected an object, got {type(raw).__name__}")
    try:
        return ApplicantProfile.model_validate(dict(raw))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "profile"
        raise ProfileValidationError(field, first["msg"]) from exc
