"""
Scoring Configuration - Insurer-Defined Weights and Thresholds

Each insurer may store its own scoring configuration. A configuration carries:

- weights: the maximum points an insurer wants each component to be worth.
  The rule tables always produce points on a fixed scale (see
  COMPONENT_MAX_POINTS); the engine rescales them to these weights.
- pdMax: the probability of default assigned to a safety score of 0.
- decisionThresholds: PD cut-offs for accept and conditional accept.

Every field is optional. resolve_config() is the single place where missing
values are replaced by the defaults below, so the engine never sees an
undefined weight, threshold or pdMax.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

COMPONENTS = ("personal", "employment", "financial", "housing", "other")

# Fixed scale of each rule table (sum = 100)
COMPONENT_MAX_POINTS: Dict[str, float] = {
    "personal": 10.0,
    "employment": 25.0,
    "financial": 20.0,
    "housing": 25.0,
    "other": 20.0,
}

DEFAULT_WEIGHTS: Dict[str, float] = dict(COMPONENT_MAX_POINTS)
DEFAULT_PD_MAX = 0.25
DEFAULT_ACCEPT_PD = 0.03       # PD <= 0.03 -> accept
DEFAULT_CONDITIONAL_PD = 0.10  # PD <= 0.10 -> conditional accept, above -> decline
MAX_NAME_LENGTH = 200
# Keeps the sum of all five weights finite
MAX_WEIGHT = 1_000_000.0


class ConfigValidationError(ValueError):
    """Raised when a scoring configuration payload violates its schema.

    Attributes:
        field: Dotted path of the first offending field (e.g. 'weights.personal')
        message: Human-readable description of the first violation
        errors: Every violation found, as [{'field': ..., 'message': ...}]
    """

    def __init__(self, field: str, message: str, errors: Optional[List[Dict[str, str]]] = None):
        self.field = field
        self.message = message
        self.errors = errors or [{"field": field, "message": message}]
        super().__init__(f"Invalid scoring configuration at '{field}': {message}")


class _ConfigModel(BaseModel):
    """Shared behaviour: camelCase on the wire, immutable, null means default."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_input(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields[info.field_name]
        if value is None:
            return field.get_default(call_default_factory=True)
        # Numbers must be real numbers; "10" and True are rejected rather than coerced
        if field.annotation is float and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise ValueError("must be a number")
        return value


class ScoringWeights(_ConfigModel):
    """Target maximum points per component."""

    personal: float = Field(default=DEFAULT_WEIGHTS["personal"], ge=0, le=MAX_WEIGHT, allow_inf_nan=False)
    employment: float = Field(default=DEFAULT_WEIGHTS["employment"], ge=0, le=MAX_WEIGHT, allow_inf_nan=False)
    financial: float = Field(default=DEFAULT_WEIGHTS["financial"], ge=0, le=MAX_WEIGHT, allow_inf_nan=False)
    housing: float = Field(default=DEFAULT_WEIGHTS["housing"], ge=0, le=MAX_WEIGHT, allow_inf_nan=False)
    other: float = Field(default=DEFAULT_WEIGHTS["other"], ge=0, le=MAX_WEIGHT, allow_inf_nan=False)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in COMPONENTS}

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())


class DecisionThresholds(_ConfigModel):
    """PD cut-offs. acceptPd <= conditionalPd is expected but not enforced."""

    accept_pd: float = Field(default=DEFAULT_ACCEPT_PD, ge=0, allow_inf_nan=False)
    conditional_pd: float = Field(default=DEFAULT_CONDITIONAL_PD, ge=0, allow_inf_nan=False)


class ScoringConfig(_ConfigModel):
    """Fully populated scoring configuration for one insurer."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    pd_max: float = Field(default=DEFAULT_PD_MAX, gt=0, allow_inf_nan=False)
    decision_thresholds: DecisionThresholds = Field(default_factory=DecisionThresholds)
    name: Optional[str] = Field(default=None, max_length=MAX_NAME_LENGTH)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape accepted by resolve_config()."""
        return self.model_dump(by_alias=True, exclude_none=True)


DEFAULT_SCORING_CONFIG = ScoringConfig()


def _format_loc(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc) or "config"


def resolve_config(raw: Any = None) -> ScoringConfig:
    """Validate a (possibly partial or absent) configuration and apply defaults.

    Args:
        raw: None, a mapping such as {} or {'weights': {'personal': 15}},
            or an already resolved ScoringConfig

    Returns:
        ScoringConfig with every field populated

    Raises:
        ConfigValidationError: If any supplied field violates its type or bounds

    Example:
        >>> cfg = resolve_config({"weights": {"personal": 15}})
        >>> cfg.weights.personal, cfg.weights.employment, cfg.pd_max
        (15.0, 25.0, 0.25)
    """
    if raw is None:
        return DEFAULT_SCORING_CONFIG
    if isinstance(raw, ScoringConfig):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigValidationError("config", f"expected an object, got {type(raw).__name__}")

    try:
        config = ScoringConfig.model_validate(dict(raw))
    except ValidationError as exc:
        errors = [
            {"field": _format_loc(err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        first = errors[0]
        raise ConfigValidationError(first["field"], first["message"], errors) from exc

    thresholds = config.decision_thresholds
    if thresholds.accept_pd > thresholds.conditional_pd:
        logger.warning(
            f"acceptPd ({thresholds.accept_pd}) is greater than conditionalPd "
            f"({thresholds.conditional_pd}); conditional_accept cannot be reached"
        )
    if config.weights.total <= 0:
        logger.warning("All component weights are zero; every applicant will score 0")

    return config
