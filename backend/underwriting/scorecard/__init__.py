"""Package init for scorecard module."""

from underwriting.scorecard.profile import (
    ApplicantProfile,
    LandlordReference,
    ProfileValidationError,
    parse_profile,
)
from underwriting.scorecard.scorecard_config import (
    COMPONENTS,
    COMPONENT_MAX_POINTS,
    DEFAULT_SCORING_CONFIG,
    ConfigValidationError,
    DecisionThresholds,
    ScoringConfig,
    ScoringWeights,
    resolve_config,
)
from underwriting.scorecard.scorecard_engine import (
    ComponentScores,
    Decision,
    ScorecardEngine,
    ScoreResult,
    compute_component_scores,
    score,
    score_components,
)

__all__ = [
    'ApplicantProfile',
    'LandlordReference',
    'ProfileValidationError',
    'parse_profile',
    'COMPONENTS',
    'COMPONENT_MAX_POINTS',
    'DEFAULT_SCORING_CONFIG',
    'ConfigValidationError',
    'DecisionThresholds',
    'ScoringConfig',
    'ScoringWeights',
    'resolve_config',
    'ComponentScores',
    'Decision',
    'ScorecardEngine',
    'ScoreResult',
    'compute_component_scores',
    'score',
    'score_components',
]
