"""
Scoring Service - insurer-aware scoring with persistence

Looks up the insurer's scoring configuration, runs the scorecard engine and
records the outcome. Persistence is best effort: a database failure is logged
and rolled back, and the caller still gets its score.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from underwriting.models.models import AuditEventType, AuditLog, ScoreRequest
from underwriting.scorecard import ApplicantProfile, ScoreResult, ScoringConfig, parse_profile, score
from underwriting.services.config_service import ScoringConfigService

logger = logging.getLogger(__name__)


class ScoringService:
    """Score applicants on behalf of an insurer."""

    def __init__(self, db: Session, config_service: Optional[ScoringConfigService] = None):
        self.db = db
        self.config_service = config_service or ScoringConfigService(db)

    def calculate_risk(self, insurer_id: str, profile: Any, persist: bool = True) -> ScoreResult:
        """Score an applicant with the insurer's current configuration.

        Args:
            insurer_id: Insurer whose configuration applies
            profile: ApplicantProfile or a camelCase mapping
            persist: Record the request and an audit entry

        Returns:
            ScoreResult

        Raises:
            ProfileValidationError: If a raw profile is invalid
            ConfigValidationError: If the stored configuration no longer validates
        """
        applicant = parse_profile(profile)
        config = self.config_service.get_config(insurer_id)
        result = score(applicant, config)

        logger.info(
            f"Scored applicant for insurer {insurer_id}: "
            f"safetyScore={result.safety_score} PD_12m={result.pd_12m} decision={result.decision.value}"
        )

        if persist:
            try:
                self._persist_score_result(insurer_id, applicant, config, result)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to persist score for insurer {insurer_id}: {e}")

        return result

    def _persist_score_result(
        self,
        insurer_id: str,
        applicant: ApplicantProfile,
        config: ScoringConfig,
        result: ScoreResult,
    ) -> ScoreRequest:
        """Save the score request and its audit entry in one transaction."""
        now = datetime.utcnow()
        response = result.to_dict()

        score_request = ScoreRequest(
            id=str(uuid.uuid4()),
            insurer_id=insurer_id,
            request_timestamp=now,
            safety_score=result.safety_score,
            pd_12m=result.pd_12m,
            decision=result.decision.value,
            components=response["components"],
            explanations=response["explanations"],
            profile_snapshot=applicant.model_dump(by_alias=True, mode="json"),
            config_snapshot=config.to_dict(),
        )
        self.db.add(score_request)

        self.db.add(AuditLog(
            event_type=AuditEventType.COMPUTE_SCORE.value,
            insurer_id=insurer_id,
            timestamp=now,
            request_payload={"scoreRequestId": score_request.id},
            response_payload=response,
        ))

        self.db.commit()
        return score_request

    def get_history(self, insurer_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent persisted scores for an insurer, newest first."""
        rows = self.db.query(ScoreRequest).filter(
            ScoreRequest.insurer_id == insurer_id
        ).order_by(
            ScoreRequest.request_timestamp.desc()
        ).limit(limit).all()

        return [
            {
                'id': row.id,
                'requestTimestamp': row.request_timestamp.isoformat() if row.request_timestamp else None,
                'safetyScore': row.safety_score,
                'PD_12m': row.pd_12m,
                'decision': row.decision,
                'components': row.components,
                'explanations': row.explanations,
            }
            for row in rows
        ]
