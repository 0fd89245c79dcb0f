# backend/underwriting/api/risk.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from underwriting.api.dependencies import get_insurer_id
from underwriting.db.database import get_db
from underwriting.schemas.schemas import RiskReportRequest, RiskResponse, ScoreHistoryResponse
from underwriting.scorecard import ApplicantProfile, ConfigValidationError
from underwriting.services.report_service import build_risk_report
from underwriting.services.scoring_service import ScoringService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/risk", tags=["risk"])


@router.post("/calculate", response_model=RiskResponse)
def calculate_risk(
    profile: ApplicantProfile,
    persist: bool = True,
    insurer_id: str = Depends(get_insurer_id),
    db: Session = Depends(get_db),
):
    """
    Score an applicant with the insurer's scoring configuration.

    Returns:
    - safetyScore (0-100) and PD_12m
    - decision: accept / conditional_accept / decline
    - weighted component points and explanations
    """
    try:
        result = ScoringService(db).calculate_risk(insurer_id, profile, persist=persist)
    except ConfigValidationError as e:
        logger.error(f"Stored scoring config for insurer {insurer_id} is invalid: {e}")
        raise HTTPException(status_code=500, detail="Stored scoring configuration is invalid")
    return RiskResponse(risk=result)


@router.post("/report")
def generate_risk_report(
    request: RiskReportRequest,
    insurer_id: str = Depends(get_insurer_id),
    db: Session = Depends(get_db),
):
    """Tenant risk assessment report (JSON)."""
    service = ScoringService(db)
    try:
        config = service.config_service.get_config(insurer_id)
    except ConfigValidationError as e:
        logger.error(f"Stored scoring config for insurer {insurer_id} is invalid: {e}")
        raise HTTPException(status_code=500, detail="Stored scoring configuration is invalid")

    report = build_risk_report(request, config)
    return {"success": True, "report": report.model_dump(by_alias=True, mode="json")}


@router.get("/history", response_model=ScoreHistoryResponse)
def get_score_history(
    limit: int = 10,
    insurer_id: str = Depends(get_insurer_id),
    db: Session = Depends(get_db),
):
    """Most recent persisted scores for the calling insurer"""
    history = ScoringService(db).get_history(insurer_id, limit=limit)
    return ScoreHistoryResponse(insurer_id=insurer_id, history=history)
