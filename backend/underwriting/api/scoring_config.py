# backend/underwriting/api/scoring_config.py

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from underwriting.api.dependencies import get_config_service, get_insurer_id
from underwriting.schemas.schemas import ConfigResponse
from underwriting.scorecard import ConfigValidationError
from underwriting.services.config_service import ScoringConfigService

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("/score", response_model=ConfigResponse)
def get_scoring_config(
    insurer_id: str = Depends(get_insurer_id),
    service: ScoringConfigService = Depends(get_config_service),
):
    """Current scoring configuration (the defaults when none is stored)"""
    return ConfigResponse(**service.describe(insurer_id))


@router.patch("/score", response_model=ConfigResponse)
def upsert_scoring_config(
    payload: Any = Body(None),
    insurer_id: str = Depends(get_insurer_id),
    service: ScoringConfigService = Depends(get_config_service),
):
    """
    Validate and store the insurer's scoring configuration.

    Omitted fields take their defaults. An invalid payload is rejected with
    400 and nothing is stored.
    """
    try:
        service.upsert_config(insurer_id, payload)
    except ConfigValidationError as e:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": e.message,
                "field": e.field,
                "errors": e.errors,
            },
        )
    return ConfigResponse(**service.describe(insurer_id))


@router.delete("/score", response_model=ConfigResponse)
def reset_scoring_config(
    insurer_id: str = Depends(get_insurer_id),
    service: ScoringConfigService = Depends(get_config_service),
):
    """Drop the stored configuration; the insurer scores with the defaults again"""
    service.delete_config(insurer_id)
    return ConfigResponse(**service.describe(insurer_id))
