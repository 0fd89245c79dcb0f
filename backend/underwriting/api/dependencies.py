# backend/underwriting/api/dependencies.py

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from underwriting.db.database import get_db
from underwriting.services.config_service import ScoringConfigService

INSURER_HEADER = "X-Insurer-Id"


def get_insurer_id(x_insurer_id: str = Header(None, alias=INSURER_HEADER)) -> str:
    """Identify the calling insurer. Every /api route is scoped to one insurer."""
    insurer_id = (x_insurer_id or "").strip()
    if not insurer_id:
        raise HTTPException(status_code=401, detail=f"Missing {INSURER_HEADER} header")
    return insurer_id


def get_config_service(db: Session = Depends(get_db)) -> ScoringConfigService:
    return ScoringConfigService(db)
