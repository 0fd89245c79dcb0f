# backend/underwriting/api/quotes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from underwriting.api.dependencies import get_insurer_id
from underwriting.db.database import get_db
from underwriting.schemas.schemas import QuoteCreate, QuoteResponse
from underwriting.services.quote_service import QuoteService

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


@router.get("", response_model=List[QuoteResponse])
def list_quotes(
    limit: int = 100,
    insurer_id: str = Depends(get_insurer_id),
    db: Session = Depends(get_db),
):
    return QuoteService(db).list_quotes(insurer_id, limit=limit)


@router.post("", response_model=QuoteResponse)
def create_quote(
    quote: QuoteCreate,
    insurer_id: str = Depends(get_insurer_id),
    db: Session = Depends(get_db),
):
    """Price and store a rent guarantee quote"""
    return QuoteService(db).create_quote(
        insurer_id,
        rent_amount=quote.rent_amount,
        risk_factor=quote.risk_factor,
        coverage_level=quote.coverage_level,
    )
