"""
Quote Service - rent guarantee premium pricing

Monthly premium = 3% of the monthly rent, scaled by the tenant's risk factor
and the chosen coverage level, rounded half-up to a whole currency unit.
Unrecognised risk factors and coverage levels price at 1.0.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from underwriting.models.models import AuditEventType, AuditLog, Quote

logger = logging.getLogger(__name__)

BASE_PREMIUM_RATE = 0.03

RISK_MULTIPLIERS = {
    'low': 0.8,
    'medium': 1.0,
    'high': 1.3,
}

COVERAGE_MULTIPLIERS = {
    'basic': 0.7,
    'standard': 1.0,
    'premium': 1.5,
}


def compute_monthly_premium(rent_amount: float, risk_factor: str, coverage_level: str) -> int:
    """Price a monthly premium.

    Example:
        >>> compute_monthly_premium(1000, "high", "premium")
        59
    """
    premium = (
        float(rent_amount)
        * BASE_PREMIUM_RATE
        * RISK_MULTIPLIERS.get(risk_factor, 1.0)
        * COVERAGE_MULTIPLIERS.get(coverage_level, 1.0)
    )
    return int(math.floor(premium + 0.5))


class QuoteService:
    """Create and list an insurer's premium quotes."""

    def __init__(self, db: Session):
        self.db = db

    def create_quote(
        self,
        insurer_id: str,
        rent_amount: float,
        risk_factor: str = 'medium',
        coverage_level: str = 'standard',
    ) -> Quote:
        monthly_premium = compute_monthly_premium(rent_amount, risk_factor, coverage_level)
        now = datetime.utcnow()

        quote = Quote(
            id=str(uuid.uuid4()),
            insurer_id=insurer_id,
            rent_amount=float(rent_amount),
            risk_factor=risk_factor,
            coverage_level=coverage_level,
            monthly_premium=monthly_premium,
            created_at=now,
        )
        self.db.add(quote)
        self.db.add(AuditLog(
            event_type=AuditEventType.CREATE_QUOTE.value,
            insurer_id=insurer_id,
            timestamp=now,
            request_payload={
                'rentAmount': float(rent_amount),
                'riskFactor': risk_factor,
                'coverageLevel': coverage_level,
            },
            response_payload={'quoteId': quote.id, 'monthlyPremium': monthly_premium},
        ))
        self.db.commit()
        self.db.refresh(quote)

        logger.info(f"Created quote {quote.id} for insurer {insurer_id}: premium={monthly_premium}")
        return quote

    def list_quotes(self, insurer_id: str, limit: int = 100) -> List[Quote]:
        """Insurer's quotes, newest first."""
        return self.db.query(Quote).filter(
            Quote.insurer_id == insurer_id
        ).order_by(
            Quote.created_at.desc()
        ).limit(limit).all()
