"""
Tenant Underwriting FastAPI REST API
Combines modular routers with utility endpoints (health, stats)
"""

import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import func
from sqlalchemy.orm import Session

# Import routers from modular structure
from underwriting.api import risk, scoring_config, quotes

# Database objects and dependency
from underwriting.db.database import get_db, init_db

from underwriting.config import settings

# Models used by the stats endpoint
from underwriting.models.models import Quote, ScoreRequest, ScoringConfigRecord
from underwriting.services.config_service import get_config_cache

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Ensure DB tables exist (safe for dev) - call AFTER all imports to avoid circular deps
init_db()

# Initialize FastAPI app
app = FastAPI(
    title="Tenant Underwriting API",
    description="Tenant risk scoring and rent guarantee decisioning",
    version="1.0.0",
)

# CORS config for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(risk.router)
app.include_router(scoring_config.router)
app.include_router(quotes.router)


@app.get("/")
def root():
    """API health check and basic info"""
    return {
        "message": "Tenant Underwriting API is running",
        "version": "1.0.0",
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "risk_calculate": "/api/risk/calculate",
            "risk_report": "/api/risk/report",
            "risk_history": "/api/risk/history",
            "scoring_config": "/api/config/score",
            "quotes": "/api/quotes",
            "stats": "/api/stats",
        },
    }


@app.get("/health")
def health_check():
    """Simple health endpoint"""
    return {"status": "healthy", "database": "connected"}


@app.get("/api/stats")
def get_statistics(db: Session = Depends(get_db)):
    """Return system statistics: stored configs, config cache, scoring outcomes and quotes"""
    total_scores = db.query(ScoreRequest).count()

    decision_distribution = {"accept": 0, "conditional_accept": 0, "decline": 0}
    for decision, count in db.query(ScoreRequest.decision, func.count(ScoreRequest.id)).group_by(
        ScoreRequest.decision
    ):
        if decision in decision_distribution:
            decision_distribution[decision] = count

    avg_safety_score = db.query(func.avg(ScoreRequest.safety_score)).scalar()

    return {
        "config_cache": get_config_cache().stats(),
        "total_insurer_configs": db.query(ScoringConfigRecord).count(),
        "total_quotes": db.query(Quote).count(),
        "risk_scoring": {
            "total_scores_computed": total_scores,
            "average_safety_score": round(avg_safety_score, 2) if avg_safety_score is not None else None,
            "decision_distribution": decision_distribution,
        },
    }


# Run with:
#   uvicorn main:app --reload --port 8000
