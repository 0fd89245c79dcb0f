from sqlalchemy import Column, Integer, String, Float, DateTime, JSON, Index
from datetime import datetime
import enum
from underwriting.db.database import Base


class AuditEventType(str, enum.Enum):
    COMPUTE_SCORE = "COMPUTE_SCORE"
    UPSERT_CONFIG = "UPSERT_CONFIG"
    DELETE_CONFIG = "DELETE_CONFIG"
    CREATE_QUOTE = "CREATE_QUOTE"


class ScoringConfigRecord(Base):
    """Stored scoring configuration, one per insurer.

    `config` holds the resolved configuration in its camelCase JSON shape so it
    round-trips through resolve_config().
    """
    __tablename__ = "scoring_configs"

    id = Column(Integer, primary_key=True, index=True)
    insurer_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String(200))
    config = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ScoreRequest(Base):
    """Log of persisted scoring requests"""
    __tablename__ = "score_requests"

    id = Column(String, primary_key=True)  # UUID
    insurer_id = Column(String, nullable=False, index=True)
    request_timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    safety_score = Column(Float, nullable=False)  # 0-100
    pd_12m = Column(Float, nullable=False)
    decision = Column(String, nullable=False)  # 'accept', 'conditional_accept', 'decline'
    components = Column(JSON, nullable=False)
    explanations = Column(JSON, nullable=False)
    profile_snapshot = Column(JSON, nullable=False)  # Applicant profile as scored
    config_snapshot = Column(JSON, nullable=False)  # Configuration as applied

    __table_args__ = (
        Index('idx_score_requests_insurer_time', 'insurer_id', 'request_timestamp'),
    )


class AuditLog(Base):
    """Audit trail for all write operations"""
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String, nullable=False)
    insurer_id = Column(String, index=True)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)
    request_payload = Column(JSON)
    response_payload = Column(JSON)


class Quote(Base):
    """Rent guarantee premium quote"""
    __tablename__ = "quotes"

    id = Column(String, primary_key=True)  # UUID
    insurer_id = Column(String, nullable=False, index=True)
    rent_amount = Column(Float, nullable=False)
    risk_factor = Column(String, nullable=False)  # low, medium, high
    coverage_level = Column(String, nullable=False)  # basic, standard, premium
    monthly_premium = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
