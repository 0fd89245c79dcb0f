"""
Scoring Configuration Service

Stores one scoring configuration per insurer and serves the resolved
configuration to the scoring path. Reads go through a TTL cache; every write
invalidates the insurer's cache entry so the next score sees the new config.

An insurer without a stored configuration scores with the built-in defaults.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from underwriting.cache import TTLCache, generate_config_cache_key
from underwriting.config import settings
from underwriting.models.models import AuditEventType, AuditLog, ScoringConfigRecord
from underwriting.scorecard import DEFAULT_SCORING_CONFIG, ScoringConfig, resolve_config

logger = logging.getLogger(__name__)

_config_cache: Optional[TTLCache] = None


def get_config_cache() -> TTLCache:
    """Process-wide cache of resolved configurations (lazily created)."""
    global _config_cache
    if _config_cache is None:
        _config_cache = TTLCache(ttl_seconds=settings.CONFIG_CACHE_TTL_SECONDS)
    return _config_cache


class ScoringConfigService:
    """Read and write insurer scoring configurations."""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache if cache is not None else get_config_cache()

    def get_record(self, insurer_id: str) -> Optional[ScoringConfigRecord]:
        return self.db.query(ScoringConfigRecord).filter(
            ScoringConfigRecord.insurer_id == insurer_id
        ).first()

    def get_config(self, insurer_id: str) -> ScoringConfig:
        """Resolved configuration for an insurer, defaults when none is stored.

        Raises:
            ConfigValidationError: If the stored document no longer validates
        """
        cache_key = generate_config_cache_key(insurer_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        logger.debug(f"Config cache miss for insurer {insurer_id}")
        # Taken before the read so a write committed meanwhile wins over this fill
        generation = self.cache.generation()
        record = self.get_record(insurer_id)
        if record is None:
            config = DEFAULT_SCORING_CONFIG
        else:
            config = resolve_config(record.config)

        if not self.cache.set(cache_key, config, generation=generation):
            logger.debug(f"Config for insurer {insurer_id} changed during load; not cached")
        return config

    def upsert_config(self, insurer_id: str, raw: Any) -> ScoringConfig:
        """Validate and store an insurer's configuration.

        The payload replaces the stored configuration as a whole; omitted
        fields take their defaults rather than the previously stored values.

        Args:
            insurer_id: Owning insurer
            raw: Partial configuration mapping (camelCase keys)

        Returns:
            The resolved configuration that was stored

        Raises:
            ConfigValidationError: If the payload is invalid; nothing is written
        """
        config = resolve_config(raw)
        document = config.to_dict()
        now = datetime.utcnow()

        record = self.get_record(insurer_id)
        if record is None:
            record = ScoringConfigRecord(insurer_id=insurer_id, created_at=now)
            self.db.add(record)
        record.name = config.name
        record.config = document
        record.updated_at = now

        self.db.add(AuditLog(
            event_type=AuditEventType.UPSERT_CONFIG.value,
            insurer_id=insurer_id,
            timestamp=now,
            request_payload=dict(raw) if isinstance(raw, Mapping) else None,
            response_payload=document,
        ))
        self._commit()

        self.cache.clear(generate_config_cache_key(insurer_id))
        logger.info(f"Stored scoring config for insurer {insurer_id} (name={config.name!r})")
        return config

    def delete_config(self, insurer_id: str) -> bool:
        """Drop an insurer's configuration so it falls back to the defaults.

        Returns:
            True if a stored configuration was removed
        """
        record = self.get_record(insurer_id)
        if record is None:
            return False

        self.db.delete(record)
        self.db.add(AuditLog(
            event_type=AuditEventType.DELETE_CONFIG.value,
            insurer_id=insurer_id,
            timestamp=datetime.utcnow(),
            request_payload=None,
            response_payload=record.config,
        ))
        self._commit()

        self.cache.clear(generate_config_cache_key(insurer_id))
        logger.info(f"Deleted scoring config for insurer {insurer_id}")
        return True

    def describe(self, insurer_id: str) -> Dict[str, Any]:
        """Configuration document plus storage metadata, for API responses."""
        config = self.get_config(insurer_id)
        record = self.get_record(insurer_id)
        return {
            "insurerId": insurer_id,
            "isDefault": record is None,
            "config": config.to_dict(),
            "updatedAt": record.updated_at.isoformat() if record and record.updated_at else None,
        }

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
