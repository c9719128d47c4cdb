"""Database store utilities for verification history and configuration."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import SETTINGS
from data.models import Base, ConfigEntry, HistoryEntry
from scoring.types import VerificationResult

logger = logging.getLogger(__name__)


def get_engine(database_url: Optional[str] = None):
    """Create a SQLAlchemy engine for the configured database."""

    url = database_url or SETTINGS["database_url"]
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, future=True, connect_args=connect_args)


def init_db(engine=None):
    """Create all tables in the configured database."""

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    return engine


def get_session(engine=None) -> Session:
    engine = engine or get_engine()
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    return SessionLocal()


@contextmanager
def session_scope(engine=None):
    session = get_session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def save_result_to_history(session: Session, result: VerificationResult, limit: Optional[int] = None) -> bool:
    """Record a result at the head of the history.

    URLs already in the history are not re-added. Only the ``limit`` most
    recent entries are kept.

    Returns:
        bool: True if the result was added.
    """
    limit = limit or SETTINGS["history_limit"]

    exists = session.query(HistoryEntry).filter(HistoryEntry.content_url == result.content_url).first()
    if exists:
        logger.debug(f"History already contains {result.content_url}, skipping")
        return False

    session.add(
        HistoryEntry(
            content_url=result.content_url,
            trust_score=result.trust_score,
            source_verified=result.source_verified,
            payload=result.to_record(),
            verification_timestamp=result.verification_timestamp,
        )
    )
    session.flush()

    stale = _recent_entries(session)[limit:]
    for entry in stale:
        session.delete(entry)

    session.commit()
    if stale:
        logger.info(f"Pruned {len(stale)} history entries beyond limit {limit}")
    return True


def load_history(session: Session, limit: Optional[int] = None) -> List[VerificationResult]:
    """Most-recent-first list of stored results, decoded back to VerificationResult."""
    entries = _recent_entries(session)
    if limit:
        entries = entries[:limit]
    return [VerificationResult.from_record(entry.payload) for entry in entries]


def clear_history(session: Session) -> int:
    count = session.query(HistoryEntry).delete()
    session.commit()
    return count


def _recent_entries(session: Session) -> List[HistoryEntry]:
    # Insertion order; ids only grow
    return session.query(HistoryEntry).order_by(HistoryEntry.id.desc()).all()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def save_config(session: Session, key: str, value: Any) -> ConfigEntry:
    entry = session.query(ConfigEntry).filter(ConfigEntry.key == key).first()
    if entry:
        entry.value = value
        entry.updated_at = datetime.utcnow()
    else:
        entry = ConfigEntry(key=key, value=value)
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return entry


def load_config(session: Session, key: str, default: Any = None) -> Any:
    entry = session.query(ConfigEntry).filter(ConfigEntry.key == key).first()
    return entry.value if entry else default
