"""Persistence models for verification history and stored configuration."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

# SQLAlchemy base for ORM models
Base = declarative_base()


class HistoryEntry(Base):
    """One published verification result, stored as a plain record."""

    __tablename__ = "verification_history"

    id = Column(Integer, primary_key=True, index=True)
    content_url = Column(Text, unique=True, nullable=False)
    trust_score = Column(Float, nullable=False)
    source_verified = Column(Boolean, default=False, nullable=False)
    payload = Column(JSON, default=dict)  # VerificationResult.to_record()
    verification_timestamp = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ConfigEntry(Base):
    """Current configuration value for a key (e.g. factor_weights)."""

    __tablename__ = "extension_config"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, nullable=False)
    value = Column(JSON, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
