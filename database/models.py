"""
SQLAlchemy ORM models for the MEDDPICC qualification engine.

Assessments are stored as a full JSON payload plus a few indexed
summary columns used for lookups.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, JSON, Index,
)
from sqlalchemy.orm import DeclarativeBase


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class AssessmentRecord(Base):
    __tablename__ = "assessments"

    id = Column(String(36), primary_key=True, default=_uuid)
    opportunity_id = Column(String(100), nullable=False, index=True)
    version = Column(Integer, nullable=False, default=1)
    total_score = Column(Integer, default=0)
    confidence_score = Column(Integer, default=0)
    risk_level = Column(String(10), default="critical")  # low, medium, high, critical
    created_by = Column(String(100), default="system")
    last_updated = Column(DateTime(timezone=True), default=_now)
    payload_json = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_assessment_opp_updated", "opportunity_id", "last_updated"),
        Index("ix_assessment_risk", "risk_level"),
    )


class ConfigurationRecord(Base):
    """Single active qualification configuration."""
    __tablename__ = "qualification_config"

    id = Column(String(20), primary_key=True, default="active")
    version = Column(String(50), nullable=False)
    payload_json = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)
