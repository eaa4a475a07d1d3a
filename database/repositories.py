"""
Repository classes for the MEDDPICC data access layer.

Each repository encapsulates CRUD operations for a specific model.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AssessmentRecord, ConfigurationRecord

logger = logging.getLogger(__name__)

ACTIVE_CONFIG_ID = "active"


class AssessmentRepository:
    """Data access for assessments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, assessment_id: str) -> Optional[AssessmentRecord]:
        result = await self.session.execute(
            select(AssessmentRecord).where(AssessmentRecord.id == assessment_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        assessment_id: str,
        opportunity_id: str,
        version: int,
        total_score: int,
        confidence_score: int,
        risk_level: str,
        created_by: str,
        last_updated: datetime,
        payload: Dict[str, Any],
    ) -> AssessmentRecord:
        record = await self.get_by_id(assessment_id)
        if record is None:
            record = AssessmentRecord(id=assessment_id)
            self.session.add(record)
        record.opportunity_id = opportunity_id
        record.version = version
        record.total_score = total_score
        record.confidence_score = confidence_score
        record.risk_level = risk_level
        record.created_by = created_by
        record.last_updated = last_updated
        record.payload_json = payload
        await self.session.flush()
        return record

    async def latest_for_opportunity(self, opportunity_id: str) -> Optional[AssessmentRecord]:
        """Most recently updated assessment for an opportunity; ties go to the greater id."""
        result = await self.session.execute(
            select(AssessmentRecord)
            .where(AssessmentRecord.opportunity_id == opportunity_id)
            .order_by(AssessmentRecord.last_updated.desc(), AssessmentRecord.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[AssessmentRecord]:
        result = await self.session.execute(
            select(AssessmentRecord).order_by(AssessmentRecord.last_updated.asc())
        )
        return list(result.scalars().all())

    async def delete(self, assessment_id: str) -> bool:
        result = await self.session.execute(
            delete(AssessmentRecord).where(AssessmentRecord.id == assessment_id)
        )
        await self.session.flush()
        return (result.rowcount or 0) > 0


class ConfigurationRepository:
    """Data access for the active qualification configuration."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(self) -> Optional[ConfigurationRecord]:
        result = await self.session.execute(
            select(ConfigurationRecord).where(ConfigurationRecord.id == ACTIVE_CONFIG_ID)
        )
        return result.scalar_one_or_none()

    async def save(self, version: str, payload: Dict[str, Any]) -> ConfigurationRecord:
        record = await self.get_active()
        if record is None:
            record = ConfigurationRecord(id=ACTIVE_CONFIG_ID)
            self.session.add(record)
        record.version = version
        record.payload_json = payload
        await self.session.flush()
        logger.info(f"Saved qualification configuration {version}")
        return record
