"""
Database-backed assessment and configuration stores.

Implements the AssessmentStore / ConfigurationStore protocols using
the repository layer. Each call runs in its own session and commits.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.repositories import AssessmentRepository, ConfigurationRepository

from .errors import ConfigurationError, StorageError
from .models import Assessment
from .pillars import QualificationConfig

logger = logging.getLogger(__name__)


class DbAssessmentStore:
    """Persistent assessment store backed by PostgreSQL or SQLite."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, assessment_id: str) -> Optional[Assessment]:
        try:
            async with self._session_factory() as session:
                record = await AssessmentRepository(session).get_by_id(assessment_id)
                return Assessment.from_dict(record.payload_json) if record else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load assessment {assessment_id}: {e}")
            raise StorageError(f"Failed to load assessment {assessment_id}") from e

    async def put(self, assessment_id: str, assessment: Assessment) -> None:
        try:
            async with self._session_factory() as session:
                await AssessmentRepository(session).upsert(
                    assessment_id=assessment_id,
                    opportunity_id=assessment.opportunity_id,
                    version=assessment.version,
                    total_score=assessment.total_score,
                    confidence_score=assessment.confidence_score,
                    risk_level=assessment.risk_level.value,
                    created_by=assessment.created_by,
                    last_updated=assessment.last_updated,
                    payload=assessment.to_dict(),
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save assessment {assessment_id}: {e}")
            raise StorageError(f"Failed to save assessment {assessment_id}") from e

    async def get_latest_for_opportunity(self, opportunity_id: str) -> Optional[Assessment]:
        try:
            async with self._session_factory() as session:
                record = await AssessmentRepository(session).latest_for_opportunity(opportunity_id)
                return Assessment.from_dict(record.payload_json) if record else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up assessment for opportunity {opportunity_id}: {e}")
            raise StorageError(f"Failed to look up assessment for opportunity {opportunity_id}") from e

    async def list_all(self) -> List[Assessment]:
        try:
            async with self._session_factory() as session:
                records = await AssessmentRepository(session).list_all()
                return [Assessment.from_dict(r.payload_json) for r in records]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list assessments: {e}")
            raise StorageError("Failed to list assessments") from e

    async def delete(self, assessment_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                deleted = await AssessmentRepository(session).delete(assessment_id)
                await session.commit()
                return deleted
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete assessment {assessment_id}: {e}")
            raise StorageError(f"Failed to delete assessment {assessment_id}") from e


class DbConfigurationStore:
    """Persistent store for the active qualification configuration."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def load(self) -> Optional[QualificationConfig]:
        try:
            async with self._session_factory() as session:
                record = await ConfigurationRepository(session).get_active()
                payload = record.payload_json if record else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load configuration: {e}")
            raise StorageError("Failed to load configuration") from e

        if payload is None:
            return None
        try:
            return QualificationConfig.from_dict(payload).validate()
        except ConfigurationError:
            logger.warning("Stored configuration is invalid")
            raise

    async def save(self, config: QualificationConfig) -> None:
        try:
            async with self._session_factory() as session:
                await ConfigurationRepository(session).save(config.version, config.to_dict())
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save configuration {config.version}: {e}")
            raise StorageError(f"Failed to save configuration {config.version}") from e
