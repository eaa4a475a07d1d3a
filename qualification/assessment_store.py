"""
Store protocols for MEDDPICC assessments and configuration.

Abstracts persistence so the qualification service can work with
either in-memory dicts or a database backend.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .models import Assessment
from .pillars import QualificationConfig


@runtime_checkable
class AssessmentStore(Protocol):
    """Protocol for assessment persistence, keyed by assessment id."""

    async def get(self, assessment_id: str) -> Optional[Assessment]:
        """Get one assessment, or None."""
        ...

    async def put(self, assessment_id: str, assessment: Assessment) -> None:
        """Insert or replace an assessment."""
        ...

    async def list_all(self) -> List[Assessment]:
        """Get every stored assessment."""
        ...

    async def get_latest_for_opportunity(self, opportunity_id: str) -> Optional[Assessment]:
        """Most recently updated assessment for an opportunity, or None."""
        ...

    async def delete(self, assessment_id: str) -> bool:
        """Delete an assessment. Returns False if it did not exist."""
        ...


@runtime_checkable
class ConfigurationStore(Protocol):
    """Protocol for the single active configuration record."""

    async def load(self) -> Optional[QualificationConfig]:
        """Get the stored configuration, or None if never saved."""
        ...

    async def save(self, config: QualificationConfig) -> None:
        """Replace the stored configuration."""
        ...


class InMemoryAssessmentStore:
    """
    Process-local assessment store.

    Records are kept serialized, so every read returns an independent
    copy of one complete write.
    """

    def __init__(self):
        self._records: Dict[str, dict] = {}

    async def get(self, assessment_id: str) -> Optional[Assessment]:
        record = self._records.get(assessment_id)
        return Assessment.from_dict(record) if record is not None else None

    async def put(self, assessment_id: str, assessment: Assessment) -> None:
        self._records[assessment_id] = assessment.to_dict()

    async def list_all(self) -> List[Assessment]:
        return [Assessment.from_dict(r) for r in list(self._records.values())]

    async def get_latest_for_opportunity(self, opportunity_id: str) -> Optional[Assessment]:
        matches = [
            Assessment.from_dict(r) for r in list(self._records.values())
            if r["opportunity_id"] == opportunity_id
        ]
        if not matches:
            return None
        # same ordering as the database query
        return max(matches, key=lambda a: (a.last_updated, a.id))

    async def delete(self, assessment_id: str) -> bool:
        return self._records.pop(assessment_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)


class InMemoryConfigurationStore:
    """Process-local configuration store."""

    def __init__(self, config: Optional[QualificationConfig] = None):
        self._record: Optional[dict] = config.to_dict() if config else None

    async def load(self) -> Optional[QualificationConfig]:
        if self._record is None:
            return None
        return QualificationConfig.from_dict(self._record)

    async def save(self, config: QualificationConfig) -> None:
        self._record = config.to_dict()
