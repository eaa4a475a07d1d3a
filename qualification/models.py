"""
Assessment data model for the MEDDPICC engine.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from .answers import Answer


class RiskLevel(Enum):
    """Deal risk classification, most severe first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def severity(self) -> int:
        return {"low": 1, "medium": 2, "high": 3, "critical": 4}[self.value]


class QualificationLevel(Enum):
    """Overall qualification band from the total score."""
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


@dataclass
class Assessment:
    """Scored qualification record for one opportunity."""
    id: str
    opportunity_id: str
    answers: List[Answer] = field(default_factory=list)
    pillar_scores: Dict[str, int] = field(default_factory=dict)
    total_score: int = 0
    confidence_score: int = 0
    risk_level: RiskLevel = RiskLevel.CRITICAL
    stage_readiness: Dict[str, bool] = field(default_factory=dict)
    coaching_actions: List[str] = field(default_factory=list)
    competitive_strengths: List[str] = field(default_factory=list)
    areas_of_concern: List[str] = field(default_factory=list)
    qualification_level: QualificationLevel = QualificationLevel.WEAK
    completion_percentage: float = 0.0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_by: str = "system"
    version: int = 0
    config_version: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "opportunity_id": self.opportunity_id,
            "answers": [a.to_dict() for a in self.answers],
            "pillar_scores": dict(self.pillar_scores),
            "total_score": self.total_score,
            "confidence_score": self.confidence_score,
            "risk_level": self.risk_level.value,
            "stage_readiness": dict(self.stage_readiness),
            "coaching_actions": list(self.coaching_actions),
            "competitive_strengths": list(self.competitive_strengths),
            "areas_of_concern": list(self.areas_of_concern),
            "qualification_level": self.qualification_level.value,
            "completion_percentage": self.completion_percentage,
            "last_updated": self.last_updated.isoformat(),
            "created_by": self.created_by,
            "version": self.version,
            "config_version": self.config_version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assessment":
        return cls(
            id=data["id"],
            opportunity_id=data["opportunity_id"],
            answers=[Answer.from_dict(a) for a in data.get("answers", [])],
            pillar_scores={k: int(v) for k, v in data.get("pillar_scores", {}).items()},
            total_score=int(data.get("total_score", 0)),
            confidence_score=int(data.get("confidence_score", 0)),
            risk_level=RiskLevel(data.get("risk_level", "critical")),
            stage_readiness={k: bool(v) for k, v in data.get("stage_readiness", {}).items()},
            coaching_actions=list(data.get("coaching_actions", [])),
            competitive_strengths=list(data.get("competitive_strengths", [])),
            areas_of_concern=list(data.get("areas_of_concern", [])),
            qualification_level=QualificationLevel(data.get("qualification_level", "weak")),
            completion_percentage=float(data.get("completion_percentage", 0.0)),
            last_updated=datetime.fromisoformat(data["last_updated"]),
            created_by=data.get("created_by", "system"),
            version=int(data.get("version", 0)),
            config_version=data.get("config_version", ""),
        )
