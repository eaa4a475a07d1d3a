"""
MEDDPICC Scoring Engine.

Converts validated answers into weighted pillar scores, an aggregate
score, a confidence score and a risk level, then derives stage
readiness, coaching actions and competitive position from them.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .answers import Answer, latest_answers
from .coaching import CoachingGenerator
from .models import Assessment, QualificationLevel, RiskLevel, round_half_up
from .pillars import QualificationConfig, default_config
from .stage_readiness import StageReadinessEvaluator

logger = logging.getLogger(__name__)


@dataclass
class TrendPoint:
    """Snapshot of an assessment for trend tracking."""
    date: datetime
    total_score: int
    pillar_scores: Dict[str, int]
    stage: str
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "total_score": self.total_score,
            "pillar_scores": dict(self.pillar_scores),
            "stage": self.stage,
            "probability": self.probability,
        }


def track_trend(assessment: Assessment, stage: str, probability: float) -> TrendPoint:
    """Capture the current scores of an assessment at a pipeline stage."""
    return TrendPoint(
        date=datetime.now(timezone.utc),
        total_score=assessment.total_score,
        pillar_scores=dict(assessment.pillar_scores),
        stage=stage,
        probability=probability,
    )


@dataclass
class PillarBreakdown:
    """Intermediate per-pillar numbers from one scoring pass."""
    raw: int = 0
    weighted: float = 0.0
    confidence: float = 0.0
    answered: int = 0


class QualificationScorer:
    """
    Scores an opportunity from its MEDDPICC answers.

    Scoring rules:
    - Pillar raw score: sum of the latest option score per question,
      capped at the pillar's max score (40 by default). With the stock
      ladder a full set of "yes" answers sums to 100, so the cap is what
      keeps a pillar inside 0-40. Set cap_pillar_scores=False on the
      config to weight the uncapped sum instead.
    - Pillar score: raw x pillar weight, rounded half-up
    - Total score: sum of the unrounded weighted scores, rounded once
    - Confidence: mean over all pillars of the pillar's mean confidence
      weight (high=1.0, medium=0.8, low=0.6, unanswered pillar=0), as 0-100
    - Risk: first matching rung of the configured ladder, else low
    """

    def __init__(self, config: Optional[QualificationConfig] = None):
        """
        Initialize the scorer.

        Args:
            config: Qualification configuration; the stock MEDDPICC config if omitted
        """
        self.config = config or default_config()
        self.readiness = StageReadinessEvaluator(self.config)
        self.coaching = CoachingGenerator(self.config)

    def compute_assessment(
        self,
        existing: Optional[Assessment],
        answers: List[Answer],
        *,
        assessment_id: Optional[str] = None,
        opportunity_id: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Assessment:
        """
        Fully recompute an assessment.

        Args:
            existing: Previously stored assessment, or None when creating
            answers: Complete answer history for the opportunity
            assessment_id: Id for a new assessment (generated if omitted)
            opportunity_id: Opportunity for a new assessment
            created_by: Creator for a new assessment

        Returns:
            New Assessment with version = existing version + 1
        """
        breakdown = self._score_pillars(answers)

        pillar_scores = {pid: round_half_up(b.weighted) for pid, b in breakdown.items()}
        total_score = round_half_up(sum(b.weighted for b in breakdown.values()))

        confidence = sum(b.confidence for b in breakdown.values()) / len(self.config.pillars)
        confidence_score = round_half_up(confidence * 100)

        risk_level = self.classify_risk(pillar_scores, total_score, confidence_score)
        stage_readiness = self.readiness.evaluate(pillar_scores, total_score)
        coaching_actions = self.coaching.generate_coaching(pillar_scores, answers)
        strengths, concerns = self.coaching.analyze_competitive_position(pillar_scores, answers)

        answered = sum(b.answered for b in breakdown.values())
        total_questions = self.config.total_questions
        completion = round(answered / total_questions * 100, 1) if total_questions else 0.0

        assessment = Assessment(
            id=existing.id if existing else (assessment_id or str(uuid.uuid4())),
            opportunity_id=existing.opportunity_id if existing else (opportunity_id or ""),
            answers=list(answers),
            pillar_scores=pillar_scores,
            total_score=total_score,
            confidence_score=confidence_score,
            risk_level=risk_level,
            stage_readiness=stage_readiness,
            coaching_actions=coaching_actions,
            competitive_strengths=strengths,
            areas_of_concern=concerns,
            qualification_level=self.qualification_level(total_score),
            completion_percentage=completion,
            last_updated=datetime.now(timezone.utc),
            created_by=existing.created_by if existing else (created_by or "system"),
            version=(existing.version if existing else 0) + 1,
            config_version=self.config.version,
        )

        logger.debug(
            f"Scored assessment {assessment.id} v{assessment.version}: "
            f"total={total_score} confidence={confidence_score} risk={risk_level.value}"
        )
        return assessment

    def _score_pillars(self, answers: List[Answer]) -> Dict[str, PillarBreakdown]:
        """Aggregate the latest answers into per-pillar numbers."""
        weights = self.config.confidence_weights
        effective = latest_answers(answers)
        breakdown: Dict[str, PillarBreakdown] = {}

        for pillar in self.config.pillars:
            pillar_answers = [
                a for a in effective
                if a.pillar == pillar.id and pillar.question(a.question_id) is not None
            ]
            raw = sum(a.score for a in pillar_answers)
            if self.config.cap_pillar_scores:
                raw = min(raw, pillar.max_score)
            confidence = 0.0
            if pillar_answers:
                confidence = sum(
                    weights.get(a.confidence_level.value, 0.0) for a in pillar_answers
                ) / len(pillar_answers)
            breakdown[pillar.id] = PillarBreakdown(
                raw=raw,
                weighted=raw * pillar.weight,
                confidence=confidence,
                answered=len(pillar_answers),
            )

        ignored = len(effective) - sum(b.answered for b in breakdown.values())
        if ignored:
            logger.debug(f"Ignored {ignored} answer(s) with unknown pillar or question")
        return breakdown

    def critical_pillar_ratio(self, pillar_scores: Dict[str, int]) -> float:
        """Share of the critical pillars' combined max score that was achieved."""
        pillars = [self.config.pillar(pid) for pid in self.config.critical_pillars]
        maximum = sum(p.max_score for p in pillars if p is not None)
        if not maximum:
            return 0.0
        achieved = sum(pillar_scores.get(pid, 0) for pid in self.config.critical_pillars)
        return achieved / maximum

    def classify_risk(
        self,
        pillar_scores: Dict[str, int],
        total_score: float,
        confidence_score: float,
    ) -> RiskLevel:
        """Walk the risk ladder; the first matching rung wins."""
        ratio = self.critical_pillar_ratio(pillar_scores)
        for rule in self.config.risk_rules:
            if rule.matches(total_score, ratio, confidence_score):
                return RiskLevel(rule.level)
        return RiskLevel.LOW

    def qualification_level(self, total_score: float) -> QualificationLevel:
        thresholds = self.config.score_thresholds
        if total_score >= thresholds.strong:
            return QualificationLevel.STRONG
        if total_score >= thresholds.moderate:
            return QualificationLevel.MODERATE
        return QualificationLevel.WEAK


def compute_assessment(
    existing: Optional[Assessment],
    answers: List[Answer],
    config: Optional[QualificationConfig] = None,
    **kwargs: Any,
) -> Assessment:
    """Score answers with a one-off scorer for the given configuration."""
    return QualificationScorer(config).compute_assessment(existing, answers, **kwargs)
